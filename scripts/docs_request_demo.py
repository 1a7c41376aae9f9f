"""Walk through raw Docs API requests: read a document, create one, edit it.

Usage:
    python scripts/docs_request_demo.py <client_secret.json> <document url or id> [email]
"""
import json
import sys

import requests

from googledocs.auth import DOCS_WRITE_SCOPE, authenticate, build_auth_config, produce_auth_token
from googledocs.client import as_id, request_build, request_make, response_process


def main(argv):
    if len(argv) < 3:
        print(__doc__)
        return 1

    secrets_path, doc_url = argv[1], argv[2]
    email = argv[3] if len(argv) > 3 else None

    build_auth_config(path=secrets_path)
    authenticate(email=email, scopes=DOCS_WRITE_SCOPE)
    token = produce_auth_token()

    with requests.Session() as session:
        return run_requests(session, token, as_id(doc_url))


def run_requests(session, token, document_id):
    req = request_build(
        method="GET",
        path="v1/documents/{documentId}",
        token=token,
        params={"documentId": document_id},
    )
    doc = response_process(request_make(req, session=session))
    print(f"Fetched '{doc['title']}' at revision {doc['revisionId']}")

    req = request_build(
        method="POST",
        path="v1/documents",
        token=token,
        body={"title": "test-new-gdoc"},
    )
    new_doc = response_process(request_make(req, session=session))
    print(f"Created '{new_doc['title']}' ({new_doc['documentId']})")

    update_body = {
        "requests": [
            {
                "insertText": {
                    "location": {"segmentId": "", "index": 5},
                    "text": "some awesome text",
                }
            }
        ],
        "writeControl": {"requiredRevisionId": doc["revisionId"]},
    }
    req = request_build(
        method="POST",
        path="v1/documents/{documentId}:batchUpdate",
        token=token,
        params={"documentId": doc["documentId"]},
        body=update_body,
    )
    edit_response = response_process(request_make(req, session=session))
    print(json.dumps(edit_response, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
