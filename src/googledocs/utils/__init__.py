"""Shared utilities for googledocs."""
