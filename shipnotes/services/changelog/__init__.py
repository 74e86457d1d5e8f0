"""Changelog generation and draft release publishing."""
