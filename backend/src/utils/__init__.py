"""Utility functions for Problem Desk."""

from .validation import is_valid_email, normalize_email, sanitize_input

__all__ = [
    "is_valid_email",
    "normalize_email",
    "sanitize_input",
]
