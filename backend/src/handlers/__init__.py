"""Lambda handlers for Problem Desk API."""

from .api_handler import api_handler

__all__ = ["api_handler"]
