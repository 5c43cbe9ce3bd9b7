"""Input validation helpers shared by the service and the submission form."""

import re
from typing import Any

from utils.constants import EMAIL_PATTERN, MAX_INPUT_CHARS

_EMAIL_RE = re.compile(EMAIL_PATTERN)


def is_valid_email(email: Any) -> bool:
    """Check an email against the basic local@domain.tld shape."""
    if not isinstance(email, str):
        return False
    return _EMAIL_RE.match(email) is not None


def sanitize_input(value: Any, max_chars: int = MAX_INPUT_CHARS) -> str:
    """Trim a string input and truncate it to the hard ceiling.

    Non-string values sanitize to an empty string.
    """
    if not isinstance(value, str):
        return ""
    return value.strip()[:max_chars]


def normalize_email(email: str) -> str:
    """Return the stored form of an email address."""
    return sanitize_input(email).lower()
