"""Shared constants for the Problem Desk backend and client."""

# Basic local@domain.tld shape. Must match between the submission form
# and the service.
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

# Inputs are truncated to this many characters before validation
MAX_INPUT_CHARS = 10000

# Problem text bounds enforced by the service
MIN_PROBLEM_CHARS = 10
MAX_PROBLEM_CHARS = 5000

# Problem text cap at the point of entry in the submission form
CLIENT_MAX_PROBLEM_CHARS = 1000

# List defaults
DEFAULT_LIST_LIMIT = 1000
PAGE_SIZE = 10

# How long a deleted problem can be restored from the review session
UNDO_WINDOW_SECONDS = 5.0

# Window used for the "submitted recently" counter
RECENT_WINDOW_HOURS = 24
