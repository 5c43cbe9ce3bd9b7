"""Client for submitting and reviewing problems."""

from .api_client import ApiError, ProblemApiClient
from .review_session import ClearAllResult, ReviewSession
from .submission import SubmissionForm

__all__ = [
    "ApiError",
    "ProblemApiClient",
    "ReviewSession",
    "ClearAllResult",
    "SubmissionForm",
]
