"""Services for Problem Desk backend."""

from .auth_service import AdminAuthService, AdminCredential, AuthorizationError
from .problem_service import (
    ProblemNotFoundError,
    ProblemService,
    ProblemStoreError,
    ProblemValidationError,
)

__all__ = [
    "AdminAuthService",
    "AdminCredential",
    "AuthorizationError",
    "ProblemService",
    "ProblemValidationError",
    "ProblemNotFoundError",
    "ProblemStoreError",
]
