"""Data models for Problem Desk."""

from .problem import (
    AdminCredentialRequest,
    AdminLoginRequest,
    DeleteProblemResponse,
    Problem,
    ProblemCreate,
    ProblemFilters,
    ProblemStatus,
    SortBy,
    StatusUpdateRequest,
)

__all__ = [
    "Problem",
    "ProblemCreate",
    "ProblemFilters",
    "ProblemStatus",
    "SortBy",
    "StatusUpdateRequest",
    "AdminCredentialRequest",
    "AdminLoginRequest",
    "DeleteProblemResponse",
]
