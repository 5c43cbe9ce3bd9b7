"""Problem submission data models."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProblemStatus(str, Enum):
    """Review status of a submitted problem."""

    PENDING = "pending"
    RESOLVED = "resolved"


class SortBy(str, Enum):
    """Orderings supported by the problem list."""

    NEWEST = "newest"
    OLDEST = "oldest"
    EMAIL = "email"
    STATUS = "status"


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so timestamps always compare."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Problem(BaseModel):
    """Stored problem record."""

    id: str
    email: str
    problem: str
    status: ProblemStatus = ProblemStatus.PENDING
    timestamp: datetime
    created_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    updated_at: str | None = None

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)

    def to_item(self) -> dict:
        """Serialize for DynamoDB storage."""
        item = self.model_dump(mode="json")
        if item["updated_at"] is None:
            del item["updated_at"]
        return item


class ProblemCreate(BaseModel):
    """Request body for submitting a problem.

    Fields are loosely typed on purpose: presence, shape and length are
    checked by the service so it can report which rule failed.
    """

    email: str | None = None
    problem: str | None = None
    timestamp: datetime | None = None


class StatusUpdateRequest(BaseModel):
    """Request body for changing a problem's status."""

    model_config = ConfigDict(populate_by_name=True)

    status: str | None = None
    admin_password: str | None = Field(None, alias="adminPassword")


class AdminCredentialRequest(BaseModel):
    """Request body carrying the admin password for deletes."""

    model_config = ConfigDict(populate_by_name=True)

    admin_password: str | None = Field(None, alias="adminPassword")


class AdminLoginRequest(BaseModel):
    """Request body for admin login."""

    password: str | None = None


class ProblemFilters(BaseModel):
    """Parsed list query parameters."""

    search: str | None = None
    status: ProblemStatus | None = None
    sort_by: SortBy = SortBy.NEWEST
    limit: int = 1000


class DeleteProblemResponse(BaseModel):
    """Response for a deleted problem, carrying its prior content."""

    message: str = "Problem deleted"
    problem: Problem
