"""Tests for problem data models."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from models.problem import (
    DeleteProblemResponse,
    Problem,
    ProblemCreate,
    ProblemStatus,
    StatusUpdateRequest,
)


class TestProblem:
    """Test cases for Problem model."""

    def test_defaults(self):
        problem = Problem(
            id="abc", email="a@b.com", problem="x" * 10, timestamp=datetime.now(UTC)
        )
        assert problem.status == ProblemStatus.PENDING
        assert problem.created_at
        assert problem.updated_at is None

    def test_invalid_status_rejected(self):
        with pytest.raises(ValidationError):
            Problem(
                id="abc",
                email="a@b.com",
                problem="x" * 10,
                status="archived",
                timestamp=datetime.now(UTC),
            )

    def test_naive_timestamp_becomes_utc(self):
        problem = Problem(
            id="abc", email="a@b.com", problem="x" * 10, timestamp=datetime(2026, 1, 1)
        )
        assert problem.timestamp.tzinfo is not None
        assert problem.timestamp == datetime(2026, 1, 1, tzinfo=UTC)

    def test_offset_timestamp_converted_to_utc(self):
        tz = timezone(timedelta(hours=2))
        problem = Problem(
            id="abc",
            email="a@b.com",
            problem="x" * 10,
            timestamp=datetime(2026, 1, 1, 12, 0, tzinfo=tz),
        )
        assert problem.timestamp == datetime(2026, 1, 1, 10, 0, tzinfo=UTC)

    def test_to_item(self, sample_problem):
        item = sample_problem.to_item()

        assert item["id"] == sample_problem.id
        assert item["status"] == "pending"
        assert isinstance(item["timestamp"], str)
        assert "updated_at" not in item

    def test_round_trip_from_item(self, sample_problem):
        assert Problem(**sample_problem.to_item()) == sample_problem


class TestRequestModels:
    """Test cases for request bodies."""

    def test_problem_create_allows_missing_fields(self):
        body = ProblemCreate()
        assert body.email is None
        assert body.problem is None
        assert body.timestamp is None

    def test_status_update_alias(self):
        body = StatusUpdateRequest(**{"status": "resolved", "adminPassword": "pw"})
        assert body.admin_password == "pw"

    def test_delete_response(self, sample_problem):
        response = DeleteProblemResponse(problem=sample_problem).model_dump(mode="json")
        assert response["message"] == "Problem deleted"
        assert response["problem"]["id"] == sample_problem.id
