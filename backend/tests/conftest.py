"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime, timedelta
from unittest.mock import Mock

import pytest

from models.problem import Problem, ProblemStatus

TEST_ADMIN_PASSWORD = "test-admin-secret"
TEST_SESSION_SECRET = "test-session-secret-key"


def make_problem(
    problem_id="01HXYZ0000000000000000000A",
    email="user@example.com",
    problem="The login page keeps timing out.",
    status=ProblemStatus.PENDING,
    timestamp=None,
) -> Problem:
    """Build a Problem with sensible defaults."""
    return Problem(
        id=problem_id,
        email=email,
        problem=problem,
        status=status,
        timestamp=timestamp or datetime(2026, 1, 20, 8, 0, tzinfo=UTC),
        created_at="2026-01-20T08:00:00+00:00",
    )


@pytest.fixture
def sample_problem():
    """Create a sample pending problem for testing."""
    return make_problem()


@pytest.fixture
def sample_problems():
    """Create a small mixed set of problems, one hour apart."""
    base = datetime(2026, 1, 20, 8, 0, tzinfo=UTC)
    return [
        make_problem(
            problem_id="01HXYZ0000000000000000000A",
            email="carol@example.com",
            problem="Checkout button does nothing on mobile.",
            timestamp=base,
        ),
        make_problem(
            problem_id="01HXYZ0000000000000000000B",
            email="alice@example.com",
            problem="Password reset email never arrives.",
            status=ProblemStatus.RESOLVED,
            timestamp=base + timedelta(hours=1),
        ),
        make_problem(
            problem_id="01HXYZ0000000000000000000C",
            email="bob@example.com",
            problem="Dashboard charts render blank in Safari.",
            timestamp=base + timedelta(hours=2),
        ),
    ]


@pytest.fixture
def mock_dynamodb_table():
    """Create a mock DynamoDB table for testing."""
    mock_table = Mock()
    mock_table.put_item.return_value = {}
    mock_table.get_item.return_value = {}
    mock_table.scan.return_value = {"Items": []}
    mock_table.update_item.return_value = {"Attributes": {}}
    mock_table.delete_item.return_value = {"Attributes": {}}
    return mock_table
