"""Service for storing and reviewing submitted problems."""

import logging
from datetime import UTC, datetime

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError
from pydantic import ValidationError
from ulid import ULID

from models.problem import Problem, ProblemFilters, ProblemStatus, as_utc
from services.auth_service import AdminAuthService, AdminCredential
from utils.constants import MAX_PROBLEM_CHARS, MIN_PROBLEM_CHARS
from utils.problem_query import (
    matches_search,
    parse_limit,
    parse_sort_by,
    parse_status,
    sort_problems,
)
from utils.validation import is_valid_email, normalize_email, sanitize_input

logger = logging.getLogger(__name__)


class ProblemValidationError(ValueError):
    """Submitted or updated data broke a validation rule.

    `reason` is one of missing_field, invalid_email, too_short, too_long,
    invalid_timestamp or invalid_status.
    """

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason


class ProblemNotFoundError(Exception):
    """No problem exists with the requested id."""

    pass


class ProblemStoreError(Exception):
    """The backing table failed to serve a request."""

    pass


class ProblemService:
    """Create, list, update and delete problem records in DynamoDB."""

    def __init__(self, table, auth_service: AdminAuthService | None = None):
        """Initialize the problem service.

        Args:
            table: DynamoDB table for problems, keyed by `id`
            auth_service: Verifies admin credentials for mutations
        """
        self.table = table
        self.auth_service = auth_service or AdminAuthService()

    # ============================================
    # Public operations
    # ============================================

    def list_problems(self, filters: ProblemFilters | None = None) -> list[Problem]:
        """List problems matching the filters.

        The status filter is evaluated by DynamoDB; search, ordering and
        the limit are applied here with the same rules the review pipeline
        uses.

        Raises:
            ProblemStoreError: On database errors
        """
        filters = filters or ProblemFilters()

        scan_kwargs = {}
        if filters.status is not None:
            scan_kwargs["FilterExpression"] = Attr("status").eq(filters.status.value)

        problems = [
            p for p in self._scan_all(**scan_kwargs) if matches_search(p, filters.search)
        ]
        return sort_problems(problems, filters.sort_by)[: filters.limit]

    def create_problem(
        self,
        email: str | None,
        problem: str | None,
        timestamp: datetime | str | None = None,
    ) -> Problem:
        """Validate and store a new problem.

        Args:
            email: Submitter's email address
            problem: Free-text problem description
            timestamp: Submission time; defaults to now

        Returns:
            The stored Problem with its assigned id

        Raises:
            ProblemValidationError: If a field is missing or out of bounds
            ProblemStoreError: On database errors
        """
        if not email or not problem:
            raise ProblemValidationError(
                "Email and problem are required", "missing_field"
            )

        clean_email = normalize_email(email)
        if not is_valid_email(clean_email):
            raise ProblemValidationError("Invalid email format", "invalid_email")

        clean_problem = sanitize_input(problem)
        if len(clean_problem) < MIN_PROBLEM_CHARS:
            raise ProblemValidationError(
                f"Problem description too short (min {MIN_PROBLEM_CHARS} characters)",
                "too_short",
            )
        if len(clean_problem) > MAX_PROBLEM_CHARS:
            raise ProblemValidationError(
                f"Problem description too long (max {MAX_PROBLEM_CHARS} characters)",
                "too_long",
            )

        now = datetime.now(UTC)
        try:
            record = Problem(
                id=str(ULID()),
                email=clean_email,
                problem=clean_problem,
                status=ProblemStatus.PENDING,
                timestamp=timestamp or now,
                created_at=now.isoformat(),
            )
        except ValidationError:
            raise ProblemValidationError("Invalid timestamp", "invalid_timestamp")

        try:
            self.table.put_item(
                Item=record.to_item(),
                ConditionExpression="attribute_not_exists(#id)",
                ExpressionAttributeNames={"#id": "id"},
            )
        except ClientError as e:
            logger.error("Failed to create problem: %s", e)
            raise ProblemStoreError(f"Failed to create problem: {e}")

        logger.info("Stored problem %s", record.id)
        return record

    def get_problem(self, problem_id: str) -> Problem | None:
        """Get a single problem by id, or None if it does not exist."""
        try:
            response = self.table.get_item(Key={"id": problem_id})
        except ClientError as e:
            logger.error("Failed to get problem %s: %s", problem_id, e)
            raise ProblemStoreError(f"Failed to get problem: {e}")

        item = response.get("Item")
        if not item:
            return None
        return Problem(**item)

    # ============================================
    # Admin operations
    # ============================================

    def verify_admin(self, password: str | None) -> bool:
        """Check a password against the admin secret."""
        return self.auth_service.verify_password(password)

    def update_status(
        self, problem_id: str, status: str | None, credential: AdminCredential | None
    ) -> Problem:
        """Set the status of a problem.

        Raises:
            AuthorizationError: If the credential is not accepted
            ProblemValidationError: If the status is not a known value
            ProblemNotFoundError: If the problem does not exist
            ProblemStoreError: On database errors
        """
        self.auth_service.authorize(credential)

        new_status = parse_status(status)
        if new_status is None:
            raise ProblemValidationError("Invalid status", "invalid_status")

        try:
            response = self.table.update_item(
                Key={"id": problem_id},
                UpdateExpression="SET #status = :status, updated_at = :updated_at",
                ConditionExpression="attribute_exists(#id)",
                ExpressionAttributeNames={"#status": "status", "#id": "id"},
                ExpressionAttributeValues={
                    ":status": new_status.value,
                    ":updated_at": datetime.now(UTC).isoformat(),
                },
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise ProblemNotFoundError(f"Problem {problem_id} not found")
            logger.error("Failed to update problem %s: %s", problem_id, e)
            raise ProblemStoreError(f"Failed to update problem: {e}")

        logger.info("Problem %s marked %s", problem_id, new_status.value)
        return Problem(**response["Attributes"])

    def delete_problem(
        self, problem_id: str, credential: AdminCredential | None
    ) -> Problem:
        """Delete a problem and return its prior content.

        Raises:
            AuthorizationError: If the credential is not accepted
            ProblemNotFoundError: If the problem does not exist
            ProblemStoreError: On database errors
        """
        self.auth_service.authorize(credential)

        try:
            response = self.table.delete_item(
                Key={"id": problem_id},
                ConditionExpression="attribute_exists(#id)",
                ExpressionAttributeNames={"#id": "id"},
                ReturnValues="ALL_OLD",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise ProblemNotFoundError(f"Problem {problem_id} not found")
            logger.error("Failed to delete problem %s: %s", problem_id, e)
            raise ProblemStoreError(f"Failed to delete problem: {e}")

        logger.info("Deleted problem %s", problem_id)
        return Problem(**response["Attributes"])

    # ============================================
    # Helpers
    # ============================================

    def _scan_all(self, **scan_kwargs) -> list[Problem]:
        """Scan the whole table, following pagination."""
        problems = []
        try:
            while True:
                response = self.table.scan(**scan_kwargs)
                problems.extend(Problem(**item) for item in response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.error("Failed to scan problems: %s", e)
            raise ProblemStoreError(f"Failed to fetch problems: {e}")
        return problems


def build_filters(
    search: str | None = None,
    status: str | None = None,
    sort_by: str | None = None,
    limit: str | int | None = None,
) -> ProblemFilters:
    """Build list filters from raw query values, ignoring invalid ones."""
    return ProblemFilters(
        search=search or None,
        status=parse_status(status),
        sort_by=parse_sort_by(sort_by),
        limit=parse_limit(limit),
    )
