"""Submission form state and pre-checks.

These checks are a convenience gate before calling the API; the service
re-validates everything and is the authority.
"""

from dataclasses import dataclass, field

from client.api_client import ProblemApiClient
from models.problem import Problem
from utils.constants import CLIENT_MAX_PROBLEM_CHARS
from utils.validation import is_valid_email


@dataclass
class SubmissionForm:
    """Email and problem text as entered by the user."""

    email: str = ""
    problem: str = ""
    errors: dict[str, str] = field(default_factory=dict)

    def set_email(self, value: str) -> None:
        self.email = value
        self.errors.pop("email", None)

    def set_problem(self, value: str) -> None:
        """Accept problem text up to the entry cap; the rest is dropped."""
        self.problem = value[:CLIENT_MAX_PROBLEM_CHARS]
        self.errors.pop("problem", None)

    @property
    def remaining_chars(self) -> int:
        return CLIENT_MAX_PROBLEM_CHARS - len(self.problem)

    def validate(self) -> bool:
        """Populate `errors` and report whether the form can be sent."""
        self.errors = {}
        if not self.email.strip():
            self.errors["email"] = "Email is required"
        elif not is_valid_email(self.email.strip()):
            self.errors["email"] = "Please enter a valid email address"
        if not self.problem.strip():
            self.errors["problem"] = "Please describe your problem"
        return not self.errors

    def submit(self, client: ProblemApiClient) -> Problem | None:
        """Send the form if it validates, then clear it.

        Returns:
            The created problem, or None when validation failed

        Raises:
            ApiError: If the API rejects the submission
        """
        if not self.validate():
            return None
        created = client.submit_problem(self.email.strip(), self.problem.strip())
        self.email = ""
        self.problem = ""
        return created
