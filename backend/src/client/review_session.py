"""Admin review session: the fetched problem list and the actions on it."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from client.api_client import ApiError, ProblemApiClient
from client.review_pipeline import Page, ReviewStats, apply_pipeline, compute_stats
from models.problem import Problem, ProblemStatus, SortBy
from services.auth_service import AdminCredential
from utils.constants import UNDO_WINDOW_SECONDS
from utils.problem_query import parse_sort_by

logger = logging.getLogger(__name__)


@dataclass
class PendingUndo:
    """A deleted problem that can still be restored."""

    problem: Problem
    expires_at: float


@dataclass
class ClearAllResult:
    """Outcome of deleting every problem one by one."""

    deleted_ids: list[str] = field(default_factory=list)
    failed_id: str | None = None
    error: ApiError | None = None

    @property
    def complete(self) -> bool:
        return self.error is None


class ReviewSession:
    """Holds the problem list for one admin and applies review actions.

    The list is always replaced wholesale by a fresh fetch after any
    mutation. The admin credential lives on the session object and is
    passed explicitly to every admin request.
    """

    def __init__(
        self,
        client: ProblemApiClient,
        credential: AdminCredential | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.credential = credential
        self.clock = clock
        self.problems: list[Problem] = []
        self.search = ""
        self.sort_by = SortBy.NEWEST
        self.page = 1
        self._undo: PendingUndo | None = None

    # Authentication

    @property
    def is_authenticated(self) -> bool:
        return bool(self.credential)

    def login(self, password: str) -> None:
        """Log in with the admin password.

        Raises:
            ApiError: If the password is rejected
        """
        self.credential = self.client.verify_admin_login(password)
        self.refresh()

    def logout(self) -> None:
        self.credential = None
        self.problems = []
        self._undo = None

    def _require_credential(self) -> AdminCredential:
        if not self.credential:
            raise ApiError("Not authenticated", status_code=401)
        return self.credential

    # View state

    def refresh(self) -> list[Problem]:
        """Fetch the full problem list, replacing the local copy."""
        self._discard_expired_undo()
        self.problems = self.client.get_problems()
        return self.problems

    def set_search(self, term: str) -> None:
        if term != self.search:
            self.search = term
            self.page = 1

    def set_sort(self, sort_by: SortBy | str) -> None:
        sort_by = parse_sort_by(sort_by)
        if sort_by != self.sort_by:
            self.sort_by = sort_by
            self.page = 1

    def go_to_page(self, page: int) -> Page:
        current = apply_pipeline(self.problems, self.search, self.sort_by, page)
        self.page = current.page
        return current

    def current_page(self) -> Page:
        """Visible page after search filter, sort and pagination."""
        self._discard_expired_undo()
        return self.go_to_page(self.page)

    def stats(self, now=None) -> ReviewStats:
        return compute_stats(self.problems, now)

    # Actions

    def toggle_status(self, problem_id: str) -> Problem:
        """Flip a problem between pending and resolved."""
        current = next((p for p in self.problems if p.id == problem_id), None)
        if current is None:
            raise ApiError("Problem not found", status_code=404)

        new_status = (
            ProblemStatus.RESOLVED
            if current.status == ProblemStatus.PENDING
            else ProblemStatus.PENDING
        )
        updated = self.client.update_problem_status(
            problem_id, new_status.value, self._require_credential()
        )
        self.refresh()
        return updated

    def delete(self, problem_id: str) -> Problem:
        """Delete a problem and keep it briefly so it can be restored."""
        deleted = self.client.delete_problem(problem_id, self._require_credential())
        self._undo = PendingUndo(
            problem=deleted, expires_at=self.clock() + UNDO_WINDOW_SECONDS
        )
        self.refresh()
        return deleted

    @property
    def undo_available(self) -> bool:
        self._discard_expired_undo()
        return self._undo is not None

    def _discard_expired_undo(self) -> None:
        if self._undo is not None and self.clock() >= self._undo.expires_at:
            self._undo = None

    def undo_delete(self) -> Problem | None:
        """Re-submit the last deleted problem if the undo window is open.

        The restored problem is a new record with a new id.
        """
        if not self.undo_available:
            return None
        original = self._undo.problem
        restored = self.client.submit_problem(
            original.email, original.problem, original.timestamp.isoformat()
        )
        self._undo = None
        self.refresh()
        return restored

    def clear_all(self) -> ClearAllResult:
        """Delete every problem with one request each.

        Not atomic: a failure stops the run and leaves earlier deletions
        in place.
        """
        credential = self._require_credential()
        result = ClearAllResult()
        for problem in list(self.problems):
            try:
                self.client.delete_problem(problem.id, credential)
            except ApiError as e:
                logger.error("Clear all stopped at %s: %s", problem.id, e)
                result.failed_id = problem.id
                result.error = e
                break
            result.deleted_ids.append(problem.id)
        self._undo = None
        self.refresh()
        return result
