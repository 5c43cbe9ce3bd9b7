"""Search and ordering rules for problem lists.

Used both by ProblemService when answering list requests and by the
review pipeline on the client, so the two always agree on ordering.
"""

import re
from datetime import UTC, datetime
from typing import Any, Iterable

from models.problem import Problem, ProblemStatus, SortBy, as_utc
from utils.constants import DEFAULT_LIST_LIMIT

_STATUS_RANK = {ProblemStatus.PENDING: 0, ProblemStatus.RESOLVED: 1}
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_sort_by(value: Any) -> SortBy:
    """Parse a sort key, falling back to newest for unknown values."""
    if isinstance(value, SortBy):
        return value
    try:
        return SortBy(value)
    except ValueError:
        return SortBy.NEWEST


def parse_status(value: Any) -> ProblemStatus | None:
    """Parse a status filter; anything outside the enum is ignored."""
    if isinstance(value, ProblemStatus):
        return value
    try:
        return ProblemStatus(value)
    except ValueError:
        return None


def parse_limit(value: Any, default: int = DEFAULT_LIST_LIMIT) -> int:
    """Parse a result limit from its leading integer.

    "10.5" and "10abc" give 10; non-numeric or non-positive values give
    the default.
    """
    if isinstance(value, int):
        limit = value
    else:
        match = _LEADING_INT_RE.match(str(value)) if value is not None else None
        if not match:
            return default
        limit = int(match.group(1))
    return limit if limit > 0 else default


def matches_search(problem: Problem, term: str | None) -> bool:
    """Case-insensitive substring match against email or problem text."""
    if not term or not term.strip():
        return True
    needle = term.strip().lower()
    return needle in problem.email.lower() or needle in problem.problem.lower()


def _epoch(problem: Problem) -> float:
    return as_utc(problem.timestamp).timestamp()


def sort_problems(
    problems: Iterable[Problem], sort_by: SortBy | str = SortBy.NEWEST
) -> list[Problem]:
    """Return a new list ordered by the given sort key.

    newest/oldest order by timestamp, email ascending, and status puts
    pending before resolved with each group newest first.
    """
    sort_by = parse_sort_by(sort_by)
    items = list(problems)

    if sort_by == SortBy.OLDEST:
        return sorted(items, key=_epoch)
    if sort_by == SortBy.EMAIL:
        return sorted(items, key=lambda p: p.email)
    if sort_by == SortBy.STATUS:
        return sorted(items, key=lambda p: (_STATUS_RANK[p.status], -_epoch(p)))
    return sorted(items, key=_epoch, reverse=True)


def is_recent(problem: Problem, now: datetime | None = None, hours: int = 24) -> bool:
    """Check whether a problem was submitted less than `hours` ago."""
    now = as_utc(now) if now else datetime.now(UTC)
    age = now - as_utc(problem.timestamp)
    return age.total_seconds() < hours * 3600
