"""Filter, sort and paginate a fetched problem list for review."""

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Iterable

from models.problem import Problem, ProblemStatus, SortBy
from utils.constants import PAGE_SIZE, RECENT_WINDOW_HOURS
from utils.problem_query import is_recent, matches_search, sort_problems


@dataclass
class Page:
    """One page of the review list."""

    items: list[Problem]
    page: int
    total_pages: int
    total_items: int
    page_size: int = PAGE_SIZE

    @property
    def start_index(self) -> int:
        """1-based position of the first item, or 0 for an empty page."""
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end_index(self) -> int:
        if not self.items:
            return 0
        return self.start_index + len(self.items) - 1


@dataclass
class ReviewStats:
    """Counters shown above the review list."""

    total: int = 0
    pending: int = 0
    resolved: int = 0
    recent: int = 0


def filter_by_search(problems: Iterable[Problem], term: str | None) -> list[Problem]:
    return [p for p in problems if matches_search(p, term)]


def page_count(total_items: int, page_size: int = PAGE_SIZE) -> int:
    """Number of pages, never less than one."""
    return max(1, math.ceil(total_items / page_size))


def clamp_page(page: int, total_items: int, page_size: int = PAGE_SIZE) -> int:
    return min(max(1, page), page_count(total_items, page_size))


def paginate(
    problems: list[Problem], page: int, page_size: int = PAGE_SIZE
) -> Page:
    """Slice out a page, clamping the page number into range."""
    page = clamp_page(page, len(problems), page_size)
    start = (page - 1) * page_size
    return Page(
        items=problems[start : start + page_size],
        page=page,
        total_pages=page_count(len(problems), page_size),
        total_items=len(problems),
        page_size=page_size,
    )


def apply_pipeline(
    problems: Iterable[Problem],
    search: str | None = None,
    sort_by: SortBy | str = SortBy.NEWEST,
    page: int = 1,
) -> Page:
    """Run search filter, then sort, then paginate."""
    filtered = filter_by_search(problems, search)
    return paginate(sort_problems(filtered, sort_by), page)


def compute_stats(
    problems: Iterable[Problem], now: datetime | None = None
) -> ReviewStats:
    """Count problems by status and those submitted in the last day."""
    now = now or datetime.now(UTC)
    stats = ReviewStats()
    for problem in problems:
        stats.total += 1
        if problem.status == ProblemStatus.PENDING:
            stats.pending += 1
        else:
            stats.resolved += 1
        if is_recent(problem, now, hours=RECENT_WINDOW_HOURS):
            stats.recent += 1
    return stats
