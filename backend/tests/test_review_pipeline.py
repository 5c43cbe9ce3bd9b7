"""Tests for the review list pipeline."""

from datetime import UTC, datetime, timedelta

import pytest

from client.review_pipeline import (
    apply_pipeline,
    clamp_page,
    compute_stats,
    page_count,
    paginate,
)
from conftest import make_problem
from models.problem import ProblemStatus


@pytest.fixture
def many_problems():
    """25 problems, one minute apart, oldest first."""
    base = datetime(2026, 1, 20, 8, 0, tzinfo=UTC)
    return [
        make_problem(
            problem_id=f"p{i:02d}",
            email=f"user{i:02d}@example.com",
            timestamp=base + timedelta(minutes=i),
        )
        for i in range(1, 26)
    ]


class TestPagination:
    def test_page_count(self):
        assert page_count(0) == 1
        assert page_count(10) == 1
        assert page_count(11) == 2
        assert page_count(25) == 3

    def test_clamp_page(self):
        assert clamp_page(0, 25) == 1
        assert clamp_page(-3, 25) == 1
        assert clamp_page(9, 25) == 3
        assert clamp_page(2, 0) == 1

    def test_last_page_is_partial(self, many_problems):
        page = paginate(many_problems, 3)

        assert page.total_pages == 3
        assert page.total_items == 25
        assert [p.id for p in page.items] == [f"p{i:02d}" for i in range(21, 26)]
        assert (page.start_index, page.end_index) == (21, 25)

    def test_out_of_range_page_is_clamped(self, many_problems):
        page = paginate(many_problems, 7)
        assert page.page == 3

    def test_empty_list(self):
        page = paginate([], 1)

        assert page.items == []
        assert page.total_pages == 1
        assert (page.start_index, page.end_index) == (0, 0)

    def test_custom_page_size(self, many_problems):
        page = paginate(many_problems, 2, page_size=5)

        assert page.total_pages == 5
        assert page.start_index == 6
        assert len(page.items) == 5


class TestApplyPipeline:
    def test_search_then_sort_then_page(self, many_problems):
        page = apply_pipeline(many_problems, search="USER1", sort_by="oldest")

        assert [p.id for p in page.items] == [f"p{i:02d}" for i in range(10, 20)]
        assert page.total_items == 10

    def test_default_is_newest_first(self, many_problems):
        page = apply_pipeline(many_problems)
        assert page.items[0].id == "p25"

    def test_no_matches(self, many_problems):
        page = apply_pipeline(many_problems, search="nobody")

        assert page.items == []
        assert page.page == 1


class TestComputeStats:
    def test_counts(self):
        now = datetime(2026, 1, 21, 12, 0, tzinfo=UTC)
        problems = [
            make_problem(problem_id="1", timestamp=now - timedelta(hours=1)),
            make_problem(
                problem_id="2",
                status=ProblemStatus.RESOLVED,
                timestamp=now - timedelta(hours=2),
            ),
            make_problem(problem_id="3", timestamp=now - timedelta(days=3)),
        ]

        stats = compute_stats(problems, now)

        assert stats.total == 3
        assert stats.pending == 2
        assert stats.resolved == 1
        assert stats.recent == 2

    def test_empty(self):
        stats = compute_stats([])
        assert (stats.total, stats.pending, stats.resolved, stats.recent) == (0, 0, 0, 0)
