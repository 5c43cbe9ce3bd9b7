"""Command-line tool for submitting and reviewing problems.

Usage:
    problem-desk submit --email you@example.com --problem "Something broke..."
    problem-desk list [--search TEXT] [--sort newest|oldest|email|status] [--page N]
    problem-desk stats
    problem-desk toggle PROBLEM_ID
    problem-desk delete PROBLEM_ID [--prompt-undo]
    problem-desk clear-all [--yes]
    problem-desk health

Admin commands read the password from --password or
PROBLEM_DESK_ADMIN_PASSWORD.
"""

import argparse
import logging
import os
import sys

from client.api_client import ApiError, ProblemApiClient
from client.review_session import ReviewSession
from client.submission import SubmissionForm
from models.problem import SortBy
from utils.constants import UNDO_WINDOW_SECONDS


def _print_problem(problem) -> None:
    print(f"[{problem.status.value:8}] {problem.id}  {problem.email}")
    print(f"    {problem.timestamp.isoformat()}  {problem.problem[:120]}")


def cmd_submit(args: argparse.Namespace, client: ProblemApiClient) -> int:
    form = SubmissionForm()
    form.set_email(args.email)
    form.set_problem(args.problem)
    created = form.submit(client)
    if created is None:
        for name, message in form.errors.items():
            print(f"{name}: {message}", file=sys.stderr)
        return 1
    print(f"Submitted {created.id}")
    return 0


def cmd_list(args: argparse.Namespace, session: ReviewSession) -> int:
    session.set_search(args.search or "")
    session.set_sort(args.sort)
    page = session.go_to_page(args.page)
    if not page.items:
        print("No problems found.")
        return 0
    for problem in page.items:
        _print_problem(problem)
    print(
        f"\nShowing {page.start_index}-{page.end_index} of {page.total_items}"
        f" (page {page.page}/{page.total_pages})"
    )
    return 0


def cmd_stats(args: argparse.Namespace, session: ReviewSession) -> int:
    stats = session.stats()
    print(f"Total:    {stats.total}")
    print(f"Pending:  {stats.pending}")
    print(f"Resolved: {stats.resolved}")
    print(f"Last 24h: {stats.recent}")
    return 0


def cmd_toggle(args: argparse.Namespace, session: ReviewSession) -> int:
    updated = session.toggle_status(args.problem_id)
    print(f"{updated.id} is now {updated.status.value}")
    return 0


def cmd_delete(args: argparse.Namespace, session: ReviewSession) -> int:
    deleted = session.delete(args.problem_id)
    print(f"Deleted {deleted.id}")
    if args.prompt_undo:
        answer = input(f"Undo within {UNDO_WINDOW_SECONDS:.0f}s? [y/N] ")
        if answer.strip().lower() == "y":
            restored = session.undo_delete()
            if restored is None:
                print("Undo window expired.")
                return 1
            print(f"Restored as {restored.id}")
    return 0


def cmd_clear_all(args: argparse.Namespace, session: ReviewSession) -> int:
    if not args.yes:
        answer = input(
            f"Delete ALL {len(session.problems)} problems? This cannot be undone! [y/N] "
        )
        if answer.strip().lower() != "y":
            print("Cancelled.")
            return 0
    result = session.clear_all()
    print(f"Deleted {len(result.deleted_ids)} problems")
    if not result.complete:
        print(f"Stopped at {result.failed_id}: {result.error}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Submit and review problems")
    parser.add_argument("--api-url", help="API base URL")
    parser.add_argument("--password", help="Admin password")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    submit_parser = subparsers.add_parser("submit", help="Submit a problem")
    submit_parser.add_argument("--email", required=True, help="Your email address")
    submit_parser.add_argument("--problem", required=True, help="Problem description")

    list_parser = subparsers.add_parser("list", help="List problems")
    list_parser.add_argument("--search", help="Match email or problem text")
    list_parser.add_argument(
        "--sort",
        choices=[s.value for s in SortBy],
        default=SortBy.NEWEST.value,
        help="Sort order",
    )
    list_parser.add_argument("--page", type=int, default=1, help="Page number")

    subparsers.add_parser("stats", help="Show problem counts")

    toggle_parser = subparsers.add_parser("toggle", help="Toggle pending/resolved")
    toggle_parser.add_argument("problem_id")

    delete_parser = subparsers.add_parser("delete", help="Delete a problem")
    delete_parser.add_argument("problem_id")
    delete_parser.add_argument(
        "--prompt-undo", action="store_true", help="Offer to undo the deletion"
    )

    clear_parser = subparsers.add_parser("clear-all", help="Delete every problem")
    clear_parser.add_argument("--yes", action="store_true", help="Skip confirmation")

    subparsers.add_parser("health", help="Check the API is up")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    client = ProblemApiClient(base_url=args.api_url)

    try:
        if args.command == "health":
            print(client.health().get("status"))
            return 0
        if args.command == "submit":
            return cmd_submit(args, client)

        password = args.password or os.environ.get("PROBLEM_DESK_ADMIN_PASSWORD")
        if not password:
            print("Admin password required (--password)", file=sys.stderr)
            return 1
        session = ReviewSession(client)
        session.login(password)

        handlers = {
            "list": cmd_list,
            "stats": cmd_stats,
            "toggle": cmd_toggle,
            "delete": cmd_delete,
            "clear-all": cmd_clear_all,
        }
        return handlers[args.command](args, session)
    except ApiError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
