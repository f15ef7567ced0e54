"""Command-line interface for Inbox Search.

This module provides the main entry point for the CLI application.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import structlog

from inbox_search.config import Settings, get_settings
from inbox_search.exceptions import InboxSearchError
from inbox_search.search import DEFAULT_CATALOG, Bucket, latest_message, parse_query, suggestions
from inbox_search.session import InboxSession
from inbox_search.store import InMemoryThreadStore, ThreadStore

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inbox-search", description="Inbox Search")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Search or browse mail threads")
    search_parser.add_argument(
        "query",
        nargs="?",
        default="",
        help="Search query (Gmail-style operators). Empty browses the folder.",
    )
    search_parser.add_argument(
        "--folder",
        choices=[b.value for b in Bucket],
        default=Bucket.INBOX.value,
        help="Folder to browse when the query is empty (default: inbox)",
    )
    search_parser.add_argument("--page", type=int, default=0, help="0-based result page")
    search_parser.add_argument(
        "--page-size",
        type=int,
        default=None,
        help="Threads per page (default: settings page_size)",
    )
    search_parser.add_argument(
        "--source",
        default=None,
        help="'gmail' or path to a JSON thread snapshot (default: settings thread_source)",
    )

    parse_parser = subparsers.add_parser("parse", help="Show how a query is parsed")
    parse_parser.add_argument("query", help="Search query")

    suggest_parser = subparsers.add_parser("suggest", help="List operator suggestions")
    suggest_parser.add_argument("input", nargs="?", default="", help="Current search box text")

    return parser


def _build_store(source: str, settings: Settings) -> ThreadStore:
    if source == "gmail":
        # Imported lazily so offline use does not need Google libraries configured.
        from inbox_search.gmail import GmailClient, GmailThreadStore

        return GmailThreadStore(GmailClient(settings))
    return InMemoryThreadStore.from_json_file(Path(source))


async def _cmd_search(args: argparse.Namespace) -> int:
    settings = get_settings()
    store = _build_store(args.source or settings.thread_source, settings)

    session = InboxSession(store, settings=settings, page_size=args.page_size)
    if not await session.refresh():
        print("Could not fetch threads.", file=sys.stderr)
        return 1

    session.set_search_text(args.query)
    session.set_folder(args.folder)
    session.set_page(args.page)

    chips = session.active_chips()
    if chips:
        print("Filters: " + ", ".join(chip.label for chip in chips))
    print(
        f"{session.result_count()} threads "
        f"(page {session.page + 1} of {max(session.page_count(), 1)})"
    )

    for thread in session.visible_threads():
        latest = latest_message(thread)
        unread = "UNREAD" if session.is_unread(thread) else "READ"
        date_part = "(no date)"
        from_part = ""
        if latest is not None:
            if latest.received_at is not None:
                date_part = latest.received_at.isoformat()
            # Show the display name of "Name <addr>".
            from_part = latest.from_address.split("<")[0].strip()
        print(
            f"{unread}\t{date_part}\t{from_part or '(unknown sender)'}\t"
            f"{thread.subject or '(no subject)'}"
        )

    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    print(parse_query(args.query).model_dump_json(indent=2))
    return 0


def _cmd_suggest(args: argparse.Namespace) -> int:
    for suggestion in suggestions(DEFAULT_CATALOG, args.input):
        marker = "*" if suggestion.active else " "
        print(f"{marker} {suggestion.label}\t{suggestion.entry.description}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Inbox Search CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()

    # Configure logging
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
    )

    logger.debug("inbox_search_started", version="0.1.0", debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    try:
        if parsed.command == "search":
            return asyncio.run(_cmd_search(parsed))
        if parsed.command == "parse":
            return _cmd_parse(parsed)
        if parsed.command == "suggest":
            return _cmd_suggest(parsed)
    except InboxSearchError as exc:
        logger.error("command_failed", command=parsed.command, error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.error("unknown_command", command=parsed.command)
    return 2


if __name__ == "__main__":
    sys.exit(main())
