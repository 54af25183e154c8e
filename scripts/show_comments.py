#!/usr/bin/env python3
"""Print the comment forest of an announcement or calendar event."""

import argparse
import asyncio
import sys

import logfire

from portal.application.thread import CommentThread, CommentThreadFactory
from portal.config import Settings
from portal.domain.gateway import TrustedClock
from portal.domain.model import Comment
from portal.domain.service import depth_policy
from portal.domain.value import ActorType, SessionContext
from portal.util.di.container import create_container
from portal.util.logging import setup_logging
from portal.util.observability import configure_logfire, instrument_httpx


async def render(thread: CommentThread, clock: TrustedClock) -> None:
    async def show(comment: Comment, depth: int) -> None:
        indent = " " * (depth_policy.calculate_indentation(depth) // 5)
        author = comment.author.display_name or "Anonymous"
        age = await clock.get_relative_time(comment.created_at)
        print(f"{indent}#{comment.id} {author} ({age}) [{comment.reaction_count} likes]")
        print(f"{indent}  {comment.text}")
        if depth_policy.should_flatten(depth + 1) and comment.replies:
            more = depth_policy.thread_continuation_message(len(comment.replies))
            print(f"{indent}  {more}")
            return
        for reply in comment.replies:
            await show(reply, depth + 1)

    for root in thread.comments:
        await show(root, 0)
    page = thread.pagination
    print(f"-- page {page.page} of {page.total_pages}, {page.total} comments")


async def run(args: argparse.Namespace) -> None:
    container = create_container()
    try:
        factory = await container.get(CommentThreadFactory)
        clock = await container.get(TrustedClock)
        session = SessionContext(
            path="/admin" if args.role == "admin" else "/student",
            admin_principal="cli" if args.role == "admin" else None,
            student_principal="cli" if args.role == "student" else None,
        )
        thread = factory.open_for(
            session,
            announcement_id=args.announcement,
            calendar_event_id=args.calendar_event,
            role_hint=ActorType(args.role),
        )
        await thread.refresh()
        await render(thread, clock)
        thread.detach()
    finally:
        await container.close()


def main() -> int:
    """Load a thread and print it, logging failures to Logfire."""
    parser = argparse.ArgumentParser(description=__doc__)
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--announcement", type=int)
    target.add_argument("--calendar-event", type=int)
    parser.add_argument("--role", choices=["admin", "student"], default="student")
    args = parser.parse_args()

    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)
    instrument_httpx()

    try:
        asyncio.run(run(args))
        return 0
    except Exception as e:
        logfire.error(
            "Showing comments failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
