"""
CLI (Command Line Interface).

Quick terminal commands for power users and for scripting, e.g.:

    evex login alice
    evex whoami
    evex events --search hackathon
    evex register 42 [--force]
    evex cancel 42
    evex my-events --status attended
    evex feedback 42 5 --comment "Great talk"
    evex interactive

Note:
- The interactive UI lives in evex/interactive.py
- Commands print plain text (no rich formatting)
- Exit codes: 0 success, 1 user or API error, 2 usage error
"""

from __future__ import annotations

import argparse
import getpass
import logging
from typing import Optional

from evex.account import LoginPage
from evex.browse import ALL, EventsPage
from evex.config import configure_logging, load_settings
from evex.context import AppContext, build_context
from evex.model import format_date, format_time
from evex.page import Page
from evex.student import FeedbackPage, MyEventsPage


logger = logging.getLogger(__name__)


def _fail(page: Page) -> int:
    print(page.error or "Something went wrong")
    return 1


def _mount(page: Page) -> bool:
    """
    Mount a page; prints a hint when the session is not allowed there.
    """
    if page.mount():
        return True
    if not page.session.is_authenticated:
        print("Not logged in. Run: evex login <username>")
    else:
        print(f"Not available for role '{page.session.role}'.")
    return False


def _cmd_login(args: argparse.Namespace, ctx: AppContext) -> int:
    password = args.password if args.password is not None else getpass.getpass("Password: ")
    page = LoginPage(ctx)
    role = page.submit(args.identifier, password)
    if role is None:
        return _fail(page)
    user = ctx.session.user
    print(f"Logged in as {user.display_name} ({role})")
    return 0


def _cmd_logout(args: argparse.Namespace, ctx: AppContext) -> int:
    ctx.session.logout()
    print("Logged out.")
    return 0


def _cmd_whoami(args: argparse.Namespace, ctx: AppContext) -> int:
    ctx.session.load()
    user = ctx.session.user
    if user is None:
        print("Not logged in.")
        return 1
    print(f"{user.username} | {user.display_name} | {user.email or '-'} | {user.role}")
    return 0


def _cmd_events(args: argparse.Namespace, ctx: AppContext) -> int:
    ctx.session.load()
    page = EventsPage(ctx)
    _mount(page)
    if page.events.error:
        print(page.events.error)
        return 1

    page.search = args.search or ""
    page.category = args.category if args.category is not None else ALL
    page.university = args.university if args.university is not None else ALL

    events = page.filtered()
    if not events:
        print("No results.")
        return 0

    for ev in events:
        when = f"{format_date(ev.date_time)} {format_time(ev.date_time)}"
        print(f"{ev.id} | {ev.title} | {when} | {ev.venue_name or 'TBA'} | {ev.occupancy} | {page.register_label(ev)}")
    return 0


def _cmd_register(args: argparse.Namespace, ctx: AppContext) -> int:
    ctx.session.load()
    page = EventsPage(ctx)
    if not ctx.session.is_authenticated:
        print("Not logged in. Run: evex login <username>")
        return 1

    if page.register(args.event_id):
        print(page.message)
        return 0

    if page.clashes and args.force:
        if page.force_register():
            print(page.message)
            return 0
        return _fail(page)

    if page.clashes:
        print(page.error)
        for c in page.clashes:
            print(f"- {c.title} | {format_date(c.date_time)} {format_time(c.date_time)} | {c.venue_name or 'TBA'}")
        print("Re-run with --force to register anyway.")
        return 1
    return _fail(page)


def _cmd_cancel(args: argparse.Namespace, ctx: AppContext) -> int:
    ctx.session.load()
    if not ctx.session.is_authenticated:
        print("Not logged in. Run: evex login <username>")
        return 1

    page = EventsPage(ctx)
    if not page.cancel(args.event_id):
        return _fail(page)
    print(page.message)
    return 0


def _cmd_my_events(args: argparse.Namespace, ctx: AppContext) -> int:
    ctx.session.load()
    page = MyEventsPage(ctx)
    if not _mount(page):
        return 1
    if page.events.error:
        print(page.events.error)
        return 1

    page.search = args.search or ""
    page.status = args.status or "all"
    page.page = args.page

    items = page.page_items()
    if not items:
        print("No events.")
        return 0

    for ev in items:
        print(f"{ev.id} | {ev.title} | {format_date(ev.date_time)} | {ev.category_name} | {ev.status}")
    print(f"Page {page.page}/{page.total_pages}")
    return 0


def _cmd_feedback(args: argparse.Namespace, ctx: AppContext) -> int:
    ctx.session.load()
    page = FeedbackPage(ctx)
    if not _mount(page):
        return 1
    if not page.submit(args.event_id, args.rating, args.comment or ""):
        return _fail(page)
    print(page.message)
    return 0


def _cmd_interactive(args: argparse.Namespace, ctx: AppContext) -> int:
    from evex.interactive import run_interactive

    run_interactive(ctx)
    return 0


COMMANDS = {
    "login": _cmd_login,
    "logout": _cmd_logout,
    "whoami": _cmd_whoami,
    "events": _cmd_events,
    "register": _cmd_register,
    "cancel": _cmd_cancel,
    "my-events": _cmd_my_events,
    "feedback": _cmd_feedback,
    "interactive": _cmd_interactive,
}


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="evex", description="Evex university events CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    p_login = sub.add_parser("login", help="Log in and store the session tokens")
    p_login.add_argument("identifier", type=str, help="Username or email")
    p_login.add_argument("--password", type=str, default=None, help="Password (prompted when omitted)")

    sub.add_parser("logout", help="Forget the stored session")
    sub.add_parser("whoami", help="Show the logged-in user")

    p_events = sub.add_parser("events", help="List events")
    p_events.add_argument("--search", type=str, default="", help="Text in title or description")
    p_events.add_argument("--category", type=int, default=None, help="Category id")
    p_events.add_argument("--university", type=int, default=None, help="Host university id")

    p_register = sub.add_parser("register", help="Register for an event")
    p_register.add_argument("event_id", type=int, help="Event id")
    p_register.add_argument("--force", action="store_true", help="Register even if it clashes with another event")

    p_cancel = sub.add_parser("cancel", help="Cancel a registration")
    p_cancel.add_argument("event_id", type=int, help="Event id")

    p_mine = sub.add_parser("my-events", help="List your registrations")
    p_mine.add_argument(
        "--status", type=str, default="all", choices=["all", "registered", "attended", "waitlisted"]
    )
    p_mine.add_argument("--search", type=str, default="", help="Text in title, description or category")
    p_mine.add_argument("--page", type=int, default=1, help="Page number (6 events per page)")

    p_feedback = sub.add_parser("feedback", help="Rate an event you attended")
    p_feedback.add_argument("event_id", type=int, help="Event id")
    p_feedback.add_argument("rating", type=int, help="Rating from 1 to 5")
    p_feedback.add_argument("--comment", type=str, default="", help="Optional comment")

    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


def main(argv: Optional[list[str]] = None, ctx: Optional[AppContext] = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if ctx is None:
        settings = load_settings()
        configure_logging(settings.log_level)
        ctx = build_context(settings)

    handler = COMMANDS.get(args.command)
    if handler is None:
        raise SystemExit(2)

    logger.debug("Running command %s", args.command)
    raise SystemExit(handler(args, ctx))
