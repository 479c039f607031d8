from __future__ import annotations

from typing import Any, Callable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from evex.account import LoginPage, OrganizerSettingsPage, SignUpPage, StudentProfilePage, password_strength
from evex.admin import AdminEventsPage, AdminOverviewPage, AdminUsersPage, UniversitiesPage
from evex.browse import ALL, EventsPage
from evex.context import AppContext
from evex.fetching import Resource
from evex.model import EVENT_STATUSES, VISIBILITIES, format_date, format_time
from evex.organizer import (
    AttendancePage,
    CreateEventPage,
    EditEventPage,
    OrganizerAnalyticsPage,
    OrganizerDashboardPage,
    OrganizerEventsPage,
    OrganizerRegistrationsPage,
)
from evex.page import Page
from evex.student import FeedbackPage, MyEventsPage, StudentOverviewPage


console = Console()

SESSION_EXPIRED = "Session expired. Please log in again."


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str, password: bool = False) -> str:
    return console.input(escape(msg), password=password)


def _safe_str(x: Any) -> str:
    return "" if x is None else escape(str(x))


def _ask_int(msg: str) -> Optional[int]:
    raw = _prompt(msg).strip()
    if not raw:
        return None
    if not raw.isdigit():
        _println("Not a number.")
        return None
    return int(raw)


def _confirm(msg: str) -> bool:
    return _prompt(f"{msg} [y/N]: ").strip().lower() == "y"


def _banners(page: Page) -> None:
    if page.error:
        _println(f"[red]{_safe_str(page.error)}[/]")
    if page.message:
        _println(f"[green]{_safe_str(page.message)}[/]")


def _resource_ok(res: Resource) -> bool:
    if res.error:
        _println(f"[red]{_safe_str(res.error)}[/]")
        return False
    return True


def _open(page: Page) -> bool:
    """
    Mount a page; prints where the user ended up when it was redirected.
    """
    if page.mount():
        return True
    _println(f"Redirected to {_safe_str(page.ctx.navigator.current)}.")
    return False


def _menu(title: str, options: list[tuple[str, str]]) -> str:
    lines = [f"[{key}] {label}" for key, label in options]
    return _prompt(f"\n{title}\n" + "\n".join(lines) + "\n[0] Exit\nSelect: ").strip()


def _events_table(title: str, events: list[Any], with_status: bool = True) -> None:
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("ID", justify="right")
    table.add_column("Event")
    table.add_column("Date")
    table.add_column("Venue")
    table.add_column("Seats", justify="right")
    if with_status:
        table.add_column("Status")
    for ev in events:
        row = [
            f"[bold cyan]{ev.id}[/]",
            _safe_str(ev.title),
            f"{format_date(ev.date_time)} {format_time(ev.date_time)}",
            _safe_str(ev.venue_name) or "TBA",
            _safe_str(ev.occupancy),
        ]
        if with_status:
            row.append(f"[green]{_safe_str(ev.status)}[/]")
        table.add_row(*row)
    console.print(table)


def run_interactive(ctx: AppContext) -> None:
    """
    Interactive menu loop. The menu follows the session role on every pass.
    """

    def _on_tokens_changed() -> None:
        if not ctx.session.is_authenticated:
            _println(f"\n[yellow]{SESSION_EXPIRED}[/]")

    unsubscribe = ctx.tokens.subscribe(_on_tokens_changed)
    try:
        ctx.session.load()
        menus: dict[str, Callable[[AppContext], bool]] = {
            "anonymous": _public_menu,
            "student": _student_menu,
            "organizer": _organizer_menu,
            "admin": _admin_menu,
        }
        while True:
            user = ctx.session.user
            _println("\n=== Evex (interactive) ===")
            _println(f"Signed in as {_safe_str(user.display_name)} ({user.role})" if user else "Not signed in")
            if not menus[ctx.session.role or "anonymous"](ctx):
                _println("Bye.")
                return
    finally:
        unsubscribe()


def _public_menu(ctx: AppContext) -> bool:
    choice = _menu("Evex", [("1", "Browse events"), ("2", "Log in"), ("3", "Sign up")])
    if choice == "0":
        return False
    if choice == "1":
        _flow_browse(ctx)
    elif choice == "2":
        _flow_login(ctx)
    elif choice == "3":
        _flow_signup(ctx)
    else:
        _println("Invalid choice.")
    return True


def _student_menu(ctx: AppContext) -> bool:
    choice = _menu(
        "Student",
        [
            ("1", "Browse events"),
            ("2", "Overview"),
            ("3", "My events"),
            ("4", "Feedback"),
            ("5", "Profile"),
            ("9", "Log out"),
        ],
    )
    if choice == "0":
        return False
    flows = {
        "1": _flow_browse,
        "2": _flow_student_overview,
        "3": _flow_my_events,
        "4": _flow_feedback,
        "5": lambda c: _flow_profile(c, StudentProfilePage(c)),
        "9": _flow_logout,
    }
    _dispatch(ctx, flows, choice)
    return True


def _organizer_menu(ctx: AppContext) -> bool:
    choice = _menu(
        "Organizer",
        [
            ("1", "Dashboard"),
            ("2", "My events"),
            ("3", "Create event"),
            ("4", "Edit event"),
            ("5", "Attendance"),
            ("6", "Registrations"),
            ("7", "Analytics"),
            ("8", "Settings"),
            ("9", "Log out"),
        ],
    )
    if choice == "0":
        return False
    flows = {
        "1": _flow_organizer_dashboard,
        "2": _flow_organizer_events,
        "3": _flow_create_event,
        "4": _flow_edit_event,
        "5": _flow_attendance,
        "6": _flow_registrations,
        "7": _flow_analytics,
        "8": lambda c: _flow_profile(c, OrganizerSettingsPage(c)),
        "9": _flow_logout,
    }
    _dispatch(ctx, flows, choice)
    return True


def _admin_menu(ctx: AppContext) -> bool:
    choice = _menu(
        "Admin",
        [("1", "Overview"), ("2", "Events"), ("3", "Users"), ("4", "Universities"), ("9", "Log out")],
    )
    if choice == "0":
        return False
    flows = {
        "1": _flow_admin_overview,
        "2": _flow_admin_events,
        "3": _flow_admin_users,
        "4": _flow_universities,
        "9": _flow_logout,
    }
    _dispatch(ctx, flows, choice)
    return True


def _dispatch(ctx: AppContext, flows: dict[str, Callable[[AppContext], None]], choice: str) -> None:
    flow = flows.get(choice)
    if flow is None:
        _println("Invalid choice.")
        return
    flow(ctx)


# --- public -----------------------------------------------------------------


def _flow_login(ctx: AppContext) -> None:
    page = LoginPage(ctx)
    identifier = _prompt("Username or email: ").strip()
    password = _prompt("Password: ", password=True)
    role = page.submit(identifier, password)
    _banners(page)
    if role:
        _println(f"Welcome back! ({role})")


def _flow_signup(ctx: AppContext) -> None:
    page = SignUpPage(ctx)
    form = {
        "username": _prompt("Username: ").strip(),
        "email": _prompt("Email: ").strip(),
        "first_name": _prompt("First name: ").strip(),
        "last_name": _prompt("Last name: ").strip(),
        "user_type": _prompt("Role (student/organizer) [student]: ").strip().lower() or "student",
        "password": _prompt("Password: ", password=True),
    }
    form["confirm_password"] = _prompt("Confirm password: ", password=True)

    checks = password_strength(form["password"])
    missing = [name for name, ok in checks.items() if not ok]
    if missing:
        _println(f"Password is missing: {', '.join(missing)}")

    page.submit(form)
    _banners(page)


def _flow_logout(ctx: AppContext) -> None:
    ctx.session.logout()
    _println("Logged out.")


def _flow_browse(ctx: AppContext) -> None:
    page = EventsPage(ctx)
    if not _open(page) or not _resource_ok(page.events):
        return

    while True:
        _events_table(f"Events ({len(page.filtered())})", page.filtered(), with_status=False)
        choice = _prompt(
            "\n[s] Search  [c] Category  [u] University  [r] Register  [x] Cancel registration\n"
            "Select [blank = back]: "
        ).strip().lower()
        if not choice:
            return

        if choice == "s":
            page.search = _prompt("Search text [blank = clear]: ").strip()
        elif choice == "c":
            for cat in page.categories.value_or([]):
                _println(f"{cat.id}) {_safe_str(cat.name)}")
            page.category = _ask_int("Category id [blank = all]: ") or ALL
        elif choice == "u":
            for uni in page.universities.value_or([]):
                _println(f"{uni.id}) {_safe_str(uni.name)}")
            page.university = _ask_int("University id [blank = all]: ") or ALL
        elif choice == "r":
            event_id = _ask_int("Event id: ")
            if event_id is None:
                continue
            page.register(event_id)
            if not page.session.is_authenticated:
                _println("Please log in to register.")
                return
            _banners(page)
            if page.clashes:
                _flow_clash(page)
        elif choice == "x":
            event_id = _ask_int("Event id: ")
            if event_id is not None:
                page.cancel(event_id)
                _banners(page)
        else:
            _println("Invalid choice.")


def _flow_clash(page: EventsPage) -> None:
    table = Table(title="Clashing events", box=box.SIMPLE)
    table.add_column("Event")
    table.add_column("When")
    table.add_column("Venue")
    for c in page.clashes:
        table.add_row(
            _safe_str(c.title),
            f"{format_date(c.date_time)} {format_time(c.date_time)}",
            _safe_str(c.venue_name) or "TBA",
        )
    console.print(table)

    if _confirm("Register anyway?"):
        page.force_register()
        _banners(page)
    else:
        page.dismiss_clashes()


def _flow_profile(ctx: AppContext, page: Any) -> None:
    if not _open(page) or not _resource_ok(page.me):
        return

    me = page.me.value
    _println(f"\n{_safe_str(me.display_name)} <{_safe_str(me.email)}>  {_safe_str(f'[{me.initials}]')}")
    _println(
        f"University: {_safe_str(me.profile.university_name) or '-'} | "
        f"Department: {_safe_str(me.profile.department) or '-'}"
    )
    for key, value in page.stats.value_or({}).items():
        _println(f"  {_safe_str(key.replace('_', ' '))}: {_safe_str(value)}")

    choice = _prompt("\n[e] Edit profile  [d] Delete account\nSelect [blank = back]: ").strip().lower()
    if choice == "e":
        for uni in page.universities.value_or([]):
            _println(f"{uni.id}) {_safe_str(uni.name)}")
        page.save(
            first_name=_prompt(f"First name [{me.first_name}]: ").strip() or me.first_name,
            last_name=_prompt(f"Last name [{me.last_name}]: ").strip() or me.last_name,
            contact_number=_prompt("Contact number: ").strip(),
            department=_prompt("Department: ").strip(),
            university=_ask_int("University id [blank = none]: "),
        )
        _banners(page)
    elif choice == "d":
        if _confirm("This permanently deletes your account. Continue?"):
            page.delete_account()
            _banners(page)


# --- student ----------------------------------------------------------------


def _flow_student_overview(ctx: AppContext) -> None:
    page = StudentOverviewPage(ctx)
    if not _open(page) or not _resource_ok(page.overview):
        return

    stats = page.overview.value["stats"]
    table = Table(title="Overview", box=box.SIMPLE)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Upcoming events", str(stats["upcoming_events"]))
    table.add_row("Events attended", str(stats["events_attended"]))
    table.add_row("Attendance rate", _safe_str(stats["attendance_rate"]))
    table.add_row("Hours engaged", str(stats["hours_engaged"]))
    console.print(table)

    for act in page.overview.value["recent_activities"][:5]:
        _println(f"- {_safe_str(act.get('title') or act.get('description'))}")


def _flow_my_events(ctx: AppContext) -> None:
    page = MyEventsPage(ctx)
    if not _open(page) or not _resource_ok(page.events):
        return

    while True:
        counts = page.counts()
        table = Table(
            title=f"My events (page {page.page}/{page.total_pages}) | "
            f"registered={counts['registered']} attended={counts['attended']}",
            box=box.SIMPLE,
        )
        table.add_column("ID", justify="right")
        table.add_column("Event")
        table.add_column("Date")
        table.add_column("Category")
        table.add_column("Status")
        for ev in page.page_items():
            table.add_row(
                f"[bold cyan]{ev.id}[/]",
                _safe_str(ev.title),
                format_date(ev.date_time),
                _safe_str(ev.category_name),
                _safe_str(ev.status),
            )
        console.print(table)

        choice = _prompt(
            "\n[n] Next  [p] Previous  [s] Search  [f] Status filter  [x] Cancel registration\n"
            "Select [blank = back]: "
        ).strip().lower()
        if not choice:
            return
        if choice == "n":
            page.page = page.page + 1
        elif choice == "p":
            page.page = page.page - 1
        elif choice == "s":
            page.search = _prompt("Search text [blank = clear]: ").strip()
        elif choice == "f":
            page.status = _prompt("Status (all/registered/attended/waitlisted) [all]: ").strip() or "all"
        elif choice == "x":
            event_id = _ask_int("Event id: ")
            if event_id is not None and _confirm("Cancel this registration?"):
                page.cancel(event_id)
                _banners(page)
        else:
            _println("Invalid choice.")


def _flow_feedback(ctx: AppContext) -> None:
    page = FeedbackPage(ctx)
    if not _open(page) or not _resource_ok(page.attended):
        return

    pending = page.pending
    if not pending:
        _println("No events waiting for feedback.")
    for i, ev in enumerate(pending, start=1):
        _println(f"{i}) {_safe_str(ev.get('title'))} ({format_date(ev.get('date_time'))})")
    _println(f"Feedback already given: {len(page.submitted)}")
    if not pending:
        return

    pick = _ask_int("Event number [blank = back]: ")
    if pick is None:
        return
    event_id = pending[pick - 1].get("id") if 1 <= pick <= len(pending) else None
    rating = _ask_int("Rating (1-5): ") or 0
    comment = _prompt("Comment (optional): ")
    page.submit(event_id, rating, comment)
    _banners(page)


# --- organizer --------------------------------------------------------------


def _flow_organizer_dashboard(ctx: AppContext) -> None:
    page = OrganizerDashboardPage(ctx)
    if not _open(page) or not _resource_ok(page.dashboard):
        return

    ov = {k: _safe_str(v) for k, v in page.overview.items()}
    _println(
        f"Events: {ov.get('total_events', 0)} ({ov.get('published_events', 0)} published, "
        f"{ov.get('draft_events', 0)} drafts) | Registrations: {ov.get('total_registrations', 0)}"
    )
    for ev in page.upcoming_events:
        _println(f"- {_safe_str(ev.get('title'))} on {format_date(ev.get('date_time'))}")


def _flow_organizer_events(ctx: AppContext) -> None:
    page = OrganizerEventsPage(ctx)
    if not _open(page) or not _resource_ok(page.events):
        return

    while True:
        stats = page.stats()
        _events_table(
            f"Events: {stats['total']} | published {stats['published']} | drafts {stats['drafts']} | "
            f"registrations {stats['registrations']}",
            page.filtered(),
        )
        choice = _prompt("\n[s] Search  [f] Status filter\nSelect [blank = back]: ").strip().lower()
        if not choice:
            return
        if choice == "s":
            page.search = _prompt("Title contains [blank = clear]: ").strip()
        elif choice == "f":
            page.status = _prompt(f"Status ({'/'.join(('all',) + EVENT_STATUSES)}) [all]: ").strip() or "all"
        else:
            _println("Invalid choice.")


def _ask_event_form(defaults: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    defaults = defaults or {}
    form: dict[str, Any] = {}
    for field, label in (
        ("title", "Title"),
        ("description", "Description"),
        ("date", "Date (YYYY-MM-DD)"),
        ("time", "Time (HH:MM)"),
        ("location", "Location"),
        ("capacity", "Capacity"),
        ("category", "Category"),
    ):
        current = _safe_str(defaults.get(field))
        hint = f" [{current}]" if current else ""
        form[field] = _prompt(f"{label}{hint}: ").strip() or current
    current = defaults.get("visibility") or "university"
    form["visibility"] = _prompt(f"Visibility ({'/'.join(VISIBILITIES)}) [{current}]: ").strip() or current
    return form


def _flow_create_event(ctx: AppContext) -> None:
    page = CreateEventPage(ctx)
    if not _open(page):
        return

    form = _ask_event_form()
    if form["visibility"] == "inter_university":
        for uni in page.universities.value_or([]):
            _println(f"{uni.id}) {_safe_str(uni.name)}")
        raw = _prompt("Allowed university ids (comma separated): ")
        form["allowed_universities"] = [int(x) for x in raw.replace(" ", "").split(",") if x.isdigit()]

    status = "draft" if _prompt("[p] Publish  [d] Save draft [p]: ").strip().lower() == "d" else "published"
    page.submit(form, status)
    _banners(page)


def _flow_edit_event(ctx: AppContext) -> None:
    event_id = _ask_int("Event id: ")
    if event_id is None:
        return
    page = EditEventPage(ctx, event_id)
    if not _open(page) or not _resource_ok(page.event):
        return

    form = _ask_event_form(page.form())
    page.save(form)
    _banners(page)


def _flow_attendance(ctx: AppContext) -> None:
    event_id = _ask_int("Event id: ")
    if event_id is None:
        return
    page = AttendancePage(ctx, event_id)
    if not _open(page) or not (_resource_ok(page.attendance) and _resource_ok(page.event)):
        return

    while True:
        table = Table(title=f"Attendance: {_safe_str(page.event.value.get('title'))}", box=box.SIMPLE)
        table.add_column("Name")
        table.add_column("Email")
        table.add_column("Checked in")
        for rec in page.filtered():
            table.add_row(
                _safe_str(rec.get("user_name")),
                _safe_str(rec.get("user_email")),
                format_time(rec.get("checked_in_at")),
            )
        console.print(table)

        available = page.available_to_mark()
        _println(f"Waiting to be marked: {len(available)}")
        choice = _prompt("\n[m] Mark attendance  [s] Search\nSelect [blank = back]: ").strip().lower()
        if not choice:
            return
        if choice == "s":
            page.search = _prompt("Name or email [blank = clear]: ").strip()
        elif choice == "m":
            for i, reg in enumerate(available, start=1):
                user = reg.get("user") or {}
                _println(f"{i}) {_safe_str(user.get('name'))} <{_safe_str(user.get('email'))}>")
            pick = _ask_int("Number: ")
            if pick is None or not 1 <= pick <= len(available):
                continue
            notes = _prompt("Notes (optional): ").strip()
            page.mark(available[pick - 1]["user"]["id"], notes)
            _banners(page)
        else:
            _println("Invalid choice.")


def _flow_registrations(ctx: AppContext) -> None:
    page = OrganizerRegistrationsPage(ctx)
    if not _open(page) or not _resource_ok(page.events):
        return

    page.search = _prompt("Search name, email, university or status [blank = all]: ").strip()
    totals = page.totals()
    _println(
        f"Registrations {totals['registrations']} | attendees {totals['attendees']} | "
        f"waitlisted {totals['waitlisted']} | upcoming events {totals['upcoming']}"
    )
    for event in page.events.value_or([]):
        rows = page.rows(event)
        table = Table(title=f"{_safe_str(event.get('title'))} ({len(rows)})", box=box.SIMPLE)
        table.add_column("Name")
        table.add_column("Email")
        table.add_column("University")
        table.add_column("Status")
        for reg in rows:
            user = reg.get("user") or {}
            table.add_row(
                _safe_str(user.get("name")),
                _safe_str(user.get("email")),
                _safe_str(user.get("university")) or "-",
                _safe_str(reg.get("status")),
            )
        console.print(table)


def _flow_analytics(ctx: AppContext) -> None:
    page = OrganizerAnalyticsPage(ctx)
    if not _open(page) or not _resource_ok(page.analytics):
        return

    stats = {k: _safe_str(v) for k, v in page.stats.items()}
    _println(
        f"Registrations {stats.get('total_registrations', 0)} (+{stats.get('recent_registrations', 0)} this week) | "
        f"cancellations {stats.get('total_cancellations', 0)} | attended {stats.get('total_attended', 0)}"
    )
    name = _prompt("Show (all/registrations/cancellations) [all]: ").strip() or "all"
    try:
        page.set_filter(name)
    except ValueError as e:
        _println(_safe_str(e))
        return

    table = Table(title="Notifications", box=box.SIMPLE)
    table.add_column("Type")
    table.add_column("User")
    table.add_column("Event")
    for n in page.notifications:
        table.add_row(
            _safe_str(n.get("notification_type")).replace("_", " "),
            f"{_safe_str(n.get('user_name'))} <{_safe_str(n.get('user_email'))}>",
            _safe_str(n.get("event_title")),
        )
    console.print(table)


# --- admin ------------------------------------------------------------------


def _flow_admin_overview(ctx: AppContext) -> None:
    page = AdminOverviewPage(ctx)
    if not _open(page) or not _resource_ok(page.analytics):
        return

    table = Table(title="Platform", box=box.SIMPLE)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for key, value in page.overview.items():
        table.add_row(_safe_str(key.replace("_", " ")), _safe_str(value))
    console.print(table)

    for ev in page.section("popular_events")[:5]:
        _println(f"- {_safe_str(ev.get('title'))}")


def _flow_admin_events(ctx: AppContext) -> None:
    page = AdminEventsPage(ctx)
    if not _open(page) or not _resource_ok(page.events):
        return

    while True:
        counts = page.counts()
        _events_table(
            f"Events {counts['total']} | published {counts['published']} | drafts {counts['draft']} | "
            f"cancelled {counts['cancelled']}",
            page.filtered(),
        )
        choice = _prompt(
            "\n[s] Search  [u] University filter  [f] Status filter  [t] Change status  [d] Delete\n"
            "Select [blank = back]: "
        ).strip().lower()
        if not choice:
            return
        if choice == "s":
            page.search = _prompt("Search [blank = clear]: ").strip()
        elif choice == "u":
            for uni in page.universities.value_or([]):
                _println(f"{uni.id}) {_safe_str(uni.name)}")
            page.set_filters(university=_ask_int("University id [blank = all]: ") or ALL)
        elif choice == "f":
            page.set_filters(status=_prompt("Status [all]: ").strip() or ALL)
        elif choice == "t":
            event_id = _ask_int("Event id: ")
            if event_id is not None:
                page.set_status(event_id, _prompt(f"New status ({'/'.join(EVENT_STATUSES)}): ").strip())
                _banners(page)
        elif choice == "d":
            event_id = _ask_int("Event id: ")
            if event_id is not None and _confirm("Are you sure you want to delete this event?"):
                page.delete(event_id)
                _banners(page)
        else:
            _println("Invalid choice.")


def _flow_admin_users(ctx: AppContext) -> None:
    page = AdminUsersPage(ctx)
    if not _open(page) or not _resource_ok(page.users):
        return

    while True:
        counts = page.counts()
        table = Table(
            title=f"Users {counts['total']} | students {counts['student']} | organizers {counts['organizer']} | "
            f"admins {counts['admin']}",
            box=box.SIMPLE,
        )
        table.add_column("ID", justify="right")
        table.add_column("Username")
        table.add_column("Email")
        table.add_column("Role")
        table.add_column("Domain")
        for u in page.filtered():
            table.add_row(
                _safe_str(u.get("id")),
                _safe_str(u.get("username")),
                _safe_str(u.get("email")),
                _safe_str(u.get("user_type")),
                _safe_str(page.domain_of(u)) or "-",
            )
        console.print(table)

        choice = _prompt(
            "\n[s] Search  [r] Role filter  [m] Domain filter  [d] Delete\nSelect [blank = back]: "
        ).strip().lower()
        if not choice:
            return
        if choice == "s":
            page.search = _prompt("Search [blank = clear]: ").strip()
        elif choice == "r":
            page.role_filter = _prompt("Role (all/student/organizer/admin) [all]: ").strip() or "all"
        elif choice == "m":
            _println(f"Domains: {_safe_str(', '.join(page.available_domains())) or '-'}")
            page.domain = _prompt("Domain [all]: ").strip() or "all"
        elif choice == "d":
            user_id = _ask_int("User id: ")
            if user_id is not None and _confirm("Are you sure you want to delete this user?"):
                page.delete(user_id)
                _banners(page)
        else:
            _println("Invalid choice.")


def _flow_universities(ctx: AppContext) -> None:
    page = UniversitiesPage(ctx)
    if not _open(page) or not _resource_ok(page.universities):
        return

    while True:
        table = Table(title="Universities", box=box.SIMPLE)
        table.add_column("ID", justify="right")
        table.add_column("Name")
        table.add_column("Code")
        table.add_column("Domain")
        table.add_column("Active")
        for u in page.filtered():
            table.add_row(
                _safe_str(u.id),
                _safe_str(u.name),
                _safe_str(u.short_code),
                _safe_str(u.domain),
                "yes" if u.is_active else "no",
            )
        console.print(table)

        choice = _prompt(
            "\n[s] Search  [a] Add  [e] Edit  [d] Delete\nSelect [blank = back]: "
        ).strip().lower()
        if not choice:
            return
        if choice == "s":
            page.search = _prompt("Search [blank = clear]: ").strip()
        elif choice in ("a", "e"):
            uni_id = _ask_int("University id: ") if choice == "e" else None
            if choice == "e" and uni_id is None:
                continue
            fields = (
                _prompt("Name: ").strip(),
                _prompt("Short code: ").strip(),
                _prompt("Domain: ").strip(),
                _prompt("Active? [Y/n]: ").strip().lower() != "n",
            )
            if uni_id is None:
                page.create(*fields)
            else:
                page.update(uni_id, *fields)
            _banners(page)
        elif choice == "d":
            uni_id = _ask_int("University id: ")
            if uni_id is not None and _confirm("Are you sure you want to delete this university?"):
                page.delete(uni_id)
                _banners(page)
        else:
            _println("Invalid choice.")
