"""
CLI (Command Line Interface).

    ucmsched registration [SUBJECT] [NUMBER] --term fall --year 2021 [--open]
    ucmsched check-crns 10163 10164 [--subject CSE]
    ucmsched watch [CRN ...] [--interval SECONDS] [--once]
    ucmsched crns add|remove|list [CRN ...]
    ucmsched config show|set

Term and year default to the values in config.json; check-crns and watch
also fall back to its subject.
Any extraction error is printed once and the command exits with 1;
a schedule is only ever printed when it was parsed completely.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from datetime import time as dtime
from typing import Iterable, List

from rich import box
from rich.console import Console
from rich.table import Table

from ucmsched.config import Settings, load_settings, save_settings
from ucmsched.errors import ScheduleError
from ucmsched.fetch import get_schedule
from ucmsched.model import Course, clean_title
from ucmsched.storage import load_watched_crns, save_watched_crns

logger = logging.getLogger("ucmsched")

console = Console(highlight=False)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _fmt_time(t: dtime) -> str:
    suffix = "am" if t.hour < 12 else "pm"
    return f"{t.hour % 12 or 12}:{t.minute:02d}{suffix}"


def _course_cells(c: Course, color: bool, with_name: bool) -> List[str]:
    time_str = "TBD"
    if not c.time.is_tbd:
        time_str = f"{_fmt_time(c.time.start)}-{_fmt_time(c.time.end)}"

    seats = c.seats_open()
    open_str = str(seats)
    if color:
        open_str = f"[red]{seats}[/]" if seats <= 0 else f"[green]{seats}[/]"

    cells = [str(c.crn)]
    if with_name:
        cells.append(clean_title(c.name))
    activity = c.kind.value if c.kind is not None else "none"
    cells += [open_str, activity, time_str, ",".join(d.short for d in c.days)]
    return cells


def _course_table(courses: Iterable[Course], color: bool, with_name: bool = True) -> Table:
    table = Table(box=box.SIMPLE)
    table.add_column("crn", justify="right")
    if with_name:
        table.add_column("name")
    table.add_column("seats open", justify="right")
    table.add_column("activity")
    table.add_column("time")
    table.add_column("days")
    for c in courses:
        table.add_row(*_course_cells(c, color, with_name))
    return table


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _term_and_year(args: argparse.Namespace, settings: Settings) -> tuple[str, int] | None:
    term = (args.term or settings.term or "").strip()
    year = args.year or settings.year
    if not year:
        print("No year given (use --year or set it with 'ucmsched config set --year').", file=sys.stderr)
        return None
    if not term:
        print("No term given (use --term or set it with 'ucmsched config set --term').", file=sys.stderr)
        return None
    return term, year


def _cmd_registration(args: argparse.Namespace, settings: Settings) -> int:
    """
    Print the schedule of one subject (or all), optionally for one course number.
    """
    ty = _term_and_year(args, settings)
    if ty is None:
        return 1
    term, year = ty

    schedule = get_schedule(year, term, args.subject or "", args.open)
    if len(schedule) == 0:
        print("no courses found")
        return 1

    courses = [c for c in schedule.ordered() if not args.number or c.number == args.number]
    if not courses:
        print("no matches")
        return 1

    console.print(_course_table(courses, color=not args.no_color))
    return 0


def _requested_crns(args: argparse.Namespace) -> List[int]:
    crns = sorted(load_watched_crns())
    for crn in args.crns:
        if crn not in crns:
            crns.append(crn)
    return crns


def _cmd_check_crns(args: argparse.Namespace, settings: Settings) -> int:
    """
    Look up specific CRNs among the courses that still have seats.
    """
    ty = _term_and_year(args, settings)
    if ty is None:
        return 1
    term, year = ty

    crns = _requested_crns(args)
    schedule = get_schedule(year, term, args.subject or settings.subject, True)

    found = [c for c in (schedule.get(crn) for crn in crns) if c is not None]
    if not found:
        print(f"could not find {crns} in schedule")
        return 1

    console.print(_course_table(found, color=not args.no_color, with_name=False))
    return 0


def _check_open(crns: List[int], year: int, term: str, subject: str) -> List[int]:
    schedule = get_schedule(year, term, subject, True)
    return [crn for crn in crns if crn in schedule]


def _cmd_watch(args: argparse.Namespace, settings: Settings) -> int:
    """
    Poll the open-seats schedule and report watched CRNs that have seats.
    """
    ty = _term_and_year(args, settings)
    if ty is None:
        return 1
    term, year = ty

    crns = _requested_crns(args)
    if not crns:
        print("no crns to check (see 'ucmsched crns add')")
        return 1

    subject = args.subject or settings.subject
    interval = args.interval if args.interval is not None else settings.interval_seconds

    while True:
        try:
            open_crns = _check_open(crns, year, term, subject)
        except ScheduleError as e:
            if args.once:
                raise
            logger.error("watch error: %s", e)
        else:
            if open_crns:
                print("Open crns:")
                for crn in open_crns:
                    print(crn)
            else:
                logger.info("none of %s have open seats", crns)
            if args.once:
                return 0 if open_crns else 1

        time.sleep(interval)


def _cmd_crns(args: argparse.Namespace) -> int:
    """
    Manage the persisted watch list.
    """
    watched = load_watched_crns()

    if args.action == "list":
        if not watched:
            print("No watched crns.")
        for crn in sorted(watched):
            print(crn)
        return 0

    if not args.crns:
        print("Please provide at least one crn.")
        return 1

    if args.action == "add":
        watched.update(args.crns)
    else:
        watched.difference_update(args.crns)
    save_watched_crns(watched)
    print(f"Watching {len(watched)} crns.")
    return 0


def _cmd_config(args: argparse.Namespace, settings: Settings) -> int:
    if args.action == "set":
        if args.term is not None:
            settings.term = args.term.strip().lower()
        if args.year is not None:
            settings.year = args.year
        if args.subject is not None:
            settings.subject = args.subject.strip().upper()
        if args.interval is not None:
            settings.interval_seconds = args.interval
        save_settings(settings)

    print(f"term:     {settings.term or '(unset)'}")
    print(f"year:     {settings.year or '(unset)'}")
    print(f"subject:  {settings.subject or 'ALL'}")
    print(f"interval: {settings.interval_seconds:g}s")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="ucmsched", description="UC Merced class schedule")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print debug logging")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    sub = parser.add_subparsers(dest="command", required=True)

    sched = argparse.ArgumentParser(add_help=False)
    sched.add_argument("--term", type=str, help="Term (spring|summer|fall)")
    sched.add_argument("--year", type=int, help="Year for registration")

    p_reg = sub.add_parser("registration", aliases=["reg"], parents=[sched], help="Get registration data")
    p_reg.add_argument("subject", nargs="?", default="", help="Subject code (e.g. CSE), all subjects if omitted")
    p_reg.add_argument("number", nargs="?", type=int, default=0, help="Only show this course number")
    p_reg.add_argument("--open", action="store_true", help="Only get classes that have seats open")

    p_check = sub.add_parser("check-crns", parents=[sched], help="Check specific CRNs for open seats")
    p_check.add_argument("crns", nargs="*", type=int, help="CRNs to check besides the watch list (not saved)")
    p_check.add_argument("--subject", type=str, default="", help="Check the CRNs for a specific subject")

    p_watch = sub.add_parser("watch", parents=[sched], help="Watch a list of CRNs for open seats")
    p_watch.add_argument("crns", nargs="*", type=int, help="CRNs to check besides the watch list (not saved)")
    p_watch.add_argument("--subject", type=str, default="", help="Check the CRNs for a specific subject")
    p_watch.add_argument("--interval", type=float, help="Seconds between checks")
    p_watch.add_argument("--once", action="store_true", help="Check once and exit")

    p_crns = sub.add_parser("crns", help="Manage watched CRNs")
    p_crns.add_argument("action", choices=["add", "remove", "list"])
    p_crns.add_argument("crns", nargs="*", type=int)

    p_conf = sub.add_parser("config", help="Show or change default settings")
    p_conf.add_argument("action", choices=["show", "set"])
    p_conf.add_argument("--term", type=str)
    p_conf.add_argument("--year", type=int)
    p_conf.add_argument("--subject", type=str)
    p_conf.add_argument("--interval", type=float)

    return parser


def _run(args: argparse.Namespace) -> int:
    settings = load_settings()

    if args.command in ("registration", "reg"):
        return _cmd_registration(args, settings)
    if args.command == "check-crns":
        return _cmd_check_crns(args, settings)
    if args.command == "watch":
        return _cmd_watch(args, settings)
    if args.command == "crns":
        return _cmd_crns(args)
    if args.command == "config":
        return _cmd_config(args, settings)
    return 2


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        code = _run(args)
    except ScheduleError as e:
        print(f"error: {e}", file=sys.stderr)
        code = 1
    except KeyboardInterrupt:
        code = 130
    raise SystemExit(code)
