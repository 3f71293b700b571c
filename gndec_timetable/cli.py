"""
Command-line interface: scrape a GNDEC department timetable and publish it.
"""
from __future__ import annotations

import argparse
import sys
from datetime import date, datetime
from pathlib import Path

import pytz

from . import __version__
from .assemble import scrape_html
from .config import get_config
from .departments import DEPARTMENTS, get_department
from .errors import FetchError, ParseError, PersistenceError
from .export import export_group_ics, write_document
from .fetch import fetch_html
from .logging import setup_logging
from .registry import update_registry
from .resolver import describe_lesson, find_group, resolve


def _parse_date(value: str | None, flag: str) -> date:
    if not value:
        raise ValueError(f"{flag} is required (YYYY-MM-DD)")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"{flag} must be YYYY-MM-DD, got {value!r}") from None


def _reference_time(value: str | None, tz_name: str) -> datetime:
    tz = pytz.timezone(tz_name)
    if not value:
        return datetime.now(tz)
    return tz.localize(datetime.fromisoformat(value))


def _print_current_next(document, group: str, at: datetime, duration: int) -> int:
    schedule = find_group(document, group)
    if schedule is None:
        print(f"Error: group {group!r} not found in this timetable.", file=sys.stderr)
        return 1
    current, upcoming = resolve(schedule, at, duration)
    print(f"{schedule.group_id} @ {at:%A %H:%M}")
    if current is not None:
        print(f"Now:  {current.time_of_class}  {describe_lesson(current)}")
    else:
        print("Now:  no class")
    if upcoming is not None:
        print(f"Next: {upcoming.time_of_class}  {describe_lesson(upcoming)}")
    else:
        print("Next: nothing more today")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Scrape a GNDEC department timetable page into one JSON schedule per group.\n"
            "- Fetch the department page, or parse a saved copy of it."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("department", choices=sorted(DEPARTMENTS), help="Department to scrape.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--fetch",
        action="store_true",
        help="Download the department timetable page (default URL, or --url).",
    )
    mode.add_argument(
        "--html",
        metavar="HTML_PATH",
        help="Parse a saved timetable page instead of downloading it.",
    )
    parser.add_argument("--url", help="Timetable page URL (overrides the department default).")
    parser.add_argument(
        "-o",
        "--output",
        help="Output path (without extension). Default: <output_dir>/timetable_<department>",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "ics"],
        default="json",
        help="json publishes every group; ics exports one --group. Default: json",
    )
    parser.add_argument(
        "--registry",
        metavar="PATH",
        help="Group registry file to append new groups to. Default: <registry_dir>/<department>.json",
    )
    parser.add_argument(
        "--no-registry",
        action="store_true",
        help="Do not touch the group registry.",
    )
    parser.add_argument("--group", help="(ics) Group to export, e.g. D2A1.")
    parser.add_argument("--term-start", metavar="YYYY-MM-DD", help="(ics) First teaching day.")
    parser.add_argument("--term-end", metavar="YYYY-MM-DD", help="(ics) Last teaching day.")
    parser.add_argument(
        "--list-groups",
        action="store_true",
        help="Print the group ids found on the page, then exit.",
    )
    parser.add_argument(
        "--now",
        metavar="GROUP",
        help="Print the current and next class of GROUP, then exit.",
    )
    parser.add_argument(
        "--at",
        metavar="YYYY-MM-DDTHH:MM",
        help="(--now) Reference time in the timetable's timezone. Default: current time.",
    )
    args = parser.parse_args(argv)

    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)
    department = get_department(args.department)
    url = args.url or department.url

    if args.html:
        try:
            html = Path(args.html).read_text(encoding="utf-8", errors="ignore")
        except OSError as e:
            print(f"Error reading {args.html}: {e}", file=sys.stderr)
            return 1
    elif args.fetch:
        try:
            print(f"Fetching {department.name} timetable...", file=sys.stderr)
            html = fetch_html(url)
        except FetchError as e:
            print(f"Error fetching timetable: {e}", file=sys.stderr)
            return 1
    else:
        print(
            "No mode specified. Use --fetch to download the department page "
            "or --html for a saved page.",
            file=sys.stderr,
        )
        return 1

    try:
        result = scrape_html(html, department, url=url)
    except ParseError as e:
        print(f"Error parsing timetable: {e}", file=sys.stderr)
        return 1
    document = result.document

    if args.list_groups:
        for gid in document.group_ids:
            print(gid)
        return 0

    if args.now:
        try:
            at = _reference_time(args.at, config.timezone)
        except ValueError as e:
            print(f"Error: --at {e}", file=sys.stderr)
            return 1
        return _print_current_next(document, args.now, at, config.lesson_duration_minutes)

    default_output = Path(config.output_dir) / f"timetable_{department.key}"
    output = args.output or str(default_output)
    ext = {"json": ".json", "ics": ".ics"}[args.format]
    out_path = Path(output).with_suffix(ext) if Path(output).suffix else Path(output + ext)

    try:
        if args.format == "ics":
            if not args.group:
                print("Error: --format ics requires --group.", file=sys.stderr)
                return 1
            schedule = find_group(document, args.group)
            if schedule is None:
                print(f"Error: group {args.group!r} not found in this timetable.", file=sys.stderr)
                return 1
            try:
                term_start = _parse_date(args.term_start, "--term-start")
                term_end = _parse_date(args.term_end, "--term-end")
            except ValueError as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
            count = export_group_ics(
                schedule,
                out_path,
                term_start,
                term_end,
                tz_name=config.timezone,
                duration_minutes=config.lesson_duration_minutes,
            )
            print(f"Exported {count} class(es) of {schedule.group_id} to {out_path}")
            return 0

        write_document(document, out_path)
        print(f"Exported {len(document.groups)} group(s) to {out_path}")

        if not args.no_registry:
            registry_path = args.registry or str(Path(config.registry_dir) / f"{department.key}.json")
            fresh = update_registry(registry_path, result.group_ids)
            if fresh:
                print(f"Registered {len(fresh)} new group(s): {', '.join(fresh)}")
    except PersistenceError as e:
        print(f"Error saving output: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
