"""
Persist timetable documents as JSON and export a group's week to ICS.
"""
from __future__ import annotations

import hashlib
import json
import os
import tempfile
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import icalendar
import pytz

from .errors import PersistenceError
from .logging import get_logger
from .models import GroupSchedule, TimetableDocument
from .resolver import LESSON_MINUTES, WEEKDAY_INDEX, describe_lesson, normalize_day, period_minutes

log = get_logger(__name__)

# GNDEC, Ludhiana
TZ_IN = "Asia/Kolkata"


def write_json_atomic(data: Any, out_path: str | Path) -> None:
    """Write JSON through a temp file in the same directory, then rename over the target."""
    path = Path(out_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise PersistenceError(f"Could not write {path}: {e}") from e


def write_document(document: TimetableDocument, out_path: str | Path) -> None:
    """Publish a timetable document as JSON."""
    write_json_atomic(document.to_json(), out_path)
    log.info("document_written", path=str(out_path), groups=len(document.groups))


def load_document(path: str | Path) -> TimetableDocument:
    """Read a published timetable document back."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise PersistenceError(f"Could not read timetable document {path}: {e}") from e
    if not isinstance(raw, dict):
        raise PersistenceError(f"Timetable document {path} is not a JSON object")
    return TimetableDocument.from_json(raw)


def _first_date_for_weekday(start: date, weekday_name: str) -> date | None:
    target_idx = WEEKDAY_INDEX.get(weekday_name)
    if target_idx is None:
        return None
    offset = (target_idx - start.weekday()) % 7
    return start + timedelta(days=offset)


def export_group_ics(
    schedule: GroupSchedule,
    out_path: str | Path,
    term_start: date,
    term_end: date,
    tz_name: str = TZ_IN,
    duration_minutes: int = LESSON_MINUTES,
) -> int:
    """
    Export one group's weekly timetable to iCalendar (.ics).

    Each non-free lesson becomes a weekly recurring event from its first
    occurrence on or after ``term_start`` until ``term_end``.

    :returns: Number of events written.
    """
    cal = icalendar.Calendar()
    cal.add("prodid", "-//GNDEC Timetable//EN")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", f"GNDEC {schedule.group_id}")
    cal.add("x-wr-timezone", tz_name)

    tz = pytz.timezone(tz_name)
    until_dt = datetime.combine(term_end, datetime.max.time()).replace(
        microsecond=0, tzinfo=timezone.utc
    )

    count = 0
    for lesson in schedule.lessons:
        if lesson.facets.free_class:
            continue
        day = normalize_day(lesson.day_of_class)
        start_min = period_minutes(lesson.time_of_class)
        first = _first_date_for_weekday(term_start, day) if day else None
        if first is None or start_min is None or first > term_end:
            continue

        start = datetime.combine(first, datetime.min.time()) + timedelta(minutes=start_min)
        end = start + timedelta(minutes=duration_minutes)
        summary = describe_lesson(lesson)

        event = icalendar.Event()
        uid_string = f"{schedule.group_id}-{day}-{lesson.time_of_class}-{summary}"
        uid_hash = hashlib.md5(uid_string.encode("utf-8")).hexdigest()
        event.add("uid", f"{uid_hash}@gndec-timetable")

        event.add("summary", summary)
        if lesson.teacher:
            event.add("description", f"Teacher: {lesson.teacher}")
        if lesson.room:
            event.add("location", lesson.room)
        event.add("dtstart", tz.localize(start))
        event.add("dtend", tz.localize(end))
        event.add("dtstamp", datetime.now(timezone.utc))
        event.add("rrule", {"freq": "weekly", "until": until_dt})

        cal.add_component(event)
        count += 1

    try:
        Path(out_path).parent.mkdir(parents=True, exist_ok=True)
        Path(out_path).write_bytes(cal.to_ical())
    except OSError as e:
        raise PersistenceError(f"Could not write {out_path}: {e}") from e
    log.info("ics_written", path=str(out_path), group_id=schedule.group_id, events=count)
    return count
