"""
Current/Next Resolver: which lesson is on now, and which one comes next.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import List, NamedTuple, Optional, Tuple

from .models import Entry, GroupSchedule, Lesson, TimetableDocument

# Department convention: every period lasts 50 minutes.
LESSON_MINUTES = 50

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
WEEKDAY_INDEX = {name: i for i, name in enumerate(WEEKDAYS)}

_DAY_MAP = {
    "mo": "Monday", "mon": "Monday", "monday": "Monday",
    "tu": "Tuesday", "tue": "Tuesday", "tues": "Tuesday", "tuesday": "Tuesday",
    "we": "Wednesday", "wed": "Wednesday", "weds": "Wednesday", "wednesday": "Wednesday",
    "th": "Thursday", "thu": "Thursday", "thur": "Thursday", "thurs": "Thursday", "thursday": "Thursday",
    "fr": "Friday", "fri": "Friday", "friday": "Friday",
    "sa": "Saturday", "sat": "Saturday", "saturday": "Saturday",
    "su": "Sunday", "sun": "Sunday", "sunday": "Sunday",
}

_PERIOD_RE = re.compile(r"^\s*(\d{1,2})[:.](\d{2})\s*([AP]M)?", re.I)


def normalize_day(text: str) -> str | None:
    """'MON', 'Mon', 'monday' -> 'Monday'; None if unrecognized."""
    t = (text or "").strip().lower()
    if t in _DAY_MAP:
        return _DAY_MAP[t]
    for key, val in _DAY_MAP.items():
        if len(key) > 2 and t.startswith(key):
            return val
    return None


def period_minutes(label: str) -> int | None:
    """Start of a period as minute-of-day.

    '08:30' -> 510, '9:30-10:20' -> 570, '1.30 PM (6TH)' -> 810.
    """
    m = _PERIOD_RE.match(label or "")
    if not m:
        return None
    hour, minute, ap = int(m.group(1)), int(m.group(2)), m.group(3)
    if ap:
        ap_u = ap.upper()
        if ap_u == "AM" and hour == 12:
            hour = 0
        elif ap_u == "PM" and hour < 12:
            hour += 12
    if hour > 23 or minute > 59:
        return None
    return hour * 60 + minute


class CurrentNext(NamedTuple):
    current: Optional[Lesson]
    next: Optional[Lesson]


def lessons_on(schedule: GroupSchedule, weekday: str) -> List[Tuple[int, Lesson]]:
    """Non-free lessons of one weekday as (start minute, lesson), earliest first."""
    day = normalize_day(weekday)
    timed: List[Tuple[int, Lesson]] = []
    for lesson in schedule.lessons:
        if lesson.facets.free_class or normalize_day(lesson.day_of_class) != day:
            continue
        start = period_minutes(lesson.time_of_class)
        if start is not None:
            timed.append((start, lesson))
    timed.sort(key=lambda item: item[0])
    return timed


def resolve(
    schedule: GroupSchedule, at: datetime, duration_minutes: int = LESSON_MINUTES
) -> CurrentNext:
    """
    Find the lesson in progress at ``at`` and the one after it.

    If nothing is in progress, ``next`` is the first lesson starting later
    that day. A day without lessons gives ``(None, None)``.
    """
    minute = at.hour * 60 + at.minute
    todays = lessons_on(schedule, WEEKDAYS[at.weekday()])

    for i, (start, lesson) in enumerate(todays):
        if start <= minute < start + duration_minutes:
            following = todays[i + 1][1] if i + 1 < len(todays) else None
            return CurrentNext(lesson, following)
        if start > minute:
            return CurrentNext(None, lesson)
    return CurrentNext(None, None)


def find_group(document: TimetableDocument, name: str) -> Optional[GroupSchedule]:
    """Look up a group ignoring case and spaces ('d2 me a1' finds 'D2 ME A1')."""
    if not name:
        return None
    if name in document.groups:
        return document.groups[name]
    wanted = "".join(name.split()).lower()
    for gid, schedule in document.groups.items():
        if gid.lower() == name.lower() or "".join(gid.split()).lower() == wanted:
            return schedule
    return None


def _describe_entry(entry: Entry) -> str:
    text = entry.subject or ""
    if entry.teacher:
        text += f" - {entry.teacher}"
    if entry.room:
        text += f" @ {entry.room}"
    return text.strip()


def describe_lesson(lesson: Lesson) -> str:
    """One-line summary, e.g. 'Algorithms - Dr. Rao @ Room 204'."""
    facets = lesson.facets
    if facets.free_class:
        return "Free"
    if lesson.entries:
        return " | ".join(_describe_entry(e) for e in lesson.entries)
    if lesson.entries is not None:
        return "Tutorial" if facets.tutorial else "Lab"
    if facets.other_department:
        return "Other department"
    return _describe_entry(Entry(subject=lesson.subject, teacher=lesson.teacher, room=lesson.room))
