"""
Lesson Tagger: derive Lab / Tut / elective / free / other-department facets.

Department timetables mark practicals with a trailing " P" (or a leading
"(P)") and tutorials with a trailing " T" on the subject code. These two
predicates are the only place that convention lives.
"""
from __future__ import annotations

from typing import Optional, Tuple

from .cells import extract_entries, project_subject
from .models import (
    CellClassification,
    Entry,
    FreeCell,
    Lesson,
    LessonFacets,
    MarkerCell,
    MultiCell,
    SingleCell,
)


def is_lab(subject: Optional[str]) -> bool:
    if not subject:
        return False
    s = subject.strip()
    return s.endswith(" P") or s.startswith("(P)")


def is_tutorial(subject: Optional[str]) -> bool:
    if not subject:
        return False
    return subject.strip().endswith(" T")


def normalize_project(
    subject: Optional[str], teacher: Optional[str]
) -> Tuple[Optional[str], Optional[str]]:
    """MNP/MJP markers become 'Minor Project'/'Major Project' with no teacher.

    Idempotent: the normalized names are not markers themselves.
    """
    project = project_subject(subject)
    if project:
        return project, None
    return subject, teacher


def _single_lesson(day: str, period: str, entry: Entry) -> Lesson:
    lab = is_lab(entry.subject)
    tutorial = is_tutorial(entry.subject)
    subject, teacher = normalize_project(entry.subject, entry.teacher)
    facets = LessonFacets(
        lab=lab,
        tutorial=tutorial,
        # An unlabeled slot is a mandatory course on another department's timetable.
        other_department=not subject and not lab and not tutorial,
    )
    return Lesson(
        day_of_class=day,
        time_of_class=period,
        facets=facets,
        subject=subject,
        teacher=teacher,
        room=entry.room,
    )


def _multi_lesson(day: str, period: str, entries: Tuple[Entry, ...]) -> Lesson:
    all_labs = bool(entries) and all(is_lab(e.subject) for e in entries)
    all_tutorials = bool(entries) and all(is_tutorial(e.subject) for e in entries)

    if all_tutorials and len(entries) == 1:
        # One active tutorial batch is shown as an ordinary class.
        return _single_lesson(day, period, entries[0])

    return Lesson(
        day_of_class=day,
        time_of_class=period,
        facets=LessonFacets(
            lab=all_labs,
            tutorial=all_tutorials,
            elective=not (all_labs or all_tutorials),
        ),
        entries=entries,
    )


def tag_lesson(day: str, period: str, cell: CellClassification) -> Lesson:
    """Build the lesson for one (day, period) slot from its classified cell.

    The cell's (subject, teacher, room) triples come from
    :func:`cells.extract_entries`; free and marker cells carry none.
    """
    if isinstance(cell, (FreeCell, MarkerCell)):
        return Lesson(
            day_of_class=day,
            time_of_class=period,
            facets=LessonFacets(free_class=True),
        )
    if isinstance(cell, MultiCell):
        return _multi_lesson(day, period, tuple(extract_entries(cell)))
    if isinstance(cell, SingleCell):
        (entry,) = extract_entries(cell)
        return _single_lesson(day, period, entry)
    raise TypeError(f"Unsupported cell classification: {cell!r}")
