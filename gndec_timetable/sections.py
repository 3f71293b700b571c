"""
Section Expander: split a section's table into per-batch subgroups.

"D2 CS A" is taught as one section but practicals and tutorials run in
batches D2A1, D2A2, ... Each batch gets the whole section's lessons, except
that a batched lab/tutorial slot keeps only that batch's own entry.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .departments import DepartmentConfig
from .errors import SectionPatternMismatch
from .logging import get_logger
from .models import GroupSchedule, Lesson

log = get_logger(__name__)

MIN_SUBGROUPS = 2


def max_subgroups(lessons: Iterable[Lesson]) -> int:
    """Largest batch count among batched lab/tutorial slots (at least 2)."""
    counts = [len(lesson.entries) for lesson in lessons if lesson.is_batched]
    return max([MIN_SUBGROUPS, *counts])


def expand_label(label: str, department: DepartmentConfig, count: int) -> List[str]:
    """
    "D2 CS A", count=3 -> ["D2A1", "D2A2", "D2A3"] (CSE format).

    :raises SectionPatternMismatch: if the department has no section pattern
        or the label does not match it.
    """
    pattern = department.compiled_section_pattern()
    if pattern is None:
        raise SectionPatternMismatch(f"{department.key} does not expand sections")
    m = pattern.match(label.strip())
    if not m:
        raise SectionPatternMismatch(f"{label!r} does not match {pattern.pattern!r}")
    year = m.group("year").upper()
    section = m.group("section").upper()
    return [
        department.group_id_format.format(year=year, section=section, n=n)
        for n in range(1, count + 1)
    ]


def slice_for_subgroup(lessons: Sequence[Lesson], index: int) -> Tuple[Lesson, ...]:
    """
    Deep-copied lessons for the subgroup at ``index`` (0-based).

    Batched slots keep only entry ``index``; a slot with fewer batches than
    the section maximum yields an empty entry list for the extra subgroups.
    """
    sliced: List[Lesson] = []
    for lesson in lessons:
        if lesson.is_batched:
            own = lesson.entries[index : index + 1]
            sliced.append(lesson.model_copy(update={"entries": tuple(own)}, deep=True))
        else:
            sliced.append(lesson.model_copy(deep=True))
    return tuple(sliced)


def expand_section(
    label: str, lessons: Sequence[Lesson], department: DepartmentConfig
) -> List[GroupSchedule]:
    """Expand one table's section label into per-subgroup schedules."""
    try:
        group_ids = expand_label(label, department, max_subgroups(lessons))
    except SectionPatternMismatch as e:
        log.debug("section_not_expanded", label=label, reason=str(e))
        return [
            GroupSchedule(
                group_id=label,
                lessons=tuple(lesson.model_copy(deep=True) for lesson in lessons),
            )
        ]

    return [
        GroupSchedule(group_id=gid, lessons=slice_for_subgroup(lessons, i))
        for i, gid in enumerate(group_ids)
    ]
