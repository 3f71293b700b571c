"""
Schedule Assembler: run the whole pipeline over one department page.

    locate tables -> read axes -> classify cells -> tag lessons
        -> expand sections -> merge into one TimetableDocument

Everything here is pure: the caller fetches the HTML and persists the
document and group registry.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from bs4 import Tag  # type: ignore[import]

from .axes import read_axes
from .cells import classify_cell
from .departments import DepartmentConfig
from .errors import ParseError
from .html import parse_document
from .locate import locate_tables
from .logging import get_logger
from .models import GroupSchedule, Lesson, TimetableDocument
from .sections import expand_section
from .tagging import tag_lesson

log = get_logger(__name__)


@dataclass
class ScrapeResult:
    document: TimetableDocument
    # Group ids to offer to the department's registry
    group_ids: List[str] = field(default_factory=list)


def parse_table(table: Tag, department: DepartmentConfig) -> List[Lesson]:
    """All lessons of one table, row by row, day by day."""
    raw = read_axes(table, department.period_labels)
    lessons: List[Lesson] = []
    for row in raw.rows:
        for day, cell in zip(raw.days, row.cells):
            classified = classify_cell(cell, department.cell_markup)
            lessons.append(tag_lesson(day, row.period_label, classified))
    return lessons


def assemble(url: str, schedules: Iterable[GroupSchedule]) -> TimetableDocument:
    """
    Merge group schedules into one document keyed by group id.

    A group id seen twice is overwritten by the later table.
    """
    groups: Dict[str, GroupSchedule] = {}
    for schedule in schedules:
        if schedule.group_id in groups:
            log.warning("group_collision", group_id=schedule.group_id, url=url)
        groups[schedule.group_id] = schedule
    return TimetableDocument(url=url, groups=groups)


def registrable_group_ids(document: TimetableDocument, department: DepartmentConfig) -> List[str]:
    """Group ids worth recording; optionally leaves out groups that are free all week."""
    ids: List[str] = []
    for gid, schedule in document.groups.items():
        if department.skip_all_free_groups and all(
            lesson.facets.free_class for lesson in schedule.lessons
        ):
            log.debug("group_not_registered", group_id=gid, reason="all_free")
            continue
        ids.append(gid)
    return ids


def new_group_ids(group_ids: Iterable[str], known: Iterable[str]) -> List[str]:
    """Ids in ``group_ids`` not yet in ``known``, first-seen order, no duplicates."""
    seen = set(known)
    fresh: List[str] = []
    for gid in group_ids:
        if gid not in seen:
            seen.add(gid)
            fresh.append(gid)
    return fresh


def scrape_html(html: str, department: DepartmentConfig, url: str | None = None) -> ScrapeResult:
    """
    Extract every group's timetable from a department page.

    :param html: Already-fetched page markup.
    :param department: Parsing configuration for the page's department.
    :param url: Source URL recorded in the document. Defaults to the department URL.
    :raises ParseError: if no timetable table can be located at all.
    """
    source_url = url if url is not None else department.url
    soup = parse_document(html)

    located = locate_tables(soup, department)
    if not located:
        raise ParseError(
            f"No timetable tables found for {department.key} "
            f"(discovery: {department.discovery.value})"
        )

    schedules: List[GroupSchedule] = []
    for label, table in located:
        lessons = parse_table(table, department)
        schedules.extend(expand_section(label, lessons, department))

    document = assemble(source_url, schedules)
    log.info(
        "document_assembled",
        department=department.key,
        tables=len(located),
        groups=len(document.groups),
    )
    return ScrapeResult(document=document, group_ids=registrable_group_ids(document, department))
