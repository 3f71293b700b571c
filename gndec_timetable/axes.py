"""
Axis Reader: turn a located timetable <table> into day and period axes.

FET "days horizontal" exports look like:

    <thead>
      <tr><td rowspan="2"></td><th colspan="6">D2 CS A</th></tr>
      <tr><th class="xAxis">Monday</th> ... <th class="xAxis">Saturday</th></tr>
    </thead>
    <tbody>
      <tr><th class="yAxis">08:30</th><td>...</td> ... </tr>
      ...
      <tr class="foot"><td></td><td colspan="6">Timetable generated with FET</td></tr>
    </tbody>
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from bs4 import Tag  # type: ignore[import]

from .html import clean_text, direct_rows
from .logging import get_logger

log = get_logger(__name__)


@dataclass
class RawRow:
    period_label: str
    cells: List[Tag]


@dataclass
class RawTable:
    days: List[str] = field(default_factory=list)
    rows: List[RawRow] = field(default_factory=list)


def _is_class(tag: Tag, name: str) -> bool:
    return name in (tag.get("class") or [])


def _day_headers(row: Tag) -> List[Tag]:
    return [th for th in row.find_all("th", recursive=False) if _is_class(th, "xAxis")]


def _period_cell(row: Tag) -> Optional[Tag]:
    for th in row.find_all("th", recursive=False):
        if _is_class(th, "yAxis"):
            return th
    return None


def read_day_axis(table: Tag) -> List[str]:
    """Texts of the x-axis header cells, taken from the last header row that has any."""
    days: List[str] = []
    for row in direct_rows(table):
        headers = _day_headers(row)
        if headers:
            days = [clean_text(th) for th in headers]
    return days


def normalize_period(label: str, period_labels: Optional[Dict[str, str]] = None) -> str:
    """Map a source period label through the department's lookup table, if any."""
    if period_labels:
        return period_labels.get(label, label)
    return label


def read_axes(table: Tag, period_labels: Optional[Dict[str, str]] = None) -> RawTable:
    """
    Extract the day axis and the period-labelled body rows of a table.

    Rows without a non-empty period cell, footer rows, and rows whose
    number of cells differs from the number of days are dropped.

    :param period_labels: Optional exact-match lookup (e.g. ``{"1": "08:30"}``);
        labels missing from it pass through unchanged.
    """
    days = read_day_axis(table)
    raw = RawTable(days=days)
    if not days:
        log.debug("day_axis_missing", table_id=table.get("id"))
        return raw

    for row in direct_rows(table):
        if _is_class(row, "foot") or _day_headers(row):
            continue
        period_cell = _period_cell(row)
        if period_cell is None:
            continue
        label = clean_text(period_cell)
        if not label:
            continue

        cells = row.find_all("td", recursive=False)
        if len(cells) != len(days):
            log.debug(
                "row_skipped",
                table_id=table.get("id"),
                period=label,
                cells=len(cells),
                days=len(days),
            )
            continue

        raw.rows.append(RawRow(period_label=normalize_period(label, period_labels), cells=cells))

    return raw
