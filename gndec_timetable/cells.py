"""
Cell Classifier and Field Extractor.

A timetable cell holds one of four shapes:

    free      "-x-", "---", blank, or a single line with no <br>
    single    "Algorithms<br>Dr. Rao<br>Room 204"
    multi     a nested <table class="detailed"> with one column per batch,
              or several subject/teacher/room triples flattened with <br>
    marker    anything unrecognizable; rendered as free

Classification is a pure function of the cell markup.
"""
from __future__ import annotations

import re
from typing import List, Optional, Sequence

from bs4 import Tag  # type: ignore[import]

from .errors import ClassificationAmbiguity
from .html import clean_text, direct_rows, parse_document
from .logging import get_logger
from .models import CellClassification, Entry, FreeCell, MarkerCell, MultiCell, SingleCell

log = get_logger(__name__)

_LINE_BREAK_RE = re.compile(r"<br\s*/?>", re.I)
_PLACEHOLDER_RE = re.compile(r"^(?:-x-|-+)?$", re.I)

MINOR_PROJECT = "Minor Project"
MAJOR_PROJECT = "Major Project"

PROJECT_MARKERS = {
    "MNP": MINOR_PROJECT,
    "MNP MNP": MINOR_PROJECT,
    "MJP": MAJOR_PROJECT,
    "MJP MJP": MAJOR_PROJECT,
}


def project_subject(text: Optional[str]) -> Optional[str]:
    """'MNP MNP' -> 'Minor Project'; None for anything that is not a project marker."""
    if not text:
        return None
    return PROJECT_MARKERS.get(" ".join(text.split()).upper())


def is_placeholder(text: str) -> bool:
    return bool(_PLACEHOLDER_RE.match(text.strip()))


def split_lines(cell: Tag) -> List[str]:
    """Split a cell's inner markup on <br>, returning the non-empty text fragments."""
    parts: List[str] = []
    for fragment in _LINE_BREAK_RE.split(cell.decode_contents()):
        text = clean_text(parse_document(fragment))
        if text:
            parts.append(text)
    return parts


# ──────────────────────────────────────────────────────────────────
#  Nested tables (electives, lab batches)
# ──────────────────────────────────────────────────────────────────

def _register(rows: Sequence[Sequence[str]], from_bottom: int, col: int) -> Optional[str]:
    idx = len(rows) - from_bottom
    if idx < 0:
        return None
    row = rows[idx]
    if col >= len(row):
        return None
    return row[col] or None


def _classify_nested(inner: Tag) -> MultiCell:
    """
    The last three rows of a detailed table are the subject, teacher and
    room registers; any rows above them (batch names) are ignored.

        <tr><td>G1</td><td>G2</td></tr>
        <tr><td>DBMS P</td><td>OS P</td></tr>
        <tr><td>AK</td><td>RS</td></tr>
        <tr><td>Lab 3</td><td>Lab 4</td></tr>
    """
    rows = [
        [clean_text(c) for c in row.find_all(["td", "th"], recursive=False)]
        for row in direct_rows(inner)
    ]
    col_count = len(rows[0]) if rows else 0

    entries: List[Entry] = []
    for col in range(col_count):
        subject = _register(rows, 3, col)
        teacher = _register(rows, 2, col)
        room = _register(rows, 1, col)
        if subject or teacher or room:
            entries.append(Entry(subject=subject, teacher=teacher, room=room))

    if not entries:
        raise ClassificationAmbiguity(f"nested table with {len(rows)} row(s) has no entries")
    return MultiCell(entries=tuple(entries))


# ──────────────────────────────────────────────────────────────────
#  Flat <br> separated cells
# ──────────────────────────────────────────────────────────────────

def classify_parts(parts: Sequence[str]) -> CellClassification:
    """Classify the text fragments of a <br> separated cell."""
    for part in parts:
        subject = project_subject(part)
        if subject:
            return SingleCell(entry=Entry(subject=subject, teacher=None, room=parts[-1]))

    if len(parts) == 3:
        return SingleCell(entry=Entry(subject=parts[0], teacher=parts[1], room=parts[2]))

    entries = [
        Entry(subject=parts[i], teacher=parts[i + 1], room=parts[i + 2])
        for i in range(0, len(parts) - 2, 3)
    ]
    if len(entries) > 1:
        return MultiCell(entries=tuple(entries))
    if entries:
        return SingleCell(entry=entries[0])
    # No complete triple: an unlabeled slot (typically another department's course).
    return SingleCell(entry=Entry())


def _classify_lines(cell: Tag) -> CellClassification:
    inner = cell.find("table")
    if inner is not None:
        return _classify_nested(inner)

    if is_placeholder(clean_text(cell)) or cell.find("br") is None:
        return FreeCell()

    return classify_parts(split_lines(cell))


def _classify_fields(cell: Tag) -> CellClassification:
    """Cells that tag their fields: <td><span class="subject">..</span>..</td>."""
    if "empty" in (cell.get("class") or []):
        return FreeCell()
    subject = clean_text(cell.select_one(".subject")) or None
    if not subject or is_placeholder(subject):
        return FreeCell()
    teacher = clean_text(cell.select_one(".teacher")) or None
    room = clean_text(cell.select_one(".room")) or None
    project = project_subject(subject)
    if project:
        return SingleCell(entry=Entry(subject=project, teacher=None, room=room))
    return SingleCell(entry=Entry(subject=subject, teacher=teacher, room=room))


# ──────────────────────────────────────────────────────────────────
#  Public API
# ──────────────────────────────────────────────────────────────────

def classify_cell(cell: Tag, markup: str = "lines") -> CellClassification:
    """
    Classify one timetable <td>.

    :param markup: ``"lines"`` for <br> separated / nested-table cells,
        ``"fields"`` for cells with .subject/.teacher/.room elements.
    """
    try:
        if markup == "fields":
            return _classify_fields(cell)
        return _classify_lines(cell)
    except ClassificationAmbiguity as e:
        log.debug("cell_marker", reason=str(e))
        return MarkerCell(reason=str(e))


def extract_entries(cell: CellClassification) -> List[Entry]:
    """The (subject, teacher, room) triples a classified cell carries."""
    if isinstance(cell, SingleCell):
        return [cell.entry]
    if isinstance(cell, MultiCell):
        return list(cell.entries)
    return []
