"""
Table Locator: find the (group label, <table>) pairs of a department page.

Three discovery strategies, selected per department:

- anchor list:   <ul><li>Group <a href="#table_55">D2 ME A</a></li></ul>
                 and later <table id="table_55">
- caption:       <table><caption><span class="name">BCA2 A</span></caption>
- header cell:   <table><thead><tr><td></td><th colspan="6">D2 CS A</th></tr>

A table whose label cannot be resolved is skipped, never fatal.
"""
from __future__ import annotations

from typing import List, Tuple

from bs4 import BeautifulSoup, Tag  # type: ignore[import]

from .departments import DepartmentConfig, Discovery
from .errors import LocatorMiss
from .html import clean_text, direct_rows, top_level_tables
from .logging import get_logger

log = get_logger(__name__)


# ──────────────────────────────────────────────────────────────────
#  Strategy 1: index list of anchors
# ──────────────────────────────────────────────────────────────────

def _resolve_anchor(soup: BeautifulSoup, anchor: Tag) -> Tuple[str, Tag]:
    label = clean_text(anchor)
    href = (anchor.get("href") or "").strip()
    if not label:
        raise LocatorMiss(f"anchor {href!r} has no label")
    if not href.startswith("#") or len(href) < 2:
        raise LocatorMiss(f"anchor {label!r} does not point into the page: {href!r}")
    table = soup.find("table", id=href[1:])
    if table is None:
        raise LocatorMiss(f"table {href!r} for {label!r} not found")
    return label, table


def _locate_by_anchors(soup: BeautifulSoup, selector: str) -> List[Tuple[str, Tag]]:
    found: List[Tuple[str, Tag]] = []
    for anchor in soup.select(selector):
        try:
            found.append(_resolve_anchor(soup, anchor))
        except LocatorMiss as e:
            log.debug("table_skipped", strategy="anchor_list", reason=str(e))
    return found


# ──────────────────────────────────────────────────────────────────
#  Strategy 2: caption .name
# ──────────────────────────────────────────────────────────────────

def _caption_label(table: Tag) -> str:
    caption = table.find("caption", recursive=False)
    if caption is None:
        raise LocatorMiss("table has no caption")
    name = caption.select_one(".name")
    label = clean_text(name)
    if not label:
        raise LocatorMiss("caption has no .name label")
    return label


# ──────────────────────────────────────────────────────────────────
#  Strategy 3: colspan header cell
# ──────────────────────────────────────────────────────────────────

def _header_cell_label(table: Tag) -> str:
    rows = direct_rows(table)
    if not rows:
        raise LocatorMiss("table has no rows")
    th = rows[0].find("th", colspan=True, recursive=False)
    label = clean_text(th)
    if not label:
        raise LocatorMiss("first header row has no colspan label")
    return label


_LABEL_READERS = {
    Discovery.CAPTION: _caption_label,
    Discovery.HEADER_CELL: _header_cell_label,
}


def _locate_by_label(soup: BeautifulSoup, discovery: Discovery) -> List[Tuple[str, Tag]]:
    read_label = _LABEL_READERS[discovery]
    found: List[Tuple[str, Tag]] = []
    for table in top_level_tables(soup):
        try:
            found.append((read_label(table), table))
        except LocatorMiss as e:
            log.debug(
                "table_skipped",
                strategy=discovery.value,
                table_id=table.get("id"),
                reason=str(e),
            )
    return found


# ──────────────────────────────────────────────────────────────────
#  Public API
# ──────────────────────────────────────────────────────────────────

def locate_tables(soup: BeautifulSoup, department: DepartmentConfig) -> List[Tuple[str, Tag]]:
    """
    Return ``(raw group label, table)`` pairs in document order.

    :param soup: Parsed department page.
    :param department: Supplies the discovery strategy (and anchor selector).
    """
    if department.discovery is Discovery.ANCHOR_LIST:
        return _locate_by_anchors(soup, department.anchor_selector)
    return _locate_by_label(soup, department.discovery)
