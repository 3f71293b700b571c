"""
BeautifulSoup helpers shared by the locator, axis reader and cell classifier.
"""
from __future__ import annotations

from typing import List, Union

from bs4 import BeautifulSoup, NavigableString, Tag  # type: ignore[import]


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def clean_text(node: Union[Tag, NavigableString, str, None]) -> str:
    """Visible text with runs of whitespace (including &nbsp;) collapsed."""
    if node is None:
        return ""
    if isinstance(node, Tag):
        text = node.get_text(" ")
    else:
        text = str(node)
    return " ".join(text.split())


def top_level_tables(soup: Union[BeautifulSoup, Tag]) -> List[Tag]:
    """Tables that are not nested inside another table's cell."""
    return [t for t in soup.find_all("table") if t.find_parent("table") is None]


def direct_rows(table: Tag) -> List[Tag]:
    """<tr> rows of a table, looking through thead/tbody/tfoot but not nested tables."""
    rows: List[Tag] = []
    for child in table.find_all(recursive=False):
        if child.name == "tr":
            rows.append(child)
        elif child.name in ("thead", "tbody", "tfoot"):
            rows.extend(child.find_all("tr", recursive=False))
    return rows
