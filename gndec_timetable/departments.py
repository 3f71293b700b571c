"""Per-department parsing configuration.

Every GNDEC department publishes its timetable as a FET/aSc HTML export, but
each page differs in how a table's group label is found, how section labels
expand into lab batches and how period rows are labelled. Those differences
are data here; the parsing engine is shared.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Discovery(str, Enum):
    """How a table's raw group label is found."""

    ANCHOR_LIST = "anchor_list"  # index <ul> of <a href="#table_N">label</a>
    CAPTION = "caption"          # <caption><span class="name">label</span></caption>
    HEADER_CELL = "header_cell"  # first <th colspan=..> of the first header row


class DepartmentConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    url: str = ""
    discovery: Discovery
    anchor_selector: str = 'ul li a[href^="#"]'
    # Named groups "year" and "section"; None disables subgroup expansion.
    section_pattern: Optional[str] = None
    group_id_format: str = "{year}{section}{n}"
    period_labels: Dict[str, str] = Field(default_factory=dict)
    cell_markup: Literal["lines", "fields"] = "lines"
    skip_all_free_groups: bool = False

    def compiled_section_pattern(self) -> Optional[re.Pattern]:
        if not self.section_pattern:
            return None
        return re.compile(self.section_pattern, re.I)


# ──────────────────────────────────────────────────────────────────
#  Period label tables
# ──────────────────────────────────────────────────────────────────

_START_TIMES = ["08:30", "09:30", "10:30", "11:30", "12:30", "13:30", "14:30", "15:30"]
_ORDINALS = ["1ST", "2ND", "3RD", "4TH", "5TH", "6TH", "7TH", "8TH"]


def _long_form(hhmm: str, ordinal: str) -> str:
    """'13:30', '6TH' -> '1.30 PM (6TH)'."""
    hour, minute = (int(p) for p in hhmm.split(":"))
    suffix = "AM" if hour < 12 else "PM"
    hour12 = hour if hour <= 12 else hour - 12
    return f"{hour12}.{minute:02d} {suffix} ({ordinal})"


# Mechanical numbers its period rows 1..8; some exports spell them out
# long-form, e.g. "8.30 AM (1ST)".
MECHANICAL_PERIODS: Dict[str, str] = {
    **{str(i + 1): t for i, t in enumerate(_START_TIMES)},
    **{_long_form(t, o): t for t, o in zip(_START_TIMES, _ORDINALS)},
}


# ──────────────────────────────────────────────────────────────────
#  Departments
# ──────────────────────────────────────────────────────────────────

DEPARTMENTS: Dict[str, DepartmentConfig] = {
    "cse": DepartmentConfig(
        key="cse",
        name="Computer Science & Engineering",
        url="https://cse.gndec.ac.in/sites/default/files/TT%20Jan-June%202026_groups_days_horizontal%20%281%29.html",
        discovery=Discovery.HEADER_CELL,
        section_pattern=r"^(?P<year>D\d+)\s+CS\s+(?P<section>[A-Z])$",
        group_id_format="{year}{section}{n}",
    ),
    "bca": DepartmentConfig(
        key="bca",
        name="Computer Applications",
        url="https://ca.gndec.ac.in/sites/default/files/ca_JAN26_groups_u.html",
        discovery=Discovery.CAPTION,
        section_pattern=r"^(?P<year>BCA\d+)\s*-?\s*(?P<section>[A-Z])$",
        group_id_format="{year}-{section}{n}",
        skip_all_free_groups=True,
    ),
    "ece": DepartmentConfig(
        key="ece",
        name="Electronics & Communication Engineering",
        url="https://ece.gndec.ac.in/sites/default/files/classes%20individual%20%283%29.html",
        discovery=Discovery.ANCHOR_LIST,
        anchor_selector='ul li a[href^="#table_"]',
    ),
    "it": DepartmentConfig(
        key="it",
        name="Information Technology",
        url="https://it.gndec.ac.in/sites/default/files/jan_june2025_6%2027%20dec_years_days_horizontal%20%286%29.html",
        discovery=Discovery.ANCHOR_LIST,
        anchor_selector='ul li a[href^="#table_"]',
    ),
    "civil": DepartmentConfig(
        key="civil",
        name="Civil Engineering",
        url="https://ce.gndec.ac.in/sites/default/files/TT_19.01.2026_data_and_timetable_groups_days_horizontal.html",
        discovery=Discovery.ANCHOR_LIST,
        anchor_selector="ul > li > ul > li > a",
        cell_markup="fields",
    ),
    "electrical": DepartmentConfig(
        key="electrical",
        name="Electrical Engineering",
        url="https://ee.gndec.ac.in/sites/default/files/R2.1%20TT%20jan-june%202026%20%282%29_years_days_horizontal_0.html",
        discovery=Discovery.ANCHOR_LIST,
        anchor_selector="ul > li > a",
    ),
    "mechanical": DepartmentConfig(
        key="mechanical",
        name="Mechanical Engineering",
        url="https://me.gndec.ac.in/sites/default/files/JAN%20MAY%202026%20lock_groups_days_horizontal_0.html",
        discovery=Discovery.ANCHOR_LIST,
        anchor_selector='ul li a[href^="#table_"]',
        section_pattern=r"^(?P<year>D\d+)\s+ME\s+(?P<section>[A-Z])$",
        group_id_format="{year} ME {section}{n}",
        period_labels=MECHANICAL_PERIODS,
    ),
}


def get_department(key: str) -> DepartmentConfig:
    """Look up a department by key (case-insensitive).

    Raises:
        ValueError: If the key is not recognized.
    """
    dept = DEPARTMENTS.get(key.strip().lower())
    if dept is None:
        raise ValueError(
            f"Unknown department {key!r}. Valid: {', '.join(sorted(DEPARTMENTS))}"
        )
    return dept
