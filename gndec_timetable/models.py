"""Pydantic models for extracted timetable data.

All data structures use Pydantic v2. Lessons and schedules are frozen: a
scrape builds them once and a re-scrape replaces them wholesale.

The JSON shape published for the app (``to_json``/``from_json``):

    {"url": ..., "timetable": {"D2A1": {"classes": [
        {"dayOfClass": "Monday", "timeOfClass": "08:30",
         "data": {"subject", "teacher", "classRoom", "elective", "freeClass",
                  "entries", "Lab", "Tut", "OtherDepartment"}}]}}}
"""
from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class Entry(BaseModel):
    """One (subject, teacher, room) triple. Any field may be missing."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    subject: Optional[str] = None
    teacher: Optional[str] = None
    room: Optional[str] = Field(default=None, alias="classRoom")

    def to_json(self) -> Dict[str, Optional[str]]:
        return {"subject": self.subject, "teacher": self.teacher, "classRoom": self.room}


# ──────────────────────────────────────────────────────────────────
#  Cell classification (tagged variant)
# ──────────────────────────────────────────────────────────────────

class FreeCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["free"] = "free"


class SingleCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["single"] = "single"
    entry: Entry = Field(default_factory=Entry)


class MultiCell(BaseModel):
    """Parallel offerings (electives or lab/tutorial batches) in one slot."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["multi"] = "multi"
    entries: Tuple[Entry, ...]


class MarkerCell(BaseModel):
    """Unrecognized content. Rendered exactly like a free period."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["marker"] = "marker"
    reason: str = ""


CellClassification = Annotated[
    Union[FreeCell, SingleCell, MultiCell, MarkerCell],
    Field(discriminator="kind"),
]


# ──────────────────────────────────────────────────────────────────
#  Lessons and schedules
# ──────────────────────────────────────────────────────────────────

class LessonFacets(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    lab: bool = Field(default=False, alias="Lab")
    tutorial: bool = Field(default=False, alias="Tut")
    elective: bool = False
    free_class: bool = Field(default=False, alias="freeClass")
    other_department: bool = Field(default=False, alias="OtherDepartment")


class Lesson(BaseModel):
    """One (day, period) slot of one group's timetable."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    day_of_class: str = Field(alias="dayOfClass")
    time_of_class: str = Field(alias="timeOfClass")
    facets: LessonFacets = Field(default_factory=LessonFacets)
    subject: Optional[str] = None
    teacher: Optional[str] = None
    room: Optional[str] = Field(default=None, alias="classRoom")
    entries: Optional[Tuple[Entry, ...]] = None

    @property
    def is_batched(self) -> bool:
        """Lab/tutorial slot whose entries are split between subgroups."""
        return (self.facets.lab or self.facets.tutorial) and self.entries is not None

    def to_json(self) -> Dict:
        data = {
            "subject": self.subject,
            "teacher": self.teacher,
            "classRoom": self.room,
            "elective": self.facets.elective,
            "freeClass": self.facets.free_class,
            "entries": (
                [e.to_json() for e in self.entries] if self.entries is not None else None
            ),
            "Lab": self.facets.lab,
            "Tut": self.facets.tutorial,
            "OtherDepartment": self.facets.other_department,
        }
        return {"dayOfClass": self.day_of_class, "timeOfClass": self.time_of_class, "data": data}

    @classmethod
    def from_json(cls, raw: Dict) -> "Lesson":
        data = raw.get("data") or {}
        entries = data.get("entries")
        return cls(
            day_of_class=raw.get("dayOfClass", ""),
            time_of_class=raw.get("timeOfClass", ""),
            facets=LessonFacets(
                lab=bool(data.get("Lab", False)),
                tutorial=bool(data.get("Tut", False)),
                elective=bool(data.get("elective", False)),
                free_class=bool(data.get("freeClass", False)),
                other_department=bool(data.get("OtherDepartment", False)),
            ),
            subject=data.get("subject"),
            teacher=data.get("teacher"),
            room=data.get("classRoom"),
            entries=(
                tuple(Entry.model_validate(e) for e in entries) if entries is not None else None
            ),
        )


class GroupSchedule(BaseModel):
    model_config = ConfigDict(frozen=True)

    group_id: str
    lessons: Tuple[Lesson, ...] = ()

    def to_json(self) -> Dict:
        return {"classes": [lesson.to_json() for lesson in self.lessons]}


class TimetableDocument(BaseModel):
    """The published artifact: every group of one department page."""

    model_config = ConfigDict(frozen=True)

    url: str = ""
    groups: Dict[str, GroupSchedule] = Field(default_factory=dict)

    @property
    def group_ids(self) -> List[str]:
        return list(self.groups)

    def to_json(self) -> Dict:
        return {
            "url": self.url,
            "timetable": {gid: sched.to_json() for gid, sched in self.groups.items()},
        }

    @classmethod
    def from_json(cls, raw: Dict) -> "TimetableDocument":
        groups: Dict[str, GroupSchedule] = {}
        for gid, body in (raw.get("timetable") or {}).items():
            classes = (body or {}).get("classes") or []
            groups[gid] = GroupSchedule(
                group_id=gid,
                lessons=tuple(Lesson.from_json(c) for c in classes),
            )
        return cls(url=raw.get("url", ""), groups=groups)
