"""
Extract GNDEC department timetables from their published HTML pages into
one canonical schedule document per student group.
"""
from .assemble import ScrapeResult, assemble, scrape_html
from .departments import DEPARTMENTS, DepartmentConfig, Discovery, get_department
from .models import Entry, GroupSchedule, Lesson, LessonFacets, TimetableDocument
from .resolver import CurrentNext, find_group, resolve

__version__ = "0.1.0"

__all__ = [
    "scrape_html",
    "assemble",
    "ScrapeResult",
    "DEPARTMENTS",
    "DepartmentConfig",
    "Discovery",
    "get_department",
    "Entry",
    "Lesson",
    "LessonFacets",
    "GroupSchedule",
    "TimetableDocument",
    "resolve",
    "find_group",
    "CurrentNext",
]
