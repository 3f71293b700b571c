"""Tests for resolver.py – current and next lesson lookup."""
from datetime import datetime

import pytest

from gndec_timetable.models import Entry, GroupSchedule, Lesson, LessonFacets, TimetableDocument
from gndec_timetable.resolver import (
    describe_lesson,
    find_group,
    normalize_day,
    period_minutes,
    resolve,
)


def _lesson(day, period, subject=None, **facets):
    return Lesson(
        day_of_class=day,
        time_of_class=period,
        subject=subject,
        facets=LessonFacets(**facets),
    )


# 2026-01-05 is a Monday
def _monday(hour, minute):
    return datetime(2026, 1, 5, hour, minute)


@pytest.fixture
def schedule():
    return GroupSchedule(
        group_id="D2A1",
        lessons=(
            _lesson("Monday", "08:30", free_class=True),
            _lesson("Monday", "10:30", "DBMS"),
            _lesson("Monday", "09:30", "Algorithms"),
            _lesson("Tuesday", "09:30", "Maths"),
        ),
    )


class TestNormalizeDay:
    def test_variants(self):
        assert normalize_day("Monday") == "Monday"
        assert normalize_day("MON") == "Monday"
        assert normalize_day("thurs") == "Thursday"
        assert normalize_day(" sat ") == "Saturday"

    def test_unknown(self):
        assert normalize_day("Lunch") is None
        assert normalize_day("") is None


class TestPeriodMinutes:
    def test_labels(self):
        assert period_minutes("08:30") == 510
        assert period_minutes("9:30-10:20") == 570
        assert period_minutes("13.30") == 810

    def test_twelve_hour_labels(self):
        assert period_minutes("8.30 AM (1ST)") == 510
        assert period_minutes("12.30 PM (5TH)") == 750
        assert period_minutes("1.30 PM (6TH)") == 810
        assert period_minutes("12.15 am") == 15

    def test_unparseable(self):
        assert period_minutes("Lunch") is None
        assert period_minutes("25:00") is None
        assert period_minutes("") is None


class TestResolve:
    def test_during_class(self, schedule):
        current, upcoming = resolve(schedule, _monday(9, 50))
        assert current.subject == "Algorithms"
        assert upcoming.subject == "DBMS"

    def test_before_class(self, schedule):
        current, upcoming = resolve(schedule, _monday(9, 20))
        assert current is None
        assert upcoming.subject == "Algorithms"

    def test_free_period_is_not_current(self, schedule):
        current, upcoming = resolve(schedule, _monday(8, 40))
        assert current is None
        assert upcoming.subject == "Algorithms"

    def test_period_end_is_exclusive(self, schedule):
        current, upcoming = resolve(schedule, _monday(10, 20))
        assert current is None
        assert upcoming.subject == "DBMS"

    def test_last_class(self, schedule):
        result = resolve(schedule, _monday(11, 0))
        assert result.current.subject == "DBMS"
        assert result.next is None

    def test_after_hours(self, schedule):
        assert resolve(schedule, _monday(20, 0)) == (None, None)

    def test_day_without_classes(self, schedule):
        assert resolve(schedule, datetime(2026, 1, 7, 9, 50)) == (None, None)

    def test_abbreviated_day_labels(self):
        sched = GroupSchedule(group_id="X", lessons=(_lesson("MON", "09:30", "AI"),))
        assert resolve(sched, _monday(9, 35)).current.subject == "AI"

    def test_afternoon_long_form_labels(self):
        sched = GroupSchedule(
            group_id="X",
            lessons=(
                _lesson("Monday", "1.30 PM (6TH)", "Thermo"),
                _lesson("Monday", "2.30 PM (7TH)", "CAD"),
            ),
        )
        current, upcoming = resolve(sched, _monday(13, 40))
        assert current.subject == "Thermo"
        assert upcoming.subject == "CAD"

    def test_custom_duration(self, schedule):
        assert resolve(schedule, _monday(10, 25), duration_minutes=60).current.subject == (
            "Algorithms"
        )


class TestFindGroup:
    def _doc(self):
        return TimetableDocument(
            groups={
                "D2A1": GroupSchedule(group_id="D2A1"),
                "D2 ME A1": GroupSchedule(group_id="D2 ME A1"),
            }
        )

    def test_exact(self):
        assert find_group(self._doc(), "D2A1").group_id == "D2A1"

    def test_case_and_spaces(self):
        assert find_group(self._doc(), "d2a1").group_id == "D2A1"
        assert find_group(self._doc(), "d2 me a1").group_id == "D2 ME A1"
        assert find_group(self._doc(), "D2MEA1").group_id == "D2 ME A1"

    def test_missing(self):
        assert find_group(self._doc(), "D9Z9") is None
        assert find_group(self._doc(), "") is None


class TestDescribeLesson:
    def test_free(self):
        assert describe_lesson(_lesson("Monday", "08:30", free_class=True)) == "Free"

    def test_single(self):
        lesson = Lesson(
            day_of_class="Monday",
            time_of_class="08:30",
            subject="Algorithms",
            teacher="Dr. Rao",
            room="Room 204",
        )
        assert describe_lesson(lesson) == "Algorithms - Dr. Rao @ Room 204"

    def test_entries(self):
        lesson = Lesson(
            day_of_class="Monday",
            time_of_class="10:30",
            facets=LessonFacets(elective=True),
            entries=(Entry(subject="AI", room="R5"), Entry(subject="ML", teacher="Dr. Q")),
        )
        assert describe_lesson(lesson) == "AI @ R5 | ML - Dr. Q"

    def test_batch_without_own_entry(self):
        lesson = Lesson(
            day_of_class="Monday",
            time_of_class="09:30",
            facets=LessonFacets(lab=True),
            entries=(),
        )
        assert describe_lesson(lesson) == "Lab"

    def test_other_department(self):
        lesson = _lesson("Monday", "09:30", other_department=True)
        assert describe_lesson(lesson) == "Other department"
