"""Tests for assemble.py – the whole page to document pipeline."""
import pytest

from gndec_timetable.assemble import assemble, new_group_ids, scrape_html
from gndec_timetable.departments import get_department
from gndec_timetable.errors import ParseError
from gndec_timetable.models import GroupSchedule, Lesson, TimetableDocument


def _detailed(*columns):
    rows = "".join(
        "<tr>" + "".join(f"<td>{col[i]}</td>" for col in columns) + "</tr>" for i in range(3)
    )
    return f'<table class="detailed">{rows}</table>'


def _grid(rows, days=("Monday", "Tuesday"), label=None, caption=None, table_id="table_1"):
    days_row = "".join(f'<th class="xAxis">{d}</th>' for d in days)
    cap = f'<caption><span class="name">{caption}</span></caption>' if caption else ""
    label_cell = f'<th colspan="{len(days)}">{label}</th>' if label else "<th></th>"
    body = "".join(
        f'<tr><th class="yAxis">{period}</th>' + "".join(f"<td>{c}</td>" for c in cells) + "</tr>"
        for period, cells in rows
    )
    return (
        f'<table id="{table_id}">{cap}'
        f'<thead><tr><td rowspan="2"></td>{label_cell}</tr><tr>{days_row}</tr></thead>'
        f'<tbody>{body}<tr class="foot"><td></td><td colspan="{len(days)}">FET</td></tr></tbody>'
        "</table>"
    )


CSE_ROWS = [
    ("08:30", ["Algorithms<br>Dr. Rao<br>Room 204", "-x-"]),
    (
        "09:30",
        [_detailed(("DBMS P", "AK", "Lab 3"), ("OS P", "RS", "Lab 4")), "Maths T<br>SK<br>R1"],
    ),
    ("10:30", [_detailed(("AI", "Dr. P", "R5"), ("ML", "Dr. Q", "R6")), "CS301<br>Dr. Y"]),
]

CSE_URL = "https://cse.gndec.ac.in/tt.html"


def _cse_page():
    return f"<html><body>{_grid(CSE_ROWS, label='D2 CS A')}</body></html>"


class TestScrapeCse:
    def test_groups(self):
        result = scrape_html(_cse_page(), get_department("cse"), url=CSE_URL)
        assert result.document.group_ids == ["D2A1", "D2A2"]
        assert result.group_ids == ["D2A1", "D2A2"]
        assert result.document.url == CSE_URL

    def test_default_url(self):
        cse = get_department("cse")
        assert scrape_html(_cse_page(), cse).document.url == cse.url

    def test_lesson_order(self):
        doc = scrape_html(_cse_page(), get_department("cse")).document
        lessons = doc.groups["D2A1"].lessons
        assert [(l.day_of_class, l.time_of_class) for l in lessons] == [
            ("Monday", "08:30"),
            ("Tuesday", "08:30"),
            ("Monday", "09:30"),
            ("Tuesday", "09:30"),
            ("Monday", "10:30"),
            ("Tuesday", "10:30"),
        ]

    def test_published_shape(self):
        doc = scrape_html(_cse_page(), get_department("cse"), url=CSE_URL).document
        data = doc.to_json()
        assert data["url"] == CSE_URL
        classes = data["timetable"]["D2A1"]["classes"]
        assert classes[0] == {
            "dayOfClass": "Monday",
            "timeOfClass": "08:30",
            "data": {
                "subject": "Algorithms",
                "teacher": "Dr. Rao",
                "classRoom": "Room 204",
                "elective": False,
                "freeClass": False,
                "entries": None,
                "Lab": False,
                "Tut": False,
                "OtherDepartment": False,
            },
        }
        assert classes[1]["data"]["freeClass"] is True

    def test_lab_batches_split(self):
        doc = scrape_html(_cse_page(), get_department("cse")).document
        first = doc.groups["D2A1"].lessons[2]
        second = doc.groups["D2A2"].lessons[2]
        assert first.facets.lab and second.facets.lab
        assert [e.subject for e in first.entries] == ["DBMS P"]
        assert [e.subject for e in second.entries] == ["OS P"]
        assert first.to_json()["data"]["entries"] == [
            {"subject": "DBMS P", "teacher": "AK", "classRoom": "Lab 3"}
        ]

    def test_tutorial_elective_and_other_department(self):
        lessons = scrape_html(_cse_page(), get_department("cse")).document.groups["D2A2"].lessons
        tutorial, elective, other = lessons[3], lessons[4], lessons[5]
        assert tutorial.facets.tutorial and tutorial.subject == "Maths T"
        assert elective.facets.elective and len(elective.entries) == 2
        assert other.facets.other_department and other.subject is None

    def test_round_trip(self):
        doc = scrape_html(_cse_page(), get_department("cse"), url=CSE_URL).document
        assert TimetableDocument.from_json(doc.to_json()) == doc

    def test_no_tables(self):
        with pytest.raises(ParseError, match="No timetable tables"):
            scrape_html("<html><body><p>Coming soon</p></body></html>", get_department("cse"))

    def test_unlabeled_table_skipped(self):
        html = _grid(CSE_ROWS, table_id="t0") + _grid(CSE_ROWS, label="D3 CS B", table_id="t1")
        doc = scrape_html(html, get_department("cse")).document
        assert doc.group_ids == ["D3B1", "D3B2"]


class TestScrapeOtherDepartments:
    def test_bca_skips_all_free_groups(self):
        free_rows = [("09:00", ["-x-", "-x-"])]
        busy_rows = [("09:00", ["Java<br>NK<br>CL2", "-x-"])]
        html = _grid(free_rows, caption="BCA2 A") + _grid(busy_rows, caption="BCA3 B", table_id="t2")
        result = scrape_html(html, get_department("bca"))
        assert result.document.group_ids == ["BCA2-A1", "BCA2-A2", "BCA3-B1", "BCA3-B2"]
        assert result.group_ids == ["BCA3-B1", "BCA3-B2"]

    def test_mechanical_periods_and_ids(self):
        index = '<ul><li><a href="#table_7">D2 ME A</a></li></ul>'
        rows = [("1", ["Thermo<br>GS<br>M1", "-x-"]), ("2", ["-x-", "-x-"])]
        result = scrape_html(index + _grid(rows, table_id="table_7"), get_department("mechanical"))
        lessons = result.document.groups["D2 ME A1"].lessons
        assert [l.time_of_class for l in lessons] == ["08:30", "08:30", "09:30", "09:30"]

    def test_ece_keeps_raw_label(self):
        index = '<ul><li><a href="#table_3">ECE 2nd Year A</a></li></ul>'
        rows = [("08:30", ["Signals<br>JK<br>E1", "-x-"])]
        doc = scrape_html(index + _grid(rows, table_id="table_3"), get_department("ece")).document
        assert doc.group_ids == ["ECE 2nd Year A"]

    def test_civil_fields_markup(self):
        index = '<ul><li>Groups<ul><li><a href="#table_1">CE2 A</a></li></ul></li></ul>'
        cell = (
            '<span class="subject">Surveying</span>'
            '<span class="teacher">HK</span><span class="room">CE-1</span>'
        )
        html = index + _grid([("08:30", [cell, ""])])
        lessons = scrape_html(html, get_department("civil")).document.groups["CE2 A"].lessons
        assert lessons[0].subject == "Surveying"
        assert lessons[1].facets.free_class


class TestAssemble:
    def test_later_group_wins(self):
        first = GroupSchedule(group_id="D2A1", lessons=())
        later = GroupSchedule(
            group_id="D2A1",
            lessons=(Lesson(day_of_class="Monday", time_of_class="08:30", subject="DBMS"),),
        )
        doc = assemble("u", [first, GroupSchedule(group_id="D2A2"), later])
        assert doc.group_ids == ["D2A1", "D2A2"]
        assert doc.groups["D2A1"].lessons[0].subject == "DBMS"

    def test_new_group_ids(self):
        assert new_group_ids(["D2A1", "D2A2", "D2A2", "D2A3"], ["D2A2"]) == ["D2A1", "D2A3"]
        assert new_group_ids([], ["D2A1"]) == []
