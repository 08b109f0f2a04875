from datetime import date

import pytest

from study_engine.dates import ExactDate, Weekly
from study_engine.schema import Assignment, Exam, ScheduleBlock, ScheduleKind
from study_engine.temporal_index import build_index


def sample_items():
    schedule = [
        ScheduleBlock("1", "Chem lab", ScheduleKind.LAB, ExactDate(date(2024, 3, 4)), "13:00", "16:00"),
        ScheduleBlock("2", "Lecture", ScheduleKind.LECTURE, Weekly("Monday"), "09:00", "10:00"),
    ]
    assignments = [
        Assignment("a1", "Report", "2024-03-04T17:30:00"),
        Assignment("a2", "Problem set", "2024-03-05"),
    ]
    exams = [Exam("e1", "Midterm", "2024-03-04T10:00:00Z")]
    return schedule, assignments, exams


def test_every_dated_item_indexed_once():
    index = build_index(*sample_items())

    monday = index.lookup(date(2024, 3, 4))
    assert sorted((entry.kind, entry.title) for entry in monday) == [
        ("Assignment", "Report"),
        ("Exam", "Midterm"),
        ("Lab", "Chem lab"),
    ]
    assert [entry.title for entry in index.lookup(date(2024, 3, 5))] == ["Problem set"]
    assert len(index) == 4


def test_weekly_blocks_are_not_indexed():
    index = build_index(*sample_items())
    assert all(entry.title != "Lecture" for entries in index.buckets.values() for entry in entries)


def test_malformed_dates_are_skipped():
    index = build_index([], [Assignment("a1", "Bad", "31/12/2024")], [Exam("e1", "Bad", "")])
    assert len(index) == 0
    assert index.lookup(date(2024, 12, 31)) == ()


def test_index_is_read_only():
    index = build_index(*sample_items())
    with pytest.raises(TypeError):
        index.buckets["2024-03-06"] = ()


def test_rebuild_is_idempotent():
    items = sample_items()
    assert dict(build_index(*items).buckets) == dict(build_index(*items).buckets)
