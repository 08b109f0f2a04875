from datetime import datetime

import pytest

from study_engine.lifecycle import advance, coerce_status, next_status, syllabus_progress, transition_payload
from study_engine.schema import ModuleStatus, SyllabusModule


def test_next_status_cycle():
    assert next_status(ModuleStatus.PENDING) == ModuleStatus.IN_PROGRESS
    assert next_status(ModuleStatus.IN_PROGRESS) == ModuleStatus.COMPLETED
    assert next_status(ModuleStatus.COMPLETED) == ModuleStatus.REVISED
    assert next_status(ModuleStatus.REVISED) == ModuleStatus.PENDING


@pytest.mark.parametrize("start", list(ModuleStatus))
def test_four_advances_return_to_start(start):
    module = SyllabusModule("m1", "Graphs", status=start)
    now = datetime(2024, 5, 1, 12, 0)
    for _ in range(4):
        module = advance(module, now)
    assert module.status == start


def test_advance_stamps_study_time():
    first = datetime(2024, 5, 1, 12, 0)
    second = datetime(2024, 5, 3, 8, 0)
    module = SyllabusModule("m1", "Graphs", status=ModuleStatus.IN_PROGRESS)

    completed = advance(module, first)
    assert completed.status == ModuleStatus.COMPLETED
    assert completed.last_studied_at == first
    assert module.status == ModuleStatus.IN_PROGRESS

    revised = advance(completed, second)
    assert revised.last_studied_at == second

    pending = advance(revised, datetime(2024, 6, 1))
    assert pending.status == ModuleStatus.PENDING
    assert pending.last_studied_at == second

    in_progress = advance(pending, datetime(2024, 6, 2))
    assert in_progress.last_studied_at == second


def test_unknown_status_falls_back_to_pending():
    assert coerce_status("Archived") == ModuleStatus.PENDING
    assert coerce_status(None) == ModuleStatus.PENDING
    assert coerce_status("In Progress") == ModuleStatus.IN_PROGRESS
    assert coerce_status("completed") == ModuleStatus.COMPLETED
    assert next_status("garbage") == ModuleStatus.IN_PROGRESS


def test_transition_payload():
    now = datetime(2024, 5, 1, 12, 0)
    module = advance(SyllabusModule("m1", "Graphs", status=ModuleStatus.IN_PROGRESS), now)
    assert transition_payload(module) == {"status": "Completed", "lastStudiedAt": "2024-05-01T12:00:00"}
    assert transition_payload(SyllabusModule("m2", "Trees")) == {"status": "Pending"}


def test_syllabus_progress():
    modules = [
        SyllabusModule("m1", "A", status=ModuleStatus.COMPLETED),
        SyllabusModule("m2", "B", status=ModuleStatus.REVISED),
        SyllabusModule("m3", "C", status=ModuleStatus.IN_PROGRESS),
        SyllabusModule("m4", "D"),
    ]
    assert syllabus_progress(modules) == 50
    assert syllabus_progress([]) == 0


def test_syllabus_progress_rounds_half_up():
    modules = [SyllabusModule("m1", "A", status=ModuleStatus.COMPLETED)]
    modules += [SyllabusModule(f"m{n}", "B") for n in range(2, 9)]
    assert syllabus_progress(modules) == 13
