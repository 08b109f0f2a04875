from datetime import datetime

from study_engine.reducers import (
    add_item,
    advance_module,
    commit_optimistic,
    remove_item,
    replace_item,
    toggle_todo,
)
from study_engine.schema import ModuleStatus, SyllabusModule, Todo


def sample_todos():
    return (Todo("t1", "Read", "2024-01-01"), Todo("t2", "Write", None, completed=True))


def test_toggle_returns_new_collection():
    todos = sample_todos()
    toggled = toggle_todo(todos, "t1")
    assert toggled[0].completed is True
    assert todos[0].completed is False
    assert toggled[1] is todos[1]


def test_add_replace_remove():
    todos = sample_todos()
    added = add_item(todos, Todo("t3", "New"))
    assert [todo.id for todo in added] == ["t3", "t1", "t2"]

    replaced = replace_item(added, Todo("t1", "Read again"))
    assert replaced[1].text == "Read again"

    assert [todo.id for todo in remove_item(replaced, "t3")] == ["t1", "t2"]
    assert remove_item(todos, "missing") == todos


def test_advance_module_only_touches_target():
    now = datetime(2024, 1, 1, 10, 0)
    modules = (SyllabusModule("m1", "A"), SyllabusModule("m2", "B", status=ModuleStatus.IN_PROGRESS))
    updated = advance_module(modules, "m2", now)
    assert updated[0] is modules[0]
    assert updated[1].status == ModuleStatus.COMPLETED
    assert updated[1].last_studied_at == now


def test_commit_success_keeps_transform():
    saved = []
    result = commit_optimistic(sample_todos(), lambda todos: toggle_todo(todos, "t1"), saved.append)
    assert result.ok
    assert result.items[0].completed is True
    assert saved == [result.items]


def test_commit_failure_restores_snapshot():
    todos = sample_todos()

    def failing_persist(_items):
        raise ConnectionError("offline")

    result = commit_optimistic(todos, lambda items: remove_item(items, "t1"), failing_persist)
    assert not result.ok
    assert isinstance(result.error, ConnectionError)
    assert result.items == todos
