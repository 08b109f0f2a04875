"""Streamlit demo UI for study-engine."""

from __future__ import annotations

import calendar
import tempfile
from dataclasses import replace
from datetime import date, datetime
from typing import Any

import numpy as np

from study_engine.adapters import json_adapter
from study_engine.agenda import AgendaMerger
from study_engine.dates import local_now
from study_engine.lifecycle import syllabus_progress, transition_payload
from study_engine.log import configure_logging
from study_engine.quick_add import parse_quick_add
from study_engine.reducers import add_item, advance_module, commit_optimistic, toggle_todo
from study_engine.retention import classify, display_retention, memory_leaks, retention_curve
from study_engine.schema import EventStore, Todo

DEMO_SNAPSHOT = "examples/sample_snapshot.json"
BAND_COLORS = {"healthy": "green", "fading": "orange", "at-risk": "red"}


def _parse_uploaded(uploaded_file) -> EventStore:
    with tempfile.NamedTemporaryFile(delete=False, suffix=".json") as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    return json_adapter.parse(temp_path)


def _persist_noop(_items) -> None:
    """The demo keeps everything in session state."""


def month_grid(store: EventStore, year: int, month: int, now: datetime) -> list[list[dict[str, Any]]]:
    """Weeks of ``{day, badges, busy, exam}`` cells for the month view."""

    merger = AgendaMerger(store)
    weeks = []
    for week in calendar.Calendar(firstweekday=0).monthdatescalendar(year, month):
        weeks.append(
            [
                {
                    "day": day,
                    "in_month": day.month == month,
                    "badges": [entry.color_tag for entry in merger.compact(day)],
                    "busy": merger.is_busy(day, now),
                    "exam": merger.is_exam_day(day),
                }
                for day in week
            ]
        )
    return weeks


def run_engine(store: EventStore, day: date, now: datetime) -> dict[str, Any]:
    """Run all engine steps and return a UI-friendly result payload."""

    merger = AgendaMerger(store)
    modules = []
    for module in store.modules:
        score = display_retention(module, now)
        modules.append(
            {
                "id": module.id,
                "title": module.title,
                "topics": list(module.topics),
                "status": module.status.value,
                "retention": score,
                "band": classify(score).value if score is not None else None,
            }
        )

    return {
        "agenda": merger.detailed(day, now),
        "modules": modules,
        "progress": syllabus_progress(store.modules),
        "leaks": memory_leaks(store.modules, now),
    }


def main() -> None:
    import streamlit as st

    configure_logging()
    st.set_page_config(page_title="Study Engine Demo", layout="wide")
    st.title("Study Engine — Streamlit Demo")

    with st.sidebar:
        st.header("Controls")
        uploaded = st.file_uploader("Upload dashboard snapshot", type=["json"])
        use_demo = st.checkbox("Load demo snapshot", value=True)
        selected = st.date_input("Day", value=date.today())
        quick_add = st.text_input("Quick add", placeholder="Read chapter 6 tomorrow p2")
        add = st.button("Add task", type="primary")

    try:
        if "store" not in st.session_state:
            if use_demo:
                st.session_state.store = json_adapter.parse(DEMO_SNAPSHOT)
            elif uploaded is not None:
                st.session_state.store = _parse_uploaded(uploaded)
            else:
                st.info("Upload a JSON snapshot or enable 'Load demo snapshot'.")
                return
    except ValueError as exc:
        st.error(f"Input error: {exc}")
        return

    store: EventStore = st.session_state.store
    now = local_now()

    if add and quick_add.strip():
        parsed = parse_quick_add(quick_add, now.date())
        todo = Todo(
            id=f"qa-{int(now.timestamp() * 1000)}",
            text=parsed.text,
            due_date=parsed.due_date.isoformat() if parsed.due_date else None,
            priority=parsed.priority,
        )
        result = commit_optimistic(store.todos, lambda todos: add_item(todos, todo), _persist_noop)
        store = st.session_state.store = replace(store, todos=result.items)
        st.success(f"Added '{parsed.text}' (p{parsed.priority}, due {parsed.due_date or 'inbox'})")

    result = run_engine(store, selected, now)

    st.subheader("A) Month")
    grid = month_grid(store, selected.year, selected.month, now)
    for week in grid:
        columns = st.columns(7)
        for column, cell in zip(columns, week):
            label = f"**{cell['day'].day}**" if cell["exam"] else str(cell["day"].day)
            dots = " ".join(f":{color}[●]" for color in cell["badges"])
            column.markdown(f"{label} {dots}" if cell["in_month"] else "")

    st.subheader(f"B) {selected:%A, %B %d}")
    if not result["agenda"]:
        st.write("Nothing scheduled.")
    for item in result["agenda"]:
        left, right = st.columns([4, 1])
        left.write(f"`{item.time}` **{item.title}** · {item.kind}" + (f" · {item.subtitle}" if item.subtitle else ""))
        if item.kind == "Todo" and right.button("Done", key=f"done-{item.id}"):
            toggled = commit_optimistic(store.todos, lambda todos: toggle_todo(todos, item.source.id), _persist_noop)
            st.session_state.store = replace(store, todos=toggled.items)
            st.rerun()

    st.subheader(f"C) Syllabus ({result['progress']}% studied)")
    for module in result["modules"]:
        left, middle, right = st.columns([3, 1, 1])
        left.write(f"**{module['title']}** · {', '.join(module['topics']) or 'no topics'}")
        if module["retention"] is not None:
            middle.markdown(f":{BAND_COLORS[module['band']]}[{module['retention']}%]")
        if right.button(module["status"], key=f"advance-{module['id']}"):
            outcome = commit_optimistic(
                store.modules, lambda modules: advance_module(modules, module["id"], now), _persist_noop
            )
            if not outcome.ok:
                st.error("Failed to update module, changes were reverted.")
            else:
                updated = next(m for m in outcome.items if m.id == module["id"])
                st.caption(str(transition_payload(updated)))
            st.session_state.store = replace(store, modules=outcome.items)
            st.rerun()

    st.subheader("D) Memory leaks")
    if not result["leaks"]:
        st.write("Retention is high across all topics.")
    for row in result["leaks"]:
        st.write(f"{row.module.title}: {row.retention}% ({row.days_since}d ago)")
        days = np.linspace(0, 14, 57)
        st.line_chart({"retention": retention_curve(row.module.strength, days)})


if __name__ == "__main__":
    main()
