"""Demo script for study-engine."""

import sys
from datetime import date, datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from study_engine.adapters.json_adapter import parse
from study_engine.agenda import detailed_agenda
from study_engine.log import configure_logging
from study_engine.quick_add import parse_quick_add
from study_engine.reducers import advance_module
from study_engine.retention import retention_report


def main() -> None:
    configure_logging("INFO")
    store = parse("examples/sample_snapshot.json")
    now = datetime(2025, 3, 10, 8, 30)

    print("Agenda for", now.date())
    for item in detailed_agenda(store, date(2025, 3, 10), now):
        print(f"  {item.time}  {item.kind:<10} {item.title}")

    modules = advance_module(store.modules, "m2", now)
    print("Retention:")
    for row in retention_report(modules, now):
        print(f"  {row.module.title}: {row.retention}% ({row.band.value})")

    print("Quick add:", parse_quick_add("Revise eigenvalues tomorrow p2", now.date()).as_payload())


if __name__ == "__main__":
    main()
