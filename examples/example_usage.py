"""Example: drive the ledger through the service layer (no Flask).

Controllers are a thin layer; the business rules live in services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.tutoring_admin.tutoring_admin.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, archive_cache_path=settings.ARCHIVE_CACHE_PATH)

    groups = container.group_service.list_all()
    if not groups:
        print("No groups yet: run scripts/seed_db.py first")
        return

    group = groups[0]
    students = container.student_service.list_all(group_id=group.group_id)
    if not students:
        print(f"Group {group.name} has no students")
        return

    student = students[0]
    slot = group.schedule[0]
    outcome = container.ledger_service.set_presence(
        student_id=student.student_id,
        group_id=group.group_id,
        session_date=date.today(),
        session_time=slot.time,
    )
    print(outcome)
    print(container.ledger_service.reconcile(student.student_id))


if __name__ == "__main__":
    main()
