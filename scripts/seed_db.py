"""Seed demo groups and students through the service layer."""

from __future__ import annotations

import importlib
import sys
from datetime import date
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.tutoring_admin.tutoring_admin.container import build_container


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        archive_cache_path=settings.ARCHIVE_CACHE_PATH,
    )

    maths = container.group_service.create(
        name="Maths 3ème",
        fee_per_session=20,
        description="Préparation brevet",
        schedule=[{"day": "monday", "time": "17:00"}, {"day": "wednesday", "time": "14:00"}],
    )
    physique = container.group_service.create(
        name="Physique Bac",
        fee_per_session=25,
        schedule=[{"day": "saturday", "time": "10:00"}],
    )

    for first, last, group_id in [
        ("Amine", "Ben Ali", maths),
        ("Sarra", "Trabelsi", maths),
        ("Youssef", "Gharbi", physique),
    ]:
        container.student_service.create(
            first_name=first,
            last_name=last,
            registration_date=date.today(),
            group_id=group_id,
        )

    print(f"OK: Seeded 2 groups and 3 students -> {settings.DB_CONFIG.get('database')}")


if __name__ == "__main__":
    main()
