from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import WeekDay


@dataclass(frozen=True)
class ScheduleSlot:
    """One recurring weekly lesson: a weekday and a ``HH:MM`` start time."""

    day: WeekDay
    time: str

    def to_document(self) -> dict:
        return {"day": self.day.value, "time": self.time}


@dataclass(frozen=True)
class Group:
    """Domain entity: a class with a weekly schedule and a per-session fee."""

    group_id: str
    name: str
    fee_per_session: float
    schedule: tuple[ScheduleSlot, ...] = ()
    description: Optional[str] = None
    created_at: Optional[datetime] = None
