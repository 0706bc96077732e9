from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import parse_timestamp
from ..core.exceptions import MalformedDocumentError
from ..groups.model import Group, ScheduleSlot
from ..groups.repository import schedule_from_list


@dataclass(frozen=True)
class FeeInterval:
    """A fee that applied to a group between two instants (inclusive)."""

    fee_per_session: float
    start: datetime
    end: datetime

    def to_cache_dict(self) -> dict:
        return {
            "feePerSession": self.fee_per_session,
            "startDate": self.start.isoformat(),
            "endDate": self.end.isoformat(),
        }


@dataclass(frozen=True)
class ArchivedGroup:
    """Last known snapshot of a group plus its fee timeline.

    ``deleted_at`` is None while only fee changes of a live group were recorded.
    """

    group_id: str
    name: str
    fee_per_session: float
    schedule: tuple[ScheduleSlot, ...] = ()
    description: Optional[str] = None
    deleted_at: Optional[datetime] = None
    fee_history: tuple[FeeInterval, ...] = ()

    @classmethod
    def snapshot_of(
        cls,
        group: Group,
        *,
        deleted_at: Optional[datetime],
        fee_history: tuple[FeeInterval, ...],
    ) -> "ArchivedGroup":
        return cls(
            group_id=group.group_id,
            name=group.name,
            fee_per_session=float(group.fee_per_session),
            schedule=tuple(group.schedule),
            description=group.description,
            deleted_at=deleted_at,
            fee_history=fee_history,
        )

    def last_boundary(self) -> Optional[datetime]:
        """Latest recorded instant of the timeline (deletion or interval end)."""
        candidates = [i.end for i in self.fee_history]
        if self.deleted_at is not None:
            candidates.append(self.deleted_at)
        return max(candidates) if candidates else None

    def to_cache_dict(self) -> dict:
        data = {
            "id": self.group_id,
            "name": self.name,
            "feePerSession": self.fee_per_session,
            "description": self.description or "",
            "schedule": [s.to_document() for s in self.schedule],
            "paymentHistory": [i.to_cache_dict() for i in self.fee_history],
        }
        if self.deleted_at is not None:
            data["deletedAt"] = self.deleted_at.isoformat()
        return data

    @classmethod
    def from_cache_dict(cls, data: dict) -> "ArchivedGroup":
        try:
            history = tuple(
                FeeInterval(
                    fee_per_session=float(h["feePerSession"]),
                    start=parse_timestamp(h["startDate"]),
                    end=parse_timestamp(h["endDate"]),
                )
                for h in data.get("paymentHistory") or []
            )
            return cls(
                group_id=str(data["id"]),
                name=str(data.get("name", "")),
                fee_per_session=float(data.get("feePerSession") or 0),
                schedule=schedule_from_list(data.get("schedule") or []),
                description=data.get("description") or None,
                deleted_at=parse_timestamp(data.get("deletedAt")),
                fee_history=history,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedDocumentError(f"Invalid archived group entry: {exc}") from exc
