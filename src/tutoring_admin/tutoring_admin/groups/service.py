from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..archive.cache import ArchivedGroupCache
from ..archive.model import ArchivedGroup
from ..common.datetime_utils import now_local
from ..common.validators import REQUIRED_FIELDS_MESSAGE, require_positive_amount, require_time_slot
from ..core.enums import WeekDay
from ..core.exceptions import NotFoundError, ValidationError
from .model import Group, ScheduleSlot
from .repository import GroupRepository

logger = logging.getLogger(__name__)


def parse_schedule(items) -> tuple[ScheduleSlot, ...]:
    """Validate form input ``[{"day": "monday", "time": "08:00"}, ...]``."""
    if not items:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)

    slots = []
    for item in items:
        if isinstance(item, ScheduleSlot):
            slots.append(item)
            continue
        try:
            day = WeekDay(str(item.get("day", "")).strip().lower())
        except (AttributeError, ValueError):
            raise ValidationError(f"Jour invalide : {item!r}") from None
        slots.append(ScheduleSlot(day=day, time=require_time_slot(item.get("time"))))
    return tuple(slots)


class GroupService:
    """Use case: manage groups; deleted groups keep a fee timeline in the archive."""

    def __init__(self, groups: GroupRepository, archive: ArchivedGroupCache):
        self._groups = groups
        self._archive = archive

    def get(self, group_id: str) -> Group:
        group = self._groups.get_by_id(group_id)
        if not group:
            raise NotFoundError("Groupe introuvable")
        return group

    def list_all(self) -> Sequence[Group]:
        return self._groups.list_all()

    def list_archived(self) -> Sequence[ArchivedGroup]:
        """Groups that were deleted; fee-change entries of live groups are skipped."""
        return [g for g in self._archive.list_all() if g.deleted_at is not None]

    def create(
        self,
        *,
        name: str,
        fee_per_session,
        schedule,
        description: Optional[str] = None,
        now: datetime | None = None,
    ) -> str:
        group = self._build("", name, fee_per_session, schedule, description, created_at=now or now_local())
        group_id = self._groups.create(group)
        logger.info("Created group %s (%s, fee=%s)", group_id, group.name, group.fee_per_session)
        return group_id

    def update(
        self,
        group_id: str,
        *,
        name: str,
        fee_per_session,
        schedule,
        description: Optional[str] = None,
        now: datetime | None = None,
    ) -> Group:
        existing = self.get(group_id)
        group = self._build(group_id, name, fee_per_session, schedule, description, created_at=existing.created_at)

        if group.fee_per_session != existing.fee_per_session:
            self._archive.record_fee_change(existing, now=now or now_local())

        self._groups.update(group)
        logger.info("Updated group %s", group_id)
        return group

    def delete(self, group_id: str, *, now: datetime | None = None) -> ArchivedGroup:
        """Archive the group's fee timeline, then remove the live record."""
        group = self.get(group_id)
        record = self._archive.archive_group(group, now=now or now_local())
        if not self._groups.delete(group_id):
            raise NotFoundError("Groupe introuvable")
        logger.info("Deleted group %s", group_id)
        return record

    def to_ui(self, group: Group) -> dict:
        return {
            "id": group.group_id,
            "name": group.name,
            "fee_per_session": group.fee_per_session,
            "description": group.description or "",
            "schedule": [s.to_document() for s in group.schedule],
        }

    @staticmethod
    def _build(group_id, name, fee_per_session, schedule, description, *, created_at) -> Group:
        name = (name or "").strip()
        if not name:
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)
        return Group(
            group_id=group_id,
            name=name,
            fee_per_session=require_positive_amount(fee_per_session, "Tarif par séance"),
            schedule=parse_schedule(schedule),
            description=(description or "").strip() or None,
            created_at=created_at,
        )
