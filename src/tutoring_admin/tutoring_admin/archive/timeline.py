"""Pure functions over an archived group's fee timeline.

They take the current cache record (or None) and return the next record;
reading and writing the cache is left to ``ArchivedGroupCache``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..groups.model import Group
from .model import ArchivedGroup, FeeInterval


def archive_on_delete(existing: Optional[ArchivedGroup], group: Group, now: datetime) -> ArchivedGroup:
    """Close the group's current fee interval and mark it deleted at ``now``.

    The interval starts where the timeline last stopped (the previous deletion,
    or the last recorded fee change), else ``now``.
    """
    start = (existing.last_boundary() if existing else None) or now
    history = existing.fee_history if existing else ()
    interval = FeeInterval(fee_per_session=float(group.fee_per_session), start=start, end=now)
    return ArchivedGroup.snapshot_of(group, deleted_at=now, fee_history=history + (interval,))


def record_fee_change(existing: Optional[ArchivedGroup], before: Group, now: datetime) -> ArchivedGroup:
    """Record that ``before.fee_per_session`` applied until ``now``."""
    start = (existing.last_boundary() if existing else None) or before.created_at or now
    history = existing.fee_history if existing else ()
    interval = FeeInterval(fee_per_session=float(before.fee_per_session), start=start, end=now)
    deleted_at = existing.deleted_at if existing else None
    return ArchivedGroup.snapshot_of(before, deleted_at=deleted_at, fee_history=history + (interval,))


def find_fee_for_date(record: ArchivedGroup, session_date: date) -> float:
    """Fee of the first interval covering ``session_date`` (day granularity).

    Falls back to the fee recorded at deletion time when no interval matches.
    """
    for interval in record.fee_history:
        if interval.start.date() <= session_date <= interval.end.date():
            return interval.fee_per_session
    return record.fee_per_session
