from __future__ import annotations

from datetime import date

from ..archive.cache import ArchivedGroupCache
from ..groups.repository import GroupRepository


class FeeResolver:
    """Price of one session of a group on a given date.

    Live groups use their current fee; deleted groups fall back to the
    archived fee timeline (0 for a group that was never archived).
    """

    def __init__(self, groups: GroupRepository, archive: ArchivedGroupCache):
        self._groups = groups
        self._archive = archive

    def fee_for_date(self, group_id: str, session_date: date) -> float:
        group = self._groups.get_by_id(group_id)
        if group:
            return float(group.fee_per_session)
        return self._archive.fee_for_date(group_id, session_date)
