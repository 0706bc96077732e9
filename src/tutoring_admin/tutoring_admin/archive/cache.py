from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Dict, Optional

from ..common.datetime_utils import now_local
from ..core.constants import ARCHIVE_CACHE_KEY
from ..core.exceptions import MalformedDocumentError
from ..groups.model import Group
from .key_value import KeyValueStore
from .model import ArchivedGroup
from .timeline import archive_on_delete, find_fee_for_date, record_fee_change

logger = logging.getLogger(__name__)


class ArchivedGroupCache:
    """Fee timelines of deleted groups, kept under a single key as JSON text."""

    def __init__(self, kv: KeyValueStore, *, key: str = ARCHIVE_CACHE_KEY):
        self._kv = kv
        self._key = key

    def get(self, group_id: str) -> Optional[ArchivedGroup]:
        return self._load().get(group_id)

    def list_all(self) -> list[ArchivedGroup]:
        return sorted(self._load().values(), key=lambda g: g.name.lower())

    def archive_group(self, group: Group, *, now: Optional[datetime] = None) -> ArchivedGroup:
        """Snapshot ``group`` right before its live record is deleted."""
        now = now or now_local()
        cache = self._load()
        record = archive_on_delete(cache.get(group.group_id), group, now)
        cache[group.group_id] = record
        self._save(cache)
        logger.info(
            "Archived group %s (fee=%s, intervals=%d)",
            group.group_id,
            group.fee_per_session,
            len(record.fee_history),
        )
        return record

    def record_fee_change(self, before: Group, *, now: Optional[datetime] = None) -> ArchivedGroup:
        """Close the interval of the fee that applied until ``now``."""
        now = now or now_local()
        cache = self._load()
        record = record_fee_change(cache.get(before.group_id), before, now)
        cache[before.group_id] = record
        self._save(cache)
        logger.info("Recorded fee change for group %s (old fee=%s)", before.group_id, before.fee_per_session)
        return record

    def fee_for_date(self, group_id: str, session_date: date) -> float:
        record = self.get(group_id)
        if record is None:
            logger.warning("No live or archived fee for group %s; pricing session %s at 0", group_id, session_date)
            return 0.0
        return find_fee_for_date(record, session_date)

    def _load(self) -> Dict[str, ArchivedGroup]:
        raw = self._kv.get_item(self._key)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise MalformedDocumentError(f"Archive cache is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise MalformedDocumentError("Archive cache must be a JSON object")
        return {gid: ArchivedGroup.from_cache_dict(entry) for gid, entry in data.items()}

    def _save(self, cache: Dict[str, ArchivedGroup]) -> None:
        payload = {gid: record.to_cache_dict() for gid, record in cache.items()}
        self._kv.set_item(self._key, json.dumps(payload, ensure_ascii=False))
