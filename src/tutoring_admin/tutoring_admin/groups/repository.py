from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Collection, WeekDay
from ..core.exceptions import MalformedDocumentError
from ..store.document_store import Document, DocumentStore
from ..store.schema import read_datetime, read_id, read_list, read_number, read_optional_str, read_str
from .model import Group, ScheduleSlot


class GroupRepository(Protocol):
    def get_by_id(self, group_id: str) -> Optional[Group]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Group]:
        raise NotImplementedError

    def create(self, group: Group) -> str:
        raise NotImplementedError

    def update(self, group: Group) -> bool:
        raise NotImplementedError

    def delete(self, group_id: str) -> bool:
        raise NotImplementedError


def schedule_from_list(items: list) -> tuple[ScheduleSlot, ...]:
    slots = []
    for item in items:
        if not isinstance(item, dict) or "day" not in item or "time" not in item:
            raise MalformedDocumentError(f"Invalid schedule entry: {item!r}")
        try:
            day = WeekDay(str(item["day"]).lower())
        except ValueError:
            raise MalformedDocumentError(f"Invalid schedule day: {item['day']!r}") from None
        slots.append(ScheduleSlot(day=day, time=str(item["time"])))
    return tuple(slots)


def group_from_document(doc: Document) -> Group:
    return Group(
        group_id=read_id(doc),
        name=read_str(doc, "name"),
        fee_per_session=read_number(doc, "feePerSession"),
        description=read_optional_str(doc, "description"),
        schedule=schedule_from_list(read_list(doc, "schedule")),
        created_at=read_datetime(doc, "createdAt"),
    )


def group_to_document(group: Group) -> Document:
    doc: Document = {
        "name": group.name,
        "feePerSession": float(group.fee_per_session),
        "description": group.description or "",
        "schedule": [s.to_document() for s in group.schedule],
    }
    if group.created_at is not None:
        doc["createdAt"] = group.created_at
    return doc


class DocumentGroupRepository(GroupRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, group_id: str) -> Optional[Group]:
        if not group_id:
            return None
        doc = self._store.get(Collection.GROUPS, group_id)
        return group_from_document(doc) if doc else None

    def list_all(self) -> Sequence[Group]:
        groups = [group_from_document(d) for d in self._store.query(Collection.GROUPS)]
        groups.sort(key=lambda g: g.name.lower())
        return groups

    def create(self, group: Group) -> str:
        return self._store.insert(Collection.GROUPS, group_to_document(group))

    def update(self, group: Group) -> bool:
        doc = group_to_document(group)
        # createdAt is set once at creation.
        doc.pop("createdAt", None)
        return self._store.update(Collection.GROUPS, group.group_id, doc)

    def delete(self, group_id: str) -> bool:
        return self._store.delete(Collection.GROUPS, group_id)
