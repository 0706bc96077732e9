from __future__ import annotations

import copy
from datetime import date, datetime
from typing import Optional, Sequence

import pytest

from src.tutoring_admin.tutoring_admin.container import assemble
from src.tutoring_admin.tutoring_admin.core.enums import Collection
from src.tutoring_admin.tutoring_admin.store.document_store import Document, Predicate


class InMemoryDocumentStore:
    """Document store fake: one dict per collection, copies on the way in and out."""

    def __init__(self):
        self.collections: dict[str, dict[str, Document]] = {c.value: {} for c in Collection}
        self._next_id = 0
        self.calls: list[tuple[str, str]] = []

    def insert(self, collection, doc: Document) -> str:
        self.calls.append(("insert", Collection(collection).value))
        self._next_id += 1
        doc_id = str(doc.get("id") or f"doc-{self._next_id}")
        stored = copy.deepcopy({k: v for k, v in doc.items() if k != "id"})
        stored["id"] = doc_id
        self.collections[Collection(collection).value][doc_id] = stored
        return doc_id

    def get(self, collection, doc_id: str) -> Optional[Document]:
        self.calls.append(("get", Collection(collection).value))
        doc = self.collections[Collection(collection).value].get(doc_id)
        return copy.deepcopy(doc) if doc else None

    def query(self, collection, predicates: Sequence[Predicate] = ()) -> Sequence[Document]:
        self.calls.append(("query", Collection(collection).value))
        docs = self.collections[Collection(collection).value].values()
        return [copy.deepcopy(d) for d in docs if all(p.matches(d) for p in predicates)]

    def update(self, collection, doc_id: str, partial: Document) -> bool:
        self.calls.append(("update", Collection(collection).value))
        docs = self.collections[Collection(collection).value]
        if doc_id not in docs:
            return False
        docs[doc_id].update(copy.deepcopy({k: v for k, v in partial.items() if k != "id"}))
        return True

    def delete(self, collection, doc_id: str) -> bool:
        self.calls.append(("delete", Collection(collection).value))
        return self.collections[Collection(collection).value].pop(doc_id, None) is not None

    def docs(self, collection: Collection) -> list[Document]:
        return list(self.collections[collection.value].values())


class InMemoryKeyValueStore:
    def __init__(self):
        self.items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 10, 9, 0, 0)


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def container(store, kv):
    return assemble(store=store, kv_store=kv)


@pytest.fixture
def make_group(container, fixed_now):
    def _make(name: str = "Maths", fee: float = 20, schedule=None) -> str:
        return container.group_service.create(
            name=name,
            fee_per_session=fee,
            schedule=schedule or [{"day": "monday", "time": "10:00"}],
            now=fixed_now,
        )

    return _make


@pytest.fixture
def make_student(container):
    def _make(group_id: str, first_name: str = "Amine", last_name: str = "Ben Ali", **extra) -> str:
        return container.student_service.create(
            first_name=first_name,
            last_name=last_name,
            registration_date=date(2025, 1, 6),
            group_id=group_id,
            **extra,
        )

    return _make
