from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Sequence

from ..core.enums import Collection

Document = Dict[str, Any]

OPERATORS = ("==", "!=", "<", "<=", ">", ">=")


@dataclass(frozen=True)
class Predicate:
    """One ``field <op> value`` filter of a query."""

    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in OPERATORS:
            raise ValueError(f"Unsupported operator: {self.op!r}")

    def matches(self, doc: Document) -> bool:
        """Evaluate against a plain document (used by in-process stores)."""
        if self.field not in doc:
            return False
        left = doc[self.field]
        if self.op == "==":
            return left == self.value
        if self.op == "!=":
            return left != self.value
        if left is None:
            return False
        if self.op == "<":
            return left < self.value
        if self.op == "<=":
            return left <= self.value
        if self.op == ">":
            return left > self.value
        return left >= self.value


def where(field: str, op: str, value: Any) -> Predicate:
    return Predicate(field=field, op=op, value=value)


class DocumentStore(Protocol):
    """Generic document store client.

    Each call is an independent round trip: there are no transactions across
    calls. Documents are plain dicts with camelCase keys plus an ``id`` key.
    """

    def insert(self, collection: Collection, doc: Document) -> str:
        """Insert a document and return its id."""

        raise NotImplementedError

    def get(self, collection: Collection, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    def query(self, collection: Collection, predicates: Sequence[Predicate] = ()) -> Sequence[Document]:
        raise NotImplementedError

    def update(self, collection: Collection, doc_id: str, partial: Document) -> bool:
        raise NotImplementedError

    def delete(self, collection: Collection, doc_id: str) -> bool:
        raise NotImplementedError
