from __future__ import annotations

import json
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import Collection
from ..core.exceptions import MalformedDocumentError, StoreError
from .connection import DatabaseConnection
from .document_store import Document, DocumentStore, Predicate
from .mysql_base import db_cursor


@dataclass(frozen=True)
class TableSpec:
    """How one collection is laid out in MySQL.

    ``columns`` maps document fields to column names and doubles as the
    whitelist for both writes and query predicates.
    """

    table: str
    columns: Dict[str, str]
    bool_fields: frozenset = field(default_factory=frozenset)
    json_fields: frozenset = field(default_factory=frozenset)


TABLES: Dict[Collection, TableSpec] = {
    Collection.STUDENTS: TableSpec(
        table="students",
        columns={
            "firstName": "first_name",
            "lastName": "last_name",
            "dateOfRegistration": "date_of_registration",
            "paid": "paid",
            "groupId": "group_id",
            "lessonsAttended": "lessons_attended",
            "montant": "montant",
        },
        bool_fields=frozenset({"paid"}),
    ),
    Collection.GROUPS: TableSpec(
        # `groups` is a reserved word in MySQL 8.
        table="student_groups",
        columns={
            "name": "name",
            "feePerSession": "fee_per_session",
            "description": "description",
            "schedule": "schedule",
            "createdAt": "created_at",
        },
        json_fields=frozenset({"schedule"}),
    ),
    Collection.ATTENDANCE: TableSpec(
        table="attendance",
        columns={
            "studentId": "student_id",
            "groupId": "group_id",
            "date": "session_date",
            "time": "session_time",
            "present": "present",
            "paid": "paid",
            "createdAt": "created_at",
            "updatedAt": "updated_at",
        },
        bool_fields=frozenset({"present", "paid"}),
    ),
    Collection.PAYMENT_HISTORY: TableSpec(
        table="payment_history",
        columns={
            "studentId": "student_id",
            "groupId": "group_id",
            "sessionDate": "session_date",
            "sessionTime": "session_time",
            "amount": "amount",
            "paidAt": "paid_at",
            "kind": "kind",
        },
    ),
}

_SQL_OPERATORS = {"==": "=", "!=": "<>", "<": "<", "<=": "<=", ">": ">", ">=": ">="}


class MySQLDocumentStore(DocumentStore):
    """Document-store client backed by one MySQL table per collection."""

    def __init__(self, conn_factory: DatabaseConnection, *, tables: Optional[Dict[Collection, TableSpec]] = None):
        self._conn_factory = conn_factory
        self._tables = tables or TABLES

    def insert(self, collection: Collection, doc: Document) -> str:
        spec = self._spec(collection)
        doc_id = str(doc.get("id") or uuid.uuid4().hex)
        fields = [k for k in doc if k != "id"]
        columns = ["doc_id"] + [self._column(spec, k) for k in fields]
        params = [doc_id] + [self._to_param(spec, k, doc[k]) for k in fields]
        placeholders = ",".join(["%s"] * len(columns))

        with self._translate_errors("insert", collection):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO {spec.table}({','.join(columns)}) VALUES({placeholders})",
                    tuple(params),
                )
        return doc_id

    def get(self, collection: Collection, doc_id: str) -> Optional[Document]:
        spec = self._spec(collection)
        with self._translate_errors("get", collection):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"SELECT {self._select_list(spec)} FROM {spec.table} WHERE doc_id=%s",
                    (str(doc_id),),
                )
                row = cur.fetchone()
        return self._to_document(spec, row) if row else None

    def query(self, collection: Collection, predicates: Sequence[Predicate] = ()) -> Sequence[Document]:
        spec = self._spec(collection)
        clauses: list[str] = []
        params: list[object] = []
        for p in predicates:
            clauses.append(f"{self._column(spec, p.field)} {_SQL_OPERATORS[p.op]} %s")
            params.append(self._to_param(spec, p.field, p.value))

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._translate_errors("query", collection):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"SELECT {self._select_list(spec)} FROM {spec.table}{where} ORDER BY doc_id",
                    tuple(params),
                )
                rows = cur.fetchall() or []
        return [self._to_document(spec, r) for r in rows]

    def update(self, collection: Collection, doc_id: str, partial: Document) -> bool:
        spec = self._spec(collection)
        fields = [k for k in partial if k != "id"]
        if not fields:
            return False
        assignments = ", ".join(f"{self._column(spec, k)}=%s" for k in fields)
        params = [self._to_param(spec, k, partial[k]) for k in fields]

        with self._translate_errors("update", collection):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"UPDATE {spec.table} SET {assignments} WHERE doc_id=%s",
                    tuple(params + [str(doc_id)]),
                )
                # rowcount is 0 when values are unchanged; check existence instead.
                if cur.rowcount > 0:
                    return True
                cur.execute(f"SELECT 1 AS found FROM {spec.table} WHERE doc_id=%s", (str(doc_id),))
                return cur.fetchone() is not None

    def delete(self, collection: Collection, doc_id: str) -> bool:
        spec = self._spec(collection)
        with self._translate_errors("delete", collection):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"DELETE FROM {spec.table} WHERE doc_id=%s", (str(doc_id),))
                return cur.rowcount > 0

    def _spec(self, collection: Collection) -> TableSpec:
        try:
            return self._tables[Collection(collection)]
        except (KeyError, ValueError):
            raise StoreError(f"Unknown collection: {collection!r}") from None

    @staticmethod
    def _column(spec: TableSpec, field_name: str) -> str:
        column = spec.columns.get(field_name)
        if not column:
            raise MalformedDocumentError(f"Unknown field {field_name!r} for {spec.table}")
        return column

    @staticmethod
    def _select_list(spec: TableSpec) -> str:
        return ", ".join(["doc_id"] + [f"{col} AS `{name}`" for name, col in spec.columns.items()])

    @staticmethod
    def _to_param(spec: TableSpec, field_name: str, value: Any) -> Any:
        if field_name in spec.json_fields and value is not None:
            return json.dumps(value, ensure_ascii=False)
        if field_name in spec.bool_fields and value is not None:
            return 1 if value else 0
        return value

    @staticmethod
    def _to_document(spec: TableSpec, row: Dict[str, Any]) -> Document:
        doc: Document = {"id": str(row["doc_id"])}
        for name in spec.columns:
            value = row.get(name)
            if value is None:
                doc[name] = None
            elif name in spec.json_fields:
                if isinstance(value, (bytes, bytearray)):
                    value = value.decode("utf-8")
                doc[name] = json.loads(value) if isinstance(value, str) else value
            elif name in spec.bool_fields:
                doc[name] = bool(value)
            elif isinstance(value, Decimal):
                doc[name] = float(value)
            elif isinstance(value, datetime):
                doc[name] = value
            elif isinstance(value, date):
                doc[name] = value.isoformat()
            else:
                doc[name] = value
        return doc

    @staticmethod
    @contextmanager
    def _translate_errors(action: str, collection: Collection):
        try:
            yield
        except mysql.connector.Error as exc:
            raise StoreError(f"Store {action} on {Collection(collection).value} failed: {exc}") from exc
