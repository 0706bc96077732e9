"""Field readers used when turning raw store documents into typed records.

Every reader raises ``MalformedDocumentError`` for a missing required field or
a value of the wrong shape, so malformed documents never reach services.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import parse_iso_date, parse_timestamp
from ..core.exceptions import MalformedDocumentError
from .document_store import Document


def _raw(doc: Document, name: str, required: bool) -> Any:
    value = doc.get(name)
    if value is None and required:
        raise MalformedDocumentError(f"Document {doc.get('id')!r} is missing field {name!r}")
    return value


def read_id(doc: Document) -> str:
    doc_id = doc.get("id")
    if not doc_id:
        raise MalformedDocumentError("Document has no id")
    return str(doc_id)


def read_str(doc: Document, name: str, *, required: bool = True, default: str = "") -> str:
    value = _raw(doc, name, required)
    if value is None:
        return default
    if not isinstance(value, str):
        raise MalformedDocumentError(f"Field {name!r} must be text, got {type(value).__name__}")
    return value


def read_optional_str(doc: Document, name: str) -> Optional[str]:
    value = doc.get(name)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise MalformedDocumentError(f"Field {name!r} must be text, got {type(value).__name__}")
    return value


def read_bool(doc: Document, name: str, *, default: bool = False) -> bool:
    value = doc.get(name)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise MalformedDocumentError(f"Field {name!r} must be a boolean, got {value!r}")


def read_number(doc: Document, name: str, *, required: bool = True, default: float = 0.0) -> float:
    value = _raw(doc, name, required)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedDocumentError(f"Field {name!r} must be numeric, got {value!r}")
    return float(value)


def read_int(doc: Document, name: str, *, default: int = 0) -> int:
    value = doc.get(name)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value:
        raise MalformedDocumentError(f"Field {name!r} must be an integer, got {value!r}")
    return int(value)


def read_date(doc: Document, name: str) -> date:
    value = _raw(doc, name, True)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise MalformedDocumentError(f"Field {name!r} must be a YYYY-MM-DD date, got {value!r}") from None


def read_datetime(doc: Document, name: str, *, required: bool = False) -> Optional[datetime]:
    value = _raw(doc, name, required)
    try:
        return parse_timestamp(value)
    except ValueError:
        raise MalformedDocumentError(f"Field {name!r} must be a timestamp, got {value!r}") from None


def read_list(doc: Document, name: str) -> list:
    value = doc.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedDocumentError(f"Field {name!r} must be a list, got {type(value).__name__}")
    return value
