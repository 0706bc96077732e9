from __future__ import annotations

import re
from datetime import date
from typing import Any

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

REQUIRED_FIELDS_MESSAGE = "Veuillez remplir tous les champs obligatoires"

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} est obligatoire")
    return str(value).strip()


def require_positive_amount(value: Any, field_name: str) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} invalide") from None
    if amount <= 0:
        raise ValidationError(f"{field_name} doit être supérieur à 0")
    return amount


def require_non_negative(value: Any, field_name: str) -> float:
    try:
        amount = float(value or 0)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} invalide") from None
    if amount < 0:
        raise ValidationError(f"{field_name} ne peut pas être négatif")
    return amount


def require_date(value: Any, field_name: str) -> date:
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"{field_name} est obligatoire")
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} invalide (format attendu AAAA-MM-JJ)") from None


def require_time_slot(value: Any, field_name: str = "Heure") -> str:
    text = str(value or "").strip()
    if not _TIME_RE.match(text):
        raise ValidationError(f"{field_name} invalide (format attendu HH:MM)")
    return text
