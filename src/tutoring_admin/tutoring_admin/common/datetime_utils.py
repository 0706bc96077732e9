from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional

from ..core.constants import DATE_FORMAT

FRENCH_MONTHS = [
    "Janvier", "Février", "Mars", "Avril", "Mai", "Juin",
    "Juillet", "Août", "Septembre", "Octobre", "Novembre", "Décembre",
]

FRENCH_DAYS = ["Lundi", "Mardi", "Mercredi", "Jeudi", "Vendredi", "Samedi", "Dimanche"]

FRENCH_DAYS_SHORT = ["Lun", "Mar", "Mer", "Jeu", "Ven", "Sam", "Dim"]

FRENCH_MONTHS_SHORT = [
    "janv.", "févr.", "mars", "avr.", "mai", "juin",
    "juil.", "août", "sept.", "oct.", "nov.", "déc.",
]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def to_ymd(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def parse_timestamp(value) -> Optional[datetime]:
    """Accept datetime or ISO-8601 text (as stored by the store/cache).

    Offset-aware values (e.g. ``2024-05-01T10:00:00.000Z``) are converted to
    naive local time so they compare with ``now_local()``.
    """
    if value is None or value == "":
        return None
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def format_date_fr(value: date) -> str:
    """e.g. ``5 mars 2025``."""
    return f"{value.day} {FRENCH_MONTHS[value.month - 1].lower()} {value.year}"


def format_short_date_fr(value: date) -> str:
    """e.g. ``5 févr.``."""
    return f"{value.day} {FRENCH_MONTHS_SHORT[value.month - 1]}"


def weekday_fr(value: date) -> str:
    return FRENCH_DAYS[value.weekday()].lower()
