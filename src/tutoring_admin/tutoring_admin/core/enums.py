from __future__ import annotations

from enum import Enum


class Collection(str, Enum):
    """Document-store collections used by the application."""

    STUDENTS = "students"
    GROUPS = "groups"
    ATTENDANCE = "attendance"
    PAYMENT_HISTORY = "paymentHistory"


class WeekDay(str, Enum):
    """Day of week as stored in a group's schedule."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def iso_index(self) -> int:
        """Python ``date.weekday()`` index (Mon=0 .. Sun=6)."""
        return list(WeekDay).index(self)


class PaymentEntryKind(str, Enum):
    """Kind of an append-only payment-history entry."""

    PAYMENT = "payment"
    REVERSAL = "reversal"
