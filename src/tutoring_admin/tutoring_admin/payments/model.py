from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..core.enums import PaymentEntryKind


@dataclass(frozen=True)
class PaymentHistoryEntry:
    """Immutable, append-only record of a session payment (or its reversal)."""

    entry_id: str
    student_id: str
    group_id: str
    session_date: date
    session_time: str
    amount: float
    paid_at: datetime
    kind: PaymentEntryKind = PaymentEntryKind.PAYMENT
