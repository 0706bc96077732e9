"""Attendance/payment ledger transitions.

Pure functions: they take a snapshot of a slot (and the session fee) and
describe the next slot state, the change to the student's counters and the
payment-history entry to append. Nothing here touches a store.

Invariant kept by applying these decisions in sequence: a student's
``montant`` is the sum of the fees of their present, unpaid slots, and
``lessons_attended`` is the number of their present slots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from ..attendance.model import ABSENT, AttendanceRecord, SlotState
from ..core.enums import PaymentEntryKind

PAID_SLOT_WARNING = "Impossible de marquer absent : cette séance est déjà payée."
ABSENT_SLOT_WARNING = "Impossible de marquer 'payé' pour une séance où l'étudiant est absent."


@dataclass(frozen=True)
class BalanceDelta:
    lessons: int = 0
    montant: float = 0.0

    @property
    def is_zero(self) -> bool:
        return self.lessons == 0 and self.montant == 0


NO_CHANGE = BalanceDelta()


@dataclass(frozen=True)
class PaymentIntent:
    """A payment-history entry to append."""

    amount: float
    kind: PaymentEntryKind = PaymentEntryKind.PAYMENT


@dataclass(frozen=True)
class LedgerDecision:
    current: SlotState
    next: SlotState
    delta: BalanceDelta = NO_CHANGE
    payment: Optional[PaymentIntent] = None
    warning: Optional[str] = None

    @property
    def blocked(self) -> bool:
        return self.warning is not None


def _blocked(current: SlotState, warning: str) -> LedgerDecision:
    return LedgerDecision(current=current, next=current, warning=warning)


def decide_presence_toggle(current: SlotState, fee: float) -> LedgerDecision:
    """Flip presence of a slot.

    A paid slot cannot be marked absent; payment must be cleared first.
    """
    if current.present and current.paid:
        return _blocked(current, PAID_SLOT_WARNING)

    if not current.present:
        return LedgerDecision(
            current=current,
            next=SlotState(present=True, paid=current.paid),
            delta=BalanceDelta(lessons=1, montant=fee),
        )

    # present & unpaid -> absent
    return LedgerDecision(
        current=current,
        next=SlotState(present=False, paid=False),
        delta=BalanceDelta(lessons=-1, montant=-fee),
    )


def decide_payment_toggle(
    current: Optional[SlotState],
    fee: float,
    *,
    record_reversals: bool = False,
) -> LedgerDecision:
    """Flip the paid flag of a present slot.

    ``current`` is None when no attendance record exists for the slot.
    Un-paying restores the fee to the balance. When ``record_reversals`` is
    set, it also appends a negative entry so the history nets out.
    """
    if current is None or not current.present:
        return _blocked(current or ABSENT, ABSENT_SLOT_WARNING)

    if not current.paid:
        return LedgerDecision(
            current=current,
            next=SlotState(present=True, paid=True),
            delta=BalanceDelta(montant=-fee),
            payment=PaymentIntent(amount=fee),
        )

    reversal = PaymentIntent(amount=-fee, kind=PaymentEntryKind.REVERSAL) if record_reversals else None
    return LedgerDecision(
        current=current,
        next=SlotState(present=True, paid=False),
        delta=BalanceDelta(montant=fee),
        payment=reversal,
    )


def apply_balance_delta(lessons_attended: int, montant: float, delta: BalanceDelta) -> tuple[int, float]:
    """New (lessons_attended, montant), each floored at 0."""
    return max(int(lessons_attended) + delta.lessons, 0), max(float(montant) + delta.montant, 0.0)


def expected_balance(
    records: Iterable[AttendanceRecord],
    fee_for: Callable[[AttendanceRecord], float],
) -> tuple[int, float]:
    """Recompute (lessons_attended, montant) from attendance records."""
    lessons = 0
    montant = 0.0
    for r in records:
        if not r.present:
            continue
        lessons += 1
        if not r.paid:
            montant += fee_for(r)
    return lessons, montant
