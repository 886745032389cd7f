"""
aggregate.py — Sums over a person's fines

Every sum is a fold that starts at Amount.zero() and adds, for each fine of
the person that matches the category,

    resolve_amount(fine.fine_reason, templates) * fine.count

Categories:

    paid_sum                   payment_state == PAID
    unpaid_sum                 payment_state == UNPAID
    medium_or_high_unpaid_sum  UNPAID and importance in {MEDIUM, HIGH}
    high_unpaid_sum            UNPAID and importance == HIGH
    total_sum                  every fine of the person

Settled fines only count towards the total. The fold order does not matter:
all inputs are non-negative, so the zero clamp of Amount is never hit.

Fines are never mutated. The template snapshot is read, never fetched.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Collection, Hashable, Iterable, Mapping, Optional
import logging

from .core import Amount, _check_int
from .reasons import (
    FineReason,
    Importance,
    Templates,
    fine_reason_from_dict,
    resolve_amount,
    resolve_importance,
)

logger = logging.getLogger(__name__)


# ==============================================================================
# FINE
# ==============================================================================

class PaymentState(Enum):
    """Payment state, valued with the backend's literals."""
    UNPAID = "unpayed"
    SETTLED = "settled"
    PAID = "payed"

    @classmethod
    def from_string(cls, value: str) -> PaymentState:
        """Accepts the backend literals and "unpaid" / "paid"."""
        aliases = {"unpaid": cls.UNPAID, "paid": cls.PAID}
        if value in aliases:
            return aliases[value]
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown payment state: {value!r}") from None


@dataclass(frozen=True)
class Fine:
    """
    A fine of one person.

    count is the number of times the reason applies; values below 1 are
    stored as 1, a non-int count raises TypeError.
    """
    id: Hashable
    owner_id: Hashable
    fine_reason: FineReason
    count: int = 1
    payment_state: PaymentState = PaymentState.UNPAID

    def __post_init__(self):
        _check_int(self.count, "count")
        if self.count < 1:
            object.__setattr__(self, "count", 1)

    def complete_amount(self, templates: Templates = None) -> Amount:
        """Resolved reason amount times count."""
        return resolve_amount(self.fine_reason, templates) * self.count

    def importance(self, templates: Templates = None) -> Importance:
        return resolve_importance(self.fine_reason, templates)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "personId": self.owner_id,
            "number": self.count,
            "payed": {"state": self.payment_state.value},
            **self.fine_reason.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Fine:
        """
        Decode a fine of the club's fine list.

        The reason fields sit next to the fine fields ({templateId} or
        {description|reason, amount, importance}), or under "fineReason".

        Raises:
            KeyError: if id or personId is missing
            TypeError: if number is not an int
            MalformedFineReasonError / NegativeAmountError: bad reason
        """
        reason_payload = data.get("fineReason", data)
        payed = data.get("payed") or {}
        state = payed.get("state", PaymentState.UNPAID.value) if isinstance(payed, Mapping) else payed
        return cls(
            id=data["id"],
            owner_id=data["personId"],
            fine_reason=fine_reason_from_dict(reason_payload),
            count=data.get("number", 1),
            payment_state=PaymentState.from_string(state),
        )


# ==============================================================================
# SUMS
# ==============================================================================

FinePredicate = Callable[[Fine, Templates], bool]


def _is_paid(fine: Fine, templates: Templates) -> bool:
    return fine.payment_state is PaymentState.PAID


def _is_unpaid(fine: Fine, templates: Templates) -> bool:
    return fine.payment_state is PaymentState.UNPAID


def _is_medium_or_high_unpaid(fine: Fine, templates: Templates) -> bool:
    return _is_unpaid(fine, templates) and fine.importance(templates) in (
        Importance.MEDIUM,
        Importance.HIGH,
    )


def _is_high_unpaid(fine: Fine, templates: Templates) -> bool:
    return _is_unpaid(fine, templates) and fine.importance(templates) is Importance.HIGH


def _any_state(fine: Fine, templates: Templates) -> bool:
    return True


def _sum(
    fines: Iterable[Fine],
    owner_id: Optional[Hashable],
    templates: Templates,
    include: FinePredicate,
) -> Amount:
    total = Amount.zero()
    for fine in fines:
        if owner_id is not None and fine.owner_id != owner_id:
            continue
        if include(fine, templates):
            total = total + fine.complete_amount(templates)
    return total


def paid_sum(fines: Iterable[Fine], owner_id: Optional[Hashable], templates: Templates = None) -> Amount:
    """Paid fines of the person. owner_id=None sums every fine."""
    return _sum(fines, owner_id, templates, _is_paid)


def unpaid_sum(fines: Iterable[Fine], owner_id: Optional[Hashable], templates: Templates = None) -> Amount:
    return _sum(fines, owner_id, templates, _is_unpaid)


def medium_or_high_unpaid_sum(
    fines: Iterable[Fine], owner_id: Optional[Hashable], templates: Templates = None
) -> Amount:
    return _sum(fines, owner_id, templates, _is_medium_or_high_unpaid)


def high_unpaid_sum(fines: Iterable[Fine], owner_id: Optional[Hashable], templates: Templates = None) -> Amount:
    return _sum(fines, owner_id, templates, _is_high_unpaid)


def total_sum(fines: Iterable[Fine], owner_id: Optional[Hashable], templates: Templates = None) -> Amount:
    """All fines of the person, whatever their payment state."""
    return _sum(fines, owner_id, templates, _any_state)


@dataclass(frozen=True)
class FineSums:
    """All category sums of one person, computed in one pass."""
    paid: Amount
    unpaid: Amount
    medium_or_high_unpaid: Amount
    high_unpaid: Amount
    total: Amount

    def to_dict(self) -> dict:
        return {
            "paid": self.paid.to_scalar(),
            "unpaid": self.unpaid.to_scalar(),
            "medium_or_high_unpaid": self.medium_or_high_unpaid.to_scalar(),
            "high_unpaid": self.high_unpaid.to_scalar(),
            "total": self.total.to_scalar(),
        }


_CATEGORIES: dict[str, FinePredicate] = {
    "paid": _is_paid,
    "unpaid": _is_unpaid,
    "medium_or_high_unpaid": _is_medium_or_high_unpaid,
    "high_unpaid": _is_high_unpaid,
    "total": _any_state,
}


def summarize(
    fines: Iterable[Fine],
    owner_id: Optional[Hashable],
    templates: Templates = None,
) -> FineSums:
    """
    Every category sum of the person.

    Iterates fines once, so generators are fine. Each fine's reason is
    resolved once per category it is checked against.
    """
    totals = {name: Amount.zero() for name in _CATEGORIES}
    count = 0
    for fine in fines:
        if owner_id is not None and fine.owner_id != owner_id:
            continue
        count += 1
        contribution = fine.complete_amount(templates)
        for name, include in _CATEGORIES.items():
            if include(fine, templates):
                totals[name] = totals[name] + contribution

    logger.debug("Summarized %d fines of %r", count, owner_id)
    return FineSums(**totals)


def selected_sum(
    fines: Iterable[Fine],
    fine_ids: Collection[Hashable],
    templates: Templates = None,
) -> Amount:
    """Amount to pay for the selected fines, whatever their owner or state."""
    total = Amount.zero()
    for fine in fines:
        if fine.id in fine_ids:
            total = total + fine.complete_amount(templates)
    return total
