"""
reasons.py — Why a fine exists

A fine reason comes in two shapes:

- FineReasonCustom: description, amount and importance stored inline
- FineReasonTemplate: only the id of a ReasonTemplate from the club's
  reason list

Resolving a reason means reading its three values. Custom reasons answer
directly. Template reasons look the id up in a template snapshot supplied by
the caller; when the snapshot is missing, empty or stale they resolve to
("", Amount.zero(), Importance.LOW) instead of failing.

    templates = [ReasonTemplate("t1", "Late", Amount(5, 0), Importance.HIGH)]
    reason = FineReasonTemplate("t1")
    resolve_amount(reason, templates)       # Amount(5, 0)
    resolve_amount(reason, [])              # Amount.zero()

No function here reads global state: the snapshot is always a parameter.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Union
import logging

from .core import Amount
from .errors import FineDecodingError, MalformedFineReasonError

logger = logging.getLogger(__name__)


# ==============================================================================
# IMPORTANCE
# ==============================================================================

class Importance(Enum):
    """Severity tier of a fine. Serialized as its lowercase literal."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_string(cls, value: str) -> Importance:
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown importance: {value!r}") from None


# ==============================================================================
# REASON TEMPLATE (club reason list entry)
# ==============================================================================

@dataclass(frozen=True)
class ReasonTemplate:
    """Reusable reason definition of the club, read-only here."""
    id: str
    description: str
    amount: Amount
    importance: Importance

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "amount": self.amount.to_scalar(),
            "importance": self.importance.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReasonTemplate:
        """
        Decode a list entry. "reason" is accepted for "description".

        Raises:
            KeyError: if a field is missing
            NegativeAmountError: if the amount is negative
        """
        description = data["description"] if "description" in data else data["reason"]
        return cls(
            id=data["id"],
            description=description,
            amount=Amount.from_scalar(data["amount"]),
            importance=Importance.from_string(data["importance"]),
        )


Templates = Optional[Sequence[ReasonTemplate]]


def find_template(templates: Templates, template_id: str) -> Optional[ReasonTemplate]:
    """First template with the given id, None if absent or no snapshot."""
    if templates is None:
        logger.debug("No template snapshot to resolve %r", template_id)
        return None
    for template in templates:
        if template.id == template_id:
            return template
    logger.debug("Template %r not in snapshot", template_id)
    return None


# ==============================================================================
# FINE REASON VARIANTS
# ==============================================================================

@dataclass(frozen=True)
class FineReasonCustom:
    """Reason with its own description, amount and importance."""
    description: str
    amount: Amount
    importance: Importance

    def complete(self, templates: Templates = None) -> FineReasonCustom:
        return self

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "amount": self.amount.to_scalar(),
            "importance": self.importance.value,
        }


@dataclass(frozen=True)
class FineReasonTemplate:
    """Reason that points to a ReasonTemplate by id."""
    template_id: str

    def complete(self, templates: Templates = None) -> FineReasonCustom:
        """Snapshot of the resolved values as a custom reason."""
        template = find_template(templates, self.template_id)
        if template is None:
            return FineReasonCustom("", Amount.zero(), Importance.LOW)
        return FineReasonCustom(template.description, template.amount, template.importance)

    def to_dict(self) -> dict:
        return {"templateId": self.template_id}


FineReason = Union[FineReasonCustom, FineReasonTemplate]


# ==============================================================================
# RESOLUTION
# ==============================================================================

def resolve_description(reason: FineReason, templates: Templates = None) -> str:
    if isinstance(reason, FineReasonCustom):
        return reason.description
    if isinstance(reason, FineReasonTemplate):
        template = find_template(templates, reason.template_id)
        return template.description if template is not None else ""
    raise TypeError(f"Not a fine reason: {type(reason).__name__}")


def resolve_amount(reason: FineReason, templates: Templates = None) -> Amount:
    if isinstance(reason, FineReasonCustom):
        return reason.amount
    if isinstance(reason, FineReasonTemplate):
        template = find_template(templates, reason.template_id)
        return template.amount if template is not None else Amount.zero()
    raise TypeError(f"Not a fine reason: {type(reason).__name__}")


def resolve_importance(reason: FineReason, templates: Templates = None) -> Importance:
    if isinstance(reason, FineReasonCustom):
        return reason.importance
    if isinstance(reason, FineReasonTemplate):
        template = find_template(templates, reason.template_id)
        return template.importance if template is not None else Importance.LOW
    raise TypeError(f"Not a fine reason: {type(reason).__name__}")


# ==============================================================================
# DECODING
# ==============================================================================

def fine_reason_from_dict(payload: Mapping[str, Any]) -> FineReason:
    """
    Decode {templateId} or {description, amount, importance}.

    A templateId wins over inline fields. "reason" is accepted for
    "description" (older payloads).

    Raises:
        MalformedFineReasonError: neither shape is complete, or a field has
            the wrong type or an unknown importance literal
        NegativeAmountError: the inline amount is negative
    """
    if not isinstance(payload, Mapping):
        raise MalformedFineReasonError(payload, "payload is not an object")

    template_id = payload.get("templateId")
    if template_id is not None:
        return FineReasonTemplate(template_id=template_id)

    description = payload.get("description", payload.get("reason"))
    raw_amount = payload.get("amount")
    raw_importance = payload.get("importance")
    if description is None or raw_amount is None or raw_importance is None:
        logger.debug("Malformed fine reason payload: %r", payload)
        raise MalformedFineReasonError(payload)
    if not isinstance(description, str):
        raise MalformedFineReasonError(payload, "description is not a string")

    try:
        amount = Amount.from_scalar(raw_amount)
    except TypeError:
        raise MalformedFineReasonError(payload, "amount is not a number") from None
    except FineDecodingError:
        logger.debug("Invalid amount in fine reason payload: %r", payload)
        raise

    try:
        importance = Importance.from_string(raw_importance)
    except ValueError:
        raise MalformedFineReasonError(payload, f"unknown importance {raw_importance!r}") from None

    return FineReasonCustom(description=description, amount=amount, importance=importance)
