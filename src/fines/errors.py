"""
errors.py — Decode boundary failures

Only two things can go wrong in this package, and both happen when data
crosses the boundary from the backend:

- a scalar amount is negative (NegativeAmountError)
- a fine reason payload has neither a templateId nor a complete
  description/amount/importance triple (MalformedFineReasonError)

Arithmetic, resolution and aggregation never raise these. A template that
cannot be found is NOT an error: it resolves to defaults.
"""

from __future__ import annotations
from typing import Any


class FineDecodingError(ValueError):
    """Base class for values rejected at the decode boundary."""


class NegativeAmountError(FineDecodingError):
    """A scalar amount was negative."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Amount is negative: {value!r}")


class MalformedFineReasonError(FineDecodingError):
    """A fine reason payload matched neither known shape."""

    def __init__(self, payload: Any, detail: str = "no templateId and no complete custom reason"):
        self.payload = payload
        self.detail = detail
        super().__init__(f"Malformed fine reason ({detail}): {payload!r}")
