"""
fines — Amounts and fine totals for a club fine tracker

Exact currency arithmetic for club fines, resolution of fine reasons against
the club's reason templates, and per-person sums for display.

================================================================================
QUICK START
================================================================================

Amounts:

    from fines import Amount

    fine = Amount(2, 50)
    fine * 3                          # Amount(units=7, sub_units=50)
    Amount(5, 0) - Amount(7, 0)       # Amount(units=0, sub_units=0), never negative
    Amount.from_scalar(12.345)        # Amount(units=12, sub_units=34), truncated
    Amount.parse("12,5").for_payment  # '12.50'

Fines and totals:

    from fines import (
        Fine, FineReasonCustom, FineReasonTemplate, Importance,
        PaymentState, ReasonTemplate, summarize,
    )

    templates = [ReasonTemplate("late", "Late to training", Amount(5, 0), Importance.MEDIUM)]
    fines = [
        Fine("f1", "anna", FineReasonTemplate("late"), count=2),
        Fine("f2", "anna", FineReasonCustom("Yellow card", Amount(3, 0), Importance.LOW),
             payment_state=PaymentState.PAID),
    ]
    sums = summarize(fines, "anna", templates)
    sums.unpaid, sums.paid, sums.total   # 10.00, 3.00, 13.00

The template list is always passed in. Nothing here fetches or caches it.

================================================================================
"""

# Amount
from .core import Amount

# Errors
from .errors import (
    FineDecodingError,
    NegativeAmountError,
    MalformedFineReasonError,
)

# Display settings
from .config import FineSettings, CurrencyFormat

# Fine reasons
from .reasons import (
    Importance,
    ReasonTemplate,
    FineReason,
    FineReasonCustom,
    FineReasonTemplate,
    find_template,
    resolve_description,
    resolve_amount,
    resolve_importance,
    fine_reason_from_dict,
)

# Aggregation
from .aggregate import (
    PaymentState,
    Fine,
    FineSums,
    paid_sum,
    unpaid_sum,
    medium_or_high_unpaid_sum,
    high_unpaid_sum,
    total_sum,
    summarize,
    selected_sum,
)

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Amount
    "Amount",
    # Errors
    "FineDecodingError",
    "NegativeAmountError",
    "MalformedFineReasonError",
    # Config
    "FineSettings",
    "CurrencyFormat",
    # Reasons
    "Importance",
    "ReasonTemplate",
    "FineReason",
    "FineReasonCustom",
    "FineReasonTemplate",
    "find_template",
    "resolve_description",
    "resolve_amount",
    "resolve_importance",
    "fine_reason_from_dict",
    # Aggregation
    "PaymentState",
    "Fine",
    "FineSums",
    "paid_sum",
    "unpaid_sum",
    "medium_or_high_unpaid_sum",
    "high_unpaid_sum",
    "total_sum",
    "summarize",
    "selected_sum",
]
