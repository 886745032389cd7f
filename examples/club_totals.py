#!/usr/bin/env python3
"""
club_totals.py — What a person's fine overview shows

================================================================================
THE PROBLEM
================================================================================

    >>> 0.1 + 0.2
    0.30000000000000004

A club collects many small fines. Summed as floats, the totals drift, and a
person sees "Unpaid: 2.9999999999999996" in the app.

================================================================================
THE APPROACH
================================================================================

Amounts are whole units plus hundredths, added with carry. Fine reasons are
either inline or point to a reason template of the club, and they are
resolved against a template snapshot that may be stale or missing.

    from fines import summarize
    sums = summarize(fines, person_id, templates)

================================================================================
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fines import (
    Amount,
    Fine,
    FineReasonCustom,
    FineReasonTemplate,
    FineSettings,
    Importance,
    MalformedFineReasonError,
    NegativeAmountError,
    PaymentState,
    ReasonTemplate,
    fine_reason_from_dict,
    selected_sum,
    summarize,
)


TEMPLATES = [
    ReasonTemplate("late", "Late to training", Amount(0, 10), Importance.LOW),
    ReasonTemplate("phone", "Phone during team talk", Amount(0, 20), Importance.MEDIUM),
    ReasonTemplate("beer", "Forgot the beer crate", Amount(15, 0), Importance.HIGH),
]

FINES = [
    Fine("f1", "anna", FineReasonTemplate("late"), count=1),
    Fine("f2", "anna", FineReasonTemplate("phone"), count=1),
    Fine("f3", "anna", FineReasonTemplate("beer"), payment_state=PaymentState.PAID),
    Fine("f4", "anna", FineReasonCustom("Yellow card", Amount(2, 50), Importance.MEDIUM), count=2),
    Fine("f5", "anna", FineReasonTemplate("deleted")),
    Fine("f6", "ben", FineReasonTemplate("beer")),
]


def demonstrate_drift():
    """Show the float problem."""
    print("=" * 60)
    print("FLOAT DRIFT")
    print("=" * 60)
    print()
    print(">>> 0.1 + 0.2")
    print(f"{0.1 + 0.2}")
    print()
    print(">>> Amount(0, 10) + Amount(0, 20)")
    print(f"{Amount(0, 10) + Amount(0, 20)}")
    print()


def demonstrate_totals():
    """Show the overview of one person."""
    print("=" * 60)
    print("OVERVIEW OF anna")
    print("=" * 60)
    print()

    settings = FineSettings()
    sums = summarize(FINES, "anna", TEMPLATES)
    for label, amount in [
        ("Paid", sums.paid),
        ("Unpaid", sums.unpaid),
        ("Unpaid medium/high", sums.medium_or_high_unpaid),
        ("Unpaid high", sums.high_unpaid),
        ("Total", sums.total),
    ]:
        print(f"  {label:<20} {amount.to_display_string(settings):>12}")
    print()

    print("Without a template snapshot (list not loaded yet):")
    print(f"  Unpaid: {summarize(FINES, 'anna', None).unpaid.to_display_string(settings)}")
    print()


def demonstrate_checkout():
    """Show the amount sent to the payment gateway."""
    print("=" * 60)
    print("CHECKOUT")
    print("=" * 60)
    print()
    amount = selected_sum(FINES, {"f1", "f2", "f4"}, TEMPLATES)
    print(f"Selected fines f1, f2, f4: {amount.for_payment} {FineSettings().currency_code}")
    print()


def demonstrate_decoding():
    """Show the decode boundary."""
    print("=" * 60)
    print("DECODING")
    print("=" * 60)
    print()
    for payload in [
        {"templateId": "late"},
        {"description": "Yellow card", "amount": 2.5, "importance": "medium"},
        {"description": "Yellow card", "amount": -2.5, "importance": "medium"},
        {"description": "Yellow card"},
    ]:
        try:
            print(f"  {payload} -> {fine_reason_from_dict(payload)}")
        except (NegativeAmountError, MalformedFineReasonError) as e:
            print(f"  {payload} -> {type(e).__name__}: {e}")
    print()


def main():
    """Run all demonstrations."""
    demonstrate_drift()
    demonstrate_totals()
    demonstrate_checkout()
    demonstrate_decoding()


if __name__ == "__main__":
    main()
