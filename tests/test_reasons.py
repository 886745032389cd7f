"""
test_reasons.py — Tests for fine reason resolution and decoding

Tests cover:
- Custom reasons answering without templates
- Template reasons resolved against a snapshot
- Defaults for missing snapshot, empty snapshot, stale id
- Payload decoding and the MalformedFineReasonError boundary
"""

import logging

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fines import (
    Amount,
    FineReasonCustom,
    FineReasonTemplate,
    Importance,
    MalformedFineReasonError,
    NegativeAmountError,
    ReasonTemplate,
    find_template,
    fine_reason_from_dict,
    resolve_amount,
    resolve_description,
    resolve_importance,
)


@pytest.fixture
def templates():
    return [
        ReasonTemplate("late", "Late to training", Amount(5, 0), Importance.HIGH),
        ReasonTemplate("phone", "Phone in the locker room", Amount(1, 50), Importance.MEDIUM),
        ReasonTemplate("late", "Duplicate id", Amount(99, 0), Importance.LOW),
    ]


# ==============================================================================
# Resolution
# ==============================================================================

class TestCustomReason:

    def test_resolves_own_fields(self, templates):
        reason = FineReasonCustom("Yellow card", Amount(3, 0), Importance.LOW)

        assert resolve_description(reason, templates) == "Yellow card"
        assert resolve_amount(reason, templates) == Amount(3, 0)
        assert resolve_importance(reason, templates) == Importance.LOW

    def test_ignores_missing_snapshot(self):
        reason = FineReasonCustom("Yellow card", Amount(3, 0), Importance.MEDIUM)

        assert resolve_amount(reason, None) == Amount(3, 0)
        assert resolve_importance(reason) == Importance.MEDIUM

    def test_complete_is_self(self):
        reason = FineReasonCustom("Yellow card", Amount(3, 0), Importance.LOW)
        assert reason.complete() is reason


class TestTemplateReason:

    def test_resolves_matching_template(self, templates):
        reason = FineReasonTemplate("phone")

        assert resolve_description(reason, templates) == "Phone in the locker room"
        assert resolve_amount(reason, templates) == Amount(1, 50)
        assert resolve_importance(reason, templates) == Importance.MEDIUM

    def test_first_match_wins(self, templates):
        reason = FineReasonTemplate("late")

        assert resolve_amount(reason, templates) == Amount(5, 0)
        assert resolve_importance(reason, templates) == Importance.HIGH

    def test_empty_snapshot_resolves_defaults(self):
        reason = FineReasonTemplate("late")

        assert resolve_description(reason, []) == ""
        assert resolve_amount(reason, []) == Amount.zero()
        assert resolve_importance(reason, []) == Importance.LOW

    def test_missing_snapshot_resolves_defaults(self):
        reason = FineReasonTemplate("late")

        assert resolve_description(reason, None) == ""
        assert resolve_amount(reason, None) == Amount.zero()
        assert resolve_importance(reason, None) == Importance.LOW

    def test_stale_id_resolves_defaults(self, templates):
        reason = FineReasonTemplate("deleted-template")

        assert resolve_description(reason, templates) == ""
        assert resolve_amount(reason, templates) == Amount.zero()
        assert resolve_importance(reason, templates) == Importance.LOW

    def test_miss_is_logged_not_raised(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="fines.reasons"):
            resolve_amount(FineReasonTemplate("gone"), [])
        assert "gone" in caplog.text

    def test_complete_snapshots_template(self, templates):
        completed = FineReasonTemplate("late").complete(templates)
        assert completed == FineReasonCustom("Late to training", Amount(5, 0), Importance.HIGH)

    def test_complete_without_template(self):
        completed = FineReasonTemplate("late").complete(None)
        assert completed == FineReasonCustom("", Amount.zero(), Importance.LOW)

    def test_resolution_does_not_modify_snapshot(self, templates):
        before = list(templates)
        resolve_amount(FineReasonTemplate("phone"), templates)
        assert templates == before


class TestResolveRejectsNonReasons:

    def test_type_error(self):
        with pytest.raises(TypeError):
            resolve_amount("late", [])


def test_find_template(templates):
    assert find_template(templates, "phone").amount == Amount(1, 50)
    assert find_template(templates, "nope") is None
    assert find_template(None, "phone") is None


# ==============================================================================
# Templates
# ==============================================================================

class TestReasonTemplate:

    def test_from_dict(self):
        t = ReasonTemplate.from_dict(
            {"id": "t1", "reason": "Late", "amount": 2.5, "importance": "medium"}
        )
        assert t == ReasonTemplate("t1", "Late", Amount(2, 50), Importance.MEDIUM)

    def test_to_dict(self):
        t = ReasonTemplate("t1", "Late", Amount(2, 50), Importance.MEDIUM)
        assert t.to_dict() == {
            "id": "t1", "description": "Late", "amount": 2.5, "importance": "medium"
        }

    def test_negative_amount_rejected(self):
        with pytest.raises(NegativeAmountError):
            ReasonTemplate.from_dict(
                {"id": "t1", "description": "Late", "amount": -1, "importance": "low"}
            )


# ==============================================================================
# Decoding
# ==============================================================================

class TestDecode:

    def test_template_payload(self):
        assert fine_reason_from_dict({"templateId": "late"}) == FineReasonTemplate("late")

    def test_template_id_wins_over_inline_fields(self):
        payload = {"templateId": "late", "description": "x", "amount": 1, "importance": "low"}
        assert fine_reason_from_dict(payload) == FineReasonTemplate("late")

    def test_custom_payload(self):
        payload = {"description": "Yellow card", "amount": 3.5, "importance": "high"}
        assert fine_reason_from_dict(payload) == FineReasonCustom(
            "Yellow card", Amount(3, 50), Importance.HIGH
        )

    def test_legacy_reason_key(self):
        payload = {"reason": "Yellow card", "amount": 3, "importance": "low"}
        assert resolve_description(fine_reason_from_dict(payload)) == "Yellow card"

    def test_null_template_id_falls_through(self):
        payload = {"templateId": None, "description": "x", "amount": 1, "importance": "low"}
        assert isinstance(fine_reason_from_dict(payload), FineReasonCustom)

    @pytest.mark.parametrize("payload", [
        {},
        {"description": "x", "amount": 1},
        {"description": "x", "importance": "low"},
        {"amount": 1, "importance": "low"},
        {"templateId": None},
    ])
    def test_incomplete_payload_is_malformed(self, payload):
        with pytest.raises(MalformedFineReasonError) as exc_info:
            fine_reason_from_dict(payload)
        assert exc_info.value.payload == payload

    def test_unknown_importance_is_malformed(self):
        with pytest.raises(MalformedFineReasonError):
            fine_reason_from_dict({"description": "x", "amount": 1, "importance": "urgent"})

    def test_non_numeric_amount_is_malformed(self):
        with pytest.raises(MalformedFineReasonError):
            fine_reason_from_dict({"description": "x", "amount": "1", "importance": "low"})

    def test_non_string_description_is_malformed(self):
        with pytest.raises(MalformedFineReasonError):
            fine_reason_from_dict({"description": 12, "amount": 1, "importance": "low"})

    def test_non_mapping_is_malformed(self):
        with pytest.raises(MalformedFineReasonError):
            fine_reason_from_dict(["templateId", "late"])

    def test_negative_amount(self):
        with pytest.raises(NegativeAmountError):
            fine_reason_from_dict({"description": "x", "amount": -0.5, "importance": "low"})

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            fine_reason_from_dict({})


class TestEncode:

    def test_template_to_dict(self):
        assert FineReasonTemplate("late").to_dict() == {"templateId": "late"}

    def test_custom_to_dict(self):
        reason = FineReasonCustom("Yellow card", Amount(3, 5), Importance.HIGH)
        assert reason.to_dict() == {
            "description": "Yellow card", "amount": 3.05, "importance": "high"
        }

    @given(
        description=st.text(max_size=30),
        units=st.integers(min_value=0, max_value=10_000_000),
        sub_units=st.integers(min_value=0, max_value=99),
        importance=st.sampled_from(list(Importance)),
    )
    @settings(max_examples=300)
    def test_custom_payload_decodes_to_same_reason(self, description, units, sub_units, importance):
        reason = FineReasonCustom(description, Amount(units, sub_units), importance)
        assert fine_reason_from_dict(reason.to_dict()) == reason


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
