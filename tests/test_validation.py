import pytest

from rulesmith.validation import CURVE, PREVIEW_REQUEST, ValidationError, require, validate


def test_valid_preview_payload_passes_through():
    ok, data = validate({"curve": {"kind": "linear"}, "formulas": {"hp": "VIT"}, "levels": 3}, PREVIEW_REQUEST)
    assert ok
    assert data == {"curve": {"kind": "linear"}, "formulas": {"hp": "VIT"}, "levels": 3}


def test_optional_fields_and_nulls_skipped():
    ok, data = validate({"levels": None}, PREVIEW_REQUEST)
    assert ok
    assert data == {}


def test_prefix_applied_to_field_names():
    ok, err = validate({"kind": ""}, CURVE, prefix="curve.")
    assert not ok
    assert err == {"field": "curve.kind", "error": "must not be empty", "code": "empty"}


def test_string_is_stripped_and_length_checked():
    ok, data = validate({"kind": "  linear "}, CURVE)
    assert ok and data["kind"] == "linear"
    ok, err = validate({"kind": "x" * 33}, CURVE)
    assert not ok and err["code"] == "max_len"


def test_number_accepts_int_and_float_not_bool():
    assert validate({"base": 10}, CURVE)[0]
    assert validate({"base": 2.5}, CURVE)[0]
    ok, err = validate({"base": True}, CURVE)
    assert not ok and err["code"] == "type"


def test_dict_item_limits():
    too_many = {f"f{i}": "1" for i in range(33)}
    ok, err = validate({"formulas": too_many}, PREVIEW_REQUEST)
    assert not ok and err["code"] == "max_items"


def test_bad_schema_reported():
    ok, err = validate({"a": 1}, {"a": ("float", True)})
    assert not ok and err["field"] == "__schema__"


def test_require_raises():
    with pytest.raises(ValidationError) as exc:
        require({"levels": -1}, PREVIEW_REQUEST)
    assert exc.value.field == "levels"
    assert exc.value.code == "min"
    assert exc.value.to_dict()["error"] == "must be >= 1"
