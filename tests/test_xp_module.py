import math

import pytest

from rulesmith.models.curve import XP_CEILING, CurveConfig, CurveKind, experience_for


def test_quadratic_floor_ramp_example():
    cfg = CurveConfig(kind=CurveKind.QUADRATIC, base=100, factor=1.5)
    # raw 15 and 60 fall under the flat 100 threshold -> 100 * level
    assert experience_for(1, cfg) == 100
    assert experience_for(2, cfg) == 200
    # raw 135 is left alone
    assert experience_for(3, cfg) == 135


def test_linear_values():
    cfg = CurveConfig(kind=CurveKind.LINEAR, base=50, factor=2)
    assert experience_for(1, cfg) == 100
    assert experience_for(5, cfg) == 500


def test_exponential_values():
    cfg = CurveConfig(kind=CurveKind.EXPONENTIAL, base=100, factor=1.5)
    assert experience_for(1, cfg) == 150
    assert experience_for(2, cfg) == 225
    assert experience_for(3, cfg) == math.floor(100 * 1.5**3)


def test_threshold_is_flat_not_level_scaled():
    # raw = 10 * level: levels 1..9 ramp, level 10 reaches exactly 100 and is kept
    cfg = CurveConfig(kind=CurveKind.LINEAR, base=10, factor=1)
    assert experience_for(9, cfg) == 900
    assert experience_for(10, cfg) == 100
    assert experience_for(11, cfg) == 110


@pytest.mark.parametrize("base,factor", [(10, 1.0), (7, 0.3), (33, 2.5), (100, 1.5), (1, 1)])
def test_linear_clamp_rule(base, factor):
    cfg = CurveConfig(kind=CurveKind.LINEAR, base=base, factor=factor)
    for level in range(1, 31):
        raw = math.floor(base * level * factor)
        expected = 100 * level if raw < 100 else raw
        assert experience_for(level, cfg) == expected


def test_negative_inputs_take_floor_ramp():
    cfg = CurveConfig(kind=CurveKind.LINEAR, base=-500, factor=3)
    assert experience_for(4, cfg) == 400
    cfg = CurveConfig(kind=CurveKind.EXPONENTIAL, base=100, factor=-2)
    assert experience_for(3, cfg) == 300


def test_non_finite_inputs_are_absorbed():
    nan_cfg = CurveConfig(kind=CurveKind.QUADRATIC, base=float("nan"), factor=1.5)
    assert experience_for(2, nan_cfg) == 200
    inf_cfg = CurveConfig(kind=CurveKind.LINEAR, base=float("inf"), factor=1)
    assert experience_for(2, inf_cfg) == XP_CEILING
    neg_inf_cfg = CurveConfig(kind=CurveKind.LINEAR, base=float("-inf"), factor=1)
    assert experience_for(3, neg_inf_cfg) == 300
    zero_inf = CurveConfig(kind=CurveKind.LINEAR, base=float("inf"), factor=0)
    assert experience_for(5, zero_inf) == 500


def test_exponential_overflow_saturates():
    cfg = CurveConfig(kind=CurveKind.EXPONENTIAL, base=100.0, factor=10)
    assert experience_for(400, cfg) == XP_CEILING
    cfg = CurveConfig(kind=CurveKind.EXPONENTIAL, base=1, factor=10.0)
    assert experience_for(400, cfg) == XP_CEILING
    # odd power of a negative factor overflows toward -inf -> floor ramp
    cfg = CurveConfig(kind=CurveKind.EXPONENTIAL, base=1, factor=-10.0)
    assert experience_for(401, cfg) == 40100


def test_zero_times_overflow_takes_floor_ramp():
    # 10000.5 ** 78 overflows a float; 0 * anything is still 0
    cfg = CurveConfig(kind=CurveKind.EXPONENTIAL, base=0, factor=10000.5)
    assert experience_for(77, cfg) == 7700
    assert experience_for(78, cfg) == 7800
    cfg = CurveConfig(kind=CurveKind.EXPONENTIAL, base=5, factor=0)
    assert experience_for(3, cfg) == 300
    cfg = CurveConfig(kind=CurveKind.EXPONENTIAL, base=math.nan, factor=10**400)
    assert experience_for(4, cfg) == 400


def test_results_are_ints():
    for kind in CurveKind:
        cfg = CurveConfig(kind=kind, base=123.4, factor=1.7)
        for level in range(1, 25):
            value = experience_for(level, cfg)
            assert isinstance(value, int)
            assert value >= 100


def test_curve_kind_parse_and_labels():
    assert CurveKind.parse("Linear") is CurveKind.LINEAR
    assert CurveKind.parse(" EXPONENTIAL ") is CurveKind.EXPONENTIAL
    assert CurveKind.parse(CurveKind.QUADRATIC) is CurveKind.QUADRATIC
    assert CurveKind.QUADRATIC.label == "Quadratic (Standard RPG)"
    with pytest.raises(ValueError):
        CurveKind.parse("cubic")


def test_curve_config_is_hashable_value():
    a = CurveConfig(kind=CurveKind.LINEAR, base=100, factor=2)
    b = CurveConfig(kind=CurveKind.LINEAR, base=100.0, factor=2.0)
    assert a == b
    assert hash(a) == hash(b)
