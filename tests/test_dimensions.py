import math
import pytest

from resizer.config import MAX_DIMENSION, MIN_DIMENSION
from resizer.models.spec import InvalidDimension, TargetSpec, clamp_dimension

def test_clamp_in_range_rounds():
    assert clamp_dimension(400) == 400
    assert clamp_dimension(399.6) == 400
    assert clamp_dimension(300.2) == 300
    assert clamp_dimension("640") == 640

def test_clamp_bounds():
    assert clamp_dimension(0) == MIN_DIMENSION
    assert clamp_dimension(-25) == MIN_DIMENSION
    assert clamp_dimension(12000) == MAX_DIMENSION
    assert clamp_dimension(8000.4) == 8000

@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, None, "abc"])
def test_clamp_non_finite_maps_to_one(value):
    assert clamp_dimension(value) == 1

@pytest.mark.parametrize("value", [math.nan, math.inf, 0, -3, None])
def test_strict_clamp_rejects(value):
    with pytest.raises(InvalidDimension):
        clamp_dimension(value, strict=True)

def test_strict_clamp_still_clamps_large_values():
    assert clamp_dimension(9000, strict=True) == MAX_DIMENSION

def test_resolved_uses_fallback_for_unset_sides():
    spec = TargetSpec(width=None, height=0).resolved(640, 480)
    assert (spec.width, spec.height) == (640, 480)

    spec = TargetSpec(width=99999, height=12.7).resolved(640, 480)
    assert (spec.width, spec.height) == (8000, 13)
