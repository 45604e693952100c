# tests/unit/core/test_interval.py

"""
Interval construction, arithmetic and structural equality.

Scope:
- strict ordering enforced at construction
- add / reflect bounds
- equality and hashing depend on bound values only
"""

from fractions import Fraction

import pytest
from hypothesis import given, strategies as st

from floatens.core.errors import EnsembleError, InvalidIntervalError
from floatens.core.interval import Interval, add, reflect
from tests._factories import exact_values, intervals


def test_make_accepts_ordered_bounds_and_stores_exact_values():
    i = Interval.make(0.9, 1.1)
    assert i.lower == Fraction(9, 10)
    assert i.upper == Fraction(11, 10)
    assert i.width == Fraction(1, 5)
    assert i.midpoint == 1
    assert i.radius == Fraction(1, 10)


@pytest.mark.parametrize("lo, hi", [(1.0, 1.0), (2.0, 1.0), (0, -1e-9)])
def test_make_rejects_unordered_bounds(lo, hi):
    with pytest.raises(InvalidIntervalError):
        Interval.make(lo, hi)


def test_invalid_interval_error_is_an_ensemble_error():
    with pytest.raises(EnsembleError):
        Interval(3, 3)


@given(lo=exact_values, hi=exact_values)
def test_make_fails_iff_lower_not_below_upper(lo, hi):
    if lo < hi:
        assert Interval(lo, hi).lower == lo
    else:
        with pytest.raises(InvalidIntervalError):
            Interval(lo, hi)


@given(a=intervals(), b=intervals())
def test_add_sums_bounds_pairwise(a, b):
    s = add(a, b)
    assert s.lower == a.lower + b.lower
    assert s.upper == a.upper + b.upper
    assert s == a + b
    assert s.width == a.width + b.width


@given(a=intervals())
def test_reflect_mirrors_bounds(a):
    r = reflect(a)
    assert r.lower == -a.upper and r.upper == -a.lower
    assert -r == a


def test_equality_ignores_construction_path():
    direct = Interval(Fraction(27, 10), Fraction(33, 10))
    from_floats = Interval.make(2.7, 3.3)
    from_center = Interval.from_center(3.0, 0.3)
    from_sum = add(Interval.make(0.9, 1.1), Interval.make(1.8, 2.2))

    assert direct == from_floats == from_center == from_sum
    assert len({direct, from_floats, from_center, from_sum}) == 1


@given(lo=exact_values, width=st.integers(min_value=1, max_value=10_000))
def test_hash_matches_for_equal_bounds(lo, width):
    hi = lo + Fraction(width, 1000)
    a = Interval(lo, hi)
    b = Interval.from_center((lo + hi) / 2, (hi - lo) / 2)
    assert a == b
    assert hash(a) == hash(b)


def test_interval_is_immutable():
    i = Interval(0, 1)
    with pytest.raises(AttributeError):
        i.lower = Fraction(-1)  # type: ignore[misc]


def test_contains_and_as_floats():
    i = Interval.make(-1, 1)
    assert i.contains(0)
    assert i.contains(1)
    assert not i.contains(1, strict=True)
    assert not i.contains("1.5")
    assert i.as_floats() == (-1.0, 1.0)
    assert str(i) == "[-1, 1]"


def test_add_with_non_interval_is_not_supported():
    with pytest.raises(TypeError):
        Interval(0, 1) + 1  # type: ignore[operator]
