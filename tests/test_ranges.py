"""Tests for version ranges."""
import pytest

from pubgrub_pypi.versioning.ranges import Bound, Range
from pubgrub_pypi.versioning.version import parse


def v(text):
    return parse(text)


class TestConstructors:
    """Range factory methods."""

    def test_any_and_empty(self):
        assert Range.any().is_any()
        assert Range.empty().is_empty()
        assert v("0") in Range.any()
        assert v("0") not in Range.empty()

    def test_exact(self):
        r = Range.exact(v("1.0"))
        assert v("1.0.0") in r
        assert v("1.0.post1") not in r
        assert v("1.0.dev1") not in r

    def test_between_is_half_open(self):
        r = Range.between(v("1.0"), v("2.0"))
        assert v("1.0") in r
        assert v("1.9.9") in r
        assert v("2.0") not in r
        assert v("0.9") not in r

    def test_strict_and_inclusive_bounds(self):
        assert v("1.0") in Range.higher_than(v("1.0"))
        assert v("1.0") not in Range.strictly_higher_than(v("1.0"))
        assert v("1.0") in Range.lower_than(v("1.0"))
        assert v("1.0") not in Range.strictly_lower_than(v("1.0"))

    def test_inverted_interval_is_empty(self):
        assert Range.between(v("2.0"), v("1.0")).is_empty()
        assert Range.between(v("1.0"), v("1.0")).is_empty()

    def test_contains_rejects_non_versions(self):
        assert "1.0" not in Range.any()


class TestSetOperations:
    """Intersection, union and complement."""

    def test_intersection(self):
        r = Range.higher_than(v("1.0")).intersection(Range.strictly_lower_than(v("2.0")))
        assert r == Range.between(v("1.0"), v("2.0"))
        assert (Range.exact(v("1")) & Range.exact(v("2"))).is_empty()

    def test_intersection_with_any_is_identity(self):
        r = Range.between(v("1.0"), v("2.0"))
        assert r & Range.any() == r
        assert Range.any() & r == r

    def test_union_merges_overlapping_and_adjacent(self):
        a = Range.between(v("1.0"), v("2.0"))
        b = Range.between(v("2.0"), v("3.0"))
        assert a | b == Range.between(v("1.0"), v("3.0"))
        assert len((a | Range.between(v("4"), v("5"))).intervals) == 2

    def test_union_keeps_strict_gap(self):
        left = Range.strictly_lower_than(v("1.0"))
        right = Range.strictly_higher_than(v("1.0"))
        both = left | right
        assert len(both.intervals) == 2
        assert v("1.0") not in both

    def test_complement_of_exact(self):
        r = Range.exact(v("1.5")).complement()
        assert v("1.5") not in r
        assert v("1.4") in r
        assert v("1.6") in r
        assert r.complement() == Range.exact(v("1.5"))

    def test_complement_of_any_and_empty(self):
        assert Range.any().complement().is_empty()
        assert (~Range.empty()).is_any()

    def test_complement_of_unbounded_halves(self):
        assert ~Range.higher_than(v("2")) == Range.strictly_lower_than(v("2"))
        assert ~Range.strictly_lower_than(v("2")) == Range.higher_than(v("2"))

    @pytest.mark.parametrize("probe", ["0.5", "1.0", "1.5", "2.0", "2.5", "3.0", "3.5"])
    def test_complement_membership_is_inverse(self, probe):
        r = Range.between(v("1.0"), v("2.0")) | Range.exact(v("3.0"))
        assert (v(probe) in r) != (v(probe) in r.complement())


class TestEqualityAndRendering:
    """Equality uses normalized versions; str() is readable."""

    def test_equality_uses_normalized_versions(self):
        assert Range.between(v("1.0.0"), v("2.0.0")) == Range.between(v("1"), v("2"))
        assert hash(Range.exact(v("1.0"))) == hash(Range.exact(v("1")))

    def test_bound_equality(self):
        assert Bound(v("1.0"), True) == Bound(v("1"), True)
        assert Bound(v("1.0"), True) != Bound(v("1.0"), False)

    def test_str(self):
        assert str(Range.any()) == "*"
        assert str(Range.empty()) == "empty"
        assert str(Range.exact(v("1.0"))) == "==1.0"
        assert str(Range.between(v("1.0"), v("2.0"))) == "[1.0, 2.0)"
        assert str(Range.strictly_lower_than(v("2"))) == "(-inf, 2)"
        assert str(Range.strictly_higher_than(v("2")) | Range.exact(v("1"))) == "==1 | (2, inf)"
