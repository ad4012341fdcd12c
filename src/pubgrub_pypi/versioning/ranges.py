"""Version ranges: finite unions of disjoint intervals over ``Version``."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .version import Version


@dataclass(frozen=True)
class Bound:
    """One end of an interval."""

    version: Version
    inclusive: bool


# (lower, upper); None means unbounded on that side.
Interval = Tuple[Optional[Bound], Optional[Bound]]


def _lower_before(a: Optional[Bound], b: Optional[Bound]) -> bool:
    """True when lower bound ``a`` starts strictly before lower bound ``b``."""
    if a is None:
        return b is not None
    if b is None:
        return False
    if a.version != b.version:
        return a.version < b.version
    return a.inclusive and not b.inclusive


def _upper_before(a: Optional[Bound], b: Optional[Bound]) -> bool:
    """True when upper bound ``a`` ends strictly before upper bound ``b``."""
    if a is None:
        return False
    if b is None:
        return True
    if a.version != b.version:
        return a.version < b.version
    return b.inclusive and not a.inclusive


def _is_empty(interval: Interval) -> bool:
    lower, upper = interval
    if lower is None or upper is None:
        return False
    if lower.version != upper.version:
        return lower.version > upper.version
    return not (lower.inclusive and upper.inclusive)


def _touches(upper: Optional[Bound], lower: Optional[Bound]) -> bool:
    """True when an interval ending at ``upper`` overlaps or abuts one starting at ``lower``."""
    if upper is None or lower is None:
        return True
    if upper.version != lower.version:
        return lower.version < upper.version
    return upper.inclusive or lower.inclusive


def _sort_key(interval: Interval):
    lower = interval[0]
    if lower is None:
        return (0,)
    return (1, lower.version.compare_key(), 0 if lower.inclusive else 1)


def _normalize(intervals: Iterable[Interval]) -> Tuple[Interval, ...]:
    pending = sorted((i for i in intervals if not _is_empty(i)), key=_sort_key)
    merged: List[Interval] = []
    for lower, upper in pending:
        if merged and _touches(merged[-1][1], lower):
            prev_lower, prev_upper = merged[-1]
            merged[-1] = (prev_lower, prev_upper if _upper_before(upper, prev_upper) else upper)
        else:
            merged.append((lower, upper))
    return tuple(merged)


def _contains(interval: Interval, version: Version) -> bool:
    lower, upper = interval
    if lower is not None:
        if version < lower.version or (version == lower.version and not lower.inclusive):
            return False
    if upper is not None:
        if version > upper.version or (version == upper.version and not upper.inclusive):
            return False
    return True


class Range:
    """Immutable set of versions expressed as sorted, disjoint intervals."""

    __slots__ = ("_intervals",)

    def __init__(self, intervals: Iterable[Interval] = ()):
        self._intervals = _normalize(intervals)

    @classmethod
    def any(cls) -> "Range":
        return cls([(None, None)])

    @classmethod
    def empty(cls) -> "Range":
        return cls()

    @classmethod
    def exact(cls, version: Version) -> "Range":
        return cls([(Bound(version, True), Bound(version, True))])

    @classmethod
    def higher_than(cls, version: Version) -> "Range":
        """Versions ``>= version``."""
        return cls([(Bound(version, True), None)])

    @classmethod
    def strictly_higher_than(cls, version: Version) -> "Range":
        return cls([(Bound(version, False), None)])

    @classmethod
    def lower_than(cls, version: Version) -> "Range":
        """Versions ``<= version``."""
        return cls([(None, Bound(version, True))])

    @classmethod
    def strictly_lower_than(cls, version: Version) -> "Range":
        return cls([(None, Bound(version, False))])

    @classmethod
    def between(cls, lower: Version, upper: Version) -> "Range":
        """Half-open ``[lower, upper)``."""
        return cls([(Bound(lower, True), Bound(upper, False))])

    @property
    def intervals(self) -> Tuple[Interval, ...]:
        return self._intervals

    def is_empty(self) -> bool:
        return not self._intervals

    def is_any(self) -> bool:
        return self._intervals == ((None, None),)

    def contains(self, version: Version) -> bool:
        return any(_contains(interval, version) for interval in self._intervals)

    def __contains__(self, version: object) -> bool:
        return isinstance(version, Version) and self.contains(version)

    def union(self, other: "Range") -> "Range":
        return Range(self._intervals + other._intervals)

    def intersection(self, other: "Range") -> "Range":
        result: List[Interval] = []
        for a_lower, a_upper in self._intervals:
            for b_lower, b_upper in other._intervals:
                lower = b_lower if _lower_before(a_lower, b_lower) else a_lower
                upper = a_upper if _upper_before(a_upper, b_upper) else b_upper
                result.append((lower, upper))
        return Range(result)

    def complement(self) -> "Range":
        gaps: List[Interval] = []
        start: Optional[Bound] = None
        open_start = True
        for lower, upper in self._intervals:
            if lower is not None:
                gaps.append((start, Bound(lower.version, not lower.inclusive)))
            if upper is None:
                open_start = False
                break
            start = Bound(upper.version, not upper.inclusive)
        if open_start:
            gaps.append((start, None))
        return Range(gaps)

    def __and__(self, other: "Range") -> "Range":
        return self.intersection(other)

    def __or__(self, other: "Range") -> "Range":
        return self.union(other)

    def __invert__(self) -> "Range":
        return self.complement()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return self._intervals == other._intervals

    def __hash__(self) -> int:
        return hash(self._intervals)

    def __str__(self) -> str:
        if self.is_empty():
            return "empty"
        if self.is_any():
            return "*"
        parts = []
        for lower, upper in self._intervals:
            if lower is not None and upper is not None and lower == upper:
                parts.append(f"=={lower.version}")
                continue
            left = "(-inf" if lower is None else ("[" if lower.inclusive else "(") + str(lower.version)
            right = "inf)" if upper is None else str(upper.version) + ("]" if upper.inclusive else ")")
            parts.append(f"{left}, {right}")
        return " | ".join(parts)

    def __repr__(self) -> str:
        return f"<Range {self}>"
