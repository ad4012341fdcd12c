"""Requirement text parsing: PEP 508 strings to (name, Range) pairs.

``packaging`` handles the PEP 508 grammar (name, extras, specifiers,
markers). Every specifier version is then re-parsed with the local version
model so the resulting ranges order exactly like the versions the provider
compares them against.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Mapping, Optional

from packaging.markers import Marker, UndefinedComparison, UndefinedEnvironmentName
from packaging.requirements import InvalidRequirement
from packaging.requirements import Requirement as _PEP508Requirement
from packaging.specifiers import InvalidSpecifier, Specifier, SpecifierSet
from packaging.utils import canonicalize_name

from ..errors import ParseError
from .ranges import Range
from .version import Version


@dataclass(frozen=True)
class Requirement:
    """A dependency on ``name`` restricted to ``range``."""

    name: str
    range: Range
    extras: FrozenSet[str] = frozenset()
    marker: Optional[Marker] = field(default=None, compare=False)

    def applies_to(self, environment: Optional[Mapping[str, str]] = None) -> bool:
        """Evaluate the environment marker; no extras are ever requested.

        Raises:
            ParseError: when the marker cannot be evaluated in ``environment``.
        """
        if self.marker is None:
            return True
        context: Dict[str, str] = dict(environment or {})
        context["extra"] = ""
        try:
            return self.marker.evaluate(context)
        except (UndefinedComparison, UndefinedEnvironmentName) as exc:
            raise ParseError(str(self.marker), str(exc)) from exc


def _parse_version(text: str, specifier: str) -> Version:
    try:
        return Version.parse(text)
    except ParseError as exc:
        raise ParseError(specifier, exc.reason) from exc


def range_from_specifier(specifier: Specifier) -> Range:
    """Convert one PEP 440 specifier clause to a Range."""
    operator, text = specifier.operator, specifier.version
    clause = str(specifier)

    if operator in ("==", "!=") and text.endswith(".*"):
        prefix = _parse_version(text[:-2], clause).prefix_floor()
        matched = Range.between(prefix, prefix.bump())
        return matched if operator == "==" else matched.complement()

    version = _parse_version(text, clause)
    if operator in ("==", "==="):
        return Range.exact(version)
    if operator == "!=":
        return Range.exact(version).complement()
    if operator == ">=":
        return Range.higher_than(version)
    if operator == ">":
        return Range.strictly_higher_than(version)
    if operator == "<=":
        return Range.lower_than(version)
    if operator == "<":
        return Range.strictly_lower_than(version)
    if operator == "~=":
        if len(version.release) < 2:
            raise ParseError(clause, "compatible release needs at least two release numbers")
        prefix = Version(epoch=version.epoch, release=version.release[:-1]).prefix_floor()
        return Range.higher_than(version).intersection(Range.strictly_lower_than(prefix.bump()))
    raise ParseError(clause, f"unsupported operator {operator!r}")


def range_from_specifiers(specifiers: SpecifierSet) -> Range:
    """Intersect every clause of a specifier set; empty sets allow anything."""
    allowed = Range.any()
    for specifier in specifiers:
        allowed = allowed.intersection(range_from_specifier(specifier))
    return allowed


def parse_specifiers(text: str) -> Range:
    """Parse specifier text such as ``">=1.0,<2"`` into a Range."""
    try:
        specifiers = SpecifierSet(text or "")
    except InvalidSpecifier as exc:
        raise ParseError(text, str(exc)) from exc
    return range_from_specifiers(specifiers)


def parse_requirement(text: str) -> Requirement:
    """Parse a ``requires_dist`` entry.

    Raises:
        ParseError: for invalid PEP 508 text, versions outside the local
            version model, or direct URL references (which no index can
            satisfy).
    """
    try:
        parsed = _PEP508Requirement(text)
    except InvalidRequirement as exc:
        raise ParseError(text, str(exc)) from exc
    if parsed.url:
        raise ParseError(text, "direct URL references are not supported")
    try:
        allowed = range_from_specifiers(parsed.specifier)
    except ParseError as exc:
        raise ParseError(text, exc.reason) from exc
    return Requirement(
        name=canonicalize_name(parsed.name),
        range=allowed,
        extras=frozenset(canonicalize_name(e) for e in parsed.extras),
        marker=parsed.marker,
    )
