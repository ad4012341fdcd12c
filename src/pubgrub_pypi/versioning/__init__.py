"""PEP 440 version model, version ranges and requirement parsing."""

from .ranges import Bound, Range
from .requirements import Requirement, parse_requirement, parse_specifiers
from .version import Version, lowest, parse

__all__ = [
    "Bound",
    "Range",
    "Requirement",
    "Version",
    "lowest",
    "parse",
    "parse_requirement",
    "parse_specifiers",
]
