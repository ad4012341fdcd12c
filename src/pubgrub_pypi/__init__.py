"""PubGrub-style dependency provider backed by the PyPI JSON API."""

from .errors import (
    NetworkError,
    NotFoundError,
    ParseError,
    ResolutionError,
    SchemaError,
    UnresolvableError,
)
from .versioning.ranges import Range
from .versioning.version import Version, lowest, parse
from .resolver.provider import Dependencies, DependencyProvider, PyPIDependencyProvider
from .resolver.run import Solver, resolve, root_candidates

__all__ = [
    "Dependencies",
    "DependencyProvider",
    "NetworkError",
    "NotFoundError",
    "ParseError",
    "PyPIDependencyProvider",
    "Range",
    "ResolutionError",
    "SchemaError",
    "Solver",
    "UnresolvableError",
    "Version",
    "lowest",
    "parse",
    "resolve",
    "root_candidates",
]

__version__ = "0.1.0"
