"""Solver-facing dependency provider and resolution runs."""

from .cache import ResolutionCache
from .provider import Dependencies, DependencyProvider, PyPIDependencyProvider
from .run import Solver, resolve, root_candidates

__all__ = [
    "Dependencies",
    "DependencyProvider",
    "PyPIDependencyProvider",
    "ResolutionCache",
    "Solver",
    "resolve",
    "root_candidates",
]
