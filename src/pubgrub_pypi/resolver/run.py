"""One resolution run: seed the solver, own the provider, tear it down."""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Protocol, Tuple

from packaging.utils import canonicalize_name

from ..common.logging_utils import Timer, extra_context
from ..config import ResolverConfig, load_config
from ..errors import ResolutionError, UnresolvableError
from ..registry.base import RegistryClient
from ..registry.pypi import PyPIClient
from ..versioning.ranges import Range
from ..versioning.requirements import parse_specifiers
from ..versioning.version import Version
from .provider import DependencyProvider, PyPIDependencyProvider

logger = logging.getLogger(__name__)


class Solver(Protocol):
    """An incompatibility solver driving a DependencyProvider.

    Returns a package -> version assignment, or raises UnresolvableError.
    """

    def __call__(
        self, provider: DependencyProvider, package: str, allowed: Range
    ) -> Mapping[str, Version]:
        ...


def root_candidates(name: str, constraint: Optional[str] = None) -> List[Tuple[str, Range]]:
    """Seed candidate list for the first ``choose_package_version`` call.

    Raises:
        ParseError: when ``constraint`` is not valid specifier text.
    """
    allowed = parse_specifiers(constraint) if constraint else Range.any()
    return [(canonicalize_name(name), allowed)]


def resolve(
    name: str,
    constraint: Optional[str],
    solver: Solver,
    *,
    config: Optional[ResolverConfig] = None,
    client: Optional[RegistryClient] = None,
    environment: Optional[Mapping[str, str]] = None,
) -> Dict[str, Version]:
    """Resolve ``name`` (optionally constrained) with ``solver``.

    The provider, its cache and the registry client live only for this
    call and are torn down whether the solver succeeds or fails.
    """
    config = config if config is not None else load_config()
    [(package, allowed)] = root_candidates(name, constraint)
    client = client if client is not None else PyPIClient(config)

    logger.info("Resolving %s %s", package, allowed)
    with Timer() as timer, PyPIDependencyProvider(client, config, environment) as provider:
        try:
            solution = solver(provider, package, allowed)
        except UnresolvableError:
            logger.warning(
                "No assignment satisfies %s %s",
                package,
                allowed,
                extra=extra_context(event="resolution", component="run", outcome="unresolvable"),
            )
            raise
        except ResolutionError as exc:
            logger.error(
                "Resolution of %s aborted: %s",
                package,
                exc,
                extra=extra_context(event="resolution", component="run", outcome="aborted"),
            )
            raise
        stats = provider.cache.stats()

    logger.info(
        "Resolved %s packages for %s",
        len(solution),
        package,
        extra=extra_context(
            event="resolution",
            component="run",
            outcome="success",
            duration_ms=timer.duration_ms(),
            cache_hits=stats["hits"],
            cache_misses=stats["misses"],
        ),
    )
    return dict(solution)
