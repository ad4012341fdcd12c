"""Dependency provider: the adapter between a PubGrub-style solver and PyPI.

The solver asks two questions, both answered synchronously:

* ``choose_package_version``: which of the undecided packages to decide
  next, and which version to try for it.
* ``get_dependencies``: what a concrete (package, version) requires.

Answers are cached for the lifetime of the provider so that a solver that
backtracks and asks again receives the identical outcome.
"""
from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, TypeVar

from packaging.utils import canonicalize_name

from ..common.logging_utils import extra_context, is_debug_enabled
from ..config import ResolverConfig
from ..errors import NotFoundError, ParseError, SchemaError
from ..registry.base import RegistryClient
from ..versioning.ranges import Range
from ..versioning.requirements import parse_requirement
from ..versioning.version import Version
from .cache import ResolutionCache, VersionEntry

logger = logging.getLogger(__name__)

P = TypeVar("P")


@dataclass(frozen=True)
class Dependencies:
    """Outcome of ``get_dependencies``.

    ``requirements`` is None when the version is unavailable; an empty
    mapping means the version exists and has no dependencies.
    """

    requirements: Optional[Mapping[str, Range]]

    @classmethod
    def available(cls, requirements: Mapping[str, Range]) -> "Dependencies":
        return cls(MappingProxyType(dict(requirements)))

    @classmethod
    def unavailable(cls) -> "Dependencies":
        return cls(None)

    @property
    def is_available(self) -> bool:
        return self.requirements is not None


class DependencyProvider(ABC):
    """The two operations a PubGrub-style solver needs from its environment."""

    @abstractmethod
    def choose_package_version(
        self, candidates: Iterable[Tuple[P, Range]]
    ) -> Tuple[P, Optional[Version]]:
        """Pick one undecided package and, if any fits, a version for it."""

    @abstractmethod
    def get_dependencies(self, package: str, version: Version) -> Dependencies:
        """Return the requirements of an exact package version."""


class PyPIDependencyProvider(DependencyProvider):
    """DependencyProvider answering from a RegistryClient.

    Version lists for every candidate of a ``choose_package_version`` call
    are fetched in parallel on a small thread pool. Every fetch is started
    at most once per package; callers needing an in-flight result wait for
    it. ``close`` cancels pending fetches and discards late results.
    """

    def __init__(
        self,
        client: RegistryClient,
        config: Optional[ResolverConfig] = None,
        environment: Optional[Mapping[str, str]] = None,
    ):
        """Initialize the provider.

        Args:
            client: Registry collaborator; owned (and closed) by the provider.
            config: Resolver configuration; defaults are used when omitted.
            environment: Marker variables overriding the running interpreter's.
        """
        self._client = client
        self._config = config or ResolverConfig()
        self._environment = dict(environment or {})
        self._cache: ResolutionCache[Dependencies] = ResolutionCache()
        self._lock = threading.Lock()
        self._inflight: Dict[str, Future] = {}
        self._closed = False
        self._executor: Optional[ThreadPoolExecutor] = None
        if self._config.prefetch_workers > 0:
            self._executor = ThreadPoolExecutor(
                max_workers=self._config.prefetch_workers,
                thread_name_prefix="pubgrub-pypi-prefetch",
            )

    def __enter__(self) -> "PyPIDependencyProvider":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def cache(self) -> ResolutionCache[Dependencies]:
        return self._cache

    def close(self) -> None:
        """Cancel pending fetches, stop the worker pool and close the client."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            pending = list(self._inflight.values())
            self._inflight.clear()
        for future in pending:
            future.cancel()
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
        self._client.close()
        self._cache.clear()

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("dependency provider is closed")

    # Version lists

    def _fetch_versions(self, package: str) -> List[VersionEntry]:
        """Query the registry for every parseable release of ``package``."""
        try:
            releases = self._client.get_project_releases(package)
        except NotFoundError:
            return []

        entries: List[VersionEntry] = []
        seen = set()
        for release in releases:
            try:
                version = Version.parse(release.version)
            except ParseError:
                if is_debug_enabled(logger):
                    logger.debug(
                        "Skipping unparseable release %s %s",
                        package,
                        release.version,
                        extra=extra_context(
                            event="parse",
                            component="provider",
                            action="fetch_versions",
                            outcome="skipped",
                        ),
                    )
                continue
            if version in seen:
                continue
            seen.add(version)
            entries.append((version, release.version, release.yanked))
        entries.sort(key=lambda entry: entry[0])
        return entries

    def _load_versions(self, package: str) -> List[VersionEntry]:
        try:
            entries = self._fetch_versions(package)
        except Exception:
            with self._lock:
                self._inflight.pop(package, None)
            raise
        with self._lock:
            self._inflight.pop(package, None)
            if self._closed:
                return entries
            return self._cache.set_versions(package, entries)

    def _start_fetch(self, package: str) -> Optional[Future]:
        """Return the in-flight fetch for ``package``, starting one if needed.

        Returns None when the list is already cached or prefetching is off.
        """
        if self._executor is None:
            return None
        with self._lock:
            self._ensure_open()
            if self._cache.peek_versions(package) is not None:
                return None
            future = self._inflight.get(package)
            if future is None:
                future = self._executor.submit(self._load_versions, package)
                self._inflight[package] = future
            return future

    def _versions(self, package: str) -> List[VersionEntry]:
        cached = self._cache.get_versions(package)
        if cached is not None:
            return cached
        future = self._start_fetch(package)
        if future is not None:
            return future.result()
        cached = self._cache.peek_versions(package)
        if cached is not None:
            return cached
        return self._load_versions(package)

    def _matching_versions(self, package: str, allowed: Range) -> List[Version]:
        """Versions of ``package`` the solver may try, ascending."""
        matching = [
            (version, yanked)
            for version, _, yanked in self._versions(package)
            if allowed.contains(version) and not self._cache.is_unavailable(package, version)
        ]
        if not self._config.allow_yanked:
            matching = [entry for entry in matching if not entry[1]]
        versions = [version for version, _ in matching]
        if not self._config.allow_prereleases:
            finals = [v for v in versions if not v.is_prerelease]
            if finals:
                versions = finals
        return versions

    def choose_package_version(
        self, candidates: Iterable[Tuple[P, Range]]
    ) -> Tuple[P, Optional[Version]]:
        """Pick the candidate with the fewest usable versions.

        Ties are broken by canonical name, then by input position. The
        chosen version is the highest usable one; None when none fits.
        """
        self._ensure_open()
        pending = list(candidates)
        if not pending:
            raise ValueError("choose_package_version needs at least one candidate")

        names = [canonicalize_name(str(package)) for package, _ in pending]
        for name in names:
            self._start_fetch(name)

        best = None
        for index, ((package, allowed), name) in enumerate(zip(pending, names)):
            versions = self._matching_versions(name, allowed)
            rank = (len(versions), name, index)
            if best is None or rank < best[0]:
                best = (rank, package, versions)

        _, package, versions = best
        chosen = versions[-1] if versions else None
        if is_debug_enabled(logger):
            logger.debug(
                "Chose %s %s",
                package,
                chosen,
                extra=extra_context(
                    event="decision",
                    component="provider",
                    action="choose_package_version",
                    outcome="version" if chosen is not None else "no_version",
                    candidate_count=len(pending),
                    matching=len(versions),
                ),
            )
        return package, chosen

    # Dependencies

    def _registry_spelling(self, package: str, version: Version) -> str:
        for known, raw, _ in self._cache.peek_versions(package) or ():
            if known == version:
                return raw
        return str(version)

    def _build_requirements(self, package: str, raw_version: str, requires: List[str]) -> Dict[str, Range]:
        result: Dict[str, Range] = {}
        for text in requires:
            try:
                requirement = parse_requirement(text)
                applies = requirement.applies_to(self._environment)
            except ParseError as exc:
                logger.error(
                    "Invalid requirement %r declared by %s %s",
                    text,
                    package,
                    raw_version,
                    extra=extra_context(
                        event="parse",
                        component="provider",
                        action="get_dependencies",
                        outcome="invalid_requirement",
                    ),
                )
                raise SchemaError(
                    f"{package} {raw_version}", f"invalid requirement {text!r}: {exc.reason}"
                ) from exc
            if not applies:
                continue
            existing = result.get(requirement.name)
            result[requirement.name] = (
                requirement.range if existing is None else existing.intersection(requirement.range)
            )
        return result

    def get_dependencies(self, package: str, version: Version) -> Dependencies:
        """Return the requirements of ``package`` at ``version``.

        Raises:
            NetworkError: the registry could not be reached.
            SchemaError: the metadata is malformed or declares an invalid
                requirement; nothing is cached in that case.
        """
        self._ensure_open()
        name = canonicalize_name(package)
        cached = self._cache.get_dependencies(name, version)
        if cached is not None:
            return cached

        raw_version = self._registry_spelling(name, version)
        try:
            requires = self._client.get_requires_dist(name, raw_version)
        except NotFoundError:
            logger.warning(
                "%s %s is not available; pruning it from the search",
                name,
                raw_version,
                extra=extra_context(
                    event="decision",
                    component="provider",
                    action="get_dependencies",
                    outcome="unavailable",
                ),
            )
            self._cache.mark_unavailable(name, version)
            outcome = Dependencies.unavailable()
        else:
            outcome = Dependencies.available(self._build_requirements(name, raw_version, requires))
        return self._cache.set_dependencies(name, version, outcome)
