"""Per-run cache for registry answers.

Entries never expire: a resolution run must see one consistent view of the
registry, so a (package, version) pair always yields the outcome it yielded
the first time. The cache is discarded with its provider.
"""
from __future__ import annotations

import threading
from typing import Any, Dict, Generic, List, Optional, Set, Tuple, TypeVar

from ..versioning.version import Version

T = TypeVar("T")

# Published versions of one project: (parsed version, registry spelling, yanked)
VersionEntry = Tuple[Version, str, bool]


class ResolutionCache(Generic[T]):
    """Lock-guarded store for version lists and dependency outcomes.

    Writers are serialized by a single lock; values are stored fully built,
    so readers never observe a partially populated entry.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._versions: Dict[str, List[VersionEntry]] = {}
        self._dependencies: Dict[Tuple[str, Version], T] = {}
        self._unavailable: Set[Tuple[str, Version]] = set()
        self._hits = 0
        self._misses = 0

    def get_versions(self, package: str) -> Optional[List[VersionEntry]]:
        """Get the cached version list for a canonical package name."""
        with self._lock:
            entry = self._versions.get(package)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry

    def set_versions(self, package: str, versions: List[VersionEntry]) -> List[VersionEntry]:
        """Cache a version list unless one is already present; return the stored list."""
        with self._lock:
            return self._versions.setdefault(package, list(versions))

    def peek_versions(self, package: str) -> Optional[List[VersionEntry]]:
        """Like ``get_versions`` but without touching hit/miss statistics."""
        with self._lock:
            return self._versions.get(package)

    def get_dependencies(self, package: str, version: Version) -> Optional[T]:
        """Get a cached dependency outcome."""
        with self._lock:
            entry = self._dependencies.get((package, version))
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry

    def set_dependencies(self, package: str, version: Version, outcome: T) -> T:
        """Cache an outcome unless one is already present; return the stored outcome."""
        with self._lock:
            return self._dependencies.setdefault((package, version), outcome)

    def mark_unavailable(self, package: str, version: Version) -> None:
        """Record that the registry does not have this version."""
        with self._lock:
            self._unavailable.add((package, version))

    def is_unavailable(self, package: str, version: Version) -> bool:
        with self._lock:
            return (package, version) in self._unavailable

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._versions.clear()
            self._dependencies.clear()
            self._unavailable.clear()

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                "hits": self._hits,
                "misses": self._misses,
                "version_lists": len(self._versions),
                "dependency_entries": len(self._dependencies),
                "unavailable": len(self._unavailable),
            }
