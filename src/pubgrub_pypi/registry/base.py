"""Registry client contract consumed by the dependency provider."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class ProjectRelease:
    """One published release of a project, as the registry spells it."""

    version: str
    yanked: bool = False


class RegistryClient(ABC):
    """Answers the two questions the provider asks a package index.

    Implementations raise ``NotFoundError`` when the registry does not know
    the project or version, ``NetworkError`` for transport failures and
    ``SchemaError`` for responses of an unexpected shape.
    """

    @abstractmethod
    def get_project_releases(self, name: str) -> List[ProjectRelease]:
        """Return every published release of ``name`` in registry order."""

    @abstractmethod
    def get_requires_dist(self, name: str, version: str) -> List[str]:
        """Return the raw requirement strings declared by ``name`` at ``version``."""

    def close(self) -> None:
        """Release any held resources."""
