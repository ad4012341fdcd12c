"""Registry clients answering version-list and metadata queries."""

from .base import ProjectRelease, RegistryClient
from .pypi import PyPIClient

__all__ = ["ProjectRelease", "PyPIClient", "RegistryClient"]
