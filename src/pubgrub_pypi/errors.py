"""Error taxonomy shared by the version model, registry client and provider.

Only ``NotFoundError`` is absorbed by the provider (as "no candidate" or an
unavailable version). Every other error propagates to the caller and aborts
the current call or resolution run.
"""
from __future__ import annotations

from typing import Optional


class ResolutionError(Exception):
    """Base class for every error raised by this package."""


class ParseError(ResolutionError, ValueError):
    """Malformed version, specifier or requirement text."""

    def __init__(self, text: str, reason: Optional[str] = None):
        self.text = text
        self.reason = reason
        message = f"Invalid text {text!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NetworkError(ResolutionError):
    """Transport failure, timeout or unexpected HTTP status."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Request to {url} failed: {reason}")


class NotFoundError(ResolutionError):
    """The registry has no such project, or no such version of it."""

    def __init__(self, name: str, version: Optional[str] = None):
        self.name = name
        self.version = version
        target = name if version is None else f"{name} {version}"
        super().__init__(f"{target} not found in registry")


class SchemaError(ResolutionError):
    """Registry data does not have the expected shape or content."""

    def __init__(self, context: str, reason: str):
        self.context = context
        self.reason = reason
        super().__init__(f"Unexpected registry data for {context}: {reason}")


class UnresolvableError(ResolutionError):
    """Raised by solvers when no assignment satisfies every requirement."""
