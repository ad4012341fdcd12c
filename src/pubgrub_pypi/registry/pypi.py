"""PyPI registry client backed by the JSON API.

Project listing:  GET <index>/<name>/json
Release metadata: GET <index>/<name>/<version>/json
"""
from __future__ import annotations

import logging
import urllib.parse
from typing import Any, List, Optional

from packaging.utils import canonicalize_name

from ..common.http_client import HttpClient
from ..common.logging_utils import extra_context, is_debug_enabled, safe_url
from ..config import ResolverConfig
from ..errors import NetworkError, NotFoundError, SchemaError
from .base import ProjectRelease, RegistryClient

logger = logging.getLogger(__name__)


def _is_yanked(files: Any) -> bool:
    """A release is yanked when it has files and every one of them is yanked."""
    if not isinstance(files, list) or not files:
        return False
    return all(isinstance(f, dict) and bool(f.get("yanked")) for f in files)


class PyPIClient(RegistryClient):
    """RegistryClient for PyPI-compatible JSON APIs."""

    def __init__(self, config: Optional[ResolverConfig] = None, http: Optional[HttpClient] = None):
        """Initialize the client.

        Args:
            config: Resolver configuration; defaults are used when omitted.
            http: Optional HTTP helper; built from ``config`` when omitted.
        """
        self._config = config or ResolverConfig()
        self._base_url = self._config.index_url.rstrip("/") + "/"
        self._http = http or HttpClient(
            timeout=self._config.request_timeout,
            retry_max=self._config.retry_max,
            retry_base_delay=self._config.retry_base_delay,
            user_agent=self._config.user_agent,
        )

    def close(self) -> None:
        self._http.close()

    def _url(self, name: str, version: Optional[str] = None) -> str:
        parts = [urllib.parse.quote(canonicalize_name(name), safe="")]
        if version is not None:
            parts.append(urllib.parse.quote(version, safe=""))
        parts.append("json")
        return self._base_url + "/".join(parts)

    def _fetch(self, url: str, name: str, version: Optional[str] = None) -> Any:
        """GET a JSON document, mapping statuses onto the error taxonomy."""
        status_code, _, data = self._http.get_json(url)
        if status_code == 404:
            logger.warning(
                "HTTP 404 received; %s is not published",
                name if version is None else f"{name} {version}",
                extra=extra_context(
                    event="http_response",
                    component="client",
                    outcome="not_found",
                    status_code=404,
                    target=safe_url(url),
                    package_manager="pypi",
                ),
            )
            raise NotFoundError(name, version)
        if status_code != 200:
            logger.error(
                "Unexpected status code %s",
                status_code,
                extra=extra_context(
                    event="http_response",
                    component="client",
                    outcome="unexpected_status",
                    status_code=status_code,
                    target=safe_url(url),
                    package_manager="pypi",
                ),
            )
            raise NetworkError(safe_url(url), f"unexpected status code {status_code}")
        if not isinstance(data, dict):
            raise SchemaError(safe_url(url), "response body is not a JSON object")
        return data

    def get_project_releases(self, name: str) -> List[ProjectRelease]:
        """Return every release of ``name`` in the order the index lists them."""
        url = self._url(name)
        data = self._fetch(url, name)
        releases = data.get("releases")
        if not isinstance(releases, dict):
            raise SchemaError(safe_url(url), "'releases' is not an object")

        result = [
            ProjectRelease(version=str(version), yanked=_is_yanked(files))
            for version, files in releases.items()
        ]
        if is_debug_enabled(logger):
            logger.debug(
                "Fetched release list",
                extra=extra_context(
                    event="function_exit",
                    component="client",
                    action="get_project_releases",
                    outcome="success",
                    count=len(result),
                    package_manager="pypi",
                ),
            )
        return result

    def get_requires_dist(self, name: str, version: str) -> List[str]:
        """Return ``info.requires_dist`` for one release; None means no requirements."""
        url = self._url(name, version)
        data = self._fetch(url, name, version)
        info = data.get("info")
        if not isinstance(info, dict):
            raise SchemaError(safe_url(url), "'info' is not an object")

        requires = info.get("requires_dist")
        if requires is None:
            return []
        if not isinstance(requires, list) or not all(isinstance(r, str) for r in requires):
            raise SchemaError(safe_url(url), "'info.requires_dist' is not a list of strings")
        return list(requires)
