"""Shared HTTP helpers used by registry clients.

Encapsulates timeout, retry and JSON decoding so registry modules avoid
duplicating try/except blocks. Transport failures surface as
``NetworkError``; interpreting status codes is left to the caller.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional, Tuple

import requests

from ..constants import Constants
from ..errors import NetworkError
from .logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


class HttpClient:
    """Thin wrapper over a ``requests.Session`` with timeouts and retries.

    Timeouts, connection errors and 5xx responses are retried up to
    ``retry_max`` attempts with exponential backoff. Other responses are
    returned as-is.
    """

    def __init__(
        self,
        *,
        timeout: float = Constants.REQUEST_TIMEOUT,
        retry_max: int = Constants.HTTP_RETRY_MAX,
        retry_base_delay: float = Constants.HTTP_RETRY_BASE_DELAY_SEC,
        user_agent: str = Constants.USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            timeout: Per-request timeout in seconds.
            retry_max: Total attempts per request (at least 1).
            retry_base_delay: Base delay for exponential backoff in seconds.
            user_agent: User-Agent header sent with every request.
            session: Optional pre-built session (mainly for tests).
        """
        self._timeout = timeout
        self._retry_max = max(1, retry_max)
        self._retry_base_delay = retry_base_delay
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = user_agent

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()

    def robust_get(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
    ) -> Tuple[int, Dict[str, str], str]:
        """Perform a GET request with timeout and retries.

        Returns:
            Tuple of (status_code, headers_dict, text).

        Raises:
            NetworkError: when every attempt timed out, failed to connect
                or returned a server error.
        """
        safe_target = safe_url(url)
        last_failure = "no attempt made"

        for attempt in range(self._retry_max):
            if attempt:
                time.sleep(self._retry_base_delay * (2 ** (attempt - 1)))
            with Timer() as t:
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request",
                        extra=extra_context(
                            event="http_request",
                            component="http_client",
                            action="GET",
                            target=safe_target,
                            attempt=attempt + 1,
                        ),
                    )
                try:
                    response = self._session.get(url, timeout=self._timeout, headers=headers)
                except requests.Timeout:
                    last_failure = f"timed out after {self._timeout} seconds"
                    logger.debug(
                        "HTTP timeout",
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            action="GET",
                            outcome="timeout",
                            attempt=attempt + 1,
                            target=safe_target,
                        ),
                    )
                    continue
                except requests.RequestException as exc:  # includes ConnectionError
                    last_failure = str(exc) or exc.__class__.__name__
                    logger.debug(
                        "HTTP request exception",
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            action="GET",
                            outcome="request_exception",
                            attempt=attempt + 1,
                            target=safe_target,
                        ),
                    )
                    continue

            if response.status_code >= 500:
                last_failure = f"server error {response.status_code}"
                logger.debug(
                    "HTTP server error",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        action="GET",
                        outcome="server_error",
                        status_code=response.status_code,
                        attempt=attempt + 1,
                        target=safe_target,
                    ),
                )
                continue

            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP response",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        action="GET",
                        outcome="success",
                        status_code=response.status_code,
                        duration_ms=t.duration_ms(),
                        target=safe_target,
                    ),
                )
            return response.status_code, dict(response.headers), response.text

        logger.error(
            "GET %s failed after %s attempts: %s",
            safe_target,
            self._retry_max,
            last_failure,
            extra=extra_context(
                event="http_error",
                component="http_client",
                action="GET",
                outcome="retries_exhausted",
                target=safe_target,
            ),
        )
        raise NetworkError(safe_target, f"{last_failure} (after {self._retry_max} attempts)")

    def get_json(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
    ) -> Tuple[int, Dict[str, str], Optional[Any]]:
        """Perform a GET request and parse a JSON body.

        Args:
            url: Target URL
            headers: Optional request headers

        Returns:
            Tuple of (status_code, headers_dict, parsed_json_or_none). The
            parsed value is None for non-200 responses and undecodable bodies.
        """
        status_code, response_headers, text = self.robust_get(
            url, headers=headers or Constants.HEADERS_JSON
        )
        if status_code != 200 or not text:
            return status_code, response_headers, None

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action="get_json",
                    outcome="json_decode_error",
                    status_code=status_code,
                    target=safe_url(url),
                ),
            )
            return status_code, response_headers, None
        return status_code, response_headers, parsed
