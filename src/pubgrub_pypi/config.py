"""Resolver configuration: defaults, YAML config file and environment overrides.

Precedence, lowest to highest: built-in defaults from ``Constants``, the YAML
file (explicit path or PUBGRUB_PYPI_CONFIG), then individual environment
variables.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

import yaml

from .constants import Constants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolverConfig:
    """Settings for one resolution run."""

    index_url: str = Constants.REGISTRY_URL_PYPI
    request_timeout: float = float(Constants.REQUEST_TIMEOUT)
    retry_max: int = Constants.HTTP_RETRY_MAX
    retry_base_delay: float = Constants.HTTP_RETRY_BASE_DELAY_SEC
    prefetch_workers: int = Constants.PREFETCH_WORKERS
    allow_prereleases: bool = False
    allow_yanked: bool = False
    user_agent: str = Constants.USER_AGENT

    def __post_init__(self) -> None:
        if not self.index_url:
            raise ValueError("index_url must not be empty")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if self.retry_max < 1:
            raise ValueError("retry_max must be at least 1")
        if self.retry_base_delay < 0:
            raise ValueError("retry_base_delay must not be negative")
        if self.prefetch_workers < 0:
            raise ValueError("prefetch_workers must not be negative")


_ENV_OVERRIDES = {
    Constants.ENV_INDEX_URL: "index_url",
    Constants.ENV_TIMEOUT: "request_timeout",
    Constants.ENV_RETRY_MAX: "retry_max",
    Constants.ENV_PREFETCH_WORKERS: "prefetch_workers",
}


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw config/env value to the type of the ``name`` field."""
    default = getattr(ResolverConfig, name)
    try:
        if isinstance(default, bool):
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in ("1", "true", "yes", "on"):
                return True
            if text in ("0", "false", "no", "off"):
                return False
            raise ValueError(text)
        if isinstance(default, int):
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(value)
            return int(value)
        if isinstance(default, float):
            return float(value)
        return str(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid value for {name}: {value!r}") from exc


def _load_yaml_config(path: str) -> Dict[str, Any]:
    """Read the ``resolver`` section (or the whole document) of a YAML file."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    section = data.get("resolver", data)
    if not isinstance(section, dict):
        raise ValueError(f"'resolver' section in {path} must be a mapping")
    return section


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> ResolverConfig:
    """Build a ResolverConfig from an optional YAML file and the environment.

    Args:
        path: Explicit config file; falls back to PUBGRUB_PYPI_CONFIG.
        environ: Environment mapping; defaults to ``os.environ``.
    """
    env = os.environ if environ is None else environ
    known = {f.name for f in fields(ResolverConfig)}
    values: Dict[str, Any] = {}

    config_path = path or env.get(Constants.ENV_CONFIG)
    if config_path:
        for key, value in _load_yaml_config(config_path).items():
            if key not in known:
                logger.warning("Ignoring unknown config key %r in %s", key, config_path)
                continue
            values[key] = _coerce(key, value)

    for variable, name in _ENV_OVERRIDES.items():
        raw = env.get(variable)
        if raw is not None and raw.strip():
            values[name] = _coerce(name, raw)

    return replace(ResolverConfig(), **values)
