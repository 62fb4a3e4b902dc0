"""YAML config loader — parses, interpolates env vars, validates, and emits observer events."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from fw_eval.config.domain.config import DEFAULT_RATE_LIMITS, HarnessConfig
from fw_eval.config.domain.observer import ConfigObserver
from fw_eval.config.infrastructure.env_interpolation import (
    find_unset_references,
    substitute,
)
from fw_eval.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)

_RATE_LIMIT_ENV_SUFFIX = "_RATE_LIMIT_RPM"
_MCP_URL_ENV_VARS = ("MCP_SERVER_URL_OVERRIDE", "MCP_SERVER_URL")


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns a HarnessConfig from a YAML file.

    A missing file is not an error: the harness runs on built-in defaults, with
    environment overrides still applied.
    """

    def __init__(
        self, observer: ConfigObserver, environ: Mapping[str, str] | None = None
    ) -> None:
        self._observer = observer
        self._environ = environ if environ is not None else os.environ

    def load(self, path: Path) -> HarnessConfig:
        """
        Load, interpolate, validate, and return a HarnessConfig.

        Raises:
            ConfigLoadError: if the file exists but is not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ConfigValidationError: if the schema is violated.
        """
        if not path.exists():
            raw: Any = {}
            self._observer.config_defaulted(path=str(path))
        else:
            raw = _parse_yaml(path=path)
            _check_missing_env_vars(raw=raw, environ=self._environ)
            raw = substitute(raw, self._environ)

        overridden = _apply_env_overrides(
            raw=raw, environ=self._environ, observer=self._observer
        )
        cfg = _build_config(resolved=overridden)
        _emit_warnings(cfg=cfg, observer=self._observer)
        if path.exists():
            self._observer.config_loaded(path=str(path), num_models=len(cfg.models))
        return cfg


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason=str(exc)) from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigLoadError(path=path, reason="top-level value must be a mapping")
    return raw


def _check_missing_env_vars(raw: Any, environ: Mapping[str, str]) -> None:
    """Raise MissingEnvVarsError if any ${ENV_VAR} references in raw are unset."""
    missing = find_unset_references(raw, environ)
    if missing:
        raise MissingEnvVarsError(missing)


def _apply_env_overrides(
    raw: dict[str, Any], environ: Mapping[str, str], observer: ConfigObserver
) -> Any:
    """
    Layer environment overrides on top of the file values.

    ``<PROVIDER>_RATE_LIMIT_RPM`` replaces the requests-per-minute budget of
    that provider; ``MCP_SERVER_URL_OVERRIDE`` (then ``MCP_SERVER_URL``)
    replaces the tool-server URL.

    Raises:
        ConfigValidationError: if a rate-limit override is not a positive integer.
    """
    rate_limits: dict[str, Any] = dict(raw.get("rate_limits") or {})
    for key, value in environ.items():
        if not key.endswith(_RATE_LIMIT_ENV_SUFFIX):
            continue
        provider = key.removesuffix(_RATE_LIMIT_ENV_SUFFIX).lower()
        try:
            rpm = int(value)
        except ValueError:
            raise ConfigValidationError(
                f"{key} must be an integer, got {value!r}"
            ) from None
        if rpm < 1:
            raise ConfigValidationError(f"{key} must be at least 1, got {rpm}")
        rate_limits[provider] = rpm
        observer.config_env_override_applied(variable=key, section="rate_limits")

    resolved = dict(raw)
    if rate_limits:
        resolved["rate_limits"] = {**DEFAULT_RATE_LIMITS, **rate_limits}

    for var in _MCP_URL_ENV_VARS:
        url = environ.get(var)
        if url:
            resolved["mcp"] = {**(raw.get("mcp") or {}), "server_url": url}
            observer.config_env_override_applied(variable=var, section="mcp")
            break

    return resolved


def _build_config(resolved: Any) -> HarnessConfig:
    try:
        return HarnessConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc


def _emit_warnings(cfg: HarnessConfig, observer: ConfigObserver) -> None:
    if cfg.judge.temperature > 0.0:
        observer.config_judge_temperature_warning(cfg.judge.temperature)
