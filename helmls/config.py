"""Server configuration resolved from the environment and the LSP client."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from .errors import ConfigError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")


@dataclass(frozen=True)
class ServerConfig:
    """Settings for one server process."""

    helm_command: str = "helm"
    helpers_path: Path = Path("templates/_helpers.tpl")
    load_chart: bool = True
    chart_timeout: float = 30.0
    log_level: str = "info"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        env = os.environ if environ is None else environ
        config = cls()
        if env.get("HELMLS_HELM"):
            config = replace(config, helm_command=env["HELMLS_HELM"])
        if env.get("HELMLS_LOAD_CHART"):
            config = replace(config, load_chart=_parse_bool("HELMLS_LOAD_CHART", env["HELMLS_LOAD_CHART"]))
        if env.get("HELMLS_CHART_TIMEOUT"):
            config = replace(config, chart_timeout=_parse_timeout("HELMLS_CHART_TIMEOUT", env["HELMLS_CHART_TIMEOUT"]))
        if env.get("HELMLS_LOG_LEVEL"):
            config = replace(config, log_level=_parse_level(env["HELMLS_LOG_LEVEL"]))
        return config

    def merged(self, options: Optional[Mapping[str, Any]]) -> "ServerConfig":
        """Overlay ``initializationOptions`` sent by the editor."""

        if not options:
            return self
        if not isinstance(options, Mapping):
            raise ConfigError(f"initializationOptions must be an object, got {type(options).__name__}")
        config = self
        if "helmCommand" in options:
            command = options["helmCommand"]
            if not isinstance(command, str) or not command:
                raise ConfigError("helmCommand must be a non-empty string")
            config = replace(config, helm_command=command)
        if "helpersPath" in options:
            config = replace(config, helpers_path=Path(str(options["helpersPath"])))
        if "loadChart" in options:
            config = replace(config, load_chart=_parse_bool("loadChart", options["loadChart"]))
        if "chartTimeout" in options:
            config = replace(config, chart_timeout=_parse_timeout("chartTimeout", options["chartTimeout"]))
        return config


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _parse_timeout(name: str, value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc
    if timeout <= 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return timeout


def _parse_level(value: str) -> str:
    lowered = value.strip().lower()
    if lowered not in LOG_LEVELS:
        raise ConfigError(
            f"Unknown log level {value!r}",
            hint=f"Use one of: {', '.join(LOG_LEVELS)}",
        )
    return lowered


__all__ = ["ServerConfig", "LOG_LEVELS"]
