from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError

ENV_PREFIX = "TASK_ORCHESTRATOR_"
CONFIG_PATH_ENV = ENV_PREFIX + "CONFIG"


@dataclass
class OrchestratorConfig:
    """Runtime settings for the engine and the bundled executor.

    Attributes:
        streaming_threshold: Task counts above this use the unordered pool
        queue_capacity: Bound of the completion queue (bounded strategy)
        fetch_url: URL requested by the blueprint executor
        request_timeout: HTTP timeout in seconds
        delay_seconds: Fixed delay after the request, in seconds
        max_workers: Threads available for blocking HTTP calls
        progress_interval: Log progress every N results (0 disables)
        log_level: Logging level name
        log_file: Optional log file; stderr when unset
    """

    streaming_threshold: int = 1000
    queue_capacity: int = 1000
    fetch_url: str = "https://httpbin.org/get"
    request_timeout: float = 10.0
    delay_seconds: float = 5.0
    max_workers: int = 32
    progress_interval: int = 100
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def validate(self) -> "OrchestratorConfig":
        if self.streaming_threshold < 0:
            raise ConfigError("streaming_threshold must be >= 0")
        if self.queue_capacity < 1:
            raise ConfigError("queue_capacity must be >= 1")
        if self.max_workers < 1:
            raise ConfigError("max_workers must be >= 1")
        if self.progress_interval < 0:
            raise ConfigError("progress_interval must be >= 0")
        if self.request_timeout <= 0:
            raise ConfigError("request_timeout must be > 0")
        if self.delay_seconds < 0:
            raise ConfigError("delay_seconds must be >= 0")
        return self


def _coerce(name: str, value: Any, default: Any) -> Any:
    if value is None:
        return None
    try:
        if isinstance(default, int):
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(f"{value} is not a whole number")
            return int(value)
        if isinstance(default, float):
            return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from exc
    return str(value)


def _apply(config: OrchestratorConfig, values: Mapping[str, Any]) -> OrchestratorConfig:
    defaults = {f.name: f.default for f in fields(OrchestratorConfig)}
    unknown = sorted(set(values) - set(defaults))
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
    coerced = {
        name: _coerce(name, value, defaults[name]) for name, value in values.items()
    }
    return replace(config, **coerced)


def load_config_file(path: str | Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(Path(path).read_text())
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def env_overrides(environ: Mapping[str, str] | None = None) -> Dict[str, str]:
    environ = os.environ if environ is None else environ
    overrides: Dict[str, str] = {}
    for f in fields(OrchestratorConfig):
        key = ENV_PREFIX + f.name.upper()
        if key in environ:
            overrides[f.name] = environ[key]
    return overrides


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> OrchestratorConfig:
    """
    Build the effective configuration.

    Defaults are overlaid by the YAML file (``path`` or the file named by
    ``TASK_ORCHESTRATOR_CONFIG``) and then by ``TASK_ORCHESTRATOR_<FIELD>``
    environment variables.
    """
    environ = os.environ if environ is None else environ
    config = OrchestratorConfig()

    path = path or environ.get(CONFIG_PATH_ENV)
    if path:
        config = _apply(config, load_config_file(path))

    config = _apply(config, env_overrides(environ))
    return config.validate()
