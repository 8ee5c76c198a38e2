"""Configuration for the analytics adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .telemetry.queue import DEFAULT_TTL_SECONDS


class ConfigError(Exception):
    """Raised when a configuration file cannot be loaded."""


@dataclass
class AdapterOptions:
    """
    Adapter options as supplied by the host page.

    ``ajax_url`` and ``pv`` are required for activation; their absence is
    reported by the adapter, not here, so that a partial config can still
    be loaded and inspected.
    """
    ajax_url: str | None = None
    pv: str | int | None = None

    # Idle window before buffered records are flushed
    queue_timeout_seconds: float = DEFAULT_TTL_SECONDS

    @classmethod
    def from_dict(cls, data: dict) -> AdapterOptions:
        """Accepts the host's camelCase keys as well as field names."""
        timeout = data.get("queueTimeout", data.get("queue_timeout_seconds"))
        return cls(
            ajax_url=data.get("ajaxUrl", data.get("ajax_url")),
            pv=data.get("pv"),
            queue_timeout_seconds=float(timeout) if timeout is not None else DEFAULT_TTL_SECONDS,
        )


@dataclass
class TransportConfig:
    """Outbound transport configuration."""
    type: str = "http"  # http | console
    timeout_seconds: float = 10.0
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class AnalyticsConfig:
    """Main configuration container."""
    provider: str = "gu"
    options: AdapterOptions = field(default_factory=AdapterOptions)
    transport: TransportConfig = field(default_factory=TransportConfig)

    @classmethod
    def from_dict(cls, data: dict) -> AnalyticsConfig:
        """Create config from dictionary."""
        return cls(
            provider=data.get("provider", "gu"),
            options=AdapterOptions.from_dict(data.get("options") or {}),
            transport=TransportConfig(**(data.get("transport") or {})),
        )

    @classmethod
    def from_yaml(cls, path: str) -> AnalyticsConfig:
        """Load config from YAML file."""
        import yaml
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        return cls._from_loaded(path, data or {})

    @classmethod
    def from_json(cls, path: str) -> AnalyticsConfig:
        """Load config from JSON file."""
        import json
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        return cls._from_loaded(path, data)

    @classmethod
    def from_file(cls, path: str) -> AnalyticsConfig:
        """Load config, choosing the parser from the file extension."""
        if path.endswith(".json"):
            return cls.from_json(path)
        return cls.from_yaml(path)

    @classmethod
    def _from_loaded(cls, path: str, data: Any) -> AnalyticsConfig:
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")
        try:
            return cls.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config {path}: {e}") from e
