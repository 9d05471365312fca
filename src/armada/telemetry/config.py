"""Telemetry configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}

# field name -> env vars consulted in order
_FLAG_ENV: dict[str, tuple[str, ...]] = {
    "enable_tracing": ("ARMADA_ENABLE_TRACING", "OTEL_TRACES_ENABLED"),
    "enable_metrics": ("ARMADA_ENABLE_METRICS", "OTEL_METRICS_ENABLED"),
    "enable_logging": ("ARMADA_ENABLE_LOGGING", "OTEL_LOGS_ENABLED"),
}

_ENDPOINT_ENV: dict[str, tuple[str, str]] = {
    "otlp_traces_endpoint": ("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", "v1/traces"),
    "otlp_metrics_endpoint": ("OTEL_EXPORTER_OTLP_METRICS_ENDPOINT", "v1/metrics"),
    "otlp_logs_endpoint": ("OTEL_EXPORTER_OTLP_LOGS_ENDPOINT", "v1/logs"),
}


def _flag_from_env(names: tuple[str, ...]) -> bool | None:
    for name in names:
        value = os.getenv(name)
        if value is not None:
            return value.strip().lower() in _TRUTHY
    return None


def _parse_resource_attributes(raw: str) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for part in raw.split(","):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        attrs[key.strip()] = value.strip()
    return attrs


class TelemetryConfig(BaseModel):
    """Runtime configuration for telemetry exporters."""

    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False
    otlp_traces_endpoint: str | None = None
    otlp_metrics_endpoint: str | None = None
    otlp_logs_endpoint: str | None = None
    service_name: str = "armada"
    service_namespace: str = "rules"
    resource_attributes: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides: Any) -> "TelemetryConfig":
        """Build a config from `ARMADA_*` and `OTEL_*` environment variables.

        Explicit ``overrides`` win over defaults but not over the environment,
        except for endpoints, which are only filled from the environment when
        no override was given.
        """

        data: Dict[str, Any] = cls().model_dump()
        data.update(overrides)

        for field_name, env_names in _FLAG_ENV.items():
            flag = _flag_from_env(env_names)
            if flag is not None:
                data[field_name] = flag

        base_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        for field_name, (env_name, suffix) in _ENDPOINT_ENV.items():
            if data.get(field_name):
                continue
            endpoint = os.getenv(env_name)
            if not endpoint and base_endpoint:
                endpoint = f"{base_endpoint.rstrip('/')}/{suffix}"
            data[field_name] = endpoint or None

        if os.getenv("OTEL_SERVICE_NAME"):
            data["service_name"] = os.environ["OTEL_SERVICE_NAME"]
        if os.getenv("OTEL_SERVICE_NAMESPACE"):
            data["service_namespace"] = os.environ["OTEL_SERVICE_NAMESPACE"]

        resource_env = os.getenv("OTEL_RESOURCE_ATTRIBUTES")
        if resource_env:
            data["resource_attributes"] = {
                **data.get("resource_attributes", {}),
                **_parse_resource_attributes(resource_env),
            }

        # A configured endpoint switches its exporter on.
        if data.get("otlp_traces_endpoint"):
            data["enable_tracing"] = True
        if data.get("otlp_metrics_endpoint"):
            data["enable_metrics"] = True
        if data.get("otlp_logs_endpoint"):
            data["enable_logging"] = True

        return cls(**data)

    def resource_dict(self) -> dict[str, str]:
        """Return OpenTelemetry resource attributes for this service."""
        attributes = {
            "service.name": self.service_name,
            "service.namespace": self.service_namespace,
        }
        attributes.update(self.resource_attributes)
        return attributes


@lru_cache(maxsize=1)
def load_telemetry_config() -> TelemetryConfig:
    """Load and cache telemetry config from the environment."""

    return TelemetryConfig.from_env()


def init_telemetry(config: TelemetryConfig | None = None) -> TelemetryConfig:
    """Initialise the enabled telemetry subsystems."""

    from .logger import init_logging
    from .metrics import init_metrics
    from .tracer import init_tracing

    resolved = config or load_telemetry_config()

    if resolved.enable_tracing:
        init_tracing(resolved)
    if resolved.enable_metrics:
        init_metrics(resolved)
    if resolved.enable_logging:
        init_logging(resolved)
    return resolved
