"""
Endpoint Monitor Configuration
==============================
Endpoint definitions loaded from YAML, plus the timing constants the
scheduler and probe executor depend on. Timing can be overridden through
environment variables.
"""

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

import yaml

DEFAULT_METHOD = "GET"


class ConfigError(Exception):
    """Configuration input is unreadable or invalid. Fatal at startup."""


@dataclass(frozen=True)
class Endpoint:
    """An HTTP probe target."""

    name: str
    url: str
    method: str = DEFAULT_METHOD
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | None = None

    def __post_init__(self):
        if not self.method:
            object.__setattr__(self, "method", DEFAULT_METHOD)
        # read-only view over a private copy
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def __hash__(self):
        return hash(
            (
                self.name,
                self.url,
                self.method,
                tuple(sorted(self.headers.items())),
                self.body,
            )
        )


@dataclass
class MonitorConfig:
    """
    Timing and concurrency settings for the monitor.

    Reads from environment variables:
        MONITOR_INTERVAL_S            Seconds between cycles (default: 15)
        MONITOR_REQUEST_TIMEOUT_S     Per-request timeout seconds (default: 1)
        MONITOR_LATENCY_THRESHOLD_MS  UP latency threshold in ms (default: 500)
        MONITOR_MAX_WORKERS           Concurrent in-flight probes (default: 10)
    """

    interval_s: float = 15.0
    request_timeout_s: float = 1.0
    latency_threshold_s: float = 0.5
    max_workers: int = 10

    # UP status range, half-open [min, max)
    up_status_min: int = 200
    up_status_max: int = 300

    def __post_init__(self):
        iv = os.environ.get("MONITOR_INTERVAL_S")
        if iv:
            self.interval_s = float(iv)
        rt = os.environ.get("MONITOR_REQUEST_TIMEOUT_S")
        if rt:
            self.request_timeout_s = float(rt)
        lt = os.environ.get("MONITOR_LATENCY_THRESHOLD_MS")
        if lt:
            self.latency_threshold_s = float(lt) / 1000.0
        mw = os.environ.get("MONITOR_MAX_WORKERS")
        if mw:
            self.max_workers = int(mw)

        if self.interval_s <= 0:
            raise ConfigError(f"interval must be positive, got {self.interval_s}")
        if self.request_timeout_s <= 0:
            raise ConfigError(
                f"request timeout must be positive, got {self.request_timeout_s}"
            )
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be >= 1, got {self.max_workers}")


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------


def _endpoint_from_item(index: int, item) -> Endpoint:
    if not isinstance(item, dict):
        raise ConfigError(
            f"entry {index}: expected a mapping, got {type(item).__name__}"
        )
    url = item.get("url")
    if not url or not isinstance(url, str):
        raise ConfigError(f"entry {index}: 'url' is required")

    headers = item.get("headers") or {}
    if not isinstance(headers, dict):
        raise ConfigError(f"entry {index}: 'headers' must be a mapping")

    body = item.get("body")
    return Endpoint(
        name=str(item.get("name") or ""),
        url=url,
        method=str(item.get("method") or DEFAULT_METHOD),
        headers={str(k): str(v) for k, v in headers.items()},
        body=None if body is None else str(body),
    )


def parse_endpoints(text: str) -> list[Endpoint]:
    """Parse a YAML document (a list of endpoint mappings). Keeps input order."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, list):
        raise ConfigError("configuration must be a YAML list of endpoints")
    return [_endpoint_from_item(i, item) for i, item in enumerate(data)]


def load_endpoints(path: str) -> list[Endpoint]:
    """Read and parse an endpoint configuration file."""
    try:
        with open(path, encoding="utf-8") as fh:
            text = fh.read()
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc
    return parse_endpoints(text)
