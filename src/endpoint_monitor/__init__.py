"""Endpoint Monitor — periodic HTTP availability checks per domain."""

__version__ = "0.1.0"

from endpoint_monitor.config import (
    ConfigError,
    Endpoint,
    MonitorConfig,
    load_endpoints,
    parse_endpoints,
)
from endpoint_monitor.domain import MalformedURL, domain_of
from endpoint_monitor.ledger import (
    AvailabilityLedger,
    DomainStats,
    LedgerError,
    UnknownDomainError,
)
from endpoint_monitor.probe import ProbeExecutor, ProbeResult, classify
from endpoint_monitor.report import emit_report, format_report
from endpoint_monitor.scheduler import CycleScheduler, SchedulerState

__all__ = [
    "AvailabilityLedger",
    "ConfigError",
    "CycleScheduler",
    "DomainStats",
    "Endpoint",
    "LedgerError",
    "MalformedURL",
    "MonitorConfig",
    "ProbeExecutor",
    "ProbeResult",
    "SchedulerState",
    "UnknownDomainError",
    "classify",
    "domain_of",
    "emit_report",
    "format_report",
    "load_endpoints",
    "parse_endpoints",
]
