"""
Availability Ledger
===================
Thread-safe, fixed-key per-domain probe counters.
"""

import threading
from dataclasses import dataclass
from typing import Iterable


class LedgerError(Exception):
    """Ledger used out of order (e.g. initialized twice)."""


class UnknownDomainError(LedgerError, KeyError):
    """A probe was recorded for a domain not registered at startup."""


@dataclass
class DomainStats:
    """Cumulative probe counters for one domain."""

    total_requests: int = 0
    up_requests: int = 0

    @property
    def percentage(self) -> int:
        """Availability rounded to the nearest integer, halves away from zero."""
        if self.total_requests == 0:
            return 0
        # round(up / total * 100) in exact integer arithmetic
        return (200 * self.up_requests + self.total_requests) // (
            2 * self.total_requests
        )


class AvailabilityLedger:
    """Per-domain counters whose key set is frozen at initialization."""

    def __init__(self):
        self._lock = threading.Lock()
        self._stats: list[DomainStats] = []
        self._index: dict[str, int] = {}
        self._initialized = False

    def initialize(self, domains: Iterable[str]) -> "AvailabilityLedger":
        """Create one zeroed entry per distinct domain. Returns self for chaining."""
        with self._lock:
            if self._initialized:
                raise LedgerError("ledger already initialized")
            for domain in sorted(set(domains)):
                self._index[domain] = len(self._stats)
                self._stats.append(DomainStats())
            self._initialized = True
        return self

    def record(self, domain: str, success: bool) -> None:
        with self._lock:
            idx = self._index.get(domain)
            if idx is None:
                raise UnknownDomainError(domain)
            stat = self._stats[idx]
            stat.total_requests += 1
            if success:
                stat.up_requests += 1

    def snapshot(self) -> list[tuple[str, int]]:
        """Return ``[(domain, percentage), ...]`` sorted by domain."""
        with self._lock:
            return [
                (domain, self._stats[idx].percentage)
                for domain, idx in sorted(self._index.items())
            ]

    def stats(self, domain: str) -> DomainStats:
        with self._lock:
            idx = self._index.get(domain)
            if idx is None:
                raise UnknownDomainError(domain)
            stat = self._stats[idx]
            return DomainStats(stat.total_requests, stat.up_requests)

    @property
    def domains(self) -> list[str]:
        with self._lock:
            return sorted(self._index)

    def __contains__(self, domain: str) -> bool:
        with self._lock:
            return domain in self._index
