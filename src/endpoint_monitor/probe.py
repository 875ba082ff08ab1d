"""
Probe Executor
==============
Issues one HTTP request per endpoint on a bounded set of worker threads,
classifies each result as UP or DOWN, and feeds the ledger.
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Sequence

import requests
from requests.adapters import HTTPAdapter

from endpoint_monitor.config import Endpoint, MonitorConfig
from endpoint_monitor.domain import MalformedURL, domain_of
from endpoint_monitor.ledger import AvailabilityLedger, UnknownDomainError

log = logging.getLogger("endpoint-monitor")

# How often a waiting cycle checks for an interrupt.
_STOP_POLL_S = 0.05


def _make_session(pool_size: int) -> requests.Session:
    session = requests.Session()
    # No retries: every probe is a single attempt.
    adapter = HTTPAdapter(max_retries=0, pool_maxsize=pool_size)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def classify(
    status_code: int, latency_s: float, config: MonitorConfig | None = None
) -> bool:
    """UP iff the status is in the UP range AND latency is under the threshold."""
    cfg = config or MonitorConfig()
    status_ok = cfg.up_status_min <= status_code < cfg.up_status_max
    return status_ok and latency_s < cfg.latency_threshold_s


@dataclass(frozen=True)
class ProbeResult:
    endpoint: Endpoint
    up: bool
    status_code: int | None = None
    latency_s: float | None = None
    error: str | None = None


class ProbeExecutor:
    """Runs probe cycles over a fixed list of endpoints."""

    def __init__(
        self,
        config: MonitorConfig | None = None,
        session: requests.Session | None = None,
    ):
        self.config = config or MonitorConfig()
        self.session = session or _make_session(self.config.max_workers)

    def _fetch(self, endpoint: Endpoint, deadline: float) -> requests.Response:
        """
        Send the request and follow redirects by hand, so the whole chain
        shares one deadline instead of a fresh timeout per hop.
        """
        resp = self.session.request(
            endpoint.method,
            endpoint.url,
            headers=dict(endpoint.headers) or None,
            data=endpoint.body,
            timeout=self.config.request_timeout_s,
            stream=True,
            allow_redirects=False,
        )
        hops = 0
        while resp.is_redirect and resp.next is not None:
            hops += 1
            resp.close()
            if hops > self.session.max_redirects:
                raise requests.TooManyRedirects(
                    f"exceeded {self.session.max_redirects} redirects"
                )
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise requests.Timeout(
                    f"timed out after {self.config.request_timeout_s}s "
                    f"({hops} redirects)"
                )
            resp = self.session.send(
                resp.next, timeout=remaining, stream=True, allow_redirects=False
            )
        return resp

    def probe(self, endpoint: Endpoint) -> ProbeResult:
        """Probe one endpoint. Never raises; any failure is a DOWN result."""
        started = time.monotonic()
        try:
            resp = self._fetch(endpoint, started + self.config.request_timeout_s)
        except Exception as exc:
            log.debug("probe %s (%s) failed: %s", endpoint.name, endpoint.url, exc)
            return ProbeResult(endpoint, up=False, error=str(exc))

        try:
            # dispatch of the first request to headers of the final response
            latency = time.monotonic() - started
            up = classify(resp.status_code, latency, self.config)
            log.debug(
                "probe %s: status=%s latency=%.0fms -> %s",
                endpoint.name,
                resp.status_code,
                latency * 1000,
                "UP" if up else "DOWN",
            )
            return ProbeResult(
                endpoint, up=up, status_code=resp.status_code, latency_s=latency
            )
        finally:
            resp.close()

    def _record(self, ledger: AvailabilityLedger, result: ProbeResult) -> None:
        try:
            ledger.record(domain_of(result.endpoint.url), result.up)
        except (MalformedURL, UnknownDomainError) as exc:
            log.warning("dropping result for %s: %s", result.endpoint.url, exc)

    def _worker(
        self,
        todo: queue.Queue,
        results: queue.Queue,
        stop_event: threading.Event,
    ) -> None:
        while not stop_event.is_set():
            try:
                endpoint = todo.get_nowait()
            except queue.Empty:
                return
            results.put(self.probe(endpoint))

    def run_cycle(
        self,
        endpoints: Sequence[Endpoint],
        ledger: AvailabilityLedger,
        stop_event: threading.Event | None = None,
    ) -> bool:
        """
        Probe every endpoint once and record the results.

        Returns True when every probe has completed. Returns False as soon as
        ``stop_event`` is set; workers take no further endpoints and probes
        still running are abandoned without being recorded. Workers are
        daemon threads, so an abandoned probe never holds up process exit.
        """
        if not endpoints:
            return True
        stop = stop_event if stop_event is not None else threading.Event()

        todo: queue.Queue = queue.Queue()
        for ep in endpoints:
            todo.put(ep)
        results: queue.Queue = queue.Queue()

        for i in range(min(self.config.max_workers, len(endpoints))):
            threading.Thread(
                target=self._worker,
                args=(todo, results, stop),
                name=f"probe-{i}",
                daemon=True,
            ).start()

        outstanding = len(endpoints)
        while outstanding:
            if stop.is_set():
                log.info("cycle interrupted, abandoning %d probes", outstanding)
                return False
            try:
                result = results.get(timeout=_STOP_POLL_S)
            except queue.Empty:
                continue
            self._record(ledger, result)
            outstanding -= 1
        return True

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ProbeExecutor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
