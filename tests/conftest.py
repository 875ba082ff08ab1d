"""Shared fixtures and fakes for the endpoint monitor test suite."""

from __future__ import annotations

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Union

import pytest

from endpoint_monitor.config import MonitorConfig


# ---------------------------------------------------------------------------
# Fake HTTP layer
# ---------------------------------------------------------------------------


class FakeResponse:
    is_redirect = False
    next = None

    def __init__(self, status_code: int):
        self.status_code = status_code
        self.closed = False

    def close(self) -> None:
        self.closed = True


Outcome = Union[tuple, Exception, list]


class FakeSession:
    """
    Stands in for ``requests.Session``.

    ``routes`` maps a URL to ``(status, latency_ms)``, to an exception
    instance to raise, or to a list of those consumed one per call. The
    latency is spent sleeping inside ``request``. ``peak_in_flight`` is the
    largest number of ``request`` calls seen running at once.
    """

    max_redirects = 30

    def __init__(self, routes: dict[str, Outcome] | None = None):
        self.routes = dict(routes or {})
        self.calls: list[dict] = []
        self.responses: list[FakeResponse] = []
        self.closed = False
        self.in_flight = 0
        self.peak_in_flight = 0
        self._lock = threading.Lock()

    def request(self, method, url, **kwargs):
        with self._lock:
            self.calls.append({"method": method, "url": url, **kwargs})
            outcome = self.routes.get(url, (200, 10))
            if isinstance(outcome, list):
                outcome = outcome.pop(0)
            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if isinstance(outcome, Exception):
                raise outcome
            status, latency_ms = outcome
            time.sleep(latency_ms / 1000.0)
        finally:
            with self._lock:
                self.in_flight -= 1
        resp = FakeResponse(status)
        with self._lock:
            self.responses.append(resp)
        return resp

    def close(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Local HTTP server
# ---------------------------------------------------------------------------


class _RouteHandler(BaseHTTPRequestHandler):
    """
    Serves ``server.routes``: path -> ``(delay_s, status, location)``.
    Signals ``server.hit`` on every request; a delay waits on
    ``server.release`` so tests can end it early.
    """

    def do_GET(self):
        self.server.hit.set()
        delay, status, location = self.server.routes.get(self.path, (0, 404, None))
        if delay:
            self.server.release.wait(timeout=delay)
        self.send_response(status)
        if location:
            self.send_header("Location", location)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format, *args):
        pass


@pytest.fixture
def http_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _RouteHandler)
    server.daemon_threads = True
    server.routes = {}
    server.hit = threading.Event()
    server.release = threading.Event()
    server.base_url = f"http://127.0.0.1:{server.server_address[1]}"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.release.set()
    server.shutdown()
    server.server_close()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_monitor_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep MONITOR_* overrides from the host environment out of tests."""
    for key in (
        "MONITOR_INTERVAL_S",
        "MONITOR_REQUEST_TIMEOUT_S",
        "MONITOR_LATENCY_THRESHOLD_MS",
        "MONITOR_MAX_WORKERS",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config() -> MonitorConfig:
    return MonitorConfig()


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()
