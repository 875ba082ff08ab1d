"""
Cycle Scheduler
===============
Runs a probe cycle and a report immediately, then once per interval tick,
until interrupted. Two states: RUNNING and TERMINATED.
"""

import enum
import logging
import signal
import threading
import time
from typing import Callable, Sequence, TextIO

from endpoint_monitor.config import Endpoint, MonitorConfig
from endpoint_monitor.domain import domain_of
from endpoint_monitor.ledger import AvailabilityLedger
from endpoint_monitor.probe import ProbeExecutor
from endpoint_monitor.report import emit_report

log = logging.getLogger("endpoint-monitor")


class SchedulerState(enum.Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


class CycleScheduler:
    """Owns the endpoints, the ledger and the run-until-interrupted loop."""

    def __init__(
        self,
        endpoints: Sequence[Endpoint],
        config: MonitorConfig | None = None,
        executor: ProbeExecutor | None = None,
        stream: TextIO | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.endpoints = tuple(endpoints)
        self.config = config or MonitorConfig()
        self.stream = stream
        self._clock = clock
        self._stop = threading.Event()
        self.state = SchedulerState.RUNNING
        self.cycles_completed = 0

        # MalformedURL here is a startup failure and propagates.
        self.ledger = AvailabilityLedger().initialize(
            domain_of(ep.url) for ep in self.endpoints
        )
        self.executor = executor or ProbeExecutor(self.config)

    def stop(self) -> None:
        """Request termination. Safe from signal handlers and other threads."""
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def run_once(self) -> bool:
        """Run one full cycle and report it. False if interrupted mid-cycle."""
        completed = self.executor.run_cycle(
            self.endpoints, self.ledger, stop_event=self._stop
        )
        if not completed or self._stop.is_set():
            return False
        emit_report(self.ledger.snapshot(), self.stream)
        self.cycles_completed += 1
        return True

    def _wait_for_tick(self, next_tick: float) -> float | None:
        """
        Block until ``next_tick`` or an interrupt, whichever comes first.
        Returns the following tick time, or None if interrupted.
        """
        interval = self.config.interval_s
        now = self._clock()
        # A cycle that overran several ticks gets one catch-up tick, not many.
        while next_tick + interval <= now:
            next_tick += interval
        if self._stop.wait(timeout=max(next_tick - now, 0.0)):
            return None
        return next_tick + interval

    def run(self, install_signal_handlers: bool = True) -> SchedulerState:
        """Run until interrupted. Returns the final state."""
        if install_signal_handlers:
            signal.signal(signal.SIGINT, lambda signum, frame: self.stop())

        log.info(
            "monitoring %d endpoints across %d domains every %ss",
            len(self.endpoints),
            len(self.ledger.domains),
            self.config.interval_s,
        )
        next_tick = self._clock() + self.config.interval_s
        self.run_once()

        while not self._stop.is_set():
            next_tick = self._wait_for_tick(next_tick)
            if next_tick is None:
                break
            self.run_once()

        self.state = SchedulerState.TERMINATED
        log.info("terminated after %d cycles", self.cycles_completed)
        return self.state
