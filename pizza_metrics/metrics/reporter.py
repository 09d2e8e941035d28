"""Metrics registry and periodic reporter.

The registry owns one collector per domain. Once started, a daemon thread
builds a line-protocol batch from every collector each ``report_interval``
seconds and hands it to a dispatcher that pushes it off-thread, so a slow
endpoint never delays the next tick. Pushes are best-effort: failures are
logged and the batch is dropped.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from pizza_metrics.chaos import ChaosController

from .builder import MetricBuilder
from .collectors import (
    AuthMetrics,
    ChaosMetrics,
    EmitsMetrics,
    HttpMetrics,
    PurchaseMetrics,
    UserMetrics,
)
from .errors import MetricsError
from .sink import MetricsSink
from .system import SystemMetrics

logger = logging.getLogger(__name__)

Dispatcher = Callable[[Callable[[], None]], None]

STATE_IDLE = "idle"
STATE_RUNNING = "running"
STATE_STOPPED = "stopped"


def dispatch_in_background(task: Callable[[], None]) -> None:
    """Run ``task`` on its own daemon thread."""
    threading.Thread(target=task, name="metrics-push", daemon=True).start()


class MetricsRegistry:
    """
    Owns the collectors and reports their state periodically.

    Lifecycle: idle -> running (start) -> stopped (stop). Nothing runs
    until ``start()`` is called; ``report_once()`` can be driven directly.
    """

    def __init__(
        self,
        source: str,
        report_interval: float = 10.0,
        system_interval: float = 1.0,
        sink: Optional[MetricsSink] = None,
        dispatch: Optional[Dispatcher] = None,
    ):
        """Initialize the registry.

        Args:
            source: Value of the ``source`` tag stamped on every record
            report_interval: Seconds between reporting ticks (default: 10)
            system_interval: Seconds between CPU/memory samples (default: 1)
            sink: Remote endpoint client; None collects without pushing
            dispatch: Runs one push; defaults to a fresh daemon thread
        """
        self.source = source
        self.report_interval = report_interval
        self.sink = sink
        self._dispatch = dispatch or dispatch_in_background

        self.http = HttpMetrics(source)
        self.system = SystemMetrics(source, interval=system_interval)
        self.users = UserMetrics(source)
        self.purchases = PurchaseMetrics(source)
        self.auth = AuthMetrics(source)
        self.chaos = ChaosMetrics(source)
        self.chaos_flag = ChaosController(self.chaos)

        self.thread: Optional[threading.Thread] = None
        self.stop_event = threading.Event()
        self.state = STATE_IDLE

        # Push bookkeeping, updated from push threads
        self._status_lock = threading.Lock()
        self.ticks = 0
        self.pushes_succeeded = 0
        self.pushes_failed = 0
        self.last_push_at: Optional[float] = None
        self.last_error: Optional[str] = None

    @classmethod
    def from_config(cls, config, dispatch: Optional[Dispatcher] = None) -> "MetricsRegistry":
        """Build a registry (and its sink, when configured) from Config."""
        sink = None
        if config.reporting_enabled:
            sink = MetricsSink(
                url=config.metrics_url,
                user_id=config.metrics_user_id,
                api_key=config.metrics_api_key,
                timeout=config.push_timeout,
            )
        return cls(
            source=config.metrics_source,
            report_interval=config.report_interval,
            system_interval=config.system_interval,
            sink=sink,
            dispatch=dispatch,
        )

    def collectors(self) -> List[Tuple[str, EmitsMetrics]]:
        """Collectors in reporting order."""
        return [
            ("http", self.http),
            ("system", self.system),
            ("users", self.users),
            ("purchases", self.purchases),
            ("auth", self.auth),
            ("chaos", self.chaos),
        ]

    # ------------------------------------------------------------------
    # Lifecycle management
    # ------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self.state == STATE_RUNNING

    def start(self):
        """Start the system sampler and, when a sink is configured, the reporting loop."""
        if self.running:
            logger.warning("Metrics registry already running")
            return

        self.system.start()
        self.stop_event = threading.Event()
        if self.sink is not None:
            self.thread = threading.Thread(
                target=self._run,
                args=(self.stop_event,),
                name="metrics-reporter",
                daemon=True,
            )
            self.thread.start()
            logger.info("Metrics reporter started (interval=%ss)", self.report_interval)
        else:
            logger.warning("No metrics endpoint configured; metrics are collected but not pushed")
        self.state = STATE_RUNNING

    def stop(self, timeout: float = 5.0):
        """Stop background threads.

        Args:
            timeout: Maximum seconds to wait for each thread to exit
        """
        if not self.running:
            return

        self.stop_event.set()
        if self.thread:
            self.thread.join(timeout=timeout)
            if self.thread.is_alive():
                logger.warning("Metrics reporter did not stop within %ss", timeout)
            self.thread = None
        self.system.stop(timeout=timeout)
        self.state = STATE_STOPPED
        logger.info("Metrics registry stopped")

    def _run(self, stop_event: threading.Event):
        while not stop_event.wait(self.report_interval):
            self.report_once()

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def snapshot(self) -> str:
        """Serialize the current state of every collector."""
        builder = MetricBuilder()
        for _, collector in self.collectors():
            for record in collector.materialize():
                builder.append_record(record)
        return builder.serialize("\n")

    def report_once(self) -> Optional[str]:
        """Run one reporting tick. Never raises.

        Returns:
            The serialized batch, or None if building it failed
        """
        try:
            payload = self.snapshot()
            with self._status_lock:
                self.ticks += 1
            if self.sink is not None:
                self._dispatch(lambda: self._push(payload))
            return payload
        except Exception as e:
            logger.error("Error sending metrics: %s", e, exc_info=True)
            return None

    def _push(self, payload: str) -> None:
        try:
            self.sink.push(payload)
        except MetricsError as e:
            logger.warning("Failed to push metrics: %s", e)
            self._record_push(error=str(e))
            return
        except Exception as e:
            logger.error("Unexpected error pushing metrics: %s", e, exc_info=True)
            self._record_push(error=str(e))
            return

        logger.debug("Pushed %s", payload)
        self._record_push()

    def _record_push(self, error: Optional[str] = None) -> None:
        with self._status_lock:
            self.last_push_at = time.time()
            if error is None:
                self.pushes_succeeded += 1
            else:
                self.pushes_failed += 1
            self.last_error = error

    def get_status(self) -> Dict[str, Any]:
        """Get reporter status for monitoring."""
        with self._status_lock:
            return {
                "state": self.state,
                "reporting": self.sink is not None,
                "report_interval": self.report_interval,
                "ticks": self.ticks,
                "pushes_succeeded": self.pushes_succeeded,
                "pushes_failed": self.pushes_failed,
                "last_push_at": self.last_push_at,
                "last_error": self.last_error,
            }
