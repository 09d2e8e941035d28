"""Self-sampling CPU and memory gauges."""
import logging
import threading
from typing import List, Optional

import psutil

from .builder import MetricRecord
from .collectors import SlotStore

logger = logging.getLogger(__name__)


def cpu_usage_percent() -> float:
    """1-minute load average normalized by logical core count, as a percent."""
    load_1m = psutil.getloadavg()[0]
    cores = psutil.cpu_count() or 1
    return round(load_1m / cores * 100, 2)


def memory_usage_percent() -> float:
    """Share of physical memory in use, as a percent."""
    memory = psutil.virtual_memory()
    used = memory.total - memory.available
    return round(used / memory.total * 100, 2)


class SystemMetrics:
    """
    Host CPU and memory usage sampled on a background thread.

    Behavior:
    - Samples every ``interval`` seconds once started
    - Replaces both gauge slots on each successful sample
    - A failed sample is logged and skipped; the previous values stay
    """

    NAME = "system"

    def __init__(self, source: str, interval: float = 1.0):
        """Initialize the system collector.

        Args:
            source: Value of the ``source`` tag
            interval: Seconds between samples (default: 1.0)
        """
        self.source = source
        self.interval = interval
        self._slots = SlotStore(source)
        self._lock = threading.Lock()

        self.thread: Optional[threading.Thread] = None
        self.stop_event = threading.Event()
        self.running = False

        self.cpu_usage = 0.0
        self.memory_usage = 0.0
        self.samples_taken = 0
        self.samples_failed = 0

    def start(self):
        """Start sampler thread."""
        if self.running:
            logger.warning("System sampler already running")
            return

        self.stop_event = threading.Event()
        self.running = True

        self.thread = threading.Thread(
            target=self._run,
            args=(self.stop_event,),
            name="metrics-system-sampler",
            daemon=True,
        )
        self.thread.start()
        logger.info("System sampler started (interval=%ss)", self.interval)

    def stop(self, timeout: float = 5.0):
        """Stop sampler thread.

        Args:
            timeout: Maximum seconds to wait for the thread to exit
        """
        if not self.running:
            return

        self.stop_event.set()
        if self.thread:
            self.thread.join(timeout=timeout)
            if self.thread.is_alive():
                logger.warning("System sampler did not stop within %ss", timeout)

        self.running = False
        logger.info("System sampler stopped")

    def _run(self, stop_event: threading.Event):
        while not stop_event.wait(self.interval):
            self.sample_once()

    def sample_once(self) -> bool:
        """Take one sample. Returns False when the sample was skipped."""
        try:
            cpu = cpu_usage_percent()
            memory = memory_usage_percent()
        except Exception as e:
            logger.warning("System metrics sample failed: %s", e)
            with self._lock:
                self.samples_failed += 1
            return False

        with self._lock:
            self.cpu_usage = cpu
            self.memory_usage = memory
            self.samples_taken += 1
            self._slots.put("cpu", self.NAME, {"type": "CPU"}, {"usage": cpu})
            self._slots.put("memory", self.NAME, {"type": "Memory"}, {"usage": memory})
        return True

    def materialize(self) -> List[MetricRecord]:
        with self._lock:
            return self._slots.records()
