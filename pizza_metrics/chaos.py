"""Process-wide chaos flag used to simulate faults elsewhere in the service."""
import logging
import threading

logger = logging.getLogger(__name__)


class ChaosController:
    """Holds the chaos flag and mirrors it into the chaos gauge.

    ``collector`` is anything with ``set_chaos_enabled(bool)``; the gauge is
    updated synchronously so the next report already carries the new value.
    """

    def __init__(self, collector):
        self._collector = collector
        self._lock = threading.Lock()
        self._enabled = False

    def enable_chaos(self, enabled: bool) -> None:
        enabled = bool(enabled)
        with self._lock:
            changed = enabled != self._enabled
            self._enabled = enabled
            self._collector.set_chaos_enabled(enabled)
        if changed:
            logger.info("Chaos %s", "enabled" if enabled else "disabled")

    def is_chaos_enabled(self) -> bool:
        with self._lock:
            return self._enabled
