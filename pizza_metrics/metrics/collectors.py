"""Per-domain metric collectors fed from the request path.

Each collector keeps its counters behind its own lock and stores one
MetricRecord per slot as soon as a mutator runs, so ``materialize()`` is a
plain read of the latest values.
"""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Mapping
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional, Protocol, runtime_checkable

from .builder import MetricRecord, Number

logger = logging.getLogger(__name__)


@runtime_checkable
class EmitsMetrics(Protocol):
    """Anything the reporter can pull records from."""

    def materialize(self) -> List[MetricRecord]:
        ...


class SlotStore:
    """Latest record per slot, kept in slot insertion order."""

    def __init__(self, source: str):
        self.source = source
        self._records: Dict[str, MetricRecord] = {}

    def put(
        self,
        slot: str,
        name: str,
        tags: Optional[Mapping],
        fields: Mapping[str, Number],
    ) -> None:
        self._records[slot] = MetricRecord.create(self.source, name, tags, fields)

    def records(self) -> List[MetricRecord]:
        return list(self._records.values())


class HttpMetrics:
    """Request counts per HTTP method plus an aggregate total."""

    NAME = "http_requests"
    TRACKED_METHODS = ("GET", "POST", "PUT", "DELETE")

    def __init__(self, source: str):
        self.source = source
        self._slots = SlotStore(source)
        self._lock = threading.Lock()
        self._counts = {method: 0 for method in self.TRACKED_METHODS}
        self._total = 0

    def on_request(self, method: str) -> None:
        method = (method or "").upper()
        with self._lock:
            if method in self._counts:
                self._counts[method] += 1
                slot = method.lower()
                self._slots.put(slot, self.NAME, {"method": slot}, {"total": self._counts[method]})
            self._total += 1
            self._slots.put("total", self.NAME, {"method": "all"}, {"total": self._total})

    def count(self, method: str) -> int:
        with self._lock:
            return self._counts.get(method.upper(), 0)

    @property
    def total(self) -> int:
        with self._lock:
            return self._total

    def materialize(self) -> List[MetricRecord]:
        with self._lock:
            return self._slots.records()


class UserMetrics:
    """Active user gauge."""

    NAME = "users"

    def __init__(self, source: str):
        self.source = source
        self._slots = SlotStore(source)
        self._lock = threading.Lock()
        self._active = 0

    def on_user_active(self) -> None:
        with self._lock:
            self._active += 1
            self._store()

    def on_user_inactive(self) -> None:
        with self._lock:
            self._active -= 1
            if self._active < 0:
                # Unbalanced logout calls; value is reported as-is.
                logger.debug("Active user gauge went negative: %s", self._active)
            self._store()

    def _store(self) -> None:
        self._slots.put("total", self.NAME, None, {"total": self._active})

    @property
    def active(self) -> int:
        with self._lock:
            return self._active

    def materialize(self) -> List[MetricRecord]:
        with self._lock:
            return self._slots.records()


def _item_price(item) -> Number:
    if isinstance(item, Mapping):
        return item["price"]
    return item.price


class PurchaseMetrics:
    """Order creation counters: purchases, revenue, latency and failures."""

    SALES = "sales"
    CREATION = "creation"

    def __init__(self, source: str):
        self.source = source
        self._slots = SlotStore(source)
        self._lock = threading.Lock()
        self._purchases = 0
        self._revenue: Number = 0
        self._latency_ms: Number = 0
        self._failures = 0

    def on_order_created(self, items: Iterable) -> None:
        """Count the order's items and add their prices to revenue."""
        items = list(items)
        cost = sum(_item_price(item) for item in items)
        with self._lock:
            self._purchases += len(items)
            self._revenue += cost
            self._slots.put("purchases", self.SALES, {"type": "Purchases"}, {"total": self._purchases})
            self._slots.put("revenue", self.SALES, {"type": "Revenue"}, {"total": self._revenue})

    def on_creation_latency(self, ms: Number) -> None:
        with self._lock:
            self._latency_ms = ms
            self._slots.put("latency", self.CREATION, {"type": "Latency"}, {"current": self._latency_ms})

    def on_creation_failure(self) -> None:
        with self._lock:
            self._failures += 1
            self._slots.put("failures", self.CREATION, {"type": "Failures"}, {"total": self._failures})

    @contextmanager
    def track_creation(self) -> Iterator[None]:
        """Time an order-creation call; count a failure if it raises.

        Latency is recorded in milliseconds whether or not the block fails.
        """
        start = time.perf_counter()
        try:
            yield
        except Exception:
            self.on_creation_failure()
            raise
        finally:
            self.on_creation_latency(round((time.perf_counter() - start) * 1000, 3))

    @property
    def purchases(self) -> int:
        with self._lock:
            return self._purchases

    @property
    def revenue(self) -> Number:
        with self._lock:
            return self._revenue

    @property
    def latency_ms(self) -> Number:
        with self._lock:
            return self._latency_ms

    @property
    def failures(self) -> int:
        with self._lock:
            return self._failures

    def materialize(self) -> List[MetricRecord]:
        with self._lock:
            return self._slots.records()


class AuthMetrics:
    """Authentication attempt counters."""

    NAME = "auth"

    def __init__(self, source: str):
        self.source = source
        self._slots = SlotStore(source)
        self._lock = threading.Lock()
        self._successes = 0
        self._failures = 0

    def on_auth_success(self) -> None:
        with self._lock:
            self._successes += 1
            self._slots.put("success", self.NAME, {"result": "Successful"}, {"total": self._successes})

    def on_auth_failure(self) -> None:
        with self._lock:
            self._failures += 1
            self._slots.put("fail", self.NAME, {"result": "Failed"}, {"total": self._failures})

    @property
    def successes(self) -> int:
        with self._lock:
            return self._successes

    @property
    def failures(self) -> int:
        with self._lock:
            return self._failures

    def materialize(self) -> List[MetricRecord]:
        with self._lock:
            return self._slots.records()


class ChaosMetrics:
    """Gauge mirroring the chaos flag (1 enabled, 0 disabled)."""

    NAME = "chaos"

    def __init__(self, source: str):
        self.source = source
        self._slots = SlotStore(source)
        self._lock = threading.Lock()
        self._enabled = False
        self.set_chaos_enabled(False)

    def set_chaos_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._enabled = bool(enabled)
            self._slots.put("chaos", self.NAME, None, {"enabled": 1 if self._enabled else 0})

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._enabled

    def materialize(self) -> List[MetricRecord]:
        with self._lock:
            return self._slots.records()
