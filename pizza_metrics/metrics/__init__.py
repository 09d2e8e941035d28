"""Metric collection and periodic reporting."""

from .builder import MetricBuilder, MetricRecord
from .collectors import (
    AuthMetrics,
    ChaosMetrics,
    EmitsMetrics,
    HttpMetrics,
    PurchaseMetrics,
    UserMetrics,
)
from .errors import MetricsError, PushConnectionError, PushRejectedError
from .reporter import MetricsRegistry
from .sink import MetricsSink
from .system import SystemMetrics

__all__ = [
    "AuthMetrics",
    "ChaosMetrics",
    "EmitsMetrics",
    "HttpMetrics",
    "MetricBuilder",
    "MetricRecord",
    "MetricsError",
    "MetricsRegistry",
    "MetricsSink",
    "PurchaseMetrics",
    "PushConnectionError",
    "PushRejectedError",
    "SystemMetrics",
    "UserMetrics",
]
