"""Metrics inspection endpoints."""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from pizza_metrics.api.dependencies import get_registry
from pizza_metrics.api.models import MetricsStatusResponse

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


@router.get("", response_model=MetricsStatusResponse)
def metrics_status(registry=Depends(get_registry)):
    """Reporter status plus the live counter values of each collector."""
    return {
        "source": registry.source,
        "reporter": registry.get_status(),
        "collectors": {
            "http": {
                "total": registry.http.total,
                **{m.lower(): registry.http.count(m) for m in registry.http.TRACKED_METHODS},
            },
            "system": {
                "cpu": registry.system.cpu_usage,
                "memory": registry.system.memory_usage,
            },
            "users": {"active": registry.users.active},
            "purchases": {
                "purchases": registry.purchases.purchases,
                "revenue": registry.purchases.revenue,
                "latency_ms": registry.purchases.latency_ms,
                "failures": registry.purchases.failures,
            },
            "auth": {
                "successes": registry.auth.successes,
                "failures": registry.auth.failures,
            },
            "chaos": {"enabled": registry.chaos.enabled},
        },
    }


@router.get("/snapshot", response_class=PlainTextResponse)
def metrics_snapshot(registry=Depends(get_registry)):
    """The line-protocol batch the next tick would push."""
    return registry.snapshot()
