"""FastAPI integration for the metrics pipeline.

The registry is created in the app lifespan and stored on app.state, so
request handlers reach collectors through dependencies rather than module
globals. Every request is counted by the HTTP metrics middleware.
"""

from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
import logging
import json
from datetime import datetime, timezone
from typing import Optional

from pizza_metrics.common.config import Config
from pizza_metrics.metrics import MetricsRegistry
from pizza_metrics.api.exceptions import generic_exception_handler
from pizza_metrics.api.routers.chaos import router as chaos_router
from pizza_metrics.api.routers.metrics import router as metrics_router

logger = logging.getLogger(__name__)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def configure_logging(level_name: str = "INFO"):
    """Configure structured JSON logging."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logging.root.handlers = [handler]
    log_level = getattr(logging, level_name, logging.INFO)
    logging.root.setLevel(log_level)
    logging.getLogger("uvicorn.access").setLevel(log_level)
    # Keep connection-pool chatter out of DEBUG output
    logging.getLogger("urllib3").setLevel(max(log_level, logging.INFO))


def create_app(
    config: Optional[Config] = None,
    registry: Optional[MetricsRegistry] = None,
) -> FastAPI:
    """Build the app. Config and registry are resolved at startup unless given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting metrics service...")
        try:
            app.state.config = config or Config()
            configure_logging(app.state.config.log_level)

            app.state.registry = registry or MetricsRegistry.from_config(app.state.config)
            app.state.registry.start()
            logger.info("Metrics registry started (source=%s)", app.state.registry.source)

            yield

        finally:
            logger.info("Shutting down metrics service...")
            if getattr(app.state, "registry", None):
                try:
                    app.state.registry.stop()
                except Exception as e:
                    logger.warning(f"Error stopping metrics registry: {e}")
                if app.state.registry.sink is not None:
                    app.state.registry.sink.close()
            logger.info("Metrics service shut down")

    app = FastAPI(
        title="Pizza Metrics",
        description="Metrics aggregation and reporting for the pizza ordering service",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Count every inbound request by method."""
        registry = getattr(request.app.state, "registry", None)
        if registry is not None:
            try:
                registry.http.on_request(request.method)
            except Exception:
                logger.debug("HTTP request tracking failed", exc_info=True)
        return await call_next(request)

    app.add_exception_handler(Exception, generic_exception_handler)
    app.include_router(chaos_router)
    app.include_router(metrics_router)

    @app.get("/")
    def root():
        """Return basic service info for smoke checks."""
        return {
            "service": "Pizza Metrics",
            "version": "0.1.0",
            "status": "running",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
