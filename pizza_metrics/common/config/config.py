"""Configuration management for the pizza service metrics pipeline

This module automatically loads environment variables from .env file using python-dotenv.
All configuration can be set via environment variables or .env file.

Example .env for pushing to a hosted Grafana/Influx line-protocol endpoint:

    PIZZA_METRICS_URL=https://influx-prod.grafana.net/api/v1/push/influx/write
    PIZZA_METRICS_USER_ID=1234567
    PIZZA_METRICS_API_KEY=glc_xxxxxxxx
    PIZZA_METRICS_SOURCE=jwt-pizza-service-dev

Reporting:
- PIZZA_METRICS_URL: Line-protocol ingestion endpoint (optional; empty disables pushing, collection still runs)
- PIZZA_METRICS_USER_ID: User identifier for the bearer credential (required when URL is set)
- PIZZA_METRICS_API_KEY: API key for the bearer credential (required when URL is set)
- PIZZA_METRICS_SOURCE: Value of the `source` tag stamped on every record (default: jwt-pizza-service)
- PIZZA_METRICS_REPORT_INTERVAL: Seconds between reporting ticks (default: 10.0)
- PIZZA_METRICS_PUSH_TIMEOUT: HTTP timeout in seconds for one push (default: 5.0)

Sampling:
- PIZZA_METRICS_SYSTEM_INTERVAL: Seconds between CPU/memory samples (default: 1.0)

Logging:
- PIZZA_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
"""
from __future__ import annotations
import math
import os
import logging
from pathlib import Path

from dotenv import load_dotenv

# Auto-load .env from project root (before Config class initialization)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
load_dotenv(PROJECT_ROOT / ".env")

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "jwt-pizza-service"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _float_env(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"Invalid {name}='{raw}'. Must be a number.") from e
    if not math.isfinite(value):
        raise ValueError(f"Invalid {name}='{raw}'. Must be a finite number.")
    return value


class Config:
    """Configuration holder for the metrics pipeline.

    Configuration is loaded from environment variables (or .env).
    See module docstring for the supported settings.
    """

    def __init__(self):
        # Remote sink settings
        self.metrics_url = os.getenv("PIZZA_METRICS_URL", "").strip()
        self.metrics_user_id = os.getenv("PIZZA_METRICS_USER_ID", "").strip()
        self.metrics_api_key = os.getenv("PIZZA_METRICS_API_KEY", "").strip()
        self.metrics_source = os.getenv("PIZZA_METRICS_SOURCE", DEFAULT_SOURCE).strip()

        # Timers
        self.report_interval = _float_env("PIZZA_METRICS_REPORT_INTERVAL", "10.0")
        self.system_interval = _float_env("PIZZA_METRICS_SYSTEM_INTERVAL", "1.0")
        self.push_timeout = _float_env("PIZZA_METRICS_PUSH_TIMEOUT", "5.0")

        # Logging
        self.log_level = os.getenv("PIZZA_LOG_LEVEL", "INFO").upper()

        self._validate_sink_config()
        self._validate_intervals()

        logger.info(
            "Metrics config: source=%s reporting=%s interval=%ss",
            self.metrics_source,
            "enabled" if self.reporting_enabled else "disabled",
            self.report_interval,
        )

    @property
    def reporting_enabled(self) -> bool:
        """True when a remote endpoint is configured."""
        return bool(self.metrics_url)

    def _validate_sink_config(self):
        """Validate the remote sink settings"""
        if not self.metrics_source:
            raise ValueError("Invalid PIZZA_METRICS_SOURCE=''. Must be non-empty.")

        if self.metrics_url:
            if not self.metrics_url.startswith(("http://", "https://")):
                raise ValueError(
                    f"Invalid PIZZA_METRICS_URL='{self.metrics_url}'. "
                    f"Must be an http(s) URL."
                )
            if not self.metrics_user_id or not self.metrics_api_key:
                raise ValueError(
                    "PIZZA_METRICS_USER_ID and PIZZA_METRICS_API_KEY are required "
                    "when PIZZA_METRICS_URL is set."
                )

        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid PIZZA_LOG_LEVEL='{self.log_level}'. "
                f"Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    def _validate_intervals(self):
        """Validate timer settings (must be positive)"""
        for name, value in (
            ("PIZZA_METRICS_REPORT_INTERVAL", self.report_interval),
            ("PIZZA_METRICS_SYSTEM_INTERVAL", self.system_interval),
            ("PIZZA_METRICS_PUSH_TIMEOUT", self.push_timeout),
        ):
            if value <= 0:
                raise ValueError(f"Invalid {name}={value}. Must be > 0 seconds.")
