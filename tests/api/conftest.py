"""Pytest fixtures for API tests."""

import pytest
from typing import Iterator
from unittest.mock import Mock
from fastapi.testclient import TestClient

from pizza_metrics.api.server import create_app
from pizza_metrics.metrics.reporter import MetricsRegistry


@pytest.fixture
def config():
    """Config stand-in with pushing disabled."""
    return Mock(
        reporting_enabled=False,
        metrics_source="jwt-pizza-service-test",
        report_interval=10.0,
        system_interval=10.0,
        push_timeout=1.0,
        log_level="WARNING",
    )


@pytest.fixture
def registry(config) -> MetricsRegistry:
    return MetricsRegistry.from_config(config)


@pytest.fixture
def client(config, registry) -> Iterator[TestClient]:
    """Create a test client whose lifespan starts and stops the registry."""
    app = create_app(config=config, registry=registry)
    with TestClient(app) as test_client:
        yield test_client
