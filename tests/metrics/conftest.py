"""Pytest fixtures for metrics tests."""

import pytest
from unittest.mock import Mock

from pizza_metrics.metrics.errors import PushRejectedError
from pizza_metrics.metrics.reporter import MetricsRegistry


SOURCE = "jwt-pizza-service-test"


def run_inline(task):
    """Dispatcher that pushes on the calling thread."""
    task()


@pytest.fixture
def source():
    return SOURCE


@pytest.fixture
def mock_sink():
    """Create a mock sink that accepts every push."""
    sink = Mock()
    sink.push = Mock(return_value=None)
    return sink


@pytest.fixture
def failing_sink():
    """Create a mock sink whose endpoint rejects every push."""
    sink = Mock()
    sink.push = Mock(side_effect=PushRejectedError("HTTP 500", status_code=500))
    return sink


@pytest.fixture
def registry(mock_sink):
    """Registry with a mock sink and synchronous dispatch."""
    reg = MetricsRegistry(
        source=SOURCE,
        report_interval=0.05,
        system_interval=0.05,
        sink=mock_sink,
        dispatch=run_inline,
    )
    yield reg
    reg.stop(timeout=2)
