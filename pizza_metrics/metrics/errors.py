"""Exceptions raised while pushing metrics to the remote sink."""


class MetricsError(Exception):
    """Base exception for metrics pipeline errors."""


class PushConnectionError(MetricsError):
    """Raised when the metrics endpoint is not reachable or times out."""


class PushRejectedError(MetricsError):
    """Raised when the metrics endpoint answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code
