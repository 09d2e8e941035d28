"""HTTP client for the remote line-protocol ingestion endpoint.

Design constraints:
- Synchronous, single-shot POST per batch
- No retries; the caller drops the batch on failure
- Every request is bounded by a timeout
"""

from __future__ import annotations

import logging

import requests

from .errors import PushConnectionError, PushRejectedError

logger = logging.getLogger(__name__)


class MetricsSink:
    """Pushes serialized batches with a ``Bearer <user_id>:<api_key>`` credential."""

    DEFAULT_TIMEOUT = 5.0

    def __init__(
        self,
        url: str,
        user_id: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self._headers = {
            "Authorization": f"Bearer {user_id}:{api_key}",
            "Content-Type": "text/plain",
        }

    def push(self, payload: str) -> None:
        """POST one batch. Raises a MetricsError subclass on failure."""
        try:
            response = self.session.post(
                self.url,
                data=payload.encode("utf-8"),
                headers=self._headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.debug("Metrics push connection error: %s", exc)
            raise PushConnectionError(f"Failed to reach metrics endpoint {self.url}: {exc}") from exc

        if not response.ok:
            raise PushRejectedError(
                f"Metrics endpoint returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

    def close(self) -> None:
        self.session.close()
