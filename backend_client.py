"""
backend_client.py
HTTP calls to the analysis backend: GET /customers and POST /run.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from settings import BACKEND_URL, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


# ===========================================================
# Errors
# ===========================================================
class BackendError(Exception):
    """Base exception for failed backend calls; str() is the banner text."""

    pass


class BackendHTTPError(BackendError):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(self, status_code: int, reason: str, body: str):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"{status_code} {reason}: {body}")


class BackendTransportError(BackendError):
    """Raised when no response was received (connection refused, DNS, timeout)."""

    pass


class BackendResponseError(BackendError):
    """Raised when a 2xx response does not carry a JSON body."""

    pass


# ===========================================================
# Client
# ===========================================================
class BackendClient:
    def __init__(
        self,
        base_url: str = BACKEND_URL,
        timeout: Optional[float] = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        logger.info("%s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise BackendTransportError(str(e)) from e

        if not 200 <= response.status_code < 300:
            raise BackendHTTPError(response.status_code, response.reason or "", response.text)

        try:
            return response.json()
        except ValueError as e:
            raise BackendResponseError(f"Invalid JSON from {path}: {e}") from e

    def list_customers(self) -> List[str]:
        data = self._request("GET", "/customers")
        customers = data.get("customers") if isinstance(data, dict) else None
        if not isinstance(customers, list):
            return []
        return [str(c) for c in customers]

    def run_analysis(self, body: Dict[str, Any]) -> Any:
        """POST /run; returns the parsed body untouched for the normalizer."""
        return self._request("POST", "/run", json=body)
