"""
HTTP client for the AgentWallet daemon.

Thin wrapper over httpx. Translates transport failures and error statuses
into the shared error taxonomy so the CLI can pick exit codes.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from ..config import BASE_URL
from ..errors import DaemonRequestError, InternalError, TransportError, ValidationError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SEC = 5.0
HEALTH_TIMEOUT_SEC = 0.5
INVALID_ARGS_STATUSES = (400, 422)


def _compact(values: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Drop ``None`` entries; absent options are not sent."""
    return {k: v for k, v in (values or {}).items() if v is not None}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return f"Request failed with status code {response.status_code}"


class DaemonClient:
    """
    Client for the daemon's control surface.

    Args:
        base_url: Daemon root URL
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (used by tests)
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: float = REQUEST_TIMEOUT_SEC,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self, timeout: float) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=timeout, transport=self._transport)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        try:
            with self._client(self.timeout) as client:
                response = client.request(
                    method,
                    path,
                    params=_compact(params) or None,
                    json=_compact(body) if body is not None else None,
                )
        except httpx.TransportError as exc:
            raise TransportError(f"Unable to reach AgentWallet daemon at {self.base_url}: {exc}") from exc

        if response.status_code in INVALID_ARGS_STATUSES:
            raise ValidationError(_error_message(response))
        if response.status_code >= 500:
            raise InternalError(_error_message(response))
        if response.is_error:
            raise DaemonRequestError(_error_message(response), status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise DaemonRequestError("Daemon returned a non-JSON response.", response.status_code) from exc

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Optional[Mapping[str, Any]] = None) -> Any:
        return self.request("POST", path, body=body or {})

    def is_healthy(self, timeout: float = HEALTH_TIMEOUT_SEC) -> bool:
        """Probe ``/health``. Never raises."""
        try:
            with self._client(timeout) as client:
                response = client.get("/health")
            return response.status_code == 200
        except httpx.HTTPError as exc:
            logger.debug("Health probe failed: %s", exc)
            return False
