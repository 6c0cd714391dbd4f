"""Tests for the httpx daemon client using a mock transport."""

from __future__ import annotations

import json

import httpx
import pytest

from agentwallet.client.api import DaemonClient
from agentwallet.errors import DaemonRequestError, InternalError, TransportError, ValidationError


def _client(handler) -> DaemonClient:
    return DaemonClient(base_url="http://daemon.test", transport=httpx.MockTransport(handler))


class TestRequests:
    def test_get_drops_none_params(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"ok": True})

        assert _client(handler).get("/balance", {"address": "0xabc", "network": None}) == {"ok": True}
        assert seen["params"] == {"address": "0xabc"}

    def test_post_drops_none_fields(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"guid": "g", "status": "PENDING"})

        _client(handler).post("/tx/send", {"network": "eip155:1", "to": None, "nonce": 0})
        assert seen["body"] == {"network": "eip155:1", "nonce": 0}

    def test_400_is_validation_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "guid is required."})

        with pytest.raises(ValidationError, match="guid is required"):
            _client(handler).get("/tx/status")

    def test_500_is_internal_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "boom"})

        with pytest.raises(InternalError, match="boom"):
            _client(handler).get("/wc/sessions")

    def test_other_status_is_request_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="Not Found")

        with pytest.raises(DaemonRequestError, match="404") as exc_info:
            _client(handler).get("/nope")
        assert exc_info.value.status_code == 404

    def test_connect_error_is_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError, match="Unable to reach"):
            _client(handler).get("/version")


class TestHealthProbe:
    def test_healthy(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/health"
            return httpx.Response(200, json={"status": "ok", "uptimeSec": 1})

        assert _client(handler).is_healthy() is True

    def test_unreachable_is_not_healthy(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        assert _client(handler).is_healthy() is False

    def test_error_status_is_not_healthy(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        assert _client(handler).is_healthy() is False
