"""
AgentWallet daemon HTTP control surface - FastAPI backend

Endpoints:
- GET  /health          Liveness + uptime
- GET  /version         Daemon version
- GET  /build-info      Build metadata
- GET  /networks        Configured networks
- GET  /accounts        Mock accounts
- GET  /balance         Deterministic mock balance
- POST /tx/send         Create a pending transaction
- GET  /tx/status       Transaction status (confirms lazily)
- GET  /wc/sessions     WalletConnect sessions
- POST /wc/connect      Open a session
- POST /wc/switch       Change session address/network
- POST /wc/disconnect   Close a session

Loopback only, fixed port. Errors are returned as ``{"error": message}``:
invalid input and unknown ids are 400, anything unexpected is 500.
"""

from __future__ import annotations

import json
import logging
import socket
from pathlib import Path
from typing import Any, Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import HOST, PORT, load_config
from ..errors import AgentWalletError, EXIT_RUNTIME_ERROR, is_invalid_args
from ..logs import configure_logging, log_level_name
from .engine import StateEngine

logger = logging.getLogger(__name__)


class InvalidPayloadError(ValueError):
    pass


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _json_body(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidPayloadError("Invalid JSON payload.") from exc
    if not isinstance(body, dict):
        raise InvalidPayloadError("Invalid JSON payload.")
    return body


def create_app(engine: StateEngine) -> FastAPI:
    """Build the ASGI app around a single engine instance."""
    app = FastAPI(title="AgentWallet daemon", version=__version__)
    app.state.engine = engine

    # ============ Error shaping ============

    @app.exception_handler(InvalidPayloadError)
    async def _invalid_payload(_request: Request, exc: InvalidPayloadError) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def _request_validation(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, "Invalid request parameters.")

    @app.exception_handler(AgentWalletError)
    async def _wallet_error(request: Request, exc: AgentWalletError) -> JSONResponse:
        if is_invalid_args(exc):
            return _error(400, str(exc))
        logger.error("Request %s %s failed: %s", request.method, request.url.path, exc)
        return _error(500, str(exc) or "Internal server error")

    @app.exception_handler(Exception)
    async def _unexpected(_request: Request, exc: Exception) -> JSONResponse:
        # Starlette re-raises after responding; uvicorn logs the traceback.
        return _error(500, str(exc) or "Internal server error")

    # ============ Metadata ============

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "uptimeSec": engine.uptime_seconds()}

    @app.get("/version")
    async def version() -> dict[str, Any]:
        return {"version": engine.build_info.version}

    @app.get("/build-info")
    async def build_info() -> dict[str, Any]:
        return engine.build_info.to_dict()

    @app.get("/networks")
    async def networks() -> dict[str, Any]:
        return {"networks": [net.to_dict() for net in engine.get_networks()]}

    @app.get("/accounts")
    async def accounts() -> dict[str, Any]:
        return {"accounts": [acc.to_dict() for acc in engine.get_accounts()]}

    @app.get("/balance")
    async def balance(address: str = "", network: str = "") -> dict[str, Any]:
        return engine.get_balance(address, network).to_dict()

    # ============ Transactions ============

    @app.post("/tx/send")
    async def tx_send(request: Request) -> dict[str, Any]:
        body = await _json_body(request)
        record = engine.create_transaction(body)
        return {"guid": record.guid, "status": record.status.value}

    @app.get("/tx/status")
    async def tx_status(guid: str = "") -> Any:
        guid = guid.strip()
        if not guid:
            return _error(400, "guid is required.")
        return engine.get_transaction_status(guid).to_dict()

    # ============ WalletConnect ============

    @app.get("/wc/sessions")
    async def wc_sessions() -> dict[str, Any]:
        return {"sessions": [s.to_dict() for s in engine.list_sessions()]}

    @app.post("/wc/connect")
    async def wc_connect(request: Request) -> dict[str, Any]:
        body = await _json_body(request)
        session = engine.connect_session(body.get("address"), body.get("network"), body.get("uri"))
        return session.to_dict()

    @app.post("/wc/switch")
    async def wc_switch(request: Request) -> dict[str, Any]:
        body = await _json_body(request)
        session = engine.switch_session(body.get("session"), body.get("address"), body.get("network"))
        return session.to_dict()

    @app.post("/wc/disconnect")
    async def wc_disconnect(request: Request) -> dict[str, Any]:
        body = await _json_body(request)
        return engine.disconnect_session(body.get("session")).to_dict()

    return app


class DaemonServer(uvicorn.Server):
    """uvicorn server that announces the control URL once the socket is bound."""

    async def startup(self, sockets: Optional[list[socket.socket]] = None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            logger.info(
                "AgentWallet daemon listening on http://%s:%s", self.config.host, self.config.port
            )


def run_daemon(config_path: Path, host: str = HOST, port: int = PORT) -> int:
    """
    Serve the control surface until SIGINT/SIGTERM.

    Returns:
        Process exit code. 1 when the port is already bound, which is the
        expected outcome for the losing side of an auto-start race.
    """
    load_dotenv(override=False)
    configure_logging()

    config = load_config(config_path)
    engine = StateEngine.from_config(config)
    app = create_app(engine)

    server = DaemonServer(
        uvicorn.Config(app, host=host, port=port, log_level=log_level_name().lower())
    )
    try:
        server.run()
    except SystemExit:
        # uvicorn raises SystemExit with its own status when it cannot bind.
        logger.error("AgentWallet daemon stopped: bind to %s:%s failed", host, port)
        return EXIT_RUNTIME_ERROR
    if not server.started:
        logger.error("AgentWallet daemon failed to start on %s:%s", host, port)
        return EXIT_RUNTIME_ERROR
    return 0


__all__ = ["DaemonServer", "create_app", "run_daemon"]
