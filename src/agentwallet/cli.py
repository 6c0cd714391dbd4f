"""
AgentWallet CLI

Agent-friendly Ethereum wallet CLI backed by a local daemon. Every command
makes sure the daemon is reachable (starting it in the background when it
is not), sends one HTTP request, and prints the result.

Commands:
  version      - Show daemon version
  build-info   - Show build metadata
  networks     - List configured networks
  account list - List managed accounts
  balance      - Mock balance for an address on a network
  send         - Submit a mocked transaction
  tx status    - Check transaction status by GUID
  wc status    - List WalletConnect sessions
  wc connect   - Open a WalletConnect session
  wc switch    - Switch session address or network
  wc disconnect - Close a session

Exit codes: 0 success, 1 runtime error, 2 invalid arguments.
"""

from __future__ import annotations

import functools
import math
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

import click

from . import __version__
from .client.api import DaemonClient
from .client.autostart import ensure_daemon_running
from .config import DEFAULT_CONFIG_FILENAME, resolve_config_path
from .errors import (
    AgentWalletError,
    EXIT_INVALID_ARGS,
    EXIT_RUNTIME_ERROR,
    INVALID_ARGS,
    RUNTIME_ERROR,
)
from .output import emit_error, emit_success, render_key_values, render_list


# ============ Options ============


@dataclass
class CliOptions:
    config: Optional[str] = None
    json: bool = False

    @property
    def config_path(self) -> Path:
        return resolve_config_path(self.config)


def output_options(func: Callable) -> Callable:
    """Accept ``--json``/``--config`` after the sub-command as well."""

    @click.option("--json", "as_json", is_flag=True, default=False, help="Output machine-readable JSON envelope")
    @click.option("--config", "config", default=None, metavar="PATH", help="Path to config file")
    @functools.wraps(func)
    def wrapper(*args: Any, as_json: bool, config: Optional[str], **kwargs: Any) -> Any:
        opts = click.get_current_context().find_object(CliOptions) or CliOptions()
        if as_json:
            opts.json = True
        if config:
            opts.config = config
        return func(*args, **kwargs)

    return wrapper


def run_command(
    request: Callable[[DaemonClient], Any],
    formatter: Optional[Callable[[Any], str]] = None,
) -> None:
    """Ensure the daemon, send the request, emit exactly one result."""
    opts = click.get_current_context().find_object(CliOptions) or CliOptions()
    client = DaemonClient()
    try:
        ensure_daemon_running(opts.config_path, client=client)
        data = request(client)
    except AgentWalletError as exc:
        emit_error(str(exc), exc.code, opts.json)
        sys.exit(exc.exit_code)
    emit_success(data, opts.json, formatter)


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="agentwallet")
@click.option(
    "--config",
    "config",
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    metavar="PATH",
    help="Path to config file",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Output machine-readable JSON envelope")
@click.option("--daemon", is_flag=True, default=False, hidden=True, help="Run the daemon in the foreground")
@click.pass_context
def cli(ctx: click.Context, config: str, as_json: bool, daemon: bool) -> None:
    """AgentWallet - agent-friendly Ethereum wallet CLI."""
    ctx.obj = CliOptions(config=config, json=as_json)

    if daemon:
        if ctx.invoked_subcommand is not None:
            emit_error("The --daemon flag cannot be combined with other commands.", INVALID_ARGS, as_json)
            sys.exit(EXIT_INVALID_ARGS)
        _run_daemon(ctx.obj)
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _run_daemon(opts: CliOptions) -> None:
    # Imported lazily: only the daemon needs the server stack.
    from .daemon.server import run_daemon

    try:
        code = run_daemon(opts.config_path)
    except AgentWalletError as exc:
        emit_error(str(exc), exc.code, opts.json)
        sys.exit(exc.exit_code)
    sys.exit(code)


# ============ Metadata ============


@cli.command()
@output_options
def version() -> None:
    """Show AgentWallet daemon version."""
    run_command(
        lambda client: client.get("/version"),
        lambda payload: f"AgentWallet v{payload['version']}",
    )


@cli.command("build-info")
@output_options
def build_info() -> None:
    """Return build metadata for diagnostics."""
    run_command(lambda client: client.get("/build-info"), render_key_values)


@cli.command()
@output_options
def networks() -> None:
    """List configured networks."""
    run_command(
        lambda client: client.get("/networks"),
        lambda payload: render_list(f"{n['name']} -> {n['rpcUrl']}" for n in payload["networks"]),
    )


# ============ Accounts ============


@cli.group()
def account() -> None:
    """Wallet account management."""


@account.command("list")
@output_options
def account_list() -> None:
    """List managed accounts."""
    run_command(
        lambda client: client.get("/accounts"),
        lambda payload: render_list(
            f"{acc['label']}: {acc['address']} ({', '.join(acc['networks'])})"
            for acc in payload["accounts"]
        ),
    )


@cli.command()
@click.option("--address", required=True, help="Target address")
@click.option("--network", required=True, help="Network name (eip155:<id>)")
@output_options
def balance(address: str, network: str) -> None:
    """Return balance for an address on a network."""
    run_command(
        lambda client: client.get("/balance", {"address": address, "network": network}),
        lambda payload: f"{payload['address']} on {payload['network']}: {payload['balanceEth']} ETH",
    )


# ============ Transactions ============


def _nonce(_ctx: click.Context, _param: click.Parameter, value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    if not math.isfinite(value):
        raise click.BadParameter("nonce must be a finite number.")
    return int(value) if value.is_integer() else value


@cli.command()
@click.option("--network", required=True, help="Network name (eip155:<id>)")
@click.option("--from", "from_address", required=True, help="Sender address")
@click.option("--to", default=None, help="Recipient address")
@click.option("--contract", default=None, help="Contract address")
@click.option("--nonce", type=float, default=None, callback=_nonce, help="Optional nonce")
@click.option("--value", default=None, help="ETH amount as string")
@click.option("--data", default=None, help="Hex payload")
@click.option("--gas-price", default=None, help="Gas price in wei string")
@output_options
def send(
    network: str,
    from_address: str,
    to: Optional[str],
    contract: Optional[str],
    nonce: Optional[float],
    value: Optional[str],
    data: Optional[str],
    gas_price: Optional[str],
) -> None:
    """Send a mocked transaction."""
    body = {
        "network": network,
        "from": from_address,
        "to": to,
        "contract": contract,
        "nonce": nonce,
        "value": value,
        "data": data,
        "gasPrice": gas_price,
    }
    run_command(
        lambda client: client.post("/tx/send", body),
        lambda payload: f"Submitted transaction {payload['guid']} ({payload['status']})",
    )


@cli.group()
def tx() -> None:
    """Transaction utilities."""


@tx.command("status")
@click.option("--guid", required=True, help="Transaction GUID from send result")
@output_options
def tx_status(guid: str) -> None:
    """Check transaction status by GUID."""
    run_command(
        lambda client: client.get("/tx/status", {"guid": guid}),
        lambda payload: f"{payload['guid']}: {payload['status']}",
    )


# ============ WalletConnect ============


@cli.group()
def wc() -> None:
    """WalletConnect session operations."""


def _render_sessions(payload: dict[str, Any]) -> str:
    sessions = payload["sessions"]
    if not sessions:
        return "No WalletConnect sessions"
    return render_list(f"{s['id']}: {s['address']} on {s['network']} ({s['status']})" for s in sessions)


@wc.command("status")
@output_options
def wc_status() -> None:
    """List WalletConnect sessions."""
    run_command(lambda client: client.get("/wc/sessions"), _render_sessions)


@wc.command("connect")
@click.option("--network", required=True, help="Network identifier")
@click.option("--address", required=True, help="Active address")
@click.option("--uri", required=True, metavar="WC-URI", help="WalletConnect URI")
@output_options
def wc_connect(network: str, address: str, uri: str) -> None:
    """Create a new WalletConnect session."""
    run_command(
        lambda client: client.post("/wc/connect", {"network": network, "address": address, "uri": uri}),
        lambda payload: f"WalletConnect session {payload['id']} connected",
    )


@wc.command("switch")
@click.option("--session", "session_id", required=True, help="Session id to mutate")
@click.option("--address", default=None, help="New address")
@click.option("--network", default=None, help="New network")
@output_options
def wc_switch(session_id: str, address: Optional[str], network: Optional[str]) -> None:
    """Switch session address or network."""
    run_command(
        lambda client: client.post(
            "/wc/switch", {"session": session_id, "address": address, "network": network}
        ),
        lambda payload: f"Session {payload['id']} switched to {payload['address']} on {payload['network']}",
    )


@wc.command("disconnect")
@click.option("--session", "session_id", required=True, help="Session id to close")
@output_options
def wc_disconnect(session_id: str) -> None:
    """Disconnect a session."""
    run_command(
        lambda client: client.post("/wc/disconnect", {"session": session_id}),
        lambda payload: f"Session {payload['id']} disconnected",
    )


# ============ Entry Points ============


def main(argv: Optional[list[str]] = None) -> None:
    """
    AgentWallet CLI entry point.

    Usage errors are reported through the same envelope as daemon errors,
    so ``--json`` callers always get JSON back.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    wants_json = "--json" in args
    try:
        # Returns the exit code when --help/--version end the invocation early.
        result = cli.main(args=args, prog_name="agentwallet", standalone_mode=False)
    except click.exceptions.Abort:
        emit_error("Aborted.", RUNTIME_ERROR, wants_json)
        sys.exit(EXIT_RUNTIME_ERROR)
    except click.ClickException as exc:
        if wants_json:
            emit_error(exc.format_message(), INVALID_ARGS, True)
        else:
            exc.show()
        sys.exit(EXIT_INVALID_ARGS)
    if isinstance(result, int) and result:
        sys.exit(result)


if __name__ == "__main__":
    main()
