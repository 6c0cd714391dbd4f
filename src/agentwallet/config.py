"""
Network configuration for the AgentWallet daemon.

The configuration file is JSON with a ``networks`` array of
``{name, rpcUrl}`` objects. A missing file falls back to the built-in
mainnet + Sepolia pair; a present but malformed file is an error.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigError
from .models import NetworkDescriptor, WalletConfig
from .schemas import CONFIG_SCHEMA, SchemaRegistry, SchemaValidationError
from .utils import is_network_name

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "wallet.conf.json"

# The daemon listens on loopback only, on a fixed port.
HOST = "127.0.0.1"
PORT = 6756
BASE_URL = f"http://{HOST}:{PORT}"

DEFAULT_CONFIG = WalletConfig(
    networks=(
        NetworkDescriptor(name="eip155:1", rpc_url="https://rpc.ankr.com/eth"),
        NetworkDescriptor(name="eip155:11155111", rpc_url="https://rpc.ankr.com/eth_sepolia"),
    )
)


def resolve_config_path(config_path: Optional[str] = None) -> Path:
    """Resolve an explicit path, or the default filename, against the cwd."""
    target = config_path if config_path and config_path.strip() else DEFAULT_CONFIG_FILENAME
    return (Path.cwd() / Path(target).expanduser()).resolve()


def load_config(config_path: Path, registry: Optional[SchemaRegistry] = None) -> WalletConfig:
    """
    Load and validate the network list.

    Args:
        config_path: Path to the JSON configuration file
        registry: Schema registry (default: bundled schemas)

    Returns:
        WalletConfig with networks in file order

    Raises:
        ConfigError: If the file cannot be parsed or an entry is invalid
    """
    if not config_path.exists():
        logger.debug("No config at %s, using built-in networks", config_path)
        return DEFAULT_CONFIG

    try:
        raw = config_path.read_text(encoding="utf-8")
        parsed = json.loads(raw)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Failed to parse config at {config_path}: {exc}") from exc

    registry = registry or SchemaRegistry.default()
    try:
        registry.validate_instance(parsed, CONFIG_SCHEMA)
    except SchemaValidationError as exc:
        logger.debug("Config schema errors: %s", exc.errors)
        if any(err.startswith("networks/") for err in exc.errors):
            raise ConfigError("Network entries must be objects.") from exc
        raise ConfigError('Config file must contain a "networks" array.') from exc

    networks = tuple(_parse_network(entry) for entry in parsed["networks"])
    return WalletConfig(networks=networks)


def _parse_network(entry: dict[str, Any]) -> NetworkDescriptor:
    name = _as_text(entry.get("name"))
    rpc_url = _as_text(entry.get("rpcUrl"))
    if not is_network_name(name):
        raise ConfigError(f'Invalid network name "{name}". Expected EIP-155 format like eip155:1.')
    if not rpc_url:
        raise ConfigError(f"Network {name} must include rpcUrl.")
    return NetworkDescriptor(name=name, rpc_url=rpc_url)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
