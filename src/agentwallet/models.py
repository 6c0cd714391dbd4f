from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class TxStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    # Query result only; never stored.
    UNKNOWN = "UNKNOWN"


class SessionStatus(str, Enum):
    CONNECTED = "CONNECTED"
    DISCONNECTED = "DISCONNECTED"


@dataclass(frozen=True)
class NetworkDescriptor:
    name: str
    rpc_url: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "rpcUrl": self.rpc_url}


@dataclass(frozen=True)
class AccountRecord:
    address: str
    label: str
    networks: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "label": self.label,
            "networks": list(self.networks),
        }


@dataclass(frozen=True)
class BalanceResult:
    address: str
    network: str
    balance_eth: str
    updated_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "network": self.network,
            "balanceEth": self.balance_eth,
            "updatedAt": self.updated_at,
        }


@dataclass
class TransactionRecord:
    """
    A mocked transaction held by the daemon.

    Attributes:
        guid: Unique identifier for the daemon's lifetime
        network: Loaded ``eip155:<id>`` network name
        from_address: Sender address (``from`` on the wire)
        status: PENDING until confirmed on a status read, then CONFIRMED
        created_at: Unix epoch milliseconds
    """
    guid: str
    network: str
    from_address: str
    status: TxStatus = TxStatus.PENDING
    created_at: int = 0
    to: Optional[str] = None
    contract: Optional[str] = None
    nonce: Optional[float] = None
    value: Optional[str] = None
    data: Optional[str] = None
    gas_price: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "guid": self.guid,
            "network": self.network,
            "from": self.from_address,
        }
        optional = {
            "to": self.to,
            "contract": self.contract,
            "nonce": self.nonce,
            "value": self.value,
            "data": self.data,
            "gasPrice": self.gas_price,
        }
        result.update({k: v for k, v in optional.items() if v is not None})
        result["status"] = self.status.value
        result["createdAt"] = self.created_at
        return result


@dataclass(frozen=True)
class TransactionStatusResult:
    guid: str
    status: TxStatus
    updated_at: str

    def to_dict(self) -> dict[str, Any]:
        return {"guid": self.guid, "status": self.status.value, "updatedAt": self.updated_at}


@dataclass
class WalletConnectSession:
    id: str
    address: str
    network: str
    uri: str
    status: SessionStatus = SessionStatus.CONNECTED
    connected_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "address": self.address,
            "network": self.network,
            "uri": self.uri,
            "status": self.status.value,
            "connectedAt": self.connected_at,
        }


@dataclass(frozen=True)
class BuildInfo:
    version: str
    platform: str
    runtime: str
    build_time: str
    vcs_revision: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "version": self.version,
            "platform": self.platform,
            "runtime": self.runtime,
            "buildTime": self.build_time,
        }
        if self.vcs_revision:
            result["vcsRevision"] = self.vcs_revision
        return result


@dataclass(frozen=True)
class WalletConfig:
    networks: tuple[NetworkDescriptor, ...] = field(default_factory=tuple)

    def network_names(self) -> list[str]:
        return [net.name for net in self.networks]

    def to_dict(self) -> dict[str, Any]:
        return {"networks": [net.to_dict() for net in self.networks]}

__all__ = [
    "AccountRecord",
    "BalanceResult",
    "BuildInfo",
    "NetworkDescriptor",
    "SessionStatus",
    "TransactionRecord",
    "TransactionStatusResult",
    "TxStatus",
    "WalletConfig",
    "WalletConnectSession",
]
