"""
State Engine - the daemon's in-memory wallet state.

Owns the transaction store and the WalletConnect session store for the
lifetime of the daemon process. Nothing is persisted.

Every operation validates its input completely before touching a store, so
a rejected request never leaves a partial write behind. A single engine-wide
lock serializes all store access; operations are short and do no I/O while
holding it.

Records handed back to callers are copies. Callers cannot mutate the stores
except through the operations below.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import replace
from typing import Any, Callable, Iterable, Mapping, Optional

from ..errors import NotFoundError, ValidationError
from ..models import (
    AccountRecord,
    BalanceResult,
    BuildInfo,
    NetworkDescriptor,
    SessionStatus,
    TransactionRecord,
    TransactionStatusResult,
    TxStatus,
    WalletConfig,
    WalletConnectSession,
)
from ..utils import (
    is_hex_data,
    is_network_name,
    is_valid_address,
    mock_balance_eth,
    normalize_text,
    utc_now_rfc3339,
    uuidv7,
)
from .buildinfo import compute_build_info

logger = logging.getLogger(__name__)

# Built-in roster; every account is offered on every loaded network.
MOCK_ACCOUNTS = (
    ("0x1111111111111111111111111111111111111111", "Agent Primary"),
    ("0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045", "Research Wallet"),
    ("0x2222222222222222222222222222222222222222", "Automation Vault"),
)

CONFIRM_DELAY_SEC = 5.0
WC_URI_PREFIX = "wc:"


class StateEngine:
    """
    Transaction and session state machines behind one lock.

    Args:
        networks: Networks loaded from configuration (fixed for the lifetime)
        clock: Wall-clock source in seconds since the epoch
        confirm_delay: Seconds after which a pending transaction confirms
        build_info: Precomputed build metadata (computed when omitted)
    """

    def __init__(
        self,
        networks: Iterable[NetworkDescriptor],
        *,
        clock: Callable[[], float] = time.time,
        confirm_delay: float = CONFIRM_DELAY_SEC,
        build_info: Optional[BuildInfo] = None,
    ) -> None:
        self._networks = tuple(networks)
        self._network_names = frozenset(net.name for net in self._networks)
        names = tuple(net.name for net in self._networks)
        self._accounts = tuple(
            AccountRecord(address=address, label=label, networks=names)
            for address, label in MOCK_ACCOUNTS
        )
        self._clock = clock
        self._confirm_delay_ms = int(confirm_delay * 1000)
        self._started_at = clock()
        # Resolved before the engine is shared; may shell out to git.
        self._build_info = build_info or compute_build_info()

        self._lock = threading.Lock()
        self._transactions: dict[str, TransactionRecord] = {}
        self._sessions: dict[str, WalletConnectSession] = {}

    @classmethod
    def from_config(cls, config: WalletConfig, **kwargs: Any) -> "StateEngine":
        return cls(config.networks, **kwargs)

    # ============ Static state ============

    @property
    def networks(self) -> tuple[NetworkDescriptor, ...]:
        return self._networks

    @property
    def accounts(self) -> tuple[AccountRecord, ...]:
        return self._accounts

    @property
    def build_info(self) -> BuildInfo:
        return self._build_info

    def get_networks(self) -> list[NetworkDescriptor]:
        return list(self._networks)

    def get_accounts(self) -> list[AccountRecord]:
        return list(self._accounts)

    def is_known_network(self, network: str) -> bool:
        return network in self._network_names

    def uptime_seconds(self) -> int:
        return round(self._clock() - self._started_at)

    # ============ Balances ============

    def get_balance(self, address: str, network: str) -> BalanceResult:
        """
        Deterministic mock balance for an address on a loaded network.

        Raises:
            ValidationError: If the address is malformed or the network unknown
        """
        if not is_valid_address(address) or not self.is_known_network(network):
            raise ValidationError("address and network must be provided as valid values.")
        return BalanceResult(
            address=address,
            network=network,
            balance_eth=mock_balance_eth(address, network),
            updated_at=utc_now_rfc3339(),
        )

    # ============ Transactions ============

    def create_transaction(self, payload: Mapping[str, Any]) -> TransactionRecord:
        """
        Validate a send request and store it as a PENDING transaction.

        Args:
            payload: Wire-shaped request (``network``, ``from``, optional
                ``to``, ``contract``, ``nonce``, ``value``, ``data``, ``gasPrice``)

        Returns:
            Copy of the stored record

        Raises:
            ValidationError: On the first violated constraint
        """
        fields = self._validate_transaction(payload)
        with self._lock:
            guid = self._fresh_id(self._transactions)
            record = TransactionRecord(
                guid=guid,
                status=TxStatus.PENDING,
                created_at=self._now_ms(),
                **fields,
            )
            self._transactions[guid] = record
            logger.info("Transaction %s created on %s", guid, record.network)
            return replace(record)

    def get_transaction_status(self, guid: str) -> TransactionStatusResult:
        """
        Current status of a transaction.

        Side effect: a PENDING record older than the confirmation delay is
        flipped to CONFIRMED in the store. There is no background timer; the
        transition only happens here.

        An unknown guid yields status UNKNOWN rather than an error.
        """
        with self._lock:
            record = self._transactions.get(guid)
            if record is None:
                status = TxStatus.UNKNOWN
            else:
                if (
                    record.status is TxStatus.PENDING
                    and self._now_ms() - record.created_at > self._confirm_delay_ms
                ):
                    record.status = TxStatus.CONFIRMED
                    logger.info("Transaction %s confirmed", guid)
                status = record.status
        return TransactionStatusResult(guid=guid, status=status, updated_at=utc_now_rfc3339())

    # ============ WalletConnect sessions ============

    def list_sessions(self) -> list[WalletConnectSession]:
        with self._lock:
            return [replace(session) for session in self._sessions.values()]

    def connect_session(self, address: Any, network: Any, uri: Any) -> WalletConnectSession:
        """
        Open a new CONNECTED session.

        Raises:
            ValidationError: If the address, network or ``wc:`` URI is invalid
        """
        address = normalize_text(address)
        network = normalize_text(network)
        uri = normalize_text(uri)
        if not is_valid_address(address):
            raise ValidationError("address must be a valid hex address.")
        self._require_network(network)
        if not uri.startswith(WC_URI_PREFIX):
            raise ValidationError(f"uri must start with '{WC_URI_PREFIX}'.")

        with self._lock:
            session = WalletConnectSession(
                id=self._fresh_id(self._sessions),
                address=address,
                network=network,
                uri=uri,
                status=SessionStatus.CONNECTED,
                connected_at=utc_now_rfc3339(),
            )
            self._sessions[session.id] = session
            logger.info("Session %s connected on %s", session.id, network)
            return replace(session)

    def switch_session(
        self,
        session_id: Any,
        address: Any = None,
        network: Any = None,
    ) -> WalletConnectSession:
        """
        Change a session's address and/or network.

        Omitted (or empty) fields keep their current value. Status, id and
        connection time are never touched.

        Raises:
            NotFoundError: If the session id is unknown
            ValidationError: If a provided field is invalid
        """
        session_id = normalize_text(session_id)
        next_address = normalize_text(address) if address else None
        next_network = normalize_text(network) if network else None

        with self._lock:
            existing = self._get_session(session_id)
            if next_address is not None and not is_valid_address(next_address):
                raise ValidationError("address must be a valid hex address.")
            if next_network is not None:
                self._require_network(next_network)
            if next_address is not None:
                existing.address = next_address
            if next_network is not None:
                existing.network = next_network
            logger.info("Session %s switched to %s on %s", session_id, existing.address, existing.network)
            return replace(existing)

    def disconnect_session(self, session_id: Any) -> WalletConnectSession:
        """
        Mark a session DISCONNECTED. Repeating the call is a no-op.

        Raises:
            NotFoundError: If the session id is unknown
        """
        session_id = normalize_text(session_id)
        with self._lock:
            existing = self._get_session(session_id)
            existing.status = SessionStatus.DISCONNECTED
            logger.info("Session %s disconnected", session_id)
            return replace(existing)

    # ============ Internals ============

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _require_network(self, network: str) -> None:
        if not is_network_name(network):
            raise ValidationError("network must be provided using eip155:<id> format.")
        if not self.is_known_network(network):
            raise ValidationError(f"Unknown network {network}.")

    def _get_session(self, session_id: str) -> WalletConnectSession:
        # Caller holds the lock.
        session = self._sessions.get(session_id) if session_id else None
        if session is None:
            raise NotFoundError("session must reference an existing session id.")
        return session

    @staticmethod
    def _fresh_id(store: Mapping[str, Any]) -> str:
        # Caller holds the lock.
        while True:
            candidate = str(uuidv7())
            if candidate not in store:
                return candidate

    def _validate_transaction(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        if not isinstance(payload, Mapping):
            raise ValidationError("Transaction payload must be an object.")

        network = normalize_text(payload.get("network"))
        from_address = normalize_text(payload.get("from"))
        to = normalize_text(payload.get("to")) or None
        contract = normalize_text(payload.get("contract")) or None
        nonce = payload.get("nonce")
        value = payload.get("value")
        data = payload.get("data")
        gas_price = payload.get("gasPrice")

        if not is_network_name(network) or not self.is_known_network(network):
            raise ValidationError("network must be provided using eip155:<id> format.")
        if not is_valid_address(from_address):
            raise ValidationError("from must be a valid hex address.")
        if payload.get("to") and not is_valid_address(to):
            raise ValidationError("to must be a valid hex address.")
        if payload.get("contract") and not is_valid_address(contract):
            raise ValidationError("contract must be a valid hex address.")
        if "nonce" in payload and not _is_non_negative_number(nonce):
            raise ValidationError("nonce must be a non-negative number when provided.")
        if "value" in payload and not isinstance(value, str):
            raise ValidationError("value must be a string representing ETH.")
        if data and not is_hex_data(data):
            raise ValidationError("data must be a hex string.")
        if gas_price and not isinstance(gas_price, str):
            raise ValidationError("gas-price must be a string representing wei.")

        return {
            "network": network,
            "from_address": from_address,
            "to": to,
            "contract": contract,
            "nonce": nonce,
            "value": value,
            "data": data or None,
            "gas_price": gas_price or None,
        }


def _is_non_negative_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value) and value >= 0
    except OverflowError:
        # Integers beyond float range are not finite numbers.
        return False
