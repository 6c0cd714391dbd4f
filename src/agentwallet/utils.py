from __future__ import annotations

import os
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")
HEX_DATA_PATTERN = re.compile(r"^0x[a-fA-F0-9]*$")
NETWORK_NAME_PATTERN = re.compile(r"^eip155:\d+$", re.IGNORECASE)

BALANCE_MODULUS = 500_000
BALANCE_DIVISOR = Decimal(1000)
BALANCE_QUANTUM = Decimal("0.000001")


def utc_now_rfc3339() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def normalize_text(value: Any) -> str:
    """Trim strings; anything that is not a string normalizes to ``""``."""
    return value.strip() if isinstance(value, str) else ""


def is_valid_address(value: Any) -> bool:
    return isinstance(value, str) and ADDRESS_PATTERN.match(value) is not None


def is_hex_data(value: Any) -> bool:
    return isinstance(value, str) and HEX_DATA_PATTERN.match(value) is not None


def is_network_name(value: Any) -> bool:
    return isinstance(value, str) and NETWORK_NAME_PATTERN.match(value) is not None


def chain_id(network: str) -> int:
    """Numeric chain id of an ``eip155:<id>`` name (0 when absent)."""
    _, _, tail = network.partition(":")
    return int(tail) if tail.isdigit() else 0


def mock_balance_eth(address: str, network: str) -> str:
    """
    Deterministic pseudo-balance for an address on a network.

    The first four address bytes, read as an unsigned integer, plus the chain
    id, reduced modulo 500000 and divided by 1000.

    Args:
        address: Valid 0x-prefixed address
        network: ``eip155:<id>`` network name

    Returns:
        Balance in ETH with six fractional digits (e.g. ``"193.139000"``)
    """
    prefix = int(address[2:10], 16)
    raw = (prefix + chain_id(network)) % BALANCE_MODULUS
    amount = (Decimal(raw) / BALANCE_DIVISOR).quantize(BALANCE_QUANTUM)
    return f"{amount:f}"


@dataclass(frozen=True)
class UuidV7:
    value: str

    def __str__(self) -> str:
        return self.value


def uuidv7() -> UuidV7:
    ts_ms = int(time.time() * 1000)
    time_bytes = ts_ms.to_bytes(6, "big")
    rand = int.from_bytes(os.urandom(10), "big")
    rand_a = (rand >> 68) & 0x0FFF
    rand_b = (rand >> 6) & ((1 << 62) - 1)

    byte6 = 0x70 | ((rand_a >> 8) & 0x0F)
    byte7 = rand_a & 0xFF
    byte8 = 0x80 | ((rand_b >> 56) & 0x3F)
    bytes9_15 = (rand_b & ((1 << 56) - 1)).to_bytes(7, "big")

    raw = bytearray()
    raw.extend(time_bytes)
    raw.append(byte6)
    raw.append(byte7)
    raw.append(byte8)
    raw.extend(bytes9_15)
    hexed = raw.hex()
    uuid = f"{hexed[0:8]}-{hexed[8:12]}-{hexed[12:16]}-{hexed[16:20]}-{hexed[20:32]}"
    return UuidV7(uuid)
