"""Cardano helpers used by the harness: mnemonics, shape checks, unit conversion."""
from __future__ import annotations

import math
import re
from typing import Optional, Union

from mnemonic import Mnemonic

LOVELACE_PER_ADA = 1_000_000

_ADDRESS_RE = re.compile(r"^(addr1|addr_test1)[a-z0-9]{98}$")
_STAKE_ADDRESS_RE = re.compile(r"^(stake1|stake_test1)[a-z0-9]{53}$")
_TX_HASH_RE = re.compile(r"^[a-f0-9]{64}$", re.IGNORECASE)
_POOL_ID_RE = re.compile(r"^pool1[a-z0-9]{51}$")
_BALANCE_RE = re.compile(r"[\d,]+\.?\d*")
_EXTENSION_URL_RE = re.compile(r"chrome-extension://([^/]+)")


def generate_mnemonic(strength: int = 256) -> str:
    """Return a fresh BIP-39 English phrase (24 words for the default strength)."""
    return Mnemonic("english").generate(strength=strength)


def is_valid_cardano_address(address: str) -> bool:
    return bool(_ADDRESS_RE.fullmatch(address))


def is_valid_stake_address(address: str) -> bool:
    return bool(_STAKE_ADDRESS_RE.fullmatch(address))


def is_valid_tx_hash(tx_hash: str) -> bool:
    return bool(_TX_HASH_RE.fullmatch(tx_hash))


def is_valid_pool_id(pool_id: str) -> bool:
    return bool(_POOL_ID_RE.fullmatch(pool_id))


def lovelace_to_ada(lovelace: Union[int, str]) -> float:
    amount = int(lovelace) if isinstance(lovelace, str) else lovelace
    return amount / LOVELACE_PER_ADA


def ada_to_lovelace(ada: float) -> int:
    """Convert ADA to lovelace, rounding down.

    The product is rounded to 6 decimals first so that values like 1.1 ADA,
    which are not exact in binary, do not floor one lovelace short.
    """
    return math.floor(round(ada * LOVELACE_PER_ADA, 6))


def format_ada(ada: float, decimals: int = 2) -> str:
    return f"{ada:.{decimals}f}"


def parse_balance(text: Optional[str]) -> float:
    """Extract the first numeric run from rendered balance text.

    >>> parse_balance("Balance: 1,234.56 ADA")
    1234.56
    """
    match = _BALANCE_RE.search(text or "")
    if not match:
        return 0.0
    digits = match.group(0).replace(",", "")
    # A bare run of commas (e.g. "Total, ADA") carries no digits
    if not digits.strip("."):
        return 0.0
    return float(digits)


def extension_id_from_url(url: str) -> Optional[str]:
    """Return the extension id from a `chrome-extension://<id>/...` URL."""
    match = _EXTENSION_URL_RE.search(url or "")
    return match.group(1) if match else None
