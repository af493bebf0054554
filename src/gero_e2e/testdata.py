"""Static test data for the UI suite.

Wallet credentials, network and API settings are configuration and live in
`gero_e2e.config`; this module only holds literals the tests share.
"""
from __future__ import annotations

from typing import Dict

TEST_AMOUNTS: Dict[str, float] = {
    "min_transfer": 1.5,  # 1 ADA minimum UTxO + fees
    "small_transfer": 5,
    "medium_transfer": 10,
    "large_transfer": 50,
}

# Deposit (2 ADA) plus fees and headroom
MIN_STAKING_BALANCE = 5

# Preprod pools. Replace with real ids before running delegation tests.
TEST_POOLS: Dict[str, str] = {
    "pool1": "pool1" + "q" * 51,
    "pool2": "pool1" + "q" * 51,
}

TEST_RECIPIENT_ADDRESS = (
    "addr_test1qz2fxv2umyhttkxyxp8x0dlpdt3k6cwng5pxj3jhsydzer3jcu5d8ps7zex2k2"
    "xt3uqxgjqnnj83ws8lhrn648jjxtwq2ytjqp"
)

KNOWN_RESTORE_MNEMONIC = (
    "manage metal also spy ignore sick trip frequent simple blade bright "
    "stool pencil neither can"
)

KNOWN_IMPORT_MNEMONIC = " ".join(
    ["test", "walk", "nut", "penalty", "hip", "pave", "soap", "entry", "language", "right", "filter", "choice"] * 2
)

INVALID_MNEMONIC = "invalid mnemonic phrase with wrong words"
WEAK_PASSWORD = "weak"
MISMATCHED_PASSWORD = "DifferentPassword123!"
WRONG_PASSWORD = "WrongPassword123!"

DAPP_URLS: Dict[str, str] = {
    "test_dapp": "https://example.com",
    "second_dapp": "https://example.org",
}

EXPECTED_ERRORS: Dict[str, str] = {
    "invalid_password": "Invalid password",
    "insufficient_funds": "Insufficient funds",
    "invalid_address": "Invalid address",
    "network_error": "Network error",
    "transaction_too_large": "Transaction too large",
}

EXPECTED_SUCCESS: Dict[str, str] = {
    "wallet_created": "Wallet created successfully",
    "transaction_sent": "Transaction sent successfully",
    "staking_delegated": "Delegation successful",
    "rewards_withdrawn": "Rewards withdrawn successfully",
}

FAUCET_DOCS_URL = "https://docs.cardano.org/cardano-testnet/tools/faucet"
