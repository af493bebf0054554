"""UI roles and their fallback selectors.

GeroWallet ships no stable automation ids, so each logical control is
described by an ordered tuple of selectors. `Browser.locate()` tries them in
order and uses the first one with a visible match. To teach the harness a
new variant of a control, add one selector to the matching tuple.

Candidates may contain `{placeholders}`; fill them with `UiRole.format()`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Tuple

Pick = Literal["first", "last"]


@dataclass(frozen=True)
class UiRole:
    name: str
    candidates: Tuple[str, ...]
    pick: Pick = "first"

    def format(self, **values: object) -> "UiRole":
        """Return a copy with `{placeholders}` in every candidate substituted."""
        return UiRole(
            name=self.name,
            candidates=tuple(c.format(**values) for c in self.candidates),
            pick=self.pick,
        )


def _role(name: str, *candidates: str, pick: Pick = "first") -> UiRole:
    return UiRole(name=name, candidates=tuple(candidates), pick=pick)


_ALL = (
    # ---- onboarding ----------------------------------------------------------
    _role(
        "welcome_screen",
        '[data-testid="welcome-screen"]',
        ".welcome-container",
        'button:has-text("Create or Import Seed Phrase")',
    ),
    _role(
        "network_selector",
        '[data-testid="network-selector"]',
        'button:has-text("Cardano Mainnet")',
        'button:has-text("Cardano Preprod")',
        'button:has-text("Cardano Preview")',
    ),
    _role(
        "network_option",
        '.v-list-item:has-text("{network}")',
        '[role="option"]:has-text("{network}")',
        '[role="menuitem"]:has-text("{network}")',
    ),
    _role(
        "create_import_entry",
        'button:has-text("Create or Import Seed Phrase")',
        'button:has-text("Import Wallet")',
        'button:has-text("Restore Wallet")',
    ),
    _role(
        "create_branch",
        'text="Create Wallet"',
        'button:has-text("Create Wallet")',
        '[data-testid="create-wallet"]',
    ),
    _role(
        "restore_branch",
        'text="Restore Wallet"',
        'button:has-text("Restore Wallet")',
        'button:has-text("Import Wallet")',
        '[data-testid="restore-wallet"]',
    ),
    _role(
        "phrase_length",
        'button:has-text("{length} words")',
        'button:has-text("{length} Words")',
        'button:text-is("{length}")',
        '[role="tab"]:has-text("{length}")',
    ),
    _role(
        "mnemonic_word_input",
        'input[placeholder*="word" i]:visible',
        ".v-autocomplete input:visible",
        'input[aria-label*="word" i]:visible',
    ),
    _role(
        "wallet_name_input",
        'input[placeholder*="name" i]:visible',
        '[data-testid="wallet-name"] input',
        'input[type="text"]:visible',
    ),
    _role(
        "mnemonic_input",
        'textarea:visible',
        'input[placeholder*="phrase" i]:visible',
    ),
    _role("password_input", 'input[type="password"]:visible'),
    _role("consent_checkbox", 'input[type="checkbox"]:visible', '[role="checkbox"]:visible'),
    _role(
        "submit_button",
        'button:has-text("Create")',
        'button:has-text("Import")',
        'button:has-text("Restore")',
        'button[type="submit"]:visible',
        pick="last",
    ),
    _role(
        "dashboard",
        '[data-testid="dashboard"]',
        ".dashboard-container",
        'h1:has-text("Gero Dashboard")',
        "text=/Dashboard/i",
        "text=/Portfolio/i",
    ),
    _role("restore_dashboard", "text=/Portfolio/i", "text=/Dashboard/i"),
    _role(
        "carousel_next",
        '.v-dialog button:has-text("Next")',
        '[role="dialog"] button:has-text("Next")',
    ),
    _role(
        "carousel_finish",
        '.v-dialog button:has-text("Finish")',
        '.v-dialog button:has-text("Get Started")',
        '[role="dialog"] button:has-text("Finish")',
        '.v-dialog button:has-text("Done")',
    ),
    # ---- login / lock --------------------------------------------------------
    _role(
        "login_screen",
        '[data-testid="login-screen"]',
        ".login-container",
        'input[type="password"]:visible',
    ),
    _role(
        "login_button",
        'button:has-text("Login")',
        'button:has-text("Unlock")',
        'button[type="submit"]:visible',
    ),
    _role(
        "lock_control",
        'button[aria-label*="lock" i]',
        'button:has-text("Lock")',
        '[data-testid="lock-wallet"]',
        ".lock-button",
    ),
    _role(
        "settings_button",
        'button:has-text("Settings")',
        '[aria-label="Settings"]',
        ".settings-icon",
    ),
    _role("lock_menu_option", "text=/lock/i"),
    # ---- dashboard -----------------------------------------------------------
    _role("balance", '[data-testid="wallet-balance"]', ".balance", ".total-balance"),
    _role(
        "wallet_address",
        '[data-testid="wallet-address"]',
        ".wallet-address",
        ".receive-address",
    ),
    _role("receive_button", 'button:has-text("Receive")'),
    _role(
        "history_entry",
        'button:has-text("Transactions")',
        'a:has-text("Transactions")',
        '[href*="transactions"]',
    ),
    # ---- send ----------------------------------------------------------------
    _role("send_button", 'button:has-text("Send")', 'a:has-text("Send")'),
    _role(
        "send_form",
        '[data-testid="send-form"]',
        ".send-container",
        "text=/Quick Send/i",
        "text=/Recipient Address/i",
        "text=/Recipient Details/i",
    ),
    _role(
        "recipient_input",
        'input[placeholder*="address" i]:visible',
        'textarea[placeholder*="address" i]:visible',
        'textarea:visible',
    ),
    _role(
        "amount_input",
        'input[type="number"]:visible',
        'input[placeholder*="amount" i]:visible',
    ),
    _role(
        "next_button",
        'button:has-text("Next")',
        'button:has-text("Continue")',
    ),
    _role(
        "confirm_transaction",
        '[data-testid="confirm-transaction"]',
        ".confirm-container",
    ),
    _role(
        "confirm_send_button",
        'button:has-text("Confirm")',
        'button:has-text("Send")',
        pick="last",
    ),
    _role(
        "transaction_success",
        '[data-testid="transaction-success"]',
        ".success-message",
        ".tx-hash",
    ),
    _role("tx_hash", '[data-testid="tx-hash"]', ".tx-hash", "code:visible"),
    _role(
        "dialog_close",
        'button:has-text("×")',
        'button[aria-label="Close"]',
        ".v-dialog .v-btn--icon",
    ),
    # ---- staking -------------------------------------------------------------
    _role(
        "staking_entry",
        'button:has-text("Staking")',
        'a:has-text("Staking")',
        '[href*="staking"]',
    ),
    _role("staking_page", '[data-testid="staking-page"]', ".staking-container"),
    _role(
        "pool_search",
        'input[placeholder*="pool" i]:visible',
        'input[placeholder*="search" i]:visible',
    ),
    _role("pool_card", '[data-testid="pool-card"]', ".pool-item", ".stake-pool"),
    _role("pool_details", '[data-testid="pool-details"]', ".pool-detail"),
    _role(
        "delegate_button",
        'button:has-text("Delegate")',
        'button:has-text("Select")',
        'button:has-text("Stake")',
    ),
    _role(
        "confirm_delegation",
        '[data-testid="confirm-delegation"]',
        ".confirm-container",
        ".confirmation-modal",
    ),
    _role(
        "confirm_delegation_button",
        'button:has-text("Confirm")',
        'button:has-text("Delegate")',
        pick="last",
    ),
    _role(
        "delegation_success",
        '[data-testid="delegation-success"]',
        ".success-message",
        '[data-testid="tx-hash"]',
        ".tx-hash",
    ),
    _role(
        "delegation_status",
        '[data-testid="delegation-status"]',
        ".delegation-info",
        ".current-pool",
        "text=/delegated to/i",
    ),
    _role(
        "rewards",
        '[data-testid="staking-rewards"]',
        ".rewards-amount",
        ".available-rewards",
        ".rewards",
    ),
    _role("withdraw_button", 'button:has-text("Withdraw")', 'button:has-text("Claim")'),
    _role(
        "confirm_withdrawal",
        '[data-testid="confirm-withdrawal"]',
        ".confirm-container",
        ".confirmation-modal",
    ),
    _role(
        "confirm_withdrawal_button",
        'button:has-text("Confirm")',
        'button:has-text("Withdraw")',
        pick="last",
    ),
    _role(
        "withdrawal_success",
        '[data-testid="withdrawal-success"]',
        ".success-message",
        '[data-testid="tx-hash"]',
        ".tx-hash",
    ),
    # ---- feedback ------------------------------------------------------------
    _role(
        "error_message",
        ".error",
        ".error-message",
        '[role="alert"]',
        ".v-messages__message",
    ),
    _role("login_error", "text=/incorrect/i", "text=/invalid/i", "text=/wrong/i"),
    _role("insufficient_funds", "text=/insufficient/i"),
    # ---- dApp connector ------------------------------------------------------
    _role("dapp_connection_request", '[data-testid="dapp-connection"]', ".dapp-request"),
    _role("approve_button", 'button:has-text("Approve")', 'button:has-text("Connect")'),
    _role("reject_button", 'button:has-text("Reject")', 'button:has-text("Cancel")'),
)

ROLES: Dict[str, UiRole] = {r.name: r for r in _ALL}


def role(name: str, **values: object) -> UiRole:
    """Look up a role by name, substituting placeholders if values are given."""
    found = ROLES[name]
    return found.format(**values) if values else found
