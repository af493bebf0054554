"""Transaction and staking flows on top of `WalletDriver`.

The submitting operations (`send_transaction`, `delegate_stake`,
`withdraw_rewards`) change wallet state and may broadcast to the network.
They never retry; a failure mid-flow propagates to the caller as-is.
"""
from __future__ import annotations

import logging

from gero_e2e.cardano_utils import parse_balance
from gero_e2e.selectors import role
from gero_e2e.wallet import WalletDriver

logger = logging.getLogger(__name__)


class CardanoDriver(WalletDriver):
    """Send, balance and staking operations driven through the wallet UI."""

    async def _read_tx_hash(self) -> str:
        return (await self.browser.text(role("tx_hash"))).strip()

    async def _confirm_with_password(self, password: str, confirm_role: str) -> None:
        await self.browser.fill(role("password_input"), password)
        await self.browser.click(role(confirm_role))

    # ---- send -------------------------------------------------------------------
    async def open_send_dialog(self) -> bool:
        """Open the send dialog. False when Send is missing, disabled or opens nothing.

        An empty wallet renders Send disabled, so False is expected there.
        """
        b = self.browser
        send = await b.locate(role("send_button"), self.timeouts.optional)
        if send is None:
            logger.info("Send button not visible")
            return False
        if await send.is_disabled():
            logger.info("Send button is disabled (wallet has nothing to send)")
            return False
        await send.click(force=True)
        return await b.is_visible(role("send_form"), self.timeouts.element)

    async def close_send_dialog(self) -> bool:
        """Close the send dialog via its close control or Escape. True once it is gone."""
        b = self.browser
        if await b.click_if_visible(role("dialog_close")):
            await b.pause(self.settle_delay)
            if not await b.is_visible(role("send_form"), timeout=0):
                return True
        await b.press("Escape")
        await b.pause(self.settle_delay)
        return not await b.is_visible(role("send_form"), timeout=0)

    async def send_transaction(self, to_address: str, amount_ada: float, password: str) -> str:
        """Send `amount_ada` to `to_address` and return the transaction hash."""
        b = self.browser
        logger.info(f"Sending {amount_ada} ADA to {to_address[:20]}...")
        await b.click(role("send_button"))
        await b.wait_for(role("send_form"), self.timeouts.element)
        await b.fill(role("recipient_input"), to_address)
        await b.fill(role("amount_input"), str(amount_ada))
        await b.click(role("next_button"))
        await b.wait_for(role("confirm_transaction"), self.timeouts.transaction_build)
        await self._confirm_with_password(password, "confirm_send_button")
        await b.wait_for(role("transaction_success"), self.timeouts.transaction_submit)
        tx_hash = await self._read_tx_hash()
        logger.info(f"Transaction sent: {tx_hash}")
        return tx_hash

    async def check_balance(self) -> float:
        text = await self.browser.text(role("balance"), self.timeouts.element)
        balance = parse_balance(text)
        logger.info(f"Wallet balance: {balance} ADA")
        return balance

    # ---- staking ----------------------------------------------------------------
    async def open_staking(self) -> bool:
        """Navigate to the staking page. False when it never shows up."""
        b = self.browser
        if not await b.click_if_visible(role("staking_entry"), self.timeouts.element):
            logger.info("Staking entry not visible")
            return False
        return await b.is_visible(role("staking_page"), self.timeouts.element)

    async def is_delegated(self) -> bool:
        return await self.browser.is_visible(role("delegation_status"))

    async def available_rewards(self) -> float:
        """Rewards shown on the staking page, 0.0 when nothing is displayed."""
        rewards = await self.browser.locate(role("rewards"), self.timeouts.optional)
        if rewards is None:
            return 0.0
        return parse_balance(await rewards.text_content())

    async def delegate_stake(self, pool_id: str, password: str) -> str:
        b = self.browser
        logger.info(f"Delegating to pool: {pool_id[:20]}...")
        await b.click(role("staking_entry"))
        await b.wait_for(role("staking_page"), self.timeouts.element)
        await b.fill(role("pool_search"), pool_id)
        await b.click(role("delegate_button"))
        await b.wait_for(role("confirm_delegation"), self.timeouts.element)
        await self._confirm_with_password(password, "confirm_delegation_button")
        await b.wait_for(role("delegation_success"), self.timeouts.staking_operation)
        tx_hash = await self._read_tx_hash()
        logger.info(f"Delegation successful: {tx_hash}")
        return tx_hash

    async def withdraw_rewards(self, password: str) -> str:
        b = self.browser
        logger.info("Withdrawing staking rewards...")
        await b.click(role("staking_entry"))
        await b.wait_for(role("staking_page"), self.timeouts.element)
        await b.click(role("withdraw_button"))
        await b.wait_for(role("confirm_withdrawal"), self.timeouts.element)
        await self._confirm_with_password(password, "confirm_withdrawal_button")
        await b.wait_for(role("withdrawal_success"), self.timeouts.staking_operation)
        tx_hash = await self._read_tx_hash()
        logger.info(f"Withdrawal successful: {tx_hash}")
        return tx_hash
