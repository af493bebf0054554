"""
Wallet flow driver
==================

Drives GeroWallet onboarding to a known terminal state (dashboard visible)
or fails with a `UiTimeout`. Optional steps such as network selection or
consent checkboxes are skipped when the control is absent.

Onboarding as observed in the UI:

    welcome -> network chooser -> create|restore -> details form
            -> (consent) -> submitting -> dashboard -> intro carousel
"""
from __future__ import annotations

import logging
from typing import Optional

from gero_e2e.browser import Browser, ElementNotFound, UiTimeout
from gero_e2e.cardano_utils import extension_id_from_url
from gero_e2e.config import HarnessConfig
from gero_e2e.extension import build_extension_url
from gero_e2e.selectors import role

logger = logging.getLogger(__name__)

SUPPORTED_PHRASE_LENGTHS = (12, 15, 24)
WELCOME_ROUTE = "index.html#/welcome"


def phrase_length(mnemonic: str) -> int:
    """Return the word count of `mnemonic` if the restore UI offers it."""
    count = len(mnemonic.split())
    if count not in SUPPORTED_PHRASE_LENGTHS:
        raise ValueError(
            f"Unsupported mnemonic length {count}; expected one of {SUPPORTED_PHRASE_LENGTHS}"
        )
    return count


class WalletDriver:
    """Create, restore, unlock and lock a wallet through the extension UI."""

    # Seconds to let the UI settle after actions that animate (lock, dialogs)
    settle_delay = 1.0

    def __init__(self, browser: Browser, config: HarnessConfig) -> None:
        self.browser = browser
        self.config = config
        self.timeouts = config.timeouts

    # ---- onboarding steps -------------------------------------------------------
    async def select_network(self, name: Optional[str] = None) -> bool:
        """Pick `name` (default: configured network) in the network selector.

        Returns False when the selector or the option is not offered.
        """
        label = (name or self.config.network.name).capitalize()
        b = self.browser
        if not await b.click_if_visible(role("network_selector")):
            logger.debug("No network selector on this screen")
            return False
        if not await b.click_if_visible(role("network_option", network=label)):
            logger.warning(f"Network option '{label}' not offered, keeping current network")
            await b.press("Escape")
            return False
        logger.info(f"Selected network: {label}")
        return True

    async def _open_entry(self) -> None:
        await self.browser.wait_for(role("welcome_screen"), self.timeouts.element)
        await self.select_network()
        await self.browser.click_if_visible(role("create_import_entry"))

    async def start_create(self) -> None:
        """Move from the welcome screen to the create-wallet form."""
        await self._open_entry()
        await self.browser.click_if_visible(role("create_branch"))

    async def start_restore(self) -> None:
        """Move from the welcome screen to the restore-wallet form."""
        await self._open_entry()
        await self.browser.click_if_visible(role("restore_branch"))

    async def fill_passwords(self, password: str, confirmation: Optional[str] = None) -> None:
        fields = await self.browser.locate_all(role("password_input"), self.timeouts.element)
        if not fields:
            raise UiTimeout(
                name="fill_passwords",
                payload={"role": "password_input"},
                message="No password field visible",
            )
        await fields[0].fill(password)
        if len(fields) > 1:
            await fields[1].fill(password if confirmation is None else confirmation)

    async def fill_details(
        self,
        name: str,
        password: str,
        confirmation: Optional[str] = None,
        mnemonic: Optional[str] = None,
        require_mnemonic: bool = False,
    ) -> None:
        """Fill the wallet form: name, phrase if asked for, password pair.

        A form without a phrase input generates its own phrase. `mnemonic`
        is then dropped, or raises `ElementNotFound` with `require_mnemonic`.
        """
        b = self.browser
        await b.fill(role("wallet_name_input"), name)
        if mnemonic:
            if await b.is_visible(role("mnemonic_input")):
                await b.fill(role("mnemonic_input"), mnemonic)
            elif require_mnemonic:
                raise ElementNotFound(
                    name="fill_details",
                    payload={"role": "mnemonic_input"},
                    message="Form offers no phrase input; use restore_wallet for a known phrase",
                )
            else:
                logger.warning("Form offers no phrase input, the wallet gets a generated phrase")
        await self.fill_passwords(password, confirmation)

    async def accept_terms(self) -> int:
        checked = await self.browser.check_all(role("consent_checkbox"))
        if checked:
            logger.debug(f"Accepted {checked} consent checkbox(es)")
        return checked

    async def submit(self) -> None:
        await self.browser.click(role("submit_button"))

    async def attempt_submit(self) -> bool:
        """Click submit unless it is disabled. Returns whether it was clicked."""
        if await self.browser.is_disabled(role("submit_button")):
            logger.info("Submit button is disabled, form not submitted")
            return False
        await self.submit()
        return True

    async def enter_mnemonic_words(self, mnemonic: str) -> None:
        """Type each word into the next empty autocomplete input and accept it."""
        b = self.browser
        words = mnemonic.split()
        for position, word in enumerate(words, start=1):
            target = await b.first_empty(role("mnemonic_word_input"), self.timeouts.element)
            if target is None:
                raise UiTimeout(
                    name="enter_mnemonic_words",
                    payload={"position": position, "words": len(words)},
                    message=f"No empty word input left for word {position}/{len(words)}",
                )
            await target.fill(word)
            await target.press("Enter")

    # ---- flows ------------------------------------------------------------------
    async def create_wallet(
        self, name: str, mnemonic: Optional[str], password: str, require_mnemonic: bool = False
    ) -> None:
        logger.info(f"Creating wallet: {name}")
        await self.start_create()
        await self.fill_details(name, password, mnemonic=mnemonic, require_mnemonic=require_mnemonic)
        await self.accept_terms()
        await self.submit()
        # Key derivation happens inside the extension and is slow
        await self.browser.wait_for(role("dashboard"), self.timeouts.wallet_creation)
        await self.dismiss_onboarding()
        logger.info(f"Wallet created: {name}")

    async def restore_wallet(self, name: str, mnemonic: str, password: str) -> None:
        length = phrase_length(mnemonic)
        logger.info(f"Restoring wallet '{name}' from {length}-word phrase")
        await self.start_restore()
        await self.browser.click(role("phrase_length", length=length))
        await self.enter_mnemonic_words(mnemonic)
        await self.fill_details(name, password)
        await self.accept_terms()
        await self.submit()
        await self.browser.wait_for(role("restore_dashboard"), self.timeouts.wallet_restore)
        await self.dismiss_onboarding()
        logger.info(f"Wallet restored: {name}")

    async def dismiss_onboarding(self, max_steps: int = 10) -> int:
        """Click through the intro carousel until it finishes or disappears.

        Returns the number of clicks made.
        """
        b = self.browser
        clicks = 0
        while clicks < max_steps:
            if await b.click_if_visible(role("carousel_finish"), timeout=0):
                return clicks + 1
            if await b.click_if_visible(role("carousel_next")):
                clicks += 1
                continue
            # "Next" may have been replaced by "Finish" while we waited
            if await b.click_if_visible(role("carousel_finish"), timeout=0):
                clicks += 1
            return clicks
        logger.warning(f"Onboarding carousel still open after {max_steps} steps")
        return clicks

    # ---- session ----------------------------------------------------------------
    async def attempt_login(self, password: str) -> None:
        """Type `password` and submit without waiting for the outcome."""
        await self.browser.fill(role("password_input"), password)
        await self.browser.click(role("login_button"))

    async def login_wallet(self, password: str) -> None:
        logger.info("Logging into wallet...")
        await self.browser.wait_for(role("login_screen"), self.timeouts.element)
        await self.attempt_login(password)
        await self.browser.wait_for(role("dashboard"), self.timeouts.wallet_login)
        logger.info("Logged in successfully")

    async def lock_wallet(self) -> bool:
        """Lock the wallet via its lock control or the settings menu.

        Falls back to navigating to the welcome route. Returns True only when
        a lock control was actually clicked.
        """
        b = self.browser
        if await b.click_if_visible(role("lock_control")):
            await b.pause(self.settle_delay)
            return True
        if await b.click_if_visible(role("settings_button")):
            await b.pause(self.settle_delay / 2)
            if await b.click_if_visible(role("lock_menu_option")):
                await b.pause(self.settle_delay)
                return True
        extension_id = extension_id_from_url(b.url)
        if extension_id:
            logger.debug("No lock control found, navigating to the welcome route")
            await b.goto(build_extension_url(extension_id, WELCOME_ROUTE))
            await b.pause(self.settle_delay)
        return False

    async def is_login_screen_visible(self, timeout: Optional[float] = None) -> bool:
        return await self.browser.is_visible(role("login_screen"), timeout)

    async def is_dashboard_visible(self, timeout: Optional[float] = None) -> bool:
        return await self.browser.is_visible(role("dashboard"), timeout)

    async def submission_blocked(self) -> bool:
        """True when the form cannot go through: submit disabled or an error shown."""
        if await self.browser.is_disabled(role("submit_button")):
            return True
        return await self.browser.is_visible(role("error_message"))

    async def get_wallet_address(self) -> str:
        b = self.browser
        found = await b.locate(role("wallet_address"), self.timeouts.optional)
        if found is None and await b.click_if_visible(role("receive_button")):
            found = await b.locate(role("wallet_address"), self.timeouts.element)
        if found is None:
            raise ElementNotFound(
                name="get_wallet_address",
                payload={"url": b.url},
                message="Could not find wallet address in UI",
            )
        return ((await found.text_content()) or "").strip()
