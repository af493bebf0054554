"""Inspect and drive the wallet provider GeroWallet injects into web pages.

Most functions evaluate a small script in the page and return plain
Python values. `find_connection_prompt` and `approve_connection` handle the
approval prompt the extension opens for a pending `enable()` request.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import anyio
from playwright.async_api import BrowserContext, Page

from gero_e2e.browser import Browser
from gero_e2e.config import Timeouts
from gero_e2e.selectors import role

logger = logging.getLogger(__name__)

PROVIDER = "gero"
EXTENSION_SCHEME = "chrome-extension://"


async def has_cardano_api(page: Page) -> bool:
    return await page.evaluate("() => typeof window.cardano !== 'undefined'")


async def has_wallet_provider(page: Page, provider: str = PROVIDER) -> bool:
    return await page.evaluate(
        "(name) => !!window.cardano && typeof window.cardano[name] !== 'undefined'",
        provider,
    )


async def provider_metadata(page: Page, provider: str = PROVIDER) -> Optional[Dict[str, Any]]:
    """`{name, icon, apiVersion}` of the provider, or None when it is absent."""
    return await page.evaluate(
        """(name) => {
            const wallet = window.cardano && window.cardano[name];
            if (!wallet) return null;
            return { name: wallet.name, icon: wallet.icon, apiVersion: wallet.apiVersion };
        }""",
        provider,
    )


async def provider_methods(page: Page, provider: str = PROVIDER) -> List[str]:
    """Names of the callable members the provider exposes."""
    return await page.evaluate(
        """(name) => {
            const wallet = window.cardano && window.cardano[name];
            if (!wallet) return [];
            return Object.keys(wallet).filter((key) => typeof wallet[key] === 'function').sort();
        }""",
        provider,
    )


async def is_enabled(page: Page, provider: str = PROVIDER) -> bool:
    return await page.evaluate(
        """async (name) => {
            const wallet = window.cardano && window.cardano[name];
            if (!wallet) return false;
            return await wallet.isEnabled();
        }""",
        provider,
    )


async def request_enable(page: Page, provider: str = PROVIDER) -> Dict[str, Any]:
    """Call `enable()` and report the outcome without waiting for approval UI.

    Returns `{"success": True, "api": bool}` or
    `{"success": False, "has_error": bool, "error_type": str, "error": str}`.
    """
    return await page.evaluate(
        """async (name) => {
            const wallet = window.cardano && window.cardano[name];
            if (!wallet) return { success: false, has_error: false, error: 'Wallet not found' };
            try {
                const api = await wallet.enable();
                return { success: true, api: !!api };
            } catch (error) {
                return {
                    success: false,
                    has_error: true,
                    error_type: error && error.constructor ? error.constructor.name : typeof error,
                    error: String(error && error.message || error),
                };
            }
        }""",
        provider,
    )


async def open_dapp_page(context: BrowserContext, url: str) -> Page:
    page = await context.new_page()
    await page.goto(url)
    await page.wait_for_load_state("domcontentloaded")
    return page


async def simulate_dapp_connection(
    context: BrowserContext,
    url: str = "https://example.com",
    provider: str = PROVIDER,
) -> Page:
    """Open `url` and fire an `enable()` request; returns the dApp page.

    The request is not awaited, so the caller can look for the approval
    prompt in the extension while it is pending.
    """
    page = await open_dapp_page(context, url)
    sent = await page.evaluate(
        """(name) => {
            const wallet = window.cardano && window.cardano[name];
            if (!wallet) return false;
            wallet.enable().catch(() => null);
            return true;
        }""",
        provider,
    )
    if sent:
        logger.debug(f"Connection request sent from {url}")
    else:
        logger.warning(f"No '{provider}' provider on {url}, nothing requested")
    return page


async def find_connection_prompt(
    context: BrowserContext,
    timeouts: Optional[Timeouts] = None,
    timeout: Optional[float] = None,
    poll_interval: float = 0.5,
) -> Optional[Browser]:
    """Wait for an extension page showing a connection request.

    The prompt may open in a new window or in an already open wallet page,
    so every extension page of the context is checked on each pass.
    Returns a `Browser` on that page, or None once `timeout` (default:
    `timeouts.dapp_connection`) has passed.
    """
    timeouts = timeouts or Timeouts()
    wait = timeouts.dapp_connection if timeout is None else timeout
    deadline = anyio.current_time() + wait
    while True:
        for page in list(context.pages):
            if not page.url.startswith(EXTENSION_SCHEME):
                continue
            browser = Browser(page, timeouts)
            if await browser.is_visible(role("dapp_connection_request"), 0):
                logger.info(f"Connection prompt open on {page.url}")
                return browser
        if anyio.current_time() >= deadline:
            logger.info(f"No connection prompt within {wait}s")
            return None
        await anyio.sleep(poll_interval)


async def approve_connection(prompt: Browser) -> None:
    await prompt.click(role("approve_button"))
    logger.info("Connection request approved")
