"""Compose the harness layers in dependency order.

    ExtensionClient -> extension id -> wallet page (Browser)
                    -> WalletDriver / CardanoDriver

Each layer only adds operations; teardown runs in reverse order.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from gero_e2e.artifacts import ArtifactRecorder, setup_console_capture
from gero_e2e.browser import Browser
from gero_e2e.cardano import CardanoDriver
from gero_e2e.config import HarnessConfig
from gero_e2e.extension import INDEX_PAGE, ExtensionClient

logger = logging.getLogger(__name__)


@dataclass
class WalletSession:
    config: HarnessConfig
    client: ExtensionClient
    extension_id: str
    page: Page
    browser: Browser
    cardano: CardanoDriver

    @property
    def wallet(self) -> CardanoDriver:
        # CardanoDriver is a WalletDriver; one instance serves both layers
        return self.cardano

    def extension_url(self, path: str) -> str:
        return self.client.extension_url(path)


@asynccontextmanager
async def open_wallet_session(
    config: HarnessConfig,
    page_path: str = INDEX_PAGE,
    record_video: bool = False,
) -> AsyncIterator[WalletSession]:
    """Launch the extension and yield a `WalletSession` on `page_path`."""
    async with ExtensionClient(config, record_video=record_video) as client:
        extension_id = await client.resolve_extension_id()
        page = await client.open_page(page_path)
        setup_console_capture(page, debug=config.debug)
        browser = Browser(page, config.timeouts)
        session = WalletSession(
            config=config,
            client=client,
            extension_id=extension_id,
            page=page,
            browser=browser,
            cardano=CardanoDriver(browser, config),
        )
        try:
            yield session
        finally:
            if not page.is_closed():
                await page.close()


async def close_recorded_client(
    client: ExtensionClient,
    recorder: Optional[ArtifactRecorder],
    failed: bool,
) -> None:
    """Save the failure artifacts of a test, then close `client` in any case.

    Artifact errors are logged, never raised: a crashed target must not keep
    Chromium and the Playwright driver alive. Videos of passing tests are
    deleted once the context is closed.
    """
    try:
        if recorder is not None:
            pages = client.context.pages
            extension_pages = [p for p in pages if p.url.startswith("chrome-extension://")]
            target = (extension_pages or pages or [None])[0]
            await recorder.stop(target, failed=failed)
            await recorder.remember_videos(pages)
    except PlaywrightError as exc:
        logger.warning(f"Could not save test artifacts: {exc}")
    finally:
        await client.close()
    if recorder is not None and not failed:
        recorder.discard_videos()
