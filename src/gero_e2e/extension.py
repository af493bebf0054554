"""
Extension loader
================

Launches Chromium on a throwaway profile with the GeroWallet extension
force-loaded, learns the extension id from its background service worker and
opens extension-internal pages.

Usage:
    from gero_e2e.config import load_config
    from gero_e2e.extension import ExtensionClient

    async with ExtensionClient(load_config()) as client:
        await client.resolve_extension_id()
        page = await client.open_options()
"""
from __future__ import annotations

import logging
import shutil
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from playwright.async_api import BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from gero_e2e.config import HarnessConfig

logger = logging.getLogger(__name__)

EXTENSION_SCHEME = "chrome-extension"
PROFILE_PREFIX = "user-data-"

OPTIONS_PAGE = "options.html"
POPUP_PAGE = "popup.html"
SIDE_PANEL_PAGE = "sidepanel.html"
INDEX_PAGE = "index.html"


class ExtensionLoadError(RuntimeError):
    """The browser could not start or the extension never registered."""


def build_extension_url(extension_id: str, path: str) -> str:
    """Return `chrome-extension://<id>/<path>`, dropping one leading slash."""
    clean = path[1:] if path.startswith("/") else path
    return f"{EXTENSION_SCHEME}://{extension_id}/{clean}"


def extension_id_from_worker_url(url: str) -> str:
    """`chrome-extension://<id>/background.js` -> `<id>`."""
    parts = url.split("/")
    if len(parts) < 3 or not parts[2]:
        raise ExtensionLoadError(f"Cannot derive extension id from worker URL: {url!r}")
    return parts[2]


def cleanup_profiles(profile_root: Path) -> List[str]:
    """Remove every profile directory left behind by earlier sessions."""
    if not profile_root.is_dir():
        return []
    removed = []
    for entry in sorted(profile_root.iterdir()):
        if entry.is_dir() and entry.name.startswith(PROFILE_PREFIX):
            shutil.rmtree(entry, ignore_errors=True)
            removed.append(entry.name)
    if removed:
        logger.info(f"Removed {len(removed)} browser profile(s) from {profile_root}")
    return removed


class ExtensionClient:
    """One persistent Chromium context with the extension loaded.

    The profile directory is created per client and left on disk after
    `close()`; `cleanup_profiles()` removes them at the end of the suite.
    """

    def __init__(
        self,
        config: HarnessConfig,
        record_video: bool = False,
        extra_args: Sequence[str] = (),
    ) -> None:
        self.config = config
        self.record_video = record_video
        self.extra_args = list(extra_args)
        self.profile_dir: Optional[Path] = None
        self.extension_id: Optional[str] = None

        self._playwright: Optional[Playwright] = None
        self._context: Optional[BrowserContext] = None

    async def __aenter__(self) -> "ExtensionClient":
        await self.launch()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def context(self) -> BrowserContext:
        if not self._context:
            raise RuntimeError("Extension client not launched. Use 'async with' or call launch()")
        return self._context

    def launch_args(self) -> List[str]:
        path = str(self.config.extension_path)
        return [
            f"--disable-extensions-except={path}",
            f"--load-extension={path}",
            "--no-sandbox",
            "--disable-setuid-sandbox",
            *self.extra_args,
        ]

    def _new_profile_dir(self) -> Path:
        name = f"{PROFILE_PREFIX}{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"
        profile = self.config.profile_root / name
        profile.mkdir(parents=True, exist_ok=True)
        return profile

    async def launch(self) -> BrowserContext:
        """Start Playwright and a persistent context with the extension loaded."""
        self.profile_dir = self._new_profile_dir()
        width, height = self.config.viewport

        options: Dict[str, Any] = {
            "headless": self.config.headless,
            "args": self.launch_args(),
            "viewport": {"width": width, "height": height},
            "permissions": ["clipboard-read", "clipboard-write"],
        }
        if self.record_video:
            video_dir = self.config.artifacts_dir / "videos"
            video_dir.mkdir(parents=True, exist_ok=True)
            options["record_video_dir"] = str(video_dir)
            options["record_video_size"] = {"width": width, "height": height}

        logger.info(f"Launching Chromium with extension from {self.config.extension_path}")
        logger.debug(f"Profile directory: {self.profile_dir}")
        try:
            self._playwright = await async_playwright().start()
            self._context = await self._playwright.chromium.launch_persistent_context(
                str(self.profile_dir), **options
            )
        except PlaywrightError as exc:
            await self.close()
            message = str(exc)
            if "executable doesn't exist" in message.lower():
                message = "Playwright browsers not installed. Run 'playwright install chromium' and retry."
            raise ExtensionLoadError(f"Browser failed to start: {message}") from exc

        self._context.set_default_timeout(self.config.timeouts.element * 1000)
        return self._context

    async def resolve_extension_id(self, timeout: float | None = None) -> str:
        """Return the id of the loaded extension, waiting for its service worker."""
        if self.extension_id:
            return self.extension_id

        wait = self.config.timeouts.extension_load if timeout is None else timeout
        workers = self.context.service_workers
        if workers:
            worker_url = workers[0].url
        else:
            try:
                worker = await self.context.wait_for_event("serviceworker", timeout=wait * 1000)
            except PlaywrightError as exc:
                raise ExtensionLoadError(
                    f"No extension service worker registered within {wait}s "
                    f"(is {self.config.extension_path} a built extension?)"
                ) from exc
            worker_url = worker.url

        self.extension_id = extension_id_from_worker_url(worker_url)
        logger.info(f"Extension loaded with ID: {self.extension_id}")
        return self.extension_id

    def extension_url(self, path: str) -> str:
        if not self.extension_id:
            raise RuntimeError("Extension id unknown; call resolve_extension_id() first")
        return build_extension_url(self.extension_id, path)

    # ---- internal pages ---------------------------------------------------------
    async def new_page(self) -> Page:
        return await self.context.new_page()

    async def open_page(self, path: str) -> Page:
        """Open an extension-internal page in a new tab."""
        await self.resolve_extension_id()
        page = await self.context.new_page()
        url = self.extension_url(path)
        logger.debug(f"Opening {url}")
        await page.goto(url, timeout=self.config.timeouts.navigation * 1000)
        await page.wait_for_load_state("domcontentloaded")
        return page

    async def open_options(self) -> Page:
        return await self.open_page(OPTIONS_PAGE)

    async def open_popup(self) -> Page:
        return await self.open_page(POPUP_PAGE)

    async def open_side_panel(self) -> Page:
        return await self.open_page(SIDE_PANEL_PAGE)

    async def open_index(self) -> Page:
        return await self.open_page(INDEX_PAGE)

    async def close(self) -> None:
        """Close the context and stop Playwright. The profile stays on disk."""
        if self._context:
            try:
                await self._context.close()
            except PlaywrightError as exc:
                logger.warning(f"Error while closing browser context: {exc}")
            self._context = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None


# ---- extension storage ----------------------------------------------------------

async def get_extension_storage(page: Page, keys: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    """Read `chrome.storage.local` (all keys when `keys` is empty)."""
    return await page.evaluate(
        """(keys) => new Promise((resolve) => {
            chrome.storage.local.get(keys && keys.length ? keys : null, (result) => resolve(result));
        })""",
        list(keys) if keys else None,
    )


async def set_extension_storage(page: Page, data: Dict[str, Any]) -> None:
    await page.evaluate(
        """(data) => new Promise((resolve) => {
            chrome.storage.local.set(data, () => resolve());
        })""",
        data,
    )


async def clear_extension_storage(page: Page) -> None:
    await page.evaluate(
        """() => new Promise((resolve) => {
            chrome.storage.local.clear(() => resolve());
        })"""
    )


async def wait_for_storage_change(page: Page, key: str, timeout: float = 10.0) -> Any:
    """Wait until `key` changes in local storage and return its new value.

    Raises:
        TimeoutError: no change within `timeout` seconds
    """
    try:
        return await page.evaluate(
            """({ key, timeoutMs }) => new Promise((resolve, reject) => {
                const listener = (changes, area) => {
                    if (area === 'local' && changes[key]) {
                        clearTimeout(timer);
                        chrome.storage.onChanged.removeListener(listener);
                        resolve(changes[key].newValue);
                    }
                };
                const timer = setTimeout(() => {
                    chrome.storage.onChanged.removeListener(listener);
                    reject(new Error(`Storage change timeout for key: ${key}`));
                }, timeoutMs);
                chrome.storage.onChanged.addListener(listener);
            })""",
            {"key": key, "timeoutMs": int(timeout * 1000)},
        )
    except PlaywrightError as exc:
        if "Storage change timeout" in str(exc):
            raise TimeoutError(f"No storage change for {key!r} within {timeout}s") from exc
        raise
