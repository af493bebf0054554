"""Console capture, screenshots and failure artifacts (trace, video)."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from playwright.async_api import BrowserContext, ConsoleMessage, Page
from playwright.async_api import Error as PlaywrightError

logger = logging.getLogger(__name__)
page_logger = logging.getLogger("gero_e2e.page")

NOISE_MARKERS = ("DevTools", "extension")


def is_noise(text: str) -> bool:
    return any(marker in text for marker in NOISE_MARKERS)


def setup_console_capture(page: Page, debug: bool = False) -> List[Tuple[str, str]]:
    """Forward browser console output into logging.

    Errors and warnings are always logged, other messages only with `debug`.
    Returns the list the captured `(type, text)` entries are appended to.
    Console errors never fail a test by themselves.
    """
    captured: List[Tuple[str, str]] = []

    def on_console(message: ConsoleMessage) -> None:
        text = message.text
        if is_noise(text):
            return
        captured.append((message.type, text))
        if message.type == "error":
            page_logger.error(f"[PAGE ERROR] {text}")
        elif message.type == "warning":
            page_logger.warning(f"[PAGE WARN] {text}")
        elif debug:
            page_logger.debug(f"[PAGE] {text}")

    def on_page_error(error: PlaywrightError) -> None:
        captured.append(("pageerror", error.message))
        page_logger.error(f"[PAGE EXCEPTION] {error.message}")

    page.on("console", on_console)
    page.on("pageerror", on_page_error)
    return captured


def _slug(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "-", name).strip("-") or "page"


async def take_screenshot(page: Page, name: str, directory: Path) -> Path:
    """Full-page screenshot named `<name>-<timestamp>.png`."""
    directory.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S-%f")
    path = directory / f"{_slug(name)}-{stamp}.png"
    await page.screenshot(path=str(path), full_page=True)
    logger.info(f"Screenshot saved: {path}")
    return path


@dataclass
class ArtifactRecorder:
    """Keeps screenshot, trace and video for a failing test and drops them otherwise.

    Lifecycle: `start()` after the context exists, `stop(page, failed)` before it
    closes, `remember_videos(pages)` before close and `discard_videos()` after.
    """

    context: BrowserContext
    output_dir: Path
    test_name: str
    saved: List[Path] = field(default_factory=list)
    _videos: List[Path] = field(default_factory=list)
    _tracing: bool = False

    async def start(self) -> None:
        await self.context.tracing.start(screenshots=True, snapshots=True)
        self._tracing = True

    async def stop(self, page: Optional[Page], failed: bool) -> List[Path]:
        if failed and page is not None:
            try:
                self.saved.append(await take_screenshot(page, self.test_name, self.output_dir))
            except PlaywrightError as exc:
                logger.warning(f"Could not capture failure screenshot: {exc}")
        if self._tracing:
            if failed:
                self.output_dir.mkdir(parents=True, exist_ok=True)
                trace = self.output_dir / f"{_slug(self.test_name)}-trace.zip"
                await self.context.tracing.stop(path=str(trace))
                self.saved.append(trace)
                logger.info(f"Trace saved: {trace}")
            else:
                await self.context.tracing.stop()
            self._tracing = False
        return self.saved

    async def remember_videos(self, pages: Sequence[Page]) -> None:
        for page in pages:
            if page.video:
                self._videos.append(Path(await page.video.path()))

    def discard_videos(self) -> None:
        """Delete recorded videos (call after the context closed)."""
        for video in self._videos:
            video.unlink(missing_ok=True)
        self._videos.clear()

    @property
    def videos(self) -> List[Path]:
        return list(self._videos)
