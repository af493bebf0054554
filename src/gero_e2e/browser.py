"""Thin wrapper around a Playwright page that resolves `UiRole`s."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import anyio
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from gero_e2e.config import Timeouts
from gero_e2e.selectors import UiRole

logger = logging.getLogger(__name__)

# Upper bound on matches inspected per selector while looking for visible ones
MAX_MATCHES = 50


@dataclass
class ToolError(Exception):
    """Raised when a browser operation fails."""

    name: str
    payload: Dict[str, Any]
    message: str

    def __str__(self) -> str:  # pragma: no cover - human readable helper
        return f"{self.name} failed ({self.message}) with payload={self.payload}"


class UiTimeout(ToolError):
    """An expected element did not become visible within its bound."""


class ElementNotFound(ToolError):
    """A required element is not present anywhere on the page."""


class Browser:
    """Convenience wrapper over a Playwright page with role-based lookups."""

    def __init__(
        self,
        page: Page,
        timeouts: Timeouts | None = None,
        poll_interval: float = 0.25,
    ) -> None:
        self._page = page
        self.timeouts = timeouts or Timeouts()
        self.poll_interval = poll_interval

    @property
    def page(self) -> Page:
        return self._page

    @property
    def url(self) -> str:
        return self._page.url

    # ---- navigation -------------------------------------------------------------
    async def goto(self, url: str, wait_until: str = "domcontentloaded") -> None:
        try:
            await self._page.goto(
                url, wait_until=wait_until, timeout=self.timeouts.navigation * 1000
            )
        except PlaywrightError as exc:
            raise ToolError(name="goto", payload={"url": url}, message=str(exc)) from exc

    async def reload(self) -> None:
        await self._page.reload(wait_until="domcontentloaded")

    async def pause(self, seconds: float) -> None:
        """Fixed delay, for UIs that animate before they accept input."""
        await anyio.sleep(seconds)

    async def press(self, key: str) -> None:
        await self._page.keyboard.press(key)

    # ---- role resolution --------------------------------------------------------
    async def _visible_matches(self, selector: str) -> List[Locator]:
        try:
            locator = self._page.locator(selector)
            count = min(await locator.count(), MAX_MATCHES)
            visible = []
            for index in range(count):
                candidate = locator.nth(index)
                if await candidate.is_visible():
                    visible.append(candidate)
            return visible
        except PlaywrightError as exc:
            # Navigation in flight or a selector the engine rejects; try again later
            logger.debug(f"Selector {selector!r} not evaluable yet: {exc}")
            return []

    async def _poll(self, role: UiRole, timeout: float) -> List[Locator]:
        """Poll the role's candidates in order until one has visible matches."""
        deadline = anyio.current_time() + timeout
        while True:
            for selector in role.candidates:
                matches = await self._visible_matches(selector)
                if matches:
                    logger.debug(f"{role.name}: resolved via {selector!r} ({len(matches)} visible)")
                    return matches
            if anyio.current_time() >= deadline:
                return []
            await anyio.sleep(self.poll_interval)

    async def locate(self, role: UiRole, timeout: float | None = None) -> Optional[Locator]:
        """Return the visible element for `role`, or None after `timeout` seconds."""
        matches = await self._poll(role, self.timeouts.element if timeout is None else timeout)
        if not matches:
            return None
        return matches[-1] if role.pick == "last" else matches[0]

    async def locate_all(self, role: UiRole, timeout: float | None = None) -> List[Locator]:
        """Return every visible match of the first candidate that has any."""
        return await self._poll(role, self.timeouts.element if timeout is None else timeout)

    async def is_visible(self, role: UiRole, timeout: float | None = None) -> bool:
        wait = self.timeouts.optional if timeout is None else timeout
        return await self.locate(role, wait) is not None

    async def wait_for(self, role: UiRole, timeout: float | None = None) -> Locator:
        """Like `locate()` but raises `UiTimeout` when nothing appears."""
        wait = self.timeouts.element if timeout is None else timeout
        found = await self.locate(role, wait)
        if found is None:
            raise UiTimeout(
                name="wait_for",
                payload={"role": role.name, "candidates": list(role.candidates)},
                message=f"'{role.name}' not visible within {wait}s on {self.url}",
            )
        return found

    async def first_empty(self, role: UiRole, timeout: float | None = None) -> Optional[Locator]:
        """Return the first visible input of `role` whose value is still empty."""
        for candidate in await self.locate_all(role, timeout):
            if not (await candidate.input_value()):
                return candidate
        return None

    # ---- actions ----------------------------------------------------------------
    async def click(self, role: UiRole, timeout: float | None = None, force: bool = False) -> Locator:
        target = await self.wait_for(role, timeout)
        try:
            await target.click(force=force, timeout=self.timeouts.action * 1000)
        except PlaywrightError as exc:
            raise ToolError(name="click", payload={"role": role.name}, message=str(exc)) from exc
        return target

    async def click_if_visible(self, role: UiRole, timeout: float | None = None) -> bool:
        """Click `role` when it shows up; absence is not an error."""
        target = await self.locate(role, self.timeouts.optional if timeout is None else timeout)
        if target is None:
            logger.debug(f"Optional '{role.name}' not present, skipping")
            return False
        await target.click(timeout=self.timeouts.action * 1000)
        return True

    async def fill(self, role: UiRole, value: str, timeout: float | None = None) -> Locator:
        target = await self.wait_for(role, timeout)
        try:
            await target.fill(value, timeout=self.timeouts.action * 1000)
        except PlaywrightError as exc:
            raise ToolError(name="fill", payload={"role": role.name}, message=str(exc)) from exc
        return target

    async def fill_nth(self, role: UiRole, index: int, value: str, timeout: float | None = None) -> None:
        """Fill the `index`-th visible match (e.g. the password confirmation field)."""
        matches = await self.locate_all(role, timeout)
        if len(matches) <= index:
            raise UiTimeout(
                name="fill_nth",
                payload={"role": role.name, "index": index, "visible": len(matches)},
                message=f"Only {len(matches)} visible '{role.name}' element(s), need #{index}",
            )
        await matches[index].fill(value, timeout=self.timeouts.action * 1000)

    async def check_all(self, role: UiRole, timeout: float | None = None) -> int:
        """Check every visible, unchecked checkbox of `role`. Returns how many were checked."""
        checked = 0
        for box in await self.locate_all(role, self.timeouts.optional if timeout is None else timeout):
            if not await box.is_checked():
                await box.check(timeout=self.timeouts.action * 1000)
                checked += 1
        return checked

    # ---- reading ----------------------------------------------------------------
    async def text(self, role: UiRole, timeout: float | None = None) -> str:
        target = await self.wait_for(role, timeout)
        return (await target.text_content()) or ""

    async def is_disabled(self, role: UiRole, timeout: float | None = None) -> bool:
        """True when the control is present and disabled; False when absent."""
        target = await self.locate(role, self.timeouts.optional if timeout is None else timeout)
        if target is None:
            return False
        return await target.is_disabled()

    async def body_text(self) -> str:
        return (await self._page.text_content("body")) or ""

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """Execute JavaScript in the page context."""
        try:
            return await self._page.evaluate(script, arg)
        except PlaywrightError as exc:
            raise ToolError(name="evaluate", payload={"script": script}, message=str(exc)) from exc

    async def screenshot(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        await self._page.screenshot(path=str(path), full_page=True)
        return path
