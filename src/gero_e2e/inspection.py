"""DOM dump helpers for the `inspect_*.py` diagnostic scripts.

Everything here prints to stdout; the output is meant for a human tuning
the selector fallbacks in `gero_e2e.selectors`.
"""
from __future__ import annotations

import argparse
import asyncio

from playwright.async_api import Page

OVERLAY_SELECTOR = ".v-overlay, .v-dialog, .modal, [role=\"dialog\"]"
OVERLAY_BUTTON_SELECTOR = ".v-overlay button, .v-dialog button, [role=\"dialog\"] button"


def banner(title: str) -> None:
    print(f"\n\n{'=' * 60}")
    print(f"STEP: {title}")
    print("=" * 60)


async def _text(page: Page, selector: str, index: int) -> str:
    return ((await page.locator(selector).nth(index).text_content()) or "").strip()


async def dump_buttons(page: Page, selector: str = "button", limit: int = 50, label: str = "Buttons") -> None:
    locator = page.locator(selector)
    count = await locator.count()
    print(f"\n{label} ({count}):")
    for index in range(min(count, limit)):
        button = locator.nth(index)
        text = ((await button.text_content()) or "").strip()
        print(f"  {index}. \"{text}\" (visible: {await button.is_visible()})")


async def dump_inputs(page: Page, limit: int = 30) -> None:
    locator = page.locator("input")
    count = await locator.count()
    print(f"\nInput fields ({count}):")
    for index in range(min(count, limit)):
        field = locator.nth(index)
        kind = await field.get_attribute("type")
        placeholder = await field.get_attribute("placeholder")
        print(f"  {index}. type=\"{kind}\", placeholder=\"{placeholder}\", visible={await field.is_visible()}")

    areas = page.locator("textarea")
    count = await areas.count()
    print(f"\nTextareas ({count}):")
    for index in range(count):
        area = areas.nth(index)
        placeholder = await area.get_attribute("placeholder")
        print(f"  {index}. placeholder=\"{placeholder}\", visible={await area.is_visible()}")


async def dump_overlays(page: Page) -> None:
    overlays = page.locator(OVERLAY_SELECTOR)
    count = await overlays.count()
    print(f"\nOverlays/dialogs: {count}")
    if count:
        await dump_buttons(page, OVERLAY_BUTTON_SELECTOR, label="Buttons in overlays")
        texts = [((await overlays.nth(i).text_content()) or "")[:200] for i in range(count)]
        print(f"Overlay text (first 200 chars): {texts}")


async def dump_links_and_headings(page: Page, limit: int = 10) -> None:
    links = page.locator("a")
    count = await links.count()
    print(f"\nLinks ({count}):")
    for index in range(min(count, limit)):
        link = links.nth(index)
        text = ((await link.text_content()) or "").strip()
        print(f"  {index}. \"{text}\" - href: {await link.get_attribute('href')}")

    print(f"\nPage title: {await page.title()}")
    for tag in ("h1", "h2"):
        headings = page.locator(tag)
        count = await headings.count()
        print(f"Found {count} {tag} elements")
        for index in range(count):
            print(f"  {tag.upper()}: \"{await _text(page, tag, index)}\"")


async def dump_state(page: Page) -> None:
    await dump_buttons(page)
    await dump_overlays(page)
    await dump_inputs(page)


def script_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--no-wait", action="store_true", help="Close the browser when done instead of waiting for Ctrl+C")
    parser.add_argument("--debug", action="store_true", help="Verbose harness logging")
    return parser


async def hold_open(no_wait: bool) -> None:
    """Keep the browser open for manual inspection until Ctrl+C."""
    if no_wait:
        return
    print("\n\nBrowser will stay open for inspection. Press Ctrl+C to close.")
    await asyncio.Event().wait()
