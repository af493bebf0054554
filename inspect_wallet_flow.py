#!/usr/bin/env python3
"""Walk the create-wallet onboarding step by step, dumping the DOM and a screenshot per step."""
import asyncio
import re
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from playwright.async_api import Page

from gero_e2e.browser import Browser
from gero_e2e.config import load_config
from gero_e2e.extension import ExtensionClient
from gero_e2e.inspection import banner, dump_buttons, dump_state, hold_open, script_parser
from gero_e2e.logging_setup import configure_logging
from gero_e2e.selectors import role


async def log_state(page: Page, step: str, screenshot_dir: Path) -> None:
    banner(step)
    screenshot_dir.mkdir(parents=True, exist_ok=True)
    slug = re.sub(r"\s+", "-", step).lower()
    path = screenshot_dir / f"inspect-{slug}.png"
    await page.screenshot(path=str(path))
    print(f"Screenshot: {path}")
    await dump_state(page)


async def inspect(no_wait: bool) -> int:
    config = load_config()
    if not config.extension_path.is_dir():
        print(f"❌ Extension not found at: {config.extension_path}")
        return 1

    async with ExtensionClient(config) as client:
        print(f"Extension ID: {await client.resolve_extension_id()}")
        page = await client.open_index()
        await asyncio.sleep(3)
        browser = Browser(page, config.timeouts)
        shots = config.screenshot_dir

        await log_state(page, "1-Initial-Welcome-Screen", shots)

        print("\n\n>>> Clicking network selector...")
        if await browser.click_if_visible(role("network_selector"), timeout=5):
            await asyncio.sleep(1.5)
            await log_state(page, "2-Network-Selector-Opened", shots)

            label = config.network.name.capitalize()
            print(f"\n\n>>> Selecting {label} network...")
            if await browser.click_if_visible(role("network_option", network=label), timeout=3):
                await asyncio.sleep(1.5)
                await log_state(page, f"3-{label}-Selected", shots)
            else:
                print(f"⚠ {label} option not found")

        print('\n\n>>> Clicking "Create or Import Seed Phrase"...')
        if await browser.click_if_visible(role("create_import_entry"), timeout=5):
            await asyncio.sleep(2)
            await log_state(page, "4-After-Create-Import-Click", shots)

            print('\n\n>>> Looking for "Create Wallet" in any element...')
            matches = page.locator('text="Create Wallet"')
            count = await matches.count()
            print(f'Elements with "Create Wallet" text: {count}')
            for index in range(count):
                element = matches.nth(index)
                tag = await element.evaluate("el => el.tagName")
                css = await element.evaluate("el => el.className")
                print(f"  {index}. <{tag}> class=\"{css}\" visible={await element.is_visible()}")

            await dump_buttons(
                page,
                '[class*="btn"], [class*="button"], [role="button"], div[class*="option"], div[class*="item"]',
                limit=20,
                label="Potentially clickable elements",
            )

            print('\n>>> Attempting to click "Create Wallet"...')
            if await browser.click_if_visible(role("create_branch")):
                await asyncio.sleep(2)
                await log_state(page, "5-After-Create-Wallet-Click", shots)
            else:
                print('✗ "Create Wallet" not visible')

        await hold_open(no_wait)
    return 0


def main() -> int:
    args = script_parser(__doc__).parse_args()
    configure_logging(args.debug)
    try:
        return asyncio.run(inspect(args.no_wait))
    except KeyboardInterrupt:
        print("\nClosed.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
