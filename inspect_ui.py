#!/usr/bin/env python3
"""Dump what the GeroWallet welcome screen renders before and after "Create or Import"."""
import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from gero_e2e.browser import Browser
from gero_e2e.config import load_config
from gero_e2e.extension import ExtensionClient, INDEX_PAGE
from gero_e2e.inspection import (
    dump_buttons,
    dump_inputs,
    dump_links_and_headings,
    dump_overlays,
    hold_open,
    script_parser,
)
from gero_e2e.logging_setup import configure_logging
from gero_e2e.selectors import role


async def inspect(no_wait: bool) -> int:
    config = load_config()
    if not config.extension_path.is_dir():
        print(f"❌ Extension not found at: {config.extension_path}")
        return 1

    async with ExtensionClient(config) as client:
        extension_id = await client.resolve_extension_id()
        print(f"Extension ID: {extension_id}")
        print(f"Opening extension at: {client.extension_url(INDEX_PAGE)}")
        page = await client.open_index()
        # Let the app initialise
        await asyncio.sleep(5)

        print("\n=== WELCOME SCREEN ===")
        await dump_buttons(page, limit=10)

        browser = Browser(page, config.timeouts)
        if await browser.click_if_visible(role("create_import_entry")):
            print('\nClicked "Create or Import Seed Phrase"...')
            await asyncio.sleep(3)
            print('\n=== AFTER CLICKING "CREATE OR IMPORT" ===')
            await dump_overlays(page)
            await dump_buttons(page, "button:visible", limit=15, label="Visible buttons")
            await dump_inputs(page, limit=10)
        else:
            print('\n"Create or Import" entry not visible')

        await dump_links_and_headings(page)
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
