#!/usr/bin/env python3
"""Show the phrase-length buttons of the restore screen (12 / 15 / 24 words)."""
import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from gero_e2e.browser import Browser
from gero_e2e.config import load_config
from gero_e2e.extension import ExtensionClient
from gero_e2e.inspection import dump_buttons, hold_open, script_parser
from gero_e2e.logging_setup import configure_logging
from gero_e2e.selectors import role
from gero_e2e.wallet import SUPPORTED_PHRASE_LENGTHS, WalletDriver


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
        wallet = WalletDriver(browser, config)
        await wallet.start_restore()
        await asyncio.sleep(2)

        print("\n=== Inspecting phrase length buttons ===")
        await dump_buttons(page, "button:visible", label="Visible buttons")

        print("\n=== Phrase length roles ===")
        for length in SUPPORTED_PHRASE_LENGTHS:
            button = await browser.locate(role("phrase_length", length=length), timeout=1)
            if button is None:
                print(f"  {length} words: not found")
                continue
            html = (await button.inner_html())[:200]
            print(f"  {length} words: \"{((await button.text_content()) or '').strip()}\"")
            print(f"    HTML: {html}")

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
