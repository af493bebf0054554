#!/usr/bin/env python3
"""Generate the two Preprod test wallets used by the funded UI tests.

Writes TEST_WALLET_1_MNEMONIC / TEST_WALLET_2_MNEMONIC into `.env` (seeded
from `.env.defaults` when `.env` does not exist yet) and a summary to
`config/test-wallets.json`.

Usage:
    gero-e2e-setup-wallets            # generate and write
    gero-e2e-setup-wallets --dry-run  # print only
"""
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from gero_e2e.cardano_utils import generate_mnemonic
from gero_e2e.envfiles import REPO_ROOT, set_env_value
from gero_e2e.testdata import FAUCET_DOCS_URL

WALLET_NAMES = ("Test Wallet 1 (Primary)", "Test Wallet 2 (Secondary)")


@dataclass
class GeneratedWallet:
    name: str
    mnemonic: str
    address: Optional[str] = None


def generate_test_wallets() -> List[GeneratedWallet]:
    return [GeneratedWallet(name=name, mnemonic=generate_mnemonic(256)) for name in WALLET_NAMES]


def render_env(template: str, wallets: Sequence[GeneratedWallet]) -> str:
    """Return `template` with each wallet's mnemonic key set."""
    content = template
    for index, wallet in enumerate(wallets, start=1):
        content = set_env_value(content, f"TEST_WALLET_{index}_MNEMONIC", wallet.mnemonic)
    return content


def save_wallets_to_env(wallets: Sequence[GeneratedWallet], root: Path = REPO_ROOT) -> Path:
    env_path = root / ".env"
    template_path = env_path if env_path.exists() else root / ".env.defaults"
    template = template_path.read_text(encoding="utf-8") if template_path.exists() else ""
    env_path.write_text(render_env(template, wallets), encoding="utf-8")
    print(f"✅ Wallet mnemonics saved to {env_path}\n")
    return env_path


def wallet_config(wallets: Sequence[GeneratedWallet], network: str = "preprod") -> dict:
    return {
        "generated": datetime.now(timezone.utc).isoformat(),
        "network": network,
        "wallets": [
            {
                "id": index,
                "name": wallet.name,
                "mnemonic": wallet.mnemonic,
                "address": wallet.address or "Generate in wallet after first login",
                "note": f"Fund this wallet from Preprod faucet: {FAUCET_DOCS_URL}",
            }
            for index, wallet in enumerate(wallets, start=1)
        ],
    }


def save_wallets_to_config(wallets: Sequence[GeneratedWallet], root: Path = REPO_ROOT) -> Path:
    config_path = root / "config" / "test-wallets.json"
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(wallet_config(wallets), indent=2), encoding="utf-8")
    print(f"✅ Wallet configuration saved to {config_path}\n")
    return config_path


def display_wallet_info(wallets: Sequence[GeneratedWallet]) -> None:
    print("📋 Generated Test Wallets:\n")
    print("═" * 80)
    for wallet in wallets:
        print(f"\n{wallet.name}")
        print("─" * 80)
        print(f"Mnemonic ({len(wallet.mnemonic.split())} words):")
        print(wallet.mnemonic)
        print("─" * 80)
    print("\n" + "═" * 80)


def display_next_steps() -> None:
    print("\n📝 Next Steps:\n")
    print("1. The wallet mnemonics have been saved to your .env file")
    print("2. Import these wallets in GeroWallet (or let the tests create them)")
    print("3. Get the wallet addresses from GeroWallet")
    print("4. Fund the wallets from the Preprod faucet:")
    print(f"   {FAUCET_DOCS_URL}")
    print("5. Wait for funds to arrive (usually 1-2 minutes)")
    print("6. Run the UI tests: pytest ui_tests\n")
    print("⚠️  These are TEST wallets for PREPROD only!")
    print("   Never use these mnemonics on mainnet or with real funds!\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate GeroWallet E2E test wallets")
    parser.add_argument("--dry-run", action="store_true", help="Print the wallets without writing files")
    parser.add_argument(
        "--root",
        type=Path,
        default=REPO_ROOT,
        help="Directory holding .env / .env.defaults (default: repository root)",
    )
    args = parser.parse_args(argv)

    print("\n🚀 GeroWallet E2E Test Wallet Setup\n")
    try:
        wallets = generate_test_wallets()
        display_wallet_info(wallets)
        if args.dry_run:
            print("\n(dry run: nothing written)\n")
            return 0
        save_wallets_to_env(wallets, args.root)
        save_wallets_to_config(wallets, args.root)
        display_next_steps()
    except OSError as exc:
        print(f"\n❌ Error during setup: {exc}", file=sys.stderr)
        return 1

    print("✅ Setup completed successfully!\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
