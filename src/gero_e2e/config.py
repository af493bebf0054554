"""Configuration for the GeroWallet E2E harness.

Values are resolved once per run from (highest priority first):
- the process environment
- `.env` (local secrets, never committed)
- `.env.defaults` (catalog of every key with its default)
- the hard-coded fallbacks below

The result is an immutable `HarnessConfig` that fixtures pass down the
fixture chain; nothing else in the harness reads the environment.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from gero_e2e.envfiles import REPO_ROOT, load_defaults

DEFAULT_BLOCKFROST_URL = "https://cardano-preprod.blockfrost.io/api/v0"
DEFAULT_FAUCET_URL = "https://faucet.preprod.world.dev.cardano.org/send-money"
DEFAULT_WALLET_PASSWORD = "TestPassword123!"

# Preprod network magic
PREPROD_MAGIC = 1


class ConfigError(RuntimeError):
    """Raised when the harness cannot run with the current configuration."""


@dataclass(frozen=True)
class NetworkConfig:
    name: str = "preprod"
    id: int = 0
    magic: int = PREPROD_MAGIC


@dataclass(frozen=True)
class BlockfrostConfig:
    api_key: str = ""
    url: str = DEFAULT_BLOCKFROST_URL

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class WalletProfile:
    """A wallet descriptor handed to the onboarding UI; never persisted here."""

    name: str
    mnemonic: str
    password: str

    @property
    def configured(self) -> bool:
        return bool(self.mnemonic.strip())

    @property
    def word_count(self) -> int:
        return len(self.mnemonic.split())


@dataclass(frozen=True)
class Timeouts:
    """Upper bounds (seconds) for every UI and network wait."""

    extension_load: float = 30.0
    wallet_creation: float = 30.0
    wallet_restore: float = 60.0
    wallet_login: float = 30.0
    transaction_build: float = 15.0
    transaction_sign: float = 15.0
    transaction_submit: float = 30.0
    transaction_confirmation: float = 300.0
    balance_update: float = 60.0
    staking_operation: float = 30.0
    dapp_connection: float = 15.0
    element: float = 10.0
    optional: float = 2.0
    action: float = 15.0
    navigation: float = 30.0


@dataclass(frozen=True)
class HarnessConfig:
    extension_path: Path
    headless: bool = False
    network: NetworkConfig = field(default_factory=NetworkConfig)
    blockfrost: BlockfrostConfig = field(default_factory=BlockfrostConfig)
    faucet_url: str = DEFAULT_FAUCET_URL
    faucet_api_key: Optional[str] = None
    wallet_password: str = DEFAULT_WALLET_PASSWORD
    wallet_1: WalletProfile = field(
        default_factory=lambda: WalletProfile("Test Wallet 1", "", DEFAULT_WALLET_PASSWORD)
    )
    wallet_2: WalletProfile = field(
        default_factory=lambda: WalletProfile("Test Wallet 2", "", DEFAULT_WALLET_PASSWORD)
    )
    timeouts: Timeouts = field(default_factory=Timeouts)
    profile_root: Path = REPO_ROOT / "tmp" / "profiles"
    artifacts_dir: Path = REPO_ROOT / "test-results"
    screenshot_dir: Path = REPO_ROOT / "screenshots"
    report_dir: Path = REPO_ROOT / "playwright-report"
    viewport: Tuple[int, int] = (1280, 720)
    ci: bool = False
    debug: bool = False

    @property
    def manifest_path(self) -> Path:
        return self.extension_path / "manifest.json"

    def problems(self) -> List[str]:
        """Return every reason the UI suite cannot start (empty when runnable)."""
        issues: List[str] = []
        if not self.blockfrost.configured:
            issues.append(
                "Missing required environment variable: BLOCKFROST_API_KEY "
                "(create a .env file based on .env.defaults)"
            )
        if not self.extension_path.is_dir():
            issues.append(
                f"Extension not found at: {self.extension_path} "
                "(build the GeroWallet extension first: cd gerowallet && npm run build)"
            )
        elif not self.manifest_path.is_file():
            issues.append(
                f"manifest.json not found at: {self.manifest_path} "
                "(the extension build may be incomplete)"
            )
        return issues

    def require_valid(self) -> "HarnessConfig":
        issues = self.problems()
        if issues:
            raise ConfigError("\n".join(issues))
        return self


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def load_config(
    environ: Mapping[str, str] | None = None,
    use_defaults: bool = True,
) -> HarnessConfig:
    """Build a `HarnessConfig` from the environment and `.env*` files.

    Args:
        environ: Mapping to read instead of `os.environ` (tests pass a dict)
        use_defaults: Overlay `.env.defaults`/`.env` below the environment
    """
    env = os.environ if environ is None else environ
    defaults = load_defaults() if use_defaults else {}

    def get(key: str, fallback: str = "") -> str:
        value = env.get(key)
        if value:
            return value
        return defaults.get(key) or fallback

    def path(key: str, fallback: Path) -> Path:
        raw = get(key)
        if not raw:
            return fallback
        candidate = Path(raw).expanduser()
        return candidate if candidate.is_absolute() else (REPO_ROOT / candidate).resolve()

    password = get("TEST_WALLET_PASSWORD", DEFAULT_WALLET_PASSWORD)

    try:
        network_id = int(get("CARDANO_NETWORK_ID", "0"))
    except ValueError as exc:
        raise ConfigError(f"CARDANO_NETWORK_ID must be an integer: {exc}") from exc

    return HarnessConfig(
        extension_path=path("EXTENSION_PATH", REPO_ROOT.parent / "gerowallet" / "extension"),
        # Extensions require headed mode unless the new headless Chromium is used
        headless=_truthy(get("PLAYWRIGHT_HEADLESS", "false")),
        network=NetworkConfig(
            name=get("CARDANO_NETWORK", "preprod"),
            id=network_id,
        ),
        blockfrost=BlockfrostConfig(
            api_key=get("BLOCKFROST_API_KEY"),
            url=get("BLOCKFROST_URL", DEFAULT_BLOCKFROST_URL).rstrip("/"),
        ),
        faucet_url=get("FAUCET_URL", DEFAULT_FAUCET_URL),
        faucet_api_key=get("FAUCET_API_KEY") or None,
        wallet_password=password,
        wallet_1=WalletProfile(
            name=get("TEST_WALLET_1_NAME", "Test Wallet 1"),
            mnemonic=get("TEST_WALLET_1_MNEMONIC"),
            password=password,
        ),
        wallet_2=WalletProfile(
            name=get("TEST_WALLET_2_NAME", "Test Wallet 2"),
            mnemonic=get("TEST_WALLET_2_MNEMONIC"),
            password=password,
        ),
        profile_root=path("PROFILE_ROOT", REPO_ROOT / "tmp" / "profiles"),
        artifacts_dir=path("ARTIFACTS_DIR", REPO_ROOT / "test-results"),
        screenshot_dir=path("SCREENSHOT_DIR", REPO_ROOT / "screenshots"),
        report_dir=path("REPORT_DIR", REPO_ROOT / "playwright-report"),
        ci=bool(env.get("CI")),
        debug=bool(env.get("DEBUG")),
    )


@lru_cache(maxsize=1)
def get_settings() -> HarnessConfig:
    """Process-wide configuration for scripts; fixtures use `load_config()`."""
    return load_config()
