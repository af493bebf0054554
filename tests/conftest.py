"""Shared fixtures for the hermetic harness tests.

Nothing here starts a browser: driver tests run against `FakePage` and the
Blockfrost client talks to a Flask mock app, in-process through an httpx
transport or over a werkzeug server on a free port for the faucet.
"""
import sys
import threading
from pathlib import Path

import pytest
from werkzeug.serving import make_server

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gero_e2e.browser import Browser  # noqa: E402
from gero_e2e.cardano import CardanoDriver  # noqa: E402
from gero_e2e.config import BlockfrostConfig, HarnessConfig, Timeouts, WalletProfile  # noqa: E402
from tests.fake_page import FakePage  # noqa: E402
from tests.mock_blockfrost_api import (  # noqa: E402
    MOCK_BLOCKFROST_URL,
    MOCK_PROJECT_ID,
    create_mock_blockfrost_app,
    create_mock_transport,
    reset_mock_state,
)

# Every bound short enough that a missing element fails in well under a second
FAST = Timeouts(
    extension_load=0.2,
    wallet_creation=0.1,
    wallet_restore=0.1,
    wallet_login=0.1,
    transaction_build=0.1,
    transaction_sign=0.1,
    transaction_submit=0.1,
    transaction_confirmation=0.1,
    balance_update=0.1,
    staking_operation=0.1,
    dapp_connection=0.1,
    element=0.05,
    optional=0.02,
    action=0.5,
    navigation=0.5,
)


@pytest.fixture()
def harness_config(tmp_path):
    """A fully valid config rooted in tmp_path with a fake extension build."""
    extension = tmp_path / "extension"
    extension.mkdir()
    (extension / "manifest.json").write_text('{"manifest_version": 3, "name": "GeroWallet"}')
    password = "TestPassword123!"
    return HarnessConfig(
        extension_path=extension,
        blockfrost=BlockfrostConfig(api_key=MOCK_PROJECT_ID),
        wallet_password=password,
        wallet_1=WalletProfile("Test Wallet 1", "", password),
        wallet_2=WalletProfile("Test Wallet 2", "", password),
        timeouts=FAST,
        profile_root=tmp_path / "profiles",
        artifacts_dir=tmp_path / "test-results",
        screenshot_dir=tmp_path / "screenshots",
        report_dir=tmp_path / "playwright-report",
    )


@pytest.fixture()
def page():
    return FakePage()


@pytest.fixture()
def browser(page):
    return Browser(page, FAST, poll_interval=0.01)


@pytest.fixture()
def driver(browser, harness_config):
    cardano = CardanoDriver(browser, harness_config)
    cardano.settle_delay = 0
    return cardano


class MockBlockfrostServer:
    """Runs the mock Blockfrost app in a background thread."""

    def __init__(self, host: str = "127.0.0.1"):
        self.host = host
        self.server = make_server(host, 0, create_mock_blockfrost_app(), threaded=True)
        self.port = self.server.server_port
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)

    def start(self) -> None:
        # make_server binds the socket, so requests queue until serve_forever runs
        self.thread.start()

    def stop(self) -> None:
        self.server.shutdown()
        self.thread.join(timeout=5)

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"


@pytest.fixture()
def mock_blockfrost():
    reset_mock_state()
    server = MockBlockfrostServer()
    server.start()
    yield server
    server.stop()
    reset_mock_state()


@pytest.fixture()
def blockfrost_transport():
    reset_mock_state()
    yield create_mock_transport()
    reset_mock_state()


@pytest.fixture()
def blockfrost_config():
    return BlockfrostConfig(api_key=MOCK_PROJECT_ID, url=MOCK_BLOCKFROST_URL)
