"""Fixtures for the real-browser GeroWallet suite.

Every test gets its own persistent Chromium profile with the extension
loaded, so tests never share wallet state. Failing tests keep a screenshot,
a Playwright trace and the recorded video under the artifacts directory.
"""
import importlib.util
import sys
from pathlib import Path

import anyio
import pytest
import pytest_asyncio

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from gero_e2e.artifacts import ArtifactRecorder, setup_console_capture
from gero_e2e.browser import Browser
from gero_e2e.cardano import CardanoDriver
from gero_e2e.config import ConfigError, get_settings
from gero_e2e.extension import ExtensionClient
from gero_e2e.logging_setup import configure_logging
from gero_e2e.preflight import run_preflight, run_teardown
from gero_e2e.session import close_recorded_client
from gero_e2e.wallet import WalletDriver

# Time the wallet needs after creation to sync its balance from the chain
SYNC_PAUSE = 10.0


# ============================================================================
# Session hooks
# ============================================================================

@pytest.hookimpl(tryfirst=True)
def pytest_configure(config):
    """Route HTML/JSON reports into the configured directories."""
    settings = get_settings()
    if importlib.util.find_spec("pytest_html") and not getattr(config.option, "htmlpath", None):
        config.option.htmlpath = str(settings.report_dir / "report.html")
        config.option.self_contained_html = True
    if importlib.util.find_spec("pytest_jsonreport") and hasattr(config.option, "json_report"):
        config.option.json_report = True
        config.option.json_report_file = str(settings.artifacts_dir / "results.json")
    if settings.ci and importlib.util.find_spec("pytest_rerunfailures") and hasattr(config.option, "reruns"):
        if not config.option.reruns:
            config.option.reruns = 2


def pytest_sessionstart(session):
    settings = get_settings()
    configure_logging(settings.debug)
    try:
        run_preflight(settings)
    except ConfigError as exc:
        pytest.exit(f"Environment validation failed:\n{exc}", returncode=1)


def pytest_sessionfinish(session, exitstatus):
    run_teardown(get_settings())


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase's report as `item.rep_<phase>` for fixtures."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


def _failed(request) -> bool:
    reports = (getattr(request.node, f"rep_{when}", None) for when in ("setup", "call"))
    return any(report is not None and report.failed for report in reports)


# ============================================================================
# Extension and wallet fixtures
# ============================================================================

@pytest.fixture(scope="session")
def harness_config():
    return get_settings()


@pytest_asyncio.fixture()
async def extension_client(harness_config, request):
    """A fresh browser profile with the extension loaded, recorded for failures."""
    client = ExtensionClient(harness_config, record_video=True)
    await client.launch()
    recorder = None
    try:
        recorder = ArtifactRecorder(client.context, harness_config.artifacts_dir, request.node.name)
        await recorder.start()
        yield client
    finally:
        await close_recorded_client(client, recorder, failed=_failed(request))


@pytest_asyncio.fixture()
async def extension_id(extension_client):
    return await extension_client.resolve_extension_id()


@pytest.fixture()
def extension_url(extension_client, extension_id):
    """Build `chrome-extension://<id>/<path>` URLs for the loaded extension."""
    return extension_client.extension_url


@pytest_asyncio.fixture()
async def options_page(extension_client, extension_id, harness_config):
    """The wallet's main page (index.html) with console output captured."""
    page = await extension_client.open_index()
    setup_console_capture(page, debug=harness_config.debug)
    return page


@pytest.fixture()
def wallet_browser(options_page, harness_config):
    return Browser(options_page, harness_config.timeouts)


@pytest.fixture()
def wallet(wallet_browser, harness_config):
    return WalletDriver(wallet_browser, harness_config)


@pytest.fixture()
def cardano(wallet_browser, harness_config):
    return CardanoDriver(wallet_browser, harness_config)


@pytest_asyncio.fixture()
async def created_wallet(cardano, harness_config):
    """A freshly generated, unfunded wallet; yields the driver on its dashboard."""
    await cardano.create_wallet("E2E Fresh Wallet", None, harness_config.wallet_password)
    return cardano


@pytest_asyncio.fixture()
async def funded_cardano(cardano, harness_config):
    """Wallet 1 from the environment, restored in this profile and synced."""
    profile = harness_config.wallet_1
    if not profile.configured:
        pytest.skip("TEST_WALLET_1_MNEMONIC not set; funded wallet tests need a preprod wallet with tADA")
    await cardano.restore_wallet(profile.name, profile.mnemonic, profile.password)
    await anyio.sleep(SYNC_PAUSE)
    return cardano
