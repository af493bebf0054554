"""
CIP-30 provider injection into ordinary web pages.

Most tests only inspect `window.cardano`. The connection test approves the
prompt the extension opens for an `enable()` request.
"""
import anyio
import pytest

from gero_e2e.dapp import (
    approve_connection,
    find_connection_prompt,
    has_cardano_api,
    has_wallet_provider,
    is_enabled,
    open_dapp_page,
    provider_metadata,
    provider_methods,
    request_enable,
    simulate_dapp_connection,
)
from gero_e2e.testdata import DAPP_URLS

pytestmark = pytest.mark.network


class TestDappConnection:

    @pytest.fixture(autouse=True)
    def setup(self, extension_client, extension_id, harness_config):
        self.context = extension_client.context
        self.timeouts = harness_config.timeouts

    async def _dapp(self, url=DAPP_URLS["test_dapp"]):
        return await open_dapp_page(self.context, url)

    @pytest.mark.asyncio
    async def test_injects_cardano_api(self):
        page = await self._dapp()

        assert await has_cardano_api(page), "window.cardano is missing"
        assert await has_wallet_provider(page), "GeroWallet provider is not injected"

    @pytest.mark.asyncio
    async def test_exposes_name_and_icon(self):
        page = await self._dapp()

        metadata = await provider_metadata(page)

        assert metadata, "Provider metadata unavailable"
        assert metadata.get("name"), f"Provider has no name: {metadata}"

    @pytest.mark.asyncio
    async def test_is_enabled_returns_bool(self):
        page = await self._dapp()

        assert isinstance(await is_enabled(page), bool)

    @pytest.mark.asyncio
    async def test_connection_request(self, created_wallet):
        """With a wallet set up, approving the prompt leaves the dApp page connected."""
        page = await simulate_dapp_connection(self.context, DAPP_URLS["test_dapp"])

        prompt = await find_connection_prompt(self.context, self.timeouts)
        if prompt is None:
            pytest.skip("Extension opened no connection prompt for enable()")
        await approve_connection(prompt)

        connected = False
        with anyio.move_on_after(self.timeouts.dapp_connection):
            while not connected:
                connected = await is_enabled(page)
                if not connected:
                    await anyio.sleep(0.5)
        assert connected, "dApp is not enabled after approving the connection"

    @pytest.mark.asyncio
    async def test_exposes_cip30_methods(self):
        page = await self._dapp()

        methods = await provider_methods(page)

        assert "enable" in methods, f"enable() missing from {methods}"
        assert "isEnabled" in methods, f"isEnabled() missing from {methods}"

    @pytest.mark.asyncio
    async def test_multiple_dapp_pages(self):
        first = await self._dapp(DAPP_URLS["test_dapp"])
        second = await self._dapp(DAPP_URLS["second_dapp"])

        assert await has_wallet_provider(first)
        assert await has_wallet_provider(second)

    @pytest.mark.asyncio
    async def test_api_survives_reload(self):
        page = await self._dapp()
        assert await has_wallet_provider(page)

        await page.reload(wait_until="domcontentloaded")

        assert await has_wallet_provider(page), "Provider missing after reload"

    @pytest.mark.asyncio
    async def test_enable_reports_outcome(self):
        """enable() either resolves or rejects with an APIError-like object."""
        page = await self._dapp()

        result = None
        with anyio.move_on_after(self.timeouts.dapp_connection):
            result = await request_enable(page)
        if result is None:
            pytest.skip("enable() is waiting for user approval in the extension")

        assert result["success"] is True or result["has_error"] is True, f"Unexpected enable() result: {result}"
