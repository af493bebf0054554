"""Tests for the Blockfrost client against the mock Blockfrost server."""

from __future__ import annotations

import socket

import httpx
import pytest
import pytest_asyncio

from gero_e2e.blockfrost import BlockfrostClient, Utxo, request_faucet_funds
from tests.mock_blockfrost_api import (
    FAUCET_REQUESTS,
    MOCK_FAUCET_KEY,
    MOCK_PROJECT_ID,
    PROJECT_IDS,
    REQUEST_LOG,
    UTXO_ERRORS,
    script_transaction,
    seed_utxos,
)

TX = "ab" * 32
ADDRESS = "addr_test1" + "q" * 98


def _closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest_asyncio.fixture()
async def client(blockfrost_config, blockfrost_transport):
    async with BlockfrostClient.from_config(blockfrost_config, timeout=5.0, transport=blockfrost_transport) as bf:
        yield bf


# ---- wait_for_confirmation --------------------------------------------------------
@pytest.mark.asyncio
async def test_confirmed_transaction_returns_true_immediately(client):
    script_transaction(TX, 200)

    assert await client.wait_for_confirmation(TX, max_attempts=3, interval=0.01) is True
    assert REQUEST_LOG == [f"GET /txs/{TX}"]


@pytest.mark.asyncio
async def test_not_found_is_retried_until_confirmed(client):
    script_transaction(TX, 404, 404, 200)

    assert await client.wait_for_confirmation(TX, max_attempts=5, interval=0.01) is True
    assert len(REQUEST_LOG) == 3


@pytest.mark.asyncio
async def test_server_error_stops_polling(client):
    script_transaction(TX, 404, 500)

    assert await client.wait_for_confirmation(TX, max_attempts=5, interval=0.01) is False
    assert len(REQUEST_LOG) == 2


@pytest.mark.asyncio
async def test_attempts_exhausted_returns_false(client):
    script_transaction(TX, 404)

    assert await client.wait_for_confirmation(TX, max_attempts=3, interval=0.01) is False
    assert len(REQUEST_LOG) == 3


@pytest.mark.asyncio
async def test_wrong_project_id_is_terminal(blockfrost_config, blockfrost_transport):
    async with BlockfrostClient("wrong", base_url=blockfrost_config.url, transport=blockfrost_transport) as bf:
        script_transaction(TX, 200)
        assert await bf.wait_for_confirmation(TX, max_attempts=3, interval=0.01) is False
    assert REQUEST_LOG == [f"GET /txs/{TX}"]


@pytest.mark.asyncio
async def test_project_id_header_reaches_the_api(client):
    script_transaction(TX, 404, 200)

    assert await client.wait_for_confirmation(TX, max_attempts=3, interval=0.01) is True
    assert PROJECT_IDS == [MOCK_PROJECT_ID, MOCK_PROJECT_ID]


@pytest.mark.asyncio
async def test_transport_errors_are_retried_then_give_up():
    async with BlockfrostClient("key", base_url=f"http://127.0.0.1:{_closed_port()}", timeout=1.0) as bf:
        assert await bf.wait_for_confirmation(TX, max_attempts=2, interval=0.01) is False


# ---- transactions and utxos ---------------------------------------------------------
@pytest.mark.asyncio
async def test_get_transaction(client):
    script_transaction(TX, 404, 200)

    assert await client.get_transaction(TX) is None
    record = await client.get_transaction(TX)
    assert record["hash"] == TX


@pytest.mark.asyncio
async def test_get_transaction_raises_on_server_error(client):
    script_transaction(TX, 500)

    with pytest.raises(httpx.HTTPStatusError):
        await client.get_transaction(TX)


@pytest.mark.asyncio
async def test_get_address_utxos_and_balance(client):
    seed_utxos(ADDRESS, 1_500_000, 2_000_000)

    utxos = await client.get_address_utxos(ADDRESS)

    assert [u.lovelace for u in utxos] == [1_500_000, 2_000_000]
    assert all(len(u.amount) == 2 for u in utxos)
    assert await client.get_address_balance(ADDRESS) == 3.5


@pytest.mark.asyncio
async def test_unknown_address_has_no_utxos(client):
    assert await client.get_address_utxos(ADDRESS) == []
    assert await client.get_address_balance(ADDRESS) == 0.0


@pytest.mark.asyncio
async def test_utxo_lookup_failure_is_an_empty_list(client):
    UTXO_ERRORS[ADDRESS] = 500

    assert await client.get_address_utxos(ADDRESS) == []


def test_utxo_from_dict_counts_only_lovelace():
    utxo = Utxo.from_dict(
        {
            "tx_hash": TX,
            "output_index": 1,
            "amount": [
                {"unit": "lovelace", "quantity": "42"},
                {"unit": "token", "quantity": "1000"},
            ],
        }
    )

    assert utxo.lovelace == 42
    assert utxo.output_index == 1


# ---- faucet -----------------------------------------------------------------------
@pytest.mark.asyncio
async def test_faucet_request_accepted(mock_blockfrost):
    accepted = await request_faucet_funds(ADDRESS, f"{mock_blockfrost.url}/faucet", api_key=MOCK_FAUCET_KEY)

    assert accepted is True
    assert FAUCET_REQUESTS == [{"address": ADDRESS}]


@pytest.mark.asyncio
async def test_faucet_request_rejected(mock_blockfrost):
    assert await request_faucet_funds(ADDRESS, f"{mock_blockfrost.url}/faucet") is False
    assert FAUCET_REQUESTS == []


@pytest.mark.asyncio
async def test_faucet_unreachable():
    assert await request_faucet_funds(ADDRESS, f"http://127.0.0.1:{_closed_port()}/faucet", timeout=1.0) is False
