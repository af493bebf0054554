"""Blockfrost client for out-of-band confirmation of wallet activity.

The harness never drives the UI through Blockfrost; it only cross-checks
what the UI reported (a transaction hash, a balance) against the chain.

Usage:
    async with BlockfrostClient.from_config(config.blockfrost) as client:
        confirmed = await client.wait_for_confirmation(tx_hash)
        balance = await client.get_address_balance(address)

Polling semantics of `wait_for_confirmation()`:
    200        -> confirmed, return True
    404        -> not on chain yet, sleep and retry
    other HTTP -> terminal, return False
    transport  -> sleep and retry
    exhausted  -> return False (never raises)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import anyio
import httpx

from gero_e2e.cardano_utils import lovelace_to_ada
from gero_e2e.config import DEFAULT_BLOCKFROST_URL, BlockfrostConfig

logger = logging.getLogger(__name__)


@dataclass
class Amount:
    unit: str
    quantity: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Amount:
        return cls(unit=data.get("unit", ""), quantity=int(data.get("quantity", 0)))


@dataclass
class Utxo:
    """One unspent output as returned by `/addresses/{address}/utxos`."""

    tx_hash: str
    output_index: int
    amount: list[Amount] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Utxo:
        return cls(
            tx_hash=data.get("tx_hash", ""),
            output_index=data.get("output_index", 0),
            amount=[Amount.from_dict(a) for a in (data.get("amount") or [])],
        )

    @property
    def lovelace(self) -> int:
        return sum(a.quantity for a in self.amount if a.unit == "lovelace")


class BlockfrostClient:
    """Async client for the Blockfrost REST API.

    Args:
        base_url: API root including the version, e.g. `.../api/v0`
        api_key: Project id sent in the `project_id` header
        timeout: Per-request timeout in seconds
        transport: Custom httpx transport (tests route requests to a mock app)
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BLOCKFROST_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"project_id": api_key},
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: BlockfrostConfig,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> BlockfrostClient:
        return cls(api_key=config.api_key, base_url=config.url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> BlockfrostClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _get(self, endpoint: str) -> httpx.Response:
        return await self._client.get(endpoint)

    async def get_transaction(self, tx_hash: str) -> Optional[dict[str, Any]]:
        """Return the transaction record, or None while it is not on chain.

        Raises:
            httpx.HTTPStatusError: for any status other than 200/404
        """
        response = await self._get(f"/txs/{tx_hash}")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()

    async def get_address_utxos(self, address: str) -> list[Utxo]:
        """UTxOs at `address`; an empty list when the lookup fails."""
        try:
            response = await self._get(f"/addresses/{address}/utxos")
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(f"Error fetching UTxOs for {address[:20]}...: {exc}")
            return []
        return [Utxo.from_dict(u) for u in response.json()]

    async def get_address_balance(self, address: str) -> float:
        utxos = await self.get_address_utxos(address)
        return lovelace_to_ada(sum(u.lovelace for u in utxos))

    async def wait_for_confirmation(
        self,
        tx_hash: str,
        max_attempts: int = 30,
        interval: float = 10.0,
    ) -> bool:
        """Poll `/txs/{hash}` until the transaction is visible on chain."""
        for attempt in range(1, max_attempts + 1):
            try:
                response = await self._get(f"/txs/{tx_hash}")
            except httpx.TransportError as exc:
                logger.warning(f"Error checking transaction (attempt {attempt}/{max_attempts}): {exc}")
                await anyio.sleep(interval)
                continue

            if response.status_code == 200:
                logger.info(f"Transaction confirmed: {tx_hash}")
                return True
            if response.status_code == 404:
                logger.info(f"Waiting for transaction confirmation... ({attempt}/{max_attempts})")
                await anyio.sleep(interval)
                continue

            logger.error(
                f"Error checking transaction: {response.status_code} {response.reason_phrase}"
            )
            return False

        logger.error(f"Transaction not confirmed after {max_attempts} attempts")
        return False


async def request_faucet_funds(
    address: str,
    faucet_url: str,
    api_key: Optional[str] = None,
    timeout: float = 30.0,
) -> bool:
    """Ask the testnet faucet to fund `address`. Returns whether it accepted."""
    headers = {"X-API-Key": api_key} if api_key else {}
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(faucet_url, json={"address": address}, headers=headers)
    except httpx.HTTPError as exc:
        logger.error(f"Error requesting faucet funds: {exc}")
        return False

    if response.is_success:
        logger.info(f"Faucet funds requested for {address[:20]}...")
        return True
    logger.error(f"Faucet request failed: {response.status_code} {response.reason_phrase}")
    return False
