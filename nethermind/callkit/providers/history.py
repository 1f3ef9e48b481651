import asyncio
import logging
from typing import Any, Protocol

import aiohttp
from aiohttp.client_exceptions import ClientError, ContentTypeError

from nethermind.callkit.config import ProviderConfig
from nethermind.callkit.exceptions import ProviderError
from nethermind.callkit.types.transactions import TransactionRecord
from nethermind.callkit.utils import chain_id_to_hex

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("providers").getChild("history")

FETCH_ERROR_MESSAGE = "Failed to fetch transaction logs."


class TransactionHistoryProvider(Protocol):
    """Returns the transaction history of an address, most recent transaction first"""

    async def fetch(self, network_id: int | str, address: str) -> list[TransactionRecord]:
        """Fetch transactions sent from or to an address"""
        raise NotImplementedError()


class MoralisTransactionProvider:
    """
    Fetches wallet transactions from the Moralis EVM API.  A single request is made per fetch, and failures are
    not retried.  Transport errors, unexpected status codes, and malformed responses are all raised as a
    ProviderError with a fixed message.

    """

    config: ProviderConfig

    def __init__(self, config: ProviderConfig):
        self.config = config

    def _session_kwargs(self) -> dict[str, Any]:
        session_kwargs: dict[str, Any] = {
            "headers": {"X-API-Key": self.config.api_key, "Accept": "application/json"},
        }
        if self.config.request_timeout is not None:
            session_kwargs["timeout"] = aiohttp.ClientTimeout(total=self.config.request_timeout)
        return session_kwargs

    async def fetch(self, network_id: int | str, address: str) -> list[TransactionRecord]:
        """
        Fetch the transactions of an address, ordered from most recent to oldest

        :param network_id: Chain ID, ie 1 for Ethereum or 97 for BSC Testnet
        :param address: Wallet or contract address
        :return: list of TransactionRecords in the order returned by the API
        """
        url = f"{self.config.base_url.rstrip('/')}/{address}"
        params = {"chain": chain_id_to_hex(network_id), "order": "DESC"}
        logger.debug(f"Fetching transactions for {address} on chain {params['chain']}")

        try:
            async with aiohttp.ClientSession(**self._session_kwargs()) as session:
                async with session.get(url, params=params) as response:
                    response_json = await self._handle_response(response)
            records = [TransactionRecord.from_json(tx) for tx in response_json["result"]]
        except ProviderError:
            raise
        except (ClientError, asyncio.TimeoutError, KeyError, TypeError, ValueError) as e:
            logger.debug(f"Error fetching transactions for {address}: {e.__class__.__name__}({e})")
            raise ProviderError(FETCH_ERROR_MESSAGE) from e

        logger.debug(f"Fetched {len(records)} transactions for {address}")
        return records

    @staticmethod
    async def _handle_response(response: aiohttp.ClientResponse) -> dict[str, Any]:
        match response.status:
            case 200:
                try:
                    return await response.json()
                except ContentTypeError as e:
                    logger.debug(f"Non JSON response from transaction API: {await response.text()}")
                    raise ProviderError(FETCH_ERROR_MESSAGE) from e
            case 401:
                logger.debug("Transaction API rejected the API key")
            case 429:
                logger.debug("Transaction API rate limit exceeded")
            case _:
                logger.debug(f"Unexpected status code {response.status} from transaction API: {await response.text()}")

        raise ProviderError(FETCH_ERROR_MESSAGE)
