import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from nethermind.callkit.exceptions import ArgumentError

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("config")

DEFAULT_MORALIS_URL = "https://deep-index.moralis.io/api/v2.2"


@dataclass(frozen=True)
class ProviderConfig:
    """Connection settings for the transaction history provider"""

    api_key: str
    """ Moralis API key, sent in the X-API-Key header """

    base_url: str = DEFAULT_MORALIS_URL
    """ Base URL of the Moralis EVM API """

    request_timeout: float | None = None
    """ Total timeout in seconds.  If None, the aiohttp default timeout applies """


def load_provider_config(api_key: str | None = None) -> ProviderConfig:
    """
    Loads the provider configuration from environment variables.  A .env file in the working directory is
    loaded first if present.

        * ``MORALIS_API_KEY``: API key.  Required unless api_key is passed
        * ``MORALIS_BASE_URL``: Overrides the API base URL
        * ``MORALIS_TIMEOUT``: Request timeout in seconds

    :param api_key: API key taking precedence over the environment
    """
    load_dotenv()

    key = api_key or os.environ.get("MORALIS_API_KEY")
    if not key:
        raise ArgumentError("Moralis API key not specified... Set with '--api-key' or MORALIS_API_KEY env variable")

    timeout = os.environ.get("MORALIS_TIMEOUT")
    try:
        request_timeout = float(timeout) if timeout else None
    except ValueError:
        raise ArgumentError(f"MORALIS_TIMEOUT must be a number of seconds, got {timeout!r}") from None

    base_url = os.environ.get("MORALIS_BASE_URL", DEFAULT_MORALIS_URL).rstrip("/")
    logger.debug(f"Loaded provider config for {base_url} with timeout {request_timeout}")
    return ProviderConfig(api_key=key, base_url=base_url, request_timeout=request_timeout)
