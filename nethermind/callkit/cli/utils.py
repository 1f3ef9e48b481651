import json
import logging
import os
from logging import Logger
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("cli")


def cli_logger_config(instrument_logger: Logger) -> Console:
    rich_console = Console()
    instrument_logger.handlers.clear()

    instrument_logger.addHandler(RichHandler(show_path=False, console=rich_console))
    instrument_logger.setLevel(logging.INFO)
    return rich_console


def group_options(*options):
    """Decorator to group multiple click options together"""

    def wrapper(function):
        for option in reversed(options):
            function = option(function)
        return function

    return wrapper


def parse_cli_value(raw_value: str) -> Any:
    """
    Parses a value passed on the command line.  JSON arrays are parsed for array and tuple arguments, and all
    other values are passed through as strings

    >>> parse_cli_value('["0x01", "2"]')
    ['0x01', '2']
    >>> parse_cli_value("1000")
    '1000'
    """
    if raw_value.startswith("["):
        try:
            return json.loads(raw_value)
        except json.JSONDecodeError:
            return raw_value
    return raw_value


def format_value(value: Any) -> Any:
    """Converts decoded values into JSON serializable values for printing"""
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, (list, tuple)):
        return [format_value(v) for v in value]
    return value


# -------------------------------------------------------
#    CLI Secrets, Connections, and Configurations
# -------------------------------------------------------
json_rpc_option = click.option(
    "--json-rpc",
    "-rpc",
    "json_rpc",
    default=os.environ.get("JSON_RPC"),
    help="RPC url to query.  If not provided, will use the JSON_RPC environment variable",
)
api_key_option = click.option(
    "--api-key",
    "api_key",
    default=os.environ.get("MORALIS_API_KEY"),
    help="Moralis API key for fetching transaction history.  If not provided, will use the MORALIS_API_KEY "
    "environment variable",
)


# -------------------------------------------------------
#    Call Parameters
# -------------------------------------------------------
network_id_option = click.option(
    "--network-id",
    "-n",
    "network_id",
    type=str,
    default="1",
    show_default=True,
    help="Chain ID of the network, as an integer or 0x prefixed hex string",
)
contract_address_option = click.option(
    "--contract-address",
    "-addr",
    "contract_address",
    type=str,
    required=True,
    help="Address of the contract",
)
type_option = click.option(
    "--type",
    "-t",
    "payload_types",
    type=str,
    multiple=True,
    help="ABI type of a method input.  Can be input multiple times, in parameter order",
)
value_option = click.option(
    "--value",
    "-v",
    "payload_values",
    type=str,
    multiple=True,
    help="Value of a method input.  Can be input multiple times, in parameter order.  Arrays and tuples "
    "are passed as JSON arrays",
)
