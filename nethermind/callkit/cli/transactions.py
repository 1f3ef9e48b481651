import logging

import click

from nethermind.callkit.cli.utils import (
    api_key_option,
    contract_address_option,
    group_options,
    json_rpc_option,
    network_id_option,
    type_option,
    value_option,
)

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("cli")


@click.group("transactions", short_help="Transaction history matching & RPC queries")
def transactions_group():
    """Transaction history matching & RPC queries"""


@transactions_group.command()
@group_options(api_key_option, network_id_option, contract_address_option, type_option, value_option)
@click.option("--method", "-m", "method_name", type=str, required=True, help="Name of the contract method")
def match(
    api_key: str | None,
    network_id: str,
    contract_address: str,
    payload_types: tuple[str, ...],
    payload_values: tuple[str, ...],
    method_name: str,
):
    """Finds the most recent transaction to a contract calling a method with the given arguments"""
    from rich.table import Table
    from nethermind.callkit.cli.utils import cli_logger_config, parse_cli_value
    from nethermind.callkit.config import load_provider_config
    from nethermind.callkit.exceptions import CallkitError
    from nethermind.callkit.matching import get_transaction_hash_for_method
    from nethermind.callkit.providers.history import MoralisTransactionProvider

    console = cli_logger_config(root_logger)

    try:
        provider = MoralisTransactionProvider(load_provider_config(api_key))
        result = get_transaction_hash_for_method(
            network_id=network_id,
            contract_address=contract_address,
            method_name=method_name,
            payload_types=list(payload_types),
            payload_values=[parse_cli_value(value) for value in payload_values],
            provider=provider,
        )
    except CallkitError as e:
        console.print(f"[red]{e}")
        raise SystemExit(1)

    if result is None:
        console.print("[yellow]No matching transaction found")
        return

    table = Table(box=None, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Hash", result.hash)
    table.add_row("From", result.from_address)
    table.add_row("To", result.to_address or "")
    table.add_row("Value", result.value)
    table.add_row("Gas Limit", result.gas_limit)
    table.add_row("Status", "[green]Success" if result.status else "[red]Failed")
    console.print(table)


@transactions_group.command()
@group_options(json_rpc_option)
@click.argument("address")
def bytecode(json_rpc: str | None, address: str):
    """Prints the deployed bytecode at ADDRESS, and whether the address is a contract or a wallet"""
    import os
    from nethermind.callkit.cli.utils import cli_logger_config
    from nethermind.callkit.exceptions import CallkitError
    from nethermind.callkit.providers.rpc import create_provider, fetch_bytecode

    console = cli_logger_config(root_logger)

    try:
        code = fetch_bytecode(create_provider(json_rpc or os.environ.get("JSON_RPC", "")), address)
    except CallkitError as e:
        console.print(f"[red]{e}")
        raise SystemExit(1)

    if len(code) == 0:
        console.print(f"{address} is a wallet address (no deployed bytecode)")
        return

    console.print(f"{address} is a contract with {len(code)} bytes of bytecode")
    click.echo("0x" + bytes(code).hex())
