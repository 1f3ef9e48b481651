import logging

import click

from nethermind.callkit.cli.utils import group_options, type_option, value_option

# isort: skip_file
# pylint: disable=import-outside-toplevel

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("cli")


@click.group("abi", short_help="Selectors, ABI encoding & calldata decoding")
def abi_group():
    """Selectors, ABI encoding & calldata decoding"""


@abi_group.command()
@click.argument("method_name")
@click.argument("payload_types", nargs=-1)
def selector(method_name: str, payload_types: tuple[str, ...]):
    """Prints the 4 byte selector of METHOD_NAME called with PAYLOAD_TYPES"""
    from nethermind.callkit.abi.selector import canonical_signature, generate_method_signature
    from nethermind.callkit.cli.utils import cli_logger_config
    from nethermind.callkit.exceptions import CallkitError

    console = cli_logger_config(root_logger)

    try:
        signature = canonical_signature(method_name, list(payload_types))
        method_selector = generate_method_signature(method_name, list(payload_types))
    except CallkitError as e:
        console.print(f"[red]{e}")
        raise SystemExit(1)

    logger.info(f"Canonical signature: {signature}")
    click.echo(method_selector)


@abi_group.command()
@click.argument("function_signature")
def function_selector(function_signature: str):
    """Prints the 4 byte selector of a full FUNCTION_SIGNATURE, ie 'transfer(address,uint256)'"""
    from nethermind.callkit.cli.utils import cli_logger_config
    from nethermind.callkit.exceptions import CallkitError
    from nethermind.callkit.signatures import generate_function_selector

    console = cli_logger_config(root_logger)

    try:
        click.echo(generate_function_selector(function_signature))
    except CallkitError as e:
        console.print(f"[red]{e}")
        raise SystemExit(1)


@abi_group.command()
@group_options(type_option, value_option)
@click.option("--method", "method_name", type=str, default=None, help="Prefix the output with the method selector")
def encode(payload_types: tuple[str, ...], payload_values: tuple[str, ...], method_name: str | None):
    """Encodes values with the Ethereum ABI, and prints the encoded hex"""
    from nethermind.callkit.abi.encoder import encode_call, encode_payload_data
    from nethermind.callkit.cli.utils import cli_logger_config, parse_cli_value
    from nethermind.callkit.exceptions import CallkitError

    console = cli_logger_config(root_logger)
    values = [parse_cli_value(value) for value in payload_values]

    try:
        if method_name:
            click.echo(encode_call(method_name, list(payload_types), values).hex())
        else:
            click.echo(encode_payload_data(list(payload_types), values))
    except CallkitError as e:
        console.print(f"[red]{e}")
        raise SystemExit(1)


@abi_group.command()
@click.argument("abi_json", type=click.File("r"))
@click.argument("calldata")
def decode(abi_json, calldata: str):
    """
    Decodes CALLDATA using the contract ABI stored in ABI_JSON.  ABI_JSON can be a list of ABI entries, or a
    compiler artifact with an 'abi' key
    """
    import json
    from rich.markup import escape
    from rich.table import Table
    from nethermind.callkit.cli.utils import cli_logger_config, format_value
    from nethermind.callkit.decoding import ContractInterface
    from nethermind.callkit.exceptions import CallkitError, SelectorNotFoundError
    from nethermind.callkit.utils import pprint_list

    console = cli_logger_config(root_logger)

    try:
        abi_data = json.loads(abi_json.read())
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid ABI JSON in {escape(abi_json.name)}: {escape(str(e))}")
        raise SystemExit(1)

    if isinstance(abi_data, dict):
        abi_data = abi_data.get("abi", [])

    try:
        interface = ContractInterface(abi_data, abi_name=abi_json.name)
        decoded = interface.decode_function_data(calldata)
    except SelectorNotFoundError as e:
        console.print(f"[red]{escape(str(e))}")
        console.print("[bold]Available Functions:")
        for line in pprint_list(interface.function_signatures(), console.width - 4):
            console.print(f"  {escape(line)}")
        raise SystemExit(1)
    except CallkitError as e:
        console.print(f"[red]{escape(str(e))}")
        raise SystemExit(1)

    table = Table(title=escape(decoded.signature), box=None)
    table.add_column("Parameter", style="bold")
    table.add_column("Type")
    table.add_column("Value")
    for (name, value), abi_type in zip(decoded.named_arguments().items(), decoded.fragment.inputs):
        table.add_row(name, abi_type.canonical, escape(json.dumps(format_value(value))))

    console.print(table)
