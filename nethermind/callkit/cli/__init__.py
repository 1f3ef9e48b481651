import click
from dotenv import load_dotenv

from nethermind.callkit.cli.abi import abi_group
from nethermind.callkit.cli.transactions import transactions_group


@click.group()
def callkit_cli():
    """Command Line Interface for Nethermind Callkit"""
    load_dotenv()


# Adding Command Groups
callkit_cli.add_command(abi_group, name="abi")
callkit_cli.add_command(transactions_group, name="transactions")
