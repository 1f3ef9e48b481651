import logging

from eth_utils import is_address, to_checksum_address
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import TransactionNotFound
from web3.types import TxData, TxReceipt

from nethermind.callkit.exceptions import ArgumentError, TransactionNotFoundError

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("providers").getChild("rpc")


def create_provider(json_rpc: str) -> Web3:
    """
    Creates a Web3 instance connected to a JSON RPC endpoint.  No request is made until the provider is used

    :param json_rpc: HTTP URL of the JSON RPC node
    """
    if not json_rpc:
        raise ArgumentError("JSON RPC URL not specified... Set with '--json-rpc' or JSON_RPC env variable")
    return Web3(Web3.HTTPProvider(json_rpc))


def fetch_bytecode(w3: Web3, address: str) -> HexBytes:
    """Returns the deployed bytecode at an address.  Empty for externally owned accounts"""
    if not is_address(address):
        raise ArgumentError(f"Invalid address: {address}")
    return w3.eth.get_code(to_checksum_address(address))


def is_contract_address(w3: Web3, address: str) -> bool:
    """True if the address is valid and has deployed bytecode"""
    if not is_address(address):
        return False
    return len(fetch_bytecode(w3, address)) > 0


def is_wallet_address(w3: Web3, address: str) -> bool:
    """True if the address is valid and has no deployed bytecode, ie an externally owned account"""
    if not is_address(address):
        return False
    return len(fetch_bytecode(w3, address)) == 0


def get_transaction(w3: Web3, transaction_hash: str) -> TxData:
    """
    Fetches a transaction by hash

    :raises TransactionNotFoundError: if the node does not return the transaction
    """
    try:
        transaction = w3.eth.get_transaction(transaction_hash)  # type: ignore[arg-type]
    except TransactionNotFound:
        transaction = None

    if not transaction:
        logger.debug(f"Transaction {transaction_hash} not found")
        raise TransactionNotFoundError("Transaction not found")
    return transaction


def get_transaction_receipt(w3: Web3, transaction_hash: str) -> TxReceipt:
    """
    Fetches the receipt of a mined transaction

    :raises TransactionNotFoundError: if the node does not return a receipt
    """
    try:
        receipt = w3.eth.get_transaction_receipt(transaction_hash)  # type: ignore[arg-type]
    except TransactionNotFound:
        receipt = None

    if not receipt:
        logger.debug(f"Receipt for {transaction_hash} not found")
        raise TransactionNotFoundError("Transaction receipt not found")
    return receipt
