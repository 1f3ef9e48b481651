import asyncio
import logging
from typing import Any, Sequence

from nethermind.callkit.abi.encoder import encode_call
from nethermind.callkit.decoding.interface import calldata_to_bytes
from nethermind.callkit.exceptions import ArgumentError, DecodingError, LengthMismatchError
from nethermind.callkit.providers.history import TransactionHistoryProvider
from nethermind.callkit.types.abi import CallData
from nethermind.callkit.types.transactions import MatchResult, TransactionRecord

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("matching")


def build_expected_calldata(
    method_name: str,
    payload_types: Sequence[str],
    payload_values: Sequence[Any],
) -> CallData:
    """
    Builds the calldata a transaction calling method_name with payload_values would carry

    :raises ArgumentError: for invalid method names, non sequence parameters, or mismatched lengths
    """
    if not isinstance(method_name, str) or not method_name.strip():
        raise ArgumentError("Invalid method name or parameters provided.")
    if not isinstance(payload_types, (list, tuple)) or not isinstance(payload_values, (list, tuple)):
        raise ArgumentError("Payload parameters and values must be arrays.")

    try:
        return encode_call(method_name, payload_types, payload_values)
    except LengthMismatchError as e:
        raise ArgumentError(f"Payload parameters and values must have the same length.  {e}") from e


def find_matching_transaction(
    transactions: Sequence[TransactionRecord],
    expected: CallData,
) -> MatchResult | None:
    """
    Returns the first transaction, in the given order, whose input equals the expected calldata

    :param transactions: Transactions in provider order
    :param expected: Expected calldata
    """
    expected_bytes = expected.data
    for record in transactions:
        try:
            record_input = calldata_to_bytes(record.input)
        except DecodingError:
            logger.debug(f"Skipping transaction {record.hash} with invalid input {record.input!r}")
            continue

        if record_input == expected_bytes:
            return MatchResult.from_record(record)

    return None


async def find_transaction_for_method(
    network_id: int | str,
    contract_address: str,
    method_name: str,
    payload_types: Sequence[str],
    payload_values: Sequence[Any],
    provider: TransactionHistoryProvider,
) -> MatchResult | None:
    """
    Finds the most recent transaction to a contract that called method_name with payload_values.

    The expected calldata is computed locally, the transaction history of the contract is fetched once from the
    provider, and the first transaction with identical input data is returned.

    :param network_id: Chain ID
    :param contract_address: Address of the contract
    :param method_name: Name of the method, ie 'transfer'
    :param payload_types: ABI types of the method inputs, ie ['address', 'uint256']
    :param payload_values: Values of the method inputs
    :param provider: Transaction history provider
    :return: MatchResult, or None if no transaction matches
    """
    expected = build_expected_calldata(method_name, payload_types, payload_values)
    logger.debug(f"Searching transactions of {contract_address} for calldata {expected.hex()}")

    transactions = await provider.fetch(network_id, contract_address)
    if not transactions:
        logger.info(f"No transactions found for contract {contract_address}")
        return None

    result = find_matching_transaction(transactions, expected)
    if result is None:
        logger.info(f"None of {len(transactions)} transactions for {contract_address} match {expected.hex()}")
    else:
        logger.info(f"Found transaction {result.hash} matching {method_name}")
    return result


def get_transaction_hash_for_method(
    network_id: int | str,
    contract_address: str,
    method_name: str,
    payload_types: Sequence[str],
    payload_values: Sequence[Any],
    provider: TransactionHistoryProvider,
) -> MatchResult | None:
    """Synchronous version of :func:`find_transaction_for_method`"""
    return asyncio.run(
        find_transaction_for_method(
            network_id=network_id,
            contract_address=contract_address,
            method_name=method_name,
            payload_types=payload_types,
            payload_values=payload_values,
            provider=provider,
        )
    )
