import logging
import re
from typing import Any

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_typing import ChecksumAddress
from eth_utils import is_hex

from nethermind.callkit.abi.selector import generate_method_signature
from nethermind.callkit.exceptions import AbiTypeError, ArgumentError

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("signatures")

_SIGNATURE_PATTERN = re.compile(r"^\s*([A-Za-z_$][A-Za-z0-9_$]*)\s*\((.*)\)\s*$")


def _split_types(type_list: str) -> list[str]:
    """Splits a comma separated type list, ignoring commas inside tuples"""
    if not type_list.strip():
        return []

    types, depth, token_start = [], 0, 0
    for index, char in enumerate(type_list):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "," and depth == 0:
            types.append(type_list[token_start:index])
            token_start = index + 1
    types.append(type_list[token_start:])
    return types


def generate_function_selector(function_signature: str) -> str:
    """
    Generates the 4 byte selector for a full function signature.  Types are normalized before hashing

    >>> generate_function_selector("transfer(address,uint256)")
    '0xa9059cbb'
    >>> generate_function_selector("transfer(address, uint)")
    '0xa9059cbb'

    """
    if not function_signature or not isinstance(function_signature, str):
        raise ArgumentError("Invalid function signature provided.")

    match = _SIGNATURE_PATTERN.match(function_signature)
    if match is None:
        raise ArgumentError("Invalid function signature provided.")

    try:
        return generate_method_signature(match.group(1), _split_types(match.group(2)))
    except AbiTypeError as e:
        raise ArgumentError("Invalid function signature provided.") from e


def _validate_typed_data(domain: Any, types: Any, message: Any) -> None:
    if not isinstance(domain, dict):
        raise ArgumentError("Typed data domain must be a dict")
    if not isinstance(types, dict) or not types:
        raise ArgumentError("Typed data types must be a non-empty dict")
    if not isinstance(message, dict):
        raise ArgumentError("Typed data message must be a dict")


def sign_typed_data(
    domain: dict[str, Any],
    types: dict[str, list[dict[str, str]]],
    message: dict[str, Any],
    signer: LocalAccount,
) -> str:
    """
    Signs EIP-712 typed data.  Signing is delegated to the eth-account signer

    :param domain: EIP-712 domain, ie {"name": ..., "version": ..., "chainId": ..., "verifyingContract": ...}
    :param types: Struct definitions, excluding the EIP712Domain type
    :param message: Values of the primary struct
    :param signer: eth-account LocalAccount holding the private key
    :return: 0x prefixed 65 byte signature
    """
    _validate_typed_data(domain, types, message)
    if not isinstance(signer, LocalAccount):
        raise ArgumentError("Signer must be an eth_account LocalAccount")

    signed = signer.sign_typed_data(domain_data=domain, message_types=types, message_data=message)
    return "0x" + bytes(signed.signature).hex()


def recover_signer(
    domain: dict[str, Any],
    types: dict[str, list[dict[str, str]]],
    message: dict[str, Any],
    signature: str | bytes,
) -> ChecksumAddress:
    """
    Recovers the address that signed EIP-712 typed data

    :param domain: EIP-712 domain the message was signed with
    :param types: Struct definitions, excluding the EIP712Domain type
    :param message: Values of the primary struct
    :param signature: 65 byte signature as bytes or 0x prefixed hex
    :return: Checksummed signer address
    """
    _validate_typed_data(domain, types, message)
    if not isinstance(signature, (bytes, str)) or (isinstance(signature, str) and not is_hex(signature)):
        raise ArgumentError("Signature must be bytes or a hex string")

    signable = encode_typed_data(domain_data=domain, message_types=types, message_data=message)
    signer = Account.recover_message(signable, signature=signature)
    logger.debug(f"Recovered signer {signer}")
    return signer
