import logging
from typing import Sequence

from eth_utils import keccak

from nethermind.callkit.exceptions import ArgumentError
from nethermind.callkit.types.abi import TypeDescriptor

from .types import as_descriptors

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("abi")


def _validate_method(method_name: str, abi_types: Sequence[str | TypeDescriptor]) -> None:
    if not isinstance(method_name, str) or not method_name.strip():
        raise ArgumentError("Invalid method name or parameters provided.")
    if not isinstance(abi_types, (list, tuple)):
        raise ArgumentError("Invalid method name or parameters provided.")


def canonical_signature(method_name: str, abi_types: Sequence[str | TypeDescriptor]) -> str:
    """
    Builds the canonical signature of a method.  Types are normalized, and whitespace is removed.

    >>> canonical_signature("transfer", ["address", "uint"])
    'transfer(address,uint256)'

    :param method_name: Name of the contract method
    :param abi_types: Ordered list of ABI types
    :return: Canonical signature string
    """
    _validate_method(method_name, abi_types)
    descriptors = as_descriptors(abi_types)
    return f"{method_name.strip()}({','.join(typ.canonical for typ in descriptors)})"


def function_selector(method_name: str, abi_types: Sequence[str | TypeDescriptor]) -> bytes:
    """Returns the 4 byte selector for a method as raw bytes"""
    signature = canonical_signature(method_name, abi_types)
    selector = keccak(text=signature)[:4]
    logger.debug(f"Selector for {signature}: 0x{selector.hex()}")
    return selector


def generate_method_signature(method_name: str, abi_types: Sequence[str | TypeDescriptor]) -> str:
    """
    Generates the 4 byte selector of a method from its name and parameter types.

    >>> generate_method_signature("transfer", ["address", "uint256"])
    '0xa9059cbb'

    :param method_name: Name of the contract method
    :param abi_types: Ordered list of ABI types
    :return: 0x prefixed selector with 8 lowercase hex characters
    """
    return "0x" + function_selector(method_name, abi_types).hex()
