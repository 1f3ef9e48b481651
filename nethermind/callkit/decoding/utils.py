from typing import Any

from eth_typing import ABI, ABIComponent, ABIFunction

from nethermind.callkit.abi.types import parse_type
from nethermind.callkit.exceptions import AbiTypeError, ArgumentError
from nethermind.callkit.types.abi import TypeKind


def abi_to_signature(abi: ABIFunction) -> str:
    """
    Converts an ABI function entry to its signature.

    >>> abi_to_signature({"type": "function", "name": "transfer", "inputs": [
    ...     {"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}
    ... ]})
    'transfer(address,uint256)'

    """
    collapsed = [collapse_if_tuple(abi_input) for abi_input in abi.get("inputs", [])]
    return f"{abi['name']}({','.join(collapsed)})"


def collapse_if_tuple(abi_params: ABIComponent | dict[str, Any]) -> str:
    """
    Converts a tuple from a dict to a parenthesized list of its types.

    >>> collapse_if_tuple(
    ...     {
    ...         'components': [
    ...             {'name': 'anAddress', 'type': 'address'},
    ...             {'name': 'anInt', 'type': 'uint256'},
    ...             {'name': 'someBytes', 'type': 'bytes'},
    ...         ],
    ...         'type': 'tuple[]',
    ...     }
    ... )
    '(address,uint256,bytes)[]'
    """

    typ = abi_params.get("type")
    if not isinstance(typ, str):
        raise ArgumentError(f"The 'type' must be a string, but got {typ} of type {type(typ)}")

    if not typ.startswith("tuple"):
        return typ

    delimited = ",".join(collapse_if_tuple(c) for c in abi_params.get("components", []))
    # Whatever comes after "tuple" is the array dims.  The Solidity ABI states that
    # this will have the form "", "[]", or "[k]".
    array_dim = typ[5:]
    return f"({delimited}){array_dim}"


def filter_functions(contract_abi: ABI | list[dict[str, Any]]) -> list[ABIFunction]:
    """Filters out all non-function ABI entries.  Entries without a type default to functions"""
    if not isinstance(contract_abi, (list, tuple)):
        raise ArgumentError(f"Contract ABI must be a list of ABI entries, not {type(contract_abi).__name__}")
    for index, entry in enumerate(contract_abi):
        if not isinstance(entry, dict):
            raise ArgumentError(f"ABI entry {index} must be a JSON object, not {type(entry).__name__}")
    return [abi for abi in contract_abi if abi.get("type", "function") == "function"]  # type: ignore


def signature_to_name(function_sig: str) -> str:
    """
    Removes types from function signature

    >>> signature_to_name("swap(address,address,uint256,uint256,int128)")
    'swap'
    """
    index = function_sig.find("(")
    if index != -1:
        return function_sig[:index]
    return function_sig


def canonicalize_signature(function_sig: str) -> str:
    """
    Normalizes the parameter types of a function signature.  The parameter list is parsed as a tuple type, so
    aliases and whitespace are handled the same way as selector generation.

    >>> canonicalize_signature("transfer(address, uint)")
    'transfer(address,uint256)'

    :raises AbiTypeError: if the parameter list is not a valid tuple of ABI types
    """
    name = signature_to_name(function_sig).strip()
    params = parse_type(function_sig[function_sig.find("(") :])
    if params.kind != TypeKind.tuple:
        raise AbiTypeError(f"Invalid function signature: {function_sig!r}")
    return f"{name}{params.canonical}"
