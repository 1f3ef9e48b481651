import functools
import logging
from typing import Sequence

from eth_abi.exceptions import ABITypeError, ParseError
from eth_abi.grammar import ABIType, TupleType, normalize, parse

from nethermind.callkit.exceptions import AbiTypeError, ArgumentError
from nethermind.callkit.types.abi import TypeDescriptor, TypeKind

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("abi")

ELEMENTARY_BASE_TYPES = ("uint", "int", "address", "bool", "bytes", "string")
UNSUPPORTED_BASE_TYPES = ("fixed", "ufixed")


def parse_type(type_str: str) -> TypeDescriptor:
    """
    Parses an ABI type string into a TypeDescriptor.  Type aliases are normalized, so 'uint' and 'uint256'
    return the same descriptor.

    >>> parse_type("uint")
    TypeDescriptor(kind=<TypeKind.elementary: 'elementary'>, base_type='uint256', array_length=None, components=())
    >>> parse_type("(address,uint256)[]").canonical
    '(address,uint256)[]'

    :param type_str: ABI type string
    :return: TypeDescriptor
    """
    if not isinstance(type_str, str):
        raise AbiTypeError(f"ABI type must be a string, but got {type_str!r} of type {type(type_str)}")
    return _parse_type_str(type_str)


@functools.lru_cache(maxsize=None)
def _parse_type_str(type_str: str) -> TypeDescriptor:
    compact = "".join(type_str.split())
    if not compact:
        raise AbiTypeError("ABI type cannot be empty")

    try:
        abi_type = parse(normalize(compact))
        abi_type.validate()
    except (ParseError, ABITypeError) as e:
        logger.debug(f"Failed to parse ABI type {type_str!r}: {e}")
        raise AbiTypeError(f"Invalid ABI type: {type_str!r}") from e

    return _to_descriptor(abi_type)


def parse_types(type_strs: Sequence[str]) -> list[TypeDescriptor]:
    """
    Parses an ordered list of ABI type strings

    :param type_strs: list or tuple of ABI type strings
    :return: list of TypeDescriptors in input order
    """
    if not isinstance(type_strs, (list, tuple)):
        raise ArgumentError(f"ABI types must be passed as a list or tuple, not {type(type_strs).__name__}")
    return [parse_type(type_str) for type_str in type_strs]


def as_descriptor(abi_type: str | TypeDescriptor) -> TypeDescriptor:
    """Returns descriptors unchanged, and parses type strings"""
    if isinstance(abi_type, TypeDescriptor):
        return abi_type
    return parse_type(abi_type)


def as_descriptors(abi_types: Sequence[str | TypeDescriptor]) -> list[TypeDescriptor]:
    """Converts a list of type strings and descriptors into descriptors"""
    if not isinstance(abi_types, (list, tuple)):
        raise ArgumentError(f"ABI types must be passed as a list or tuple, not {type(abi_types).__name__}")
    return [as_descriptor(abi_type) for abi_type in abi_types]


def _to_descriptor(abi_type: ABIType) -> TypeDescriptor:
    if abi_type.is_array:
        # arrlist is ordered from innermost to outermost dimension
        dimension = abi_type.arrlist[-1]
        element = _to_descriptor(abi_type.item_type)
        if dimension:
            return TypeDescriptor(
                kind=TypeKind.array,
                base_type=element.base_type,
                array_length=dimension[0],
                components=(element,),
            )
        return TypeDescriptor(kind=TypeKind.dynamic_array, base_type=element.base_type, components=(element,))

    if isinstance(abi_type, TupleType):
        return TypeDescriptor(
            kind=TypeKind.tuple,
            base_type="tuple",
            components=tuple(_to_descriptor(component) for component in abi_type.components),
        )

    if abi_type.base in UNSUPPORTED_BASE_TYPES:
        raise AbiTypeError(f"Fixed point type {abi_type.to_type_str()} is not supported")

    if abi_type.base not in ELEMENTARY_BASE_TYPES:
        raise AbiTypeError(f"Unknown ABI type: {abi_type.to_type_str()}")

    return TypeDescriptor(kind=TypeKind.elementary, base_type=abi_type.to_type_str())
