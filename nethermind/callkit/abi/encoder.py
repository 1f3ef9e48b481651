import logging
from typing import Any, Sequence

from nethermind.callkit.exceptions import ArgumentError, EncodingError, LengthMismatchError
from nethermind.callkit.types.abi import CallData, TypeDescriptor, TypeKind

from .selector import function_selector
from .types import as_descriptors
from .values import (
    AbiBytes,
    AbiElementaryValue,
    AbiInteger,
    AbiString,
    AbiValue,
    coerce_value,
)

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("abi")


def encode_abi(abi_types: Sequence[str | TypeDescriptor], values: Sequence[Any]) -> bytes:
    """
    Encodes values using the head/tail layout of the Ethereum ABI.

    >>> encoded = encode_abi(["uint8", "string"], [1, "abc"])
    >>> [int.from_bytes(encoded[i : i + 32], "big") for i in range(0, 96, 32)]
    [1, 64, 3]
    >>> len(encoded), encoded[96:99]
    (128, b'abc')

    :param abi_types: Ordered list of ABI type strings or TypeDescriptors
    :param values: Ordered list of raw values, validated with :func:`coerce_value`
    :return: Encoded bytes, always a multiple of 32 bytes
    """
    if not isinstance(abi_types, (list, tuple)) or not isinstance(values, (list, tuple)):
        raise ArgumentError("ABI types and values must be passed as lists or tuples")

    if len(abi_types) != len(values):
        raise LengthMismatchError(
            f"types/values length mismatch (count={{'types': {len(abi_types)}, 'values': {len(values)}}})"
        )

    descriptors = as_descriptors(abi_types)
    typed_values = []
    for index, (abi_type, value) in enumerate(zip(descriptors, values)):
        try:
            typed_values.append(coerce_value(abi_type, value))
        except EncodingError as e:
            raise EncodingError(f"Cannot encode argument {index} as {abi_type.canonical}: {e}") from e

    return encode_typed_values(descriptors, typed_values)


def encode_payload_data(abi_types: Sequence[str | TypeDescriptor], values: Sequence[Any]) -> str:
    """Encodes values, returning unprefixed lowercase hex that can be appended to a selector"""
    return encode_abi(abi_types, values).hex()


def encode_call(method_name: str, abi_types: Sequence[str | TypeDescriptor], values: Sequence[Any]) -> CallData:
    """
    Builds the full calldata for a method call.

    :param method_name: Name of the contract method
    :param abi_types: Ordered list of ABI types for the method inputs
    :param values: Ordered list of raw values
    :return: CallData
    """
    selector = function_selector(method_name, abi_types)
    return CallData(selector=selector, encoded_args=encode_abi(abi_types, values))


def encode_typed_values(abi_types: Sequence[TypeDescriptor], values: Sequence[AbiValue]) -> bytes:
    """
    Encodes a region of already validated values.  Static values are written in place in the head, and dynamic
    values are appended to the tail, with the head storing their offset from the start of the region.
    """
    head_size = sum(abi_type.head_size for abi_type in abi_types)

    heads: list[bytes] = []
    tails: list[bytes] = []
    tail_offset = head_size

    for abi_type, value in zip(abi_types, values, strict=True):
        encoded = _encode_value(abi_type, value)
        if abi_type.is_dynamic:
            heads.append(_encode_uint(tail_offset))
            tails.append(encoded)
            tail_offset += len(encoded)
        else:
            heads.append(encoded)

    return b"".join(heads + tails)


def _encode_value(abi_type: TypeDescriptor, value: AbiValue) -> bytes:
    match abi_type.kind:
        case TypeKind.array:
            return encode_typed_values([abi_type.element] * len(value), value)  # type: ignore[arg-type]
        case TypeKind.dynamic_array:
            return _encode_uint(len(value)) + encode_typed_values(  # type: ignore[arg-type]
                [abi_type.element] * len(value), value  # type: ignore[arg-type]
            )
        case TypeKind.tuple:
            return encode_typed_values(abi_type.components, value)  # type: ignore[arg-type]
        case _:
            return _encode_elementary(value)  # type: ignore[arg-type]


def _encode_elementary(value: AbiElementaryValue) -> bytes:
    if isinstance(value, (AbiBytes, AbiString)):
        payload = value.payload
        padding = -len(payload) % 32
        return _encode_uint(len(payload)) + payload + b"\x00" * padding
    return value.to_word()


def _encode_uint(value: int) -> bytes:
    return AbiInteger(value=value, bits=256, signed=False).to_word()
