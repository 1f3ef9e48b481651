import logging
from typing import Any, Sequence

from eth_utils import to_checksum_address

from nethermind.callkit.exceptions import DecodingError
from nethermind.callkit.types.abi import TypeDescriptor, TypeKind

from .types import as_descriptors

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("abi")

WORD_SIZE = 32


def decode_abi(abi_types: Sequence[str | TypeDescriptor], data: bytes | bytearray) -> tuple[Any, ...]:
    """
    Decodes ABI encoded data.  The inverse of :func:`nethermind.callkit.abi.encoder.encode_abi`

    Decoded values are returned as:

        * ``uintN`` / ``intN`` -> int
        * ``address`` -> checksummed hex string
        * ``bool`` -> bool
        * ``bytesN`` / ``bytes`` -> bytes
        * ``string`` -> str
        * arrays -> list, and tuples -> tuple

    :param abi_types: Ordered list of ABI type strings or TypeDescriptors
    :param data: Encoded argument bytes, without a function selector
    :return: Tuple of decoded values in the same order as abi_types
    """
    descriptors = as_descriptors(abi_types)
    return tuple(_decode_region(descriptors, bytes(data), 0))


def _read_word(data: bytes, position: int) -> bytes:
    if position < 0 or position + WORD_SIZE > len(data):
        raise DecodingError(
            f"Cannot read 32 byte word at offset {position}, data is only {len(data)} bytes long"
        )
    return data[position : position + WORD_SIZE]


def _read_uint(data: bytes, position: int) -> int:
    return int.from_bytes(_read_word(data, position), "big")


def _decode_region(abi_types: Sequence[TypeDescriptor], data: bytes, start: int) -> list[Any]:
    """Decodes a head/tail region.  Offsets stored in the head are relative to start"""
    values = []
    position = start
    for abi_type in abi_types:
        if abi_type.is_dynamic:
            offset = _read_uint(data, position)
            if start + offset >= len(data):
                raise DecodingError(
                    f"Offset {offset} for {abi_type.canonical} at position {position} points outside of "
                    f"{len(data)} bytes of data"
                )
            values.append(_decode_value(abi_type, data, start + offset))
        else:
            values.append(_decode_value(abi_type, data, position))
        position += abi_type.head_size
    return values


def _decode_value(abi_type: TypeDescriptor, data: bytes, position: int) -> Any:
    match abi_type.kind:
        case TypeKind.array:
            return _decode_region([abi_type.element] * (abi_type.array_length or 0), data, position)
        case TypeKind.dynamic_array:
            count = _read_uint(data, position)
            # Every element occupies at least one head word
            if position + WORD_SIZE + count * WORD_SIZE > len(data):
                raise DecodingError(
                    f"Array length {count} for {abi_type.canonical} at position {position} exceeds "
                    f"{len(data)} bytes of data"
                )
            return _decode_region([abi_type.element] * count, data, position + WORD_SIZE)
        case TypeKind.tuple:
            return tuple(_decode_region(abi_type.components, data, position))
        case _:
            return _decode_elementary(abi_type, data, position)


def _decode_elementary(abi_type: TypeDescriptor, data: bytes, position: int) -> Any:
    if abi_type.base_type in ("bytes", "string"):
        return _decode_byte_string(abi_type, data, position)

    word = _read_word(data, position)
    match abi_type.family:
        case "uint":
            value = int.from_bytes(word, "big")
            if value >= 2 ** (abi_type.size or 256):
                raise DecodingError(f"Value {value} at position {position} overflows {abi_type.canonical}")
            return value
        case "int":
            value = int.from_bytes(word, "big", signed=True)
            bits = abi_type.size or 256
            if not -(2 ** (bits - 1)) <= value < 2 ** (bits - 1):
                raise DecodingError(f"Value {value} at position {position} overflows {abi_type.canonical}")
            return value
        case "address":
            _check_padding(abi_type, word[:12], position)
            return to_checksum_address(word[12:])
        case "bool":
            value = int.from_bytes(word, "big")
            if value not in (0, 1):
                raise DecodingError(f"Invalid bool value {value} at position {position}")
            return value == 1
        case "bytes":
            size = abi_type.size or WORD_SIZE
            _check_padding(abi_type, word[size:], position)
            return word[:size]

    raise DecodingError(f"Cannot decode values of type {abi_type.canonical}")


def _decode_byte_string(abi_type: TypeDescriptor, data: bytes, position: int) -> bytes | str:
    length = _read_uint(data, position)
    payload_start = position + WORD_SIZE
    padded_length = length + (-length % WORD_SIZE)
    if payload_start + padded_length > len(data):
        raise DecodingError(
            f"{abi_type.canonical} length {length} at position {position} exceeds {len(data)} bytes of data"
        )
    _check_padding(abi_type, data[payload_start + length : payload_start + padded_length], position)
    payload = data[payload_start : payload_start + length]
    if abi_type.base_type == "bytes":
        return payload
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodingError(f"Invalid UTF-8 string at position {position}") from e


def _check_padding(abi_type: TypeDescriptor, padding: bytes, position: int) -> None:
    if padding.strip(b"\x00"):
        raise DecodingError(f"Non-empty padding bytes for {abi_type.canonical} at position {position}")
