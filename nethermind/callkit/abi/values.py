"""
Typed representations of ABI values.  Raw values supplied by callers (ints, decimal and hex strings, address
strings, ...) are converted with :func:`coerce_value` before encoding, so the encoder only handles values that
are already valid for their declared type.
"""
import re
from dataclasses import dataclass
from typing import Any, Union

from eth_utils import decode_hex, is_address, is_hex, to_canonical_address, to_checksum_address

from nethermind.callkit.exceptions import EncodingError
from nethermind.callkit.types.abi import TypeDescriptor, TypeKind

_INT_PATTERN = re.compile(r"-?(0x[0-9a-f]+|[0-9]+)", re.ASCII | re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class AbiInteger:
    """Signed or unsigned integer that fits within its bit size"""

    value: int
    bits: int
    signed: bool

    def to_word(self) -> bytes:
        """Big endian, sign extended 32 byte word"""
        return self.value.to_bytes(32, "big", signed=self.signed)

    @property
    def native(self) -> int:
        return self.value


@dataclass(frozen=True, slots=True)
class AbiAddress:
    """20 byte address"""

    value: bytes

    def to_word(self) -> bytes:
        """Address stored in the low order 20 bytes of the word"""
        return self.value.rjust(32, b"\x00")

    @property
    def native(self) -> str:
        return to_checksum_address(self.value)


@dataclass(frozen=True, slots=True)
class AbiBool:
    value: bool

    def to_word(self) -> bytes:
        return int(self.value).to_bytes(32, "big")

    @property
    def native(self) -> bool:
        return self.value


@dataclass(frozen=True, slots=True)
class AbiFixedBytes:
    """bytes1 through bytes32.  Values are exactly as long as the type size"""

    value: bytes

    def to_word(self) -> bytes:
        return self.value.ljust(32, b"\x00")

    @property
    def native(self) -> bytes:
        return self.value


@dataclass(frozen=True, slots=True)
class AbiBytes:
    """Dynamic length byte string"""

    value: bytes

    @property
    def payload(self) -> bytes:
        return self.value

    @property
    def native(self) -> bytes:
        return self.value


@dataclass(frozen=True, slots=True)
class AbiString:
    """UTF-8 string"""

    value: str

    @property
    def payload(self) -> bytes:
        return self.value.encode("utf-8")

    @property
    def native(self) -> str:
        return self.value


AbiElementaryValue = Union[AbiInteger, AbiAddress, AbiBool, AbiFixedBytes, AbiBytes, AbiString]
AbiValue = Union[AbiElementaryValue, tuple["AbiValue", ...]]


def to_native(abi_type: TypeDescriptor, value: AbiValue) -> Any:
    """
    Converts a typed ABI value back into plain python values.  Arrays are returned as lists, and
    tuples as tuples.
    """
    match abi_type.kind:
        case TypeKind.array | TypeKind.dynamic_array:
            return [to_native(abi_type.element, v) for v in value]  # type: ignore[arg-type, union-attr]
        case TypeKind.tuple:
            return tuple(to_native(c, v) for c, v in zip(abi_type.components, value))  # type: ignore[arg-type]
        case _:
            return value.native  # type: ignore[union-attr]


def coerce_value(abi_type: TypeDescriptor, raw_value: Any) -> AbiValue:
    """
    Validates a raw value against an ABI type, and converts it into a typed ABI value.

    Accepted raw values:

        * ``uintN`` / ``intN``: int, decimal string, or 0x prefixed hex string
        * ``address``: hex string (checksummed or single case), or 20 bytes
        * ``bool``: bool, or the strings 'true' and 'false'
        * ``bytesN`` / ``bytes``: bytes, or 0x prefixed hex string
        * ``string``: str
        * arrays and tuples: list or tuple of raw values

    :param abi_type: Type the value is encoded as
    :param raw_value: Value supplied by the caller
    :return: Typed ABI value.  Arrays & tuples are returned as tuples of typed values
    """
    match abi_type.kind:
        case TypeKind.array | TypeKind.dynamic_array:
            items = _require_sequence(abi_type, raw_value)
            if abi_type.kind == TypeKind.array and len(items) != abi_type.array_length:
                raise EncodingError(
                    f"Expected {abi_type.array_length} elements for {abi_type.canonical}, but got {len(items)}"
                )
            return tuple(coerce_value(abi_type.element, item) for item in items)

        case TypeKind.tuple:
            items = _require_sequence(abi_type, raw_value)
            if len(items) != len(abi_type.components):
                raise EncodingError(
                    f"Expected {len(abi_type.components)} members for {abi_type.canonical}, but got {len(items)}"
                )
            return tuple(coerce_value(component, item) for component, item in zip(abi_type.components, items))

        case _:
            return _coerce_elementary(abi_type, raw_value)


def _coerce_elementary(abi_type: TypeDescriptor, raw_value: Any) -> AbiElementaryValue:
    match abi_type.family:
        case "uint" | "int":
            return _coerce_integer(abi_type, raw_value)
        case "address":
            return _coerce_address(raw_value)
        case "bool":
            return _coerce_bool(raw_value)
        case "bytes" if abi_type.size is not None:
            value = _to_byte_string(abi_type, raw_value)
            if len(value) != abi_type.size:
                raise EncodingError(f"{abi_type.canonical} requires exactly {abi_type.size} bytes, got {len(value)}")
            return AbiFixedBytes(value)
        case "bytes":
            return AbiBytes(_to_byte_string(abi_type, raw_value))
        case "string":
            if not isinstance(raw_value, str):
                raise EncodingError(f"string value must be a str, not {type(raw_value).__name__}")
            return AbiString(raw_value)

    raise EncodingError(f"Cannot encode values of type {abi_type.canonical}")


def _require_sequence(abi_type: TypeDescriptor, raw_value: Any) -> list[Any] | tuple[Any, ...]:
    if not isinstance(raw_value, (list, tuple)):
        raise EncodingError(f"{abi_type.canonical} value must be a list or tuple, not {type(raw_value).__name__}")
    return raw_value


def _coerce_integer(abi_type: TypeDescriptor, raw_value: Any) -> AbiInteger:
    signed = abi_type.family == "int"
    bits = abi_type.size or 256

    if isinstance(raw_value, bool) or not isinstance(raw_value, (int, str)):
        raise EncodingError(f"{abi_type.canonical} value must be an int or numeric string, not {raw_value!r}")

    if isinstance(raw_value, str):
        value = _parse_int_string(abi_type, raw_value)
    else:
        value = raw_value

    lower, upper = (-(2 ** (bits - 1)), 2 ** (bits - 1) - 1) if signed else (0, 2**bits - 1)
    if not lower <= value <= upper:
        raise EncodingError(f"Value {value} out of bounds for {abi_type.canonical}")

    return AbiInteger(value=value, bits=bits, signed=signed)


def _parse_int_string(abi_type: TypeDescriptor, raw_value: str) -> int:
    text = raw_value.strip()
    if not _INT_PATTERN.fullmatch(text):
        raise EncodingError(f"Invalid numeric value {raw_value!r} for {abi_type.canonical}")

    negative = text.startswith("-")
    digits = text[1:] if negative else text
    value = int(digits[2:], 16) if digits[:2].lower() == "0x" else int(digits, 10)

    return -value if negative else value


def _coerce_address(raw_value: Any) -> AbiAddress:
    if isinstance(raw_value, (bytes, bytearray)):
        if len(raw_value) != 20:
            raise EncodingError(f"Address must be 20 bytes, got {len(raw_value)}")
        return AbiAddress(bytes(raw_value))

    if isinstance(raw_value, str) and is_address(raw_value):
        return AbiAddress(to_canonical_address(raw_value))

    raise EncodingError(f"Invalid address {raw_value!r}")


def _coerce_bool(raw_value: Any) -> AbiBool:
    if isinstance(raw_value, bool):
        return AbiBool(raw_value)
    if isinstance(raw_value, str) and raw_value.strip().lower() in ("true", "false"):
        return AbiBool(raw_value.strip().lower() == "true")
    raise EncodingError(f"Invalid bool value {raw_value!r}")


def _to_byte_string(abi_type: TypeDescriptor, raw_value: Any) -> bytes:
    if isinstance(raw_value, (bytes, bytearray, memoryview)):
        return bytes(raw_value)
    if isinstance(raw_value, str) and raw_value.startswith(("0x", "0X")) and is_hex(raw_value):
        if len(raw_value) % 2:
            raise EncodingError(f"Hex string {raw_value!r} has an odd number of characters")
        return decode_hex(raw_value)
    raise EncodingError(f"{abi_type.canonical} value must be bytes or a 0x prefixed hex string, not {raw_value!r}")
