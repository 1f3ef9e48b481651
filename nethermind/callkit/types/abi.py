import re
from dataclasses import dataclass, field
from enum import Enum

from eth_utils import keccak

# pylint: disable=invalid-name

_SIZED_TYPE_PATTERN = re.compile(r"^([a-z]+)(\d*)$")


class TypeKind(Enum):
    """Structural kind of an ABI type"""

    elementary = "elementary"
    array = "array"
    dynamic_array = "dynamic_array"
    tuple = "tuple"


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """
    Canonical representation of an ABI type.  Descriptors are immutable, and are parsed from type strings with
    :func:`nethermind.callkit.abi.types.parse_type`

    >>> from nethermind.callkit.abi.types import parse_type
    >>> parse_type("uint[2][]").canonical
    'uint256[2][]'
    >>> parse_type("(address,bytes)").is_dynamic
    True

    """

    kind: TypeKind
    """ Structural kind of the type """

    base_type: str
    """
        Canonical elementary type name, ie 'uint256' or 'address'.  For arrays, the base type of the innermost
        element, and 'tuple' for tuples
    """

    array_length: int | None = None
    """ Number of elements for fixed size arrays """

    components: tuple["TypeDescriptor", ...] = field(default_factory=tuple)
    """ Member types of a tuple, or the single element type of an array """

    @property
    def canonical(self) -> str:
        """Canonical type string used when hashing signatures"""
        match self.kind:
            case TypeKind.elementary:
                return self.base_type
            case TypeKind.array:
                return f"{self.element.canonical}[{self.array_length}]"
            case TypeKind.dynamic_array:
                return f"{self.element.canonical}[]"
            case TypeKind.tuple:
                return f"({','.join(c.canonical for c in self.components)})"
        raise ValueError(f"Invalid type kind: {self.kind}")

    @property
    def element(self) -> "TypeDescriptor":
        """Element type of an array"""
        if self.kind not in (TypeKind.array, TypeKind.dynamic_array):
            raise ValueError(f"{self.canonical} is not an array type")
        return self.components[0]

    @property
    def family(self) -> str:
        """Elementary type without its size, ie 'uint' for 'uint64', and 'bytes' for 'bytes32'"""
        match = _SIZED_TYPE_PATTERN.match(self.base_type)
        return match.group(1) if match else self.base_type

    @property
    def size(self) -> int | None:
        """Bit size of integer types, and byte size for fixed size bytes.  None for unsized types"""
        match = _SIZED_TYPE_PATTERN.match(self.base_type)
        if match is None or not match.group(2):
            return None
        return int(match.group(2))

    @property
    def is_dynamic(self) -> bool:
        """
        True if the encoded size of the type depends on its value.  bytes, string, dynamic arrays, and any
        array or tuple containing a dynamic type are dynamic
        """
        match self.kind:
            case TypeKind.elementary:
                return self.base_type in ("bytes", "string")
            case TypeKind.dynamic_array:
                return True
            case _:
                return any(c.is_dynamic for c in self.components)

    @property
    def head_size(self) -> int:
        """Bytes occupied in the head region.  Dynamic types occupy a single 32 byte offset slot"""
        if self.is_dynamic:
            return 32
        match self.kind:
            case TypeKind.array:
                return self.element.head_size * (self.array_length or 0)
            case TypeKind.tuple:
                return sum(c.head_size for c in self.components)
            case _:
                return 32

    def __str__(self) -> str:
        return self.canonical


@dataclass(frozen=True, slots=True)
class FunctionFragment:
    """Single function from a contract ABI.  The signature and selector are always derived from the inputs"""

    name: str
    inputs: tuple[TypeDescriptor, ...]
    input_names: tuple[str, ...] = field(default_factory=tuple)
    state_mutability: str = "nonpayable"

    @property
    def input_types(self) -> list[str]:
        """Canonical input types"""
        return [typ.canonical for typ in self.inputs]

    @property
    def signature(self) -> str:
        """Canonical signature, ie 'transfer(address,uint256)'"""
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        """First 4 bytes of the keccak hash of the canonical signature"""
        return keccak(text=self.signature)[:4]

    @property
    def is_read_only(self) -> bool:
        """True for view and pure functions"""
        return self.state_mutability in ("view", "pure")


@dataclass(frozen=True, slots=True)
class CallData:
    """Encoded contract call.  The encoded arguments are always a multiple of 32 bytes"""

    selector: bytes
    encoded_args: bytes

    @property
    def data(self) -> bytes:
        """Full calldata bytes, including selector"""
        return self.selector + self.encoded_args

    def hex(self) -> str:
        """Calldata as 0x prefixed lowercase hex string"""
        return "0x" + self.data.hex()

    def __len__(self) -> int:
        return 4 + len(self.encoded_args)
