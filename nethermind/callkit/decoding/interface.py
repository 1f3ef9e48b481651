import logging
from dataclasses import dataclass
from typing import Any, Sequence

from eth_typing import ABI, ABIFunction
from eth_utils import decode_hex, is_hex

from nethermind.callkit.abi.decoder import decode_abi
from nethermind.callkit.abi.encoder import encode_abi
from nethermind.callkit.abi.types import parse_type
from nethermind.callkit.exceptions import (
    AbiTypeError,
    ArgumentError,
    DecodingError,
    SelectorNotFoundError,
)
from nethermind.callkit.types.abi import CallData, FunctionFragment

from .utils import canonicalize_signature, collapse_if_tuple, filter_functions

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("decoding")


@dataclass(frozen=True, slots=True)
class DecodedCall:
    """Function call decoded from calldata"""

    fragment: FunctionFragment
    arguments: tuple[Any, ...]

    @property
    def name(self) -> str:
        return self.fragment.name

    @property
    def signature(self) -> str:
        return self.fragment.signature

    def named_arguments(self) -> dict[str, Any]:
        """
        Maps input names to decoded values.  Unnamed inputs are keyed by their position, ie 'arg_1'
        """
        return {
            name or f"arg_{index}": value
            for index, (name, value) in enumerate(zip(self.fragment.input_names, self.arguments, strict=True))
        }


def fragment_from_abi(abi_function: ABIFunction) -> FunctionFragment:
    """
    Parses a function entry from an ABI JSON into a FunctionFragment

    :param abi_function: Dict containing the name, inputs, and state mutability of a function
    """
    name = abi_function.get("name")
    if not name:
        raise ArgumentError(f"ABI function entry is missing a name: {abi_function}")

    inputs = abi_function.get("inputs", [])
    return FunctionFragment(
        name=name,
        inputs=tuple(parse_type(collapse_if_tuple(abi_input)) for abi_input in inputs),
        input_names=tuple(abi_input.get("name", "") for abi_input in inputs),
        state_mutability=_state_mutability(abi_function),
    )


def _state_mutability(abi_function: ABIFunction) -> str:
    if "stateMutability" in abi_function:
        return abi_function["stateMutability"]
    # Legacy ABIs only define the constant and payable flags
    if abi_function.get("constant"):
        return "view"
    return "payable" if abi_function.get("payable") else "nonpayable"


def calldata_to_bytes(calldata: str | bytes | bytearray) -> bytes:
    """Converts 0x prefixed hex calldata to bytes.  Raises DecodingError for invalid hex"""
    if isinstance(calldata, (bytes, bytearray)):
        return bytes(calldata)
    if isinstance(calldata, str) and is_hex(calldata) and len(calldata) % 2 == 0:
        return decode_hex(calldata)
    raise DecodingError(f"Calldata must be bytes or a hex string, got {calldata!r}")


class ContractInterface:
    """
    Function table for a contract ABI.  Fragments are indexed by their 4 byte selector when the interface is
    loaded, and calldata is matched against the table by exact selector equality.

    >>> interface = ContractInterface(erc20_abi, abi_name="ERC20")
    >>> decoded = interface.decode_function_data("0xa9059cbb...")
    >>> decoded.signature
    'transfer(address,uint256)'

    """

    abi_name: str
    """ Name of the ABI.  Included in error messages """

    fragments: dict[bytes, FunctionFragment]
    """ Mapping from 4 byte selectors to function fragments, in ABI order """

    def __init__(self, abi: ABI | list[dict[str, Any]], abi_name: str = ""):
        self.abi_name = abi_name
        self.fragments = {}

        for abi_function in filter_functions(abi):
            try:
                fragment = fragment_from_abi(abi_function)
            except AbiTypeError as e:
                raise ArgumentError(f"Invalid ABI entry for function {abi_function.get('name')}: {e}") from e

            existing = self.fragments.get(fragment.selector)
            if existing is not None:
                logger.warning(
                    f"Function {fragment.signature} shares the selector 0x{fragment.selector.hex()} with "
                    f"{existing.signature}.  Keeping {existing.signature}"
                )
                continue

            logger.debug(f"Adding function {fragment.signature} with selector 0x{fragment.selector.hex()}")
            self.fragments[fragment.selector] = fragment

    def function_signatures(self) -> list[str]:
        """Returns the canonical signatures of all functions in the interface"""
        return [fragment.signature for fragment in self.fragments.values()]

    def get_function(self, key: str | bytes) -> FunctionFragment | None:
        """
        Looks up a function by 4 byte selector, 0x prefixed selector, full signature, or name.  Names that are
        overloaded within the ABI are ambiguous, and raise an ArgumentError

        :param key: selector bytes, '0xa9059cbb', 'transfer(address,uint256)' or 'transfer'
        """
        if isinstance(key, bytes):
            return self.fragments.get(key)

        if is_hex(key) and len(key) == 10 and key.startswith("0x"):
            return self.fragments.get(decode_hex(key))

        if "(" in key:
            try:
                signature = canonicalize_signature(key)
            except AbiTypeError:
                logger.debug(f"Cannot parse function signature {key!r}")
                return None
            return next((f for f in self.fragments.values() if f.signature == signature), None)

        matches = [f for f in self.fragments.values() if f.name == key]
        if len(matches) > 1:
            raise ArgumentError(
                f"Function name {key} is ambiguous.  Use one of the signatures: {[f.signature for f in matches]}"
            )
        return matches[0] if matches else None

    def decode_function_data(self, calldata: str | bytes | bytearray) -> DecodedCall:
        """
        Decodes calldata into the function it calls and its arguments.

        :param calldata: Full calldata, including the 4 byte selector
        :return: DecodedCall
        """
        data = calldata_to_bytes(calldata)
        if len(data) < 4:
            raise DecodingError(f"Calldata must be at least 4 bytes, got {len(data)}")

        selector = data[:4]
        fragment = self.fragments.get(selector)
        if fragment is None:
            raise SelectorNotFoundError("0x" + selector.hex(), self.abi_name or None)

        arguments = decode_abi(list(fragment.inputs), data[4:])
        logger.debug(f"Decoded {fragment.signature} with {len(arguments)} arguments")
        return DecodedCall(fragment=fragment, arguments=arguments)

    def encode_function_call(self, function: str, values: Sequence[Any]) -> CallData:
        """
        Encodes calldata for a function in the interface

        :param function: Function name, signature, or selector
        :param values: Ordered list of raw argument values
        """
        fragment = self.get_function(function)
        if fragment is None:
            raise ArgumentError(f"Function {function} not found in ABI {self.abi_name}".rstrip())
        return CallData(selector=fragment.selector, encoded_args=encode_abi(list(fragment.inputs), values))


def decode_transaction_data(contract_abi: ABI | list[dict[str, Any]], calldata: str | bytes) -> DecodedCall:
    """
    Decodes transaction input data using a contract ABI

    :param contract_abi: ABI JSON as a list of ABI entries
    :param calldata: Transaction input data
    """
    return ContractInterface(contract_abi).decode_function_data(calldata)
