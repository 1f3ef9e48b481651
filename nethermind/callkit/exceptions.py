class CallkitError(Exception):
    """Base class for all errors raised by callkit"""


class ArgumentError(CallkitError, ValueError):
    """

    Raised when a caller supplies a malformed or missing argument, such as an empty method name, or a type list
    that is not a sequence

    """


class LengthMismatchError(CallkitError, ValueError):
    """Raised when the number of ABI types and the number of values differ"""


class AbiTypeError(CallkitError, TypeError):
    """

    Raised when an ABI type string cannot be parsed, or describes a type that is not supported.  Valid type
    strings include:

        * Elementary types such as ``address``, ``uint256``, ``bool``, ``bytes32``, ``bytes`` and ``string``
        * Arrays of any type, either fixed ``uint256[3]`` or dynamic ``address[]``
        * Tuples of any types ``(address,uint256[])``

    """


class EncodingError(CallkitError):
    """

    Raised when a value cannot be represented by its declared ABI type.  Typically caused by:

    * Integers that overflow the bit size of the type, or negative values for unsigned types
    * Non-numeric strings passed for integer types
    * Addresses that are not 20 bytes, or mixed-case addresses with an invalid checksum
    * Sequences with the wrong number of elements for fixed arrays and tuples

    """


class DecodingError(CallkitError):
    """

    Raised when ABI encoded data cannot be decoded.  Offsets and lengths that point outside the data, non-zero
    padding bytes, and invalid boolean or UTF-8 values are never silently clamped.

    """


class SelectorNotFoundError(CallkitError, LookupError):
    """Raised when the 4 byte selector of calldata does not match any function in an ABI"""

    selector: str
    """ Observed selector as a 0x prefixed hex string """

    def __init__(self, selector: str, abi_name: str | None = None):
        self.selector = selector
        message = f"Function selector {selector} not found in ABI"
        if abi_name:
            message += f" {abi_name}"
        super().__init__(message)


class ProviderError(CallkitError):
    """Raised when the transaction history provider fails to return transactions"""


class TransactionNotFoundError(CallkitError, LookupError):
    """Raised when a JSON RPC node does not return a transaction or receipt for a hash"""
