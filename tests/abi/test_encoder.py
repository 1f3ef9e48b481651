import eth_abi
import pytest
from eth_utils import to_checksum_address

from nethermind.callkit.abi.encoder import encode_abi, encode_call, encode_payload_data
from nethermind.callkit.abi.types import parse_type
from nethermind.callkit.abi.values import AbiBool, AbiInteger, AbiString, coerce_value, to_native
from nethermind.callkit.exceptions import ArgumentError, EncodingError, LengthMismatchError


def _word(value: int) -> str:
    return value.to_bytes(32, "big").hex()


def test_encode_transfer_payload():
    result = encode_payload_data(
        ["address", "uint256"],
        ["0x0000000000000000000000000000000000000000", "1000000000000000000"],
    )

    assert result == (
        "0000000000000000000000000000000000000000000000000000000000000000"
        "0000000000000000000000000000000000000000000000000de0b6b3a7640000"
    )
    assert len(result) == 128


def test_encode_address_in_low_order_bytes():
    address = to_checksum_address("0xf8e81d47203a594245e36c48e151709f0c19fbe8")
    encoded = encode_abi(["address"], [address])

    assert encoded[:12] == b"\x00" * 12
    assert encoded[12:] == bytes.fromhex("f8e81d47203a594245e36c48e151709f0c19fbe8")


def test_encode_static_values():
    encoded = encode_abi(["bool", "bool", "int8", "bytes4"], [True, False, -1, b"\xde\xad\xbe\xef"])

    assert encoded.hex() == (
        _word(1) + _word(0) + "ff" * 32 + "deadbeef" + "00" * 28
    )


def test_encode_dynamic_values():
    encoded = encode_abi(["string"], ["hello"])
    assert encoded.hex() == _word(32) + _word(5) + "68656c6c6f" + "00" * 27

    encoded = encode_abi(["uint256[]"], [[1, 2]])
    assert encoded.hex() == _word(32) + _word(2) + _word(1) + _word(2)

    # Empty bytes only carry the length prefix
    assert encode_abi(["bytes"], [b""]).hex() == _word(32) + _word(0)


def test_encode_solidity_documentation_example():
    # f(uint256,uint32[],bytes10,bytes) from the Solidity ABI specification
    call = encode_call(
        "f",
        ["uint256", "uint32[]", "bytes10", "bytes"],
        [0x123, [0x456, 0x789], b"1234567890", b"Hello, world!"],
    )

    expected_words = [
        "0000000000000000000000000000000000000000000000000000000000000123",
        "0000000000000000000000000000000000000000000000000000000000000080",
        "3132333435363738393000000000000000000000000000000000000000000000",
        "00000000000000000000000000000000000000000000000000000000000000e0",
        "0000000000000000000000000000000000000000000000000000000000000002",
        "0000000000000000000000000000000000000000000000000000000000000456",
        "0000000000000000000000000000000000000000000000000000000000000789",
        "000000000000000000000000000000000000000000000000000000000000000d",
        "48656c6c6f2c20776f726c642100000000000000000000000000000000000000",
    ]
    assert call.hex() == "0x8be65246" + "".join(expected_words)
    assert len(call) == 4 + 32 * len(expected_words)
    assert len(call.encoded_args) % 32 == 0


def test_encode_nested_dynamic_arrays():
    # g(uint256[][],string[]) from the Solidity ABI specification
    encoded = encode_abi(["uint256[][]", "string[]"], [[[1, 2], [3]], ["one", "two", "three"]])

    expected_words = [
        _word(0x40),
        _word(0x140),
        _word(2),
        _word(0x40),
        _word(0xA0),
        _word(2),
        _word(1),
        _word(2),
        _word(1),
        _word(3),
        _word(3),
        _word(0x60),
        _word(0xA0),
        _word(0xE0),
        _word(3),
        "6f6e65" + "00" * 29,
        _word(3),
        "74776f" + "00" * 29,
        _word(5),
        "7468726565" + "00" * 27,
    ]
    assert encoded.hex() == "".join(expected_words)


@pytest.mark.parametrize(
    "types,values",
    [
        (["uint8", "int256", "bool"], [255, -(2**255), True]),
        (["address[2]", "bytes32"], [["0x" + "11" * 20, "0x" + "22" * 20], b"\x01" * 32]),
        (["(address,uint256)", "string"], [("0x" + "33" * 20, 7), "callkit"]),
        (["(uint8,bytes)[]", "uint16[2][]"], [[(1, b"\x01\x02"), (2, b"")], [[1, 2], [3, 4]]]),
        (["string[2]", "(bool,(string,uint32[]))"], [["a", "b" * 40], (True, ("nested", [9, 10, 11]))]),
        (["bytes"], [bytes(range(70))]),
    ],
)
def test_encode_matches_eth_abi(types, values):
    assert encode_abi(types, values) == eth_abi.encode(types, values)


def test_encode_accepts_string_numbers():
    assert encode_abi(["uint256"], ["0x10"]) == encode_abi(["uint256"], [16])
    assert encode_abi(["int16"], ["-300"]) == encode_abi(["int16"], [-300])
    assert encode_abi(["bool"], ["true"]) == encode_abi(["bool"], [True])
    assert encode_abi(["bytes2"], ["0xabcd"]) == encode_abi(["bytes2"], [b"\xab\xcd"])


@pytest.mark.parametrize("text", ["١٢", "0x-5", "-0x", "1_000", "0x_ff", "+5", "--1", ""])
def test_numeric_strings_are_plain_ascii(text):
    with pytest.raises(EncodingError, match="Invalid numeric value"):
        encode_abi(["int256"], [text])


def test_to_native_returns_lists_for_arrays():
    abi_type = parse_type("(uint8[2],(bool,string)[])")
    value = coerce_value(abi_type, [["1", 2], [(True, "a")]])

    assert value == ((AbiInteger(1, 8, False), AbiInteger(2, 8, False)), ((AbiBool(True), AbiString("a")),))
    assert to_native(abi_type, value) == ([1, 2], [(True, "a")])



def test_encode_empty():
    assert encode_abi([], []) == b""
    assert encode_call("foo", [], []).hex() == "0xc2985578"


def test_length_mismatch():
    with pytest.raises(LengthMismatchError, match="types/values length mismatch"):
        encode_payload_data(["address", "uint256"], ["1000"])

    with pytest.raises(LengthMismatchError):
        encode_abi([], [1])


def test_non_sequence_arguments():
    with pytest.raises(ArgumentError):
        encode_abi("uint256", [1])  # type: ignore[arg-type]

    with pytest.raises(ArgumentError):
        encode_abi(["uint256"], 1)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "abi_type,value",
    [
        ("uint256", "not a number"),
        ("uint256", "12abc"),
        ("uint256", -1),
        ("uint8", 256),
        ("int8", 128),
        ("int8", -129),
        ("uint256", True),
        ("uint256", 1.5),
        ("address", "0x1234"),
        ("address", "0x" + "zz" * 20),
        ("address", b"\x01" * 19),
        # Mixed case address with an invalid checksum
        ("address", "0xF8e81D47203A594245E36C48e151709F0C19fBe8"),
        ("bool", 1),
        ("bytes4", b"\x01\x02"),
        ("bytes4", "deadbeef"),
        ("bytes", "0x123"),
        ("string", b"bytes"),
        ("uint256[2]", [1]),
        ("uint256[]", "1,2"),
        ("(address,uint256)", ["0x" + "11" * 20]),
    ],
)
def test_encoding_errors(abi_type, value):
    with pytest.raises(EncodingError):
        encode_abi([abi_type], [value])


def test_encoding_error_names_argument_index():
    with pytest.raises(EncodingError, match="argument 1 as uint256"):
        encode_abi(["address", "uint256"], ["0x" + "00" * 20, "ten"])
