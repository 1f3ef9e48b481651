import json

import pytest
from eth_utils import to_checksum_address as tca

from nethermind.callkit.decoding import ContractInterface, decode_transaction_data
from nethermind.callkit.decoding.utils import (
    abi_to_signature,
    canonicalize_signature,
    collapse_if_tuple,
    filter_functions,
    signature_to_name,
)
from nethermind.callkit.exceptions import AbiTypeError, ArgumentError, DecodingError, SelectorNotFoundError
from tests.resources.ABI import BATCH_ROUTER_ABI_JSON, ERC20_ABI_JSON

ERC20_ABI = json.loads(ERC20_ABI_JSON)
BATCH_ROUTER_ABI = json.loads(BATCH_ROUTER_ABI_JSON)

ADDRESS_1 = "000000000000000000000000f8e81D47203A594245E36C48e151709F0C19fBe8"
ADDRESS_2 = "000000000000000000000000bEbc44782C7dB0a1A60Cb6fe97d0b483032FF1C7"
AMOUNT = "000000000000000000000000000000000000000000000000000000000227376b"


def test_interface_initialization():
    interface = ContractInterface(ERC20_ABI, abi_name="ERC20")
    loaded_functions = interface.function_signatures()

    assert "transfer(address,uint256)" in loaded_functions
    assert "transferFrom(address,address,uint256)" in loaded_functions
    assert "balanceOf(address)" in loaded_functions

    # Constructors and events are not callable functions
    assert len(loaded_functions) == 9
    assert bytes.fromhex("a9059cbb") in interface.fragments


def test_decode_transfers():
    interface = ContractInterface(ERC20_ABI, abi_name="ERC20")

    decoded_transfer = interface.decode_function_data("0xa9059cbb" + ADDRESS_1 + AMOUNT)
    decoded_transfer_from = interface.decode_function_data("0x23b872dd" + ADDRESS_1 + ADDRESS_2 + AMOUNT)

    assert decoded_transfer.name == "transfer"
    assert decoded_transfer.signature == "transfer(address,uint256)"
    assert decoded_transfer.arguments == ("0xf8e81D47203A594245E36C48e151709F0C19fBe8", 36124523)
    assert decoded_transfer.named_arguments() == {
        "recipient": "0xf8e81D47203A594245E36C48e151709F0C19fBe8",
        "amount": 36124523,
    }

    assert decoded_transfer_from.name == "transferFrom"
    assert decoded_transfer_from.named_arguments()["sender"] == "0xf8e81D47203A594245E36C48e151709F0C19fBe8"
    assert decoded_transfer_from.named_arguments()["recipient"] == "0xbEbc44782C7dB0a1A60Cb6fe97d0b483032FF1C7"
    assert decoded_transfer_from.named_arguments()["amount"] == 36124523


def test_decode_accepts_bytes_and_uppercase_hex():
    interface = ContractInterface(ERC20_ABI)
    calldata = "0xA9059CBB" + ADDRESS_1.upper() + AMOUNT

    assert interface.decode_function_data(calldata).arguments[1] == 36124523
    assert interface.decode_function_data(bytes.fromhex(calldata[2:])).name == "transfer"


def test_decode_function_with_tuple_argument(random_address):
    interface = ContractInterface(BATCH_ROUTER_ABI, abi_name="BatchRouter")
    maker_1, maker_2 = random_address(), random_address()
    orders = [(maker_1, 10**18, "first order"), (maker_2, 1, "")]

    call = interface.encode_function_call("submitOrders", [orders, 1700000000])
    decoded = interface.decode_function_data(call.hex())

    assert decoded.signature == "submitOrders((address,uint256,string)[],uint64)"
    assert decoded.named_arguments() == {"orders": orders, "deadline": 1700000000}


def test_unknown_selector():
    interface = ContractInterface(ERC20_ABI, abi_name="ERC20")

    with pytest.raises(SelectorNotFoundError, match="Function selector 0xff42c812 not found in ABI ERC20") as exc:
        interface.decode_function_data("0xff42c812" + AMOUNT)

    assert exc.value.selector == "0xff42c812"

    with pytest.raises(LookupError, match="not found in ABI$"):
        decode_transaction_data(ERC20_ABI, "0xff42c812")


def test_invalid_calldata():
    interface = ContractInterface(ERC20_ABI)

    with pytest.raises(DecodingError):
        interface.decode_function_data("0xa905")

    with pytest.raises(DecodingError):
        interface.decode_function_data("not calldata")

    # Selector matches, but the arguments are truncated
    with pytest.raises(DecodingError):
        interface.decode_function_data("0xa9059cbb" + ADDRESS_1)


def test_get_function():
    interface = ContractInterface(BATCH_ROUTER_ABI)

    multicall = interface.get_function("multicall")
    assert multicall is not None
    assert multicall.state_mutability == "payable"
    assert interface.get_function(multicall.selector) == multicall
    assert interface.get_function("0x" + multicall.selector.hex()) == multicall
    assert interface.get_function("multicall(bytes[])") == multicall

    assert interface.get_function("missing") is None
    assert interface.get_function("0x00000000") is None


def test_get_function_normalizes_signatures():
    interface = ContractInterface(ERC20_ABI)
    transfer = interface.get_function("transfer(address,uint256)")

    assert transfer is not None
    assert interface.get_function("transfer(address,uint)") == transfer
    assert interface.get_function(" transfer( address , uint256 )") == transfer
    assert interface.get_function("totalSupply()") == interface.get_function("totalSupply")
    assert interface.get_function("transfer(address,uint7)") is None
    assert interface.get_function("transfer(address,uint256)[]") is None

    sender, recipient = "0x" + ADDRESS_1[-40:], "0x" + ADDRESS_2[-40:]
    call = interface.encode_function_call("transferFrom(address,address,uint)", [sender, recipient, 1])
    assert call.selector == bytes.fromhex("23b872dd")


def test_overloaded_functions():
    interface = ContractInterface(BATCH_ROUTER_ABI)

    with pytest.raises(ArgumentError, match="ambiguous"):
        interface.get_function("setLimits")

    single = interface.get_function("setLimits(uint128[3])")
    with_flag = interface.get_function("setLimits(uint128[3],bool)")
    assert single is not None and with_flag is not None
    assert single.selector != with_flag.selector

    call = interface.encode_function_call("setLimits(uint128[3],bool)", [[1, 2, 3], True])
    decoded = interface.decode_function_data(call.data)
    assert decoded.fragment == with_flag
    assert decoded.arguments == ([1, 2, 3], True)


def test_legacy_state_mutability():
    interface = ContractInterface(BATCH_ROUTER_ABI)
    ping = interface.get_function("ping")

    assert ping is not None
    assert ping.state_mutability == "view"
    assert ping.is_read_only

    decoded = interface.decode_function_data(interface.encode_function_call("ping", [b"\x07" * 32]).data)
    assert decoded.named_arguments() == {"arg_0": b"\x07" * 32}


def test_duplicate_selectors_keep_first_entry(debug_logger, caplog):
    abi = ERC20_ABI + [
        {
            "type": "function",
            "name": "transfer",
            "inputs": [{"name": "to", "type": "address"}, {"name": "value", "type": "uint256"}],
            "outputs": [],
            "stateMutability": "payable",
        }
    ]
    interface = ContractInterface(abi)
    transfer = interface.get_function("transfer")

    assert transfer is not None
    assert transfer.input_names == ("recipient", "amount")
    assert transfer.state_mutability == "nonpayable"
    assert "shares the selector 0xa9059cbb" in caplog.text


def test_invalid_abi():
    with pytest.raises(ArgumentError):
        ContractInterface({"abi": ERC20_ABI})  # type: ignore[arg-type]

    with pytest.raises(ArgumentError):
        ContractInterface([{"type": "function", "name": "bad", "inputs": [{"name": "x", "type": "uint7"}]}])


def test_encode_unknown_function():
    with pytest.raises(ArgumentError, match="not found in ABI ERC20"):
        ContractInterface(ERC20_ABI, abi_name="ERC20").encode_function_call("mint", [1])


def test_abi_utils():
    funcs = filter_functions(ERC20_ABI)
    transfer = [f for f in funcs if f["name"] == "transfer"][0]

    assert abi_to_signature(transfer) == "transfer(address,uint256)"
    assert collapse_if_tuple(BATCH_ROUTER_ABI[1]["inputs"][0]) == "(address,uint256,string)[]"
    assert all(f["type"] == "function" for f in funcs)

    with pytest.raises(ArgumentError):
        collapse_if_tuple({"name": "x"})

    assert signature_to_name("swap(address,uint256)") == "swap"
    assert canonicalize_signature("swap((uint,address)[], int)") == "swap((uint256,address)[],int256)"
    with pytest.raises(AbiTypeError):
        canonicalize_signature("swap(uint7)")
    assert canonicalize_signature("totalSupply()") == "totalSupply()"

    with pytest.raises(ArgumentError, match="ABI entry 1"):
        filter_functions([transfer, "transfer(address,uint256)"])  # type: ignore[list-item]


def test_decode_round_trip_matches_original_address(random_address):
    interface = ContractInterface(ERC20_ABI)
    owner, spender = random_address(), random_address()

    decoded = interface.decode_function_data(interface.encode_function_call("allowance", [owner, spender]).hex())

    assert decoded.arguments == (tca(owner), tca(spender))
