import logging
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from eth_typing import ABI
from eth_utils import is_address, to_checksum_address
from web3 import Web3
from web3.contract import Contract

from nethermind.callkit.abi.types import as_descriptors
from nethermind.callkit.abi.values import coerce_value, to_native
from nethermind.callkit.decoding.interface import fragment_from_abi
from nethermind.callkit.decoding.utils import filter_functions
from nethermind.callkit.exceptions import ArgumentError, EncodingError
from nethermind.callkit.types.abi import FunctionFragment

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("callkit").getChild("contracts")


class ContractHandle(Protocol):
    """Subset of web3.contract.Contract used for dispatching calls"""

    w3: Web3

    def get_function_by_signature(self, signature: str) -> Any:
        """Returns the contract function matching a canonical signature"""
        raise NotImplementedError()


def create_contract_instance(w3: Web3, contract_address: str, abi: ABI | list[dict[str, Any]]) -> Contract:
    """
    Creates a web3 contract handle for a deployed contract

    :param w3: Web3 instance
    :param contract_address: Address of the deployed contract
    :param abi: Contract ABI JSON
    """
    if not is_address(contract_address):
        raise ArgumentError(f"Invalid contract address: {contract_address}")
    return w3.eth.contract(address=to_checksum_address(contract_address), abi=abi)


@dataclass(frozen=True)
class ContractMethod:
    """Dispatch table entry binding a function fragment to the contract function that executes it"""

    fragment: FunctionFragment
    function: Any

    def invoke(
        self,
        w3: Web3,
        arguments: Sequence[Any],
        is_read_only: bool,
        transaction: dict[str, Any] | None = None,
    ) -> Any:
        """
        Executes the method.  Read only methods are executed with eth_call.  State changing methods are sent
        as a transaction, and block until the transaction receipt is available

        :return: Return value of the call, or the receipt of the mined transaction
        """
        bound = self.function(*arguments)
        if is_read_only:
            logger.debug(f"Calling {self.fragment.signature}")
            return bound.call(transaction)

        logger.debug(f"Sending transaction for {self.fragment.signature}")
        tx_hash = bound.transact(transaction)
        return w3.eth.wait_for_transaction_receipt(tx_hash)


class ContractDispatcher:
    """
    Explicit dispatch table for a deployed contract.  Every function in the ABI is registered once, keyed by its
    name and canonical input types, and calls are resolved against this table.

    """

    contract: ContractHandle
    methods: dict[tuple[str, tuple[str, ...]], ContractMethod]
    """ Mapping from (name, input types) to dispatch entries """

    def __init__(self, contract: ContractHandle, abi: ABI | list[dict[str, Any]]):
        self.contract = contract
        self.methods = {}

        for abi_function in filter_functions(abi):
            fragment = fragment_from_abi(abi_function)
            key = (fragment.name, tuple(fragment.input_types))
            self.methods[key] = ContractMethod(
                fragment=fragment,
                function=contract.get_function_by_signature(fragment.signature),
            )

        logger.debug(f"Loaded {len(self.methods)} contract methods into dispatcher")

    @classmethod
    def from_address(cls, w3: Web3, contract_address: str, abi: ABI | list[dict[str, Any]]) -> "ContractDispatcher":
        """Creates the contract handle and the dispatch table"""
        return cls(create_contract_instance(w3, contract_address, abi), abi)

    def resolve(
        self,
        function_name: str,
        params: Sequence[Any],
        types: Sequence[str] | None = None,
    ) -> ContractMethod:
        """
        Selects the dispatch entry for a call.  Overloaded functions are resolved by the number of parameters,
        or by explicit types when several overloads share the same arity.

        :param function_name: Name of the contract function
        :param params: Call parameters
        :param types: Input types, required to select between overloads with the same number of inputs
        """
        candidates = [method for (name, _), method in self.methods.items() if name == function_name]
        if not candidates:
            raise ArgumentError(f"Function {function_name} not found in contract ABI")

        if types is not None:
            key = (function_name, tuple(typ.canonical for typ in as_descriptors(types)))
            if key not in self.methods:
                raise ArgumentError(f"No matching fragment for {function_name}({','.join(key[1])})")
            if len(params) != len(key[1]):
                raise ArgumentError(
                    f"{self.methods[key].fragment.signature} takes {len(key[1])} arguments, but got {len(params)}"
                )
            return self.methods[key]

        matching = [method for method in candidates if len(method.fragment.inputs) == len(params)]
        if not matching:
            raise ArgumentError(
                f"No matching fragment for {function_name} with {len(params)} arguments.  "
                f"Available: {[method.fragment.signature for method in candidates]}"
            )
        if len(matching) > 1:
            raise ArgumentError(
                f"Ambiguous call to {function_name}.  Pass types to select one of "
                f"{[method.fragment.signature for method in matching]}"
            )
        return matching[0]

    def call(
        self,
        function_name: str,
        params: Sequence[Any] = (),
        types: Sequence[str] | None = None,
        is_read_only: bool | None = None,
        transaction: dict[str, Any] | None = None,
    ) -> Any:
        """
        Calls a contract function by name.  Parameters are validated against the ABI input types before the
        call is made

        :param function_name: Name of the contract function
        :param params: Ordered call parameters
        :param types: Input types to select between overloads
        :param is_read_only:
            If True, executes with eth_call.  If False, sends a transaction and waits for the receipt.  Defaults
            to the state mutability of the function
        :param transaction: Transaction parameters such as 'from' and 'value'
        """
        if not isinstance(params, (list, tuple)):
            raise ArgumentError("Contract call parameters must be a list or tuple")

        method = self.resolve(function_name, params, types)
        try:
            arguments = [
                to_native(abi_type, coerce_value(abi_type, param))
                for abi_type, param in zip(method.fragment.inputs, params)
            ]
        except EncodingError as e:
            raise ArgumentError(f"Invalid arguments for {method.fragment.signature}: {e}") from e

        read_only = method.fragment.is_read_only if is_read_only is None else is_read_only
        return method.invoke(self.contract.w3, arguments, read_only, transaction)


def call_contract_function(
    dispatcher: ContractDispatcher,
    function_name: str,
    params: Sequence[Any] = (),
    is_read_only: bool | None = None,
) -> Any:
    """Calls a contract function through a dispatcher.  See :meth:`ContractDispatcher.call`"""
    return dispatcher.call(function_name, params, is_read_only=is_read_only)
