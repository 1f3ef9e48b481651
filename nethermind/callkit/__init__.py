from nethermind.callkit.abi import (
    canonical_signature,
    decode_abi,
    encode_abi,
    encode_call,
    encode_payload_data,
    generate_method_signature,
    parse_type,
)
from nethermind.callkit.config import ProviderConfig, load_provider_config
from nethermind.callkit.contracts import (
    ContractDispatcher,
    call_contract_function,
    create_contract_instance,
)
from nethermind.callkit.decoding import (
    ContractInterface,
    DecodedCall,
    decode_transaction_data,
)
from nethermind.callkit.matching import (
    find_transaction_for_method,
    get_transaction_hash_for_method,
)
from nethermind.callkit.providers import (
    MoralisTransactionProvider,
    create_provider,
    fetch_bytecode,
    get_transaction,
    get_transaction_receipt,
    is_contract_address,
    is_wallet_address,
)
from nethermind.callkit.signatures import (
    generate_function_selector,
    recover_signer,
    sign_typed_data,
)
