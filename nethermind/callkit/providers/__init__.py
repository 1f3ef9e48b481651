from .history import MoralisTransactionProvider, TransactionHistoryProvider
from .rpc import (
    create_provider,
    fetch_bytecode,
    get_transaction,
    get_transaction_receipt,
    is_contract_address,
    is_wallet_address,
)
