from .interface import ContractInterface, DecodedCall, decode_transaction_data
