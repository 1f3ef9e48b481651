from .abi import CallData, FunctionFragment, TypeDescriptor, TypeKind
from .transactions import MatchResult, TransactionRecord
