from .decoder import decode_abi
from .encoder import encode_abi, encode_call, encode_payload_data
from .selector import canonical_signature, function_selector, generate_method_signature
from .types import parse_type, parse_types
from .values import coerce_value, to_native
