from eth_utils import is_hex

from nethermind.callkit.exceptions import ArgumentError


def chain_id_to_hex(network_id: int | str) -> str:
    """
    Converts a chain ID to the 0x prefixed hex format used by the Moralis API

    >>> chain_id_to_hex(97)
    '0x61'
    >>> chain_id_to_hex("1")
    '0x1'
    >>> chain_id_to_hex("0x89")
    '0x89'

    """
    if isinstance(network_id, bool):
        raise ArgumentError(f"Invalid network ID: {network_id!r}")

    if isinstance(network_id, int):
        chain_id = network_id
    elif isinstance(network_id, str) and network_id.strip().isdigit():
        chain_id = int(network_id.strip())
    elif isinstance(network_id, str) and network_id.startswith("0x") and is_hex(network_id) and len(network_id) > 2:
        chain_id = int(network_id, 16)
    else:
        raise ArgumentError(f"Invalid network ID: {network_id!r}")

    if chain_id <= 0:
        raise ArgumentError(f"Network ID must be positive, got {chain_id}")
    return hex(chain_id)


def pprint_list(write_array: list[str], term_width: int) -> list[str]:
    """
    Wraps an array of strings into lines with a max width of term_width

    :param write_array:
    :param term_width:
    :return:
    """
    current_line, output = "", []
    for write_val in write_array:
        if current_line and len(current_line) + len(write_val) + 1 > term_width:
            output.append(current_line)
            current_line = ""
        current_line += f"'{write_val}', "
    output.append(current_line)
    return output
