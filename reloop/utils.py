"""
Utility functions.
"""

import sys
from typing import Any, Dict, List, Union
import json
from hexbytes import HexBytes
from eth_abi import encode
from eth_typing.encoding import HexStr
from eth_utils import function_signature_to_4byte_selector
from web3 import Web3
from web3.datastructures import AttributeDict

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
DEFAULT_IPFS_GATEWAY = "https://gateway.pinata.cloud/ipfs/"
IPFS_SCHEME = "ipfs://"


class Web3JsonEncoder(json.JSONEncoder):
    """
    JSON encoder for decoded log arguments: ``AttributeDict`` becomes a
    plain object and raw bytes become lowercase ``0x`` hex.
    """

    def default(self, o: Any) -> Union[Dict[Any, Any], HexStr]:
        if isinstance(o, AttributeDict):
            return dict(o)
        if isinstance(o, (HexBytes, bytes, bytearray)):
            return to_hex(o)
        return super().default(o)


def to_hex(value: bytes | str) -> HexStr:
    """
    Lowercase ``0x``-prefixed hex for bytes or a hex string
    """
    return HexStr(Web3.to_hex(HexBytes(value)).lower())


def normalize_address(address: str) -> str:
    """
    Canonical form of an address used everywhere in the database.

    Addresses are case-insensitive on Ethereum (the case only carries
    the checksum), so they are always stored and looked up in lowercase.

    Examples:
        ::

            print(normalize_address("0x6B175474E89094C44Da98b954EedeAC495271d0F"))
            # 0x6b175474e89094c44da98b954eedeac495271d0f
    """
    return address.lower()


def is_zero_address(address: str) -> bool:
    """
    ``True`` if ``address`` is the zero address (mint / burn counterparty)
    """
    return normalize_address(address) == ZERO_ADDRESS


def short_address(address: str) -> str:
    """
    ``0x6B17...1d0F`` form of an address, for log lines only
    """
    return address[:6] + "..." + address[-4:]


def ipfs_to_http(uri: str | None, gateway: str = DEFAULT_IPFS_GATEWAY) -> str | None:
    """
    Rewrite an ``ipfs://<hash>`` token URI to an HTTP gateway URL.

    Any other URI is returned unchanged.

    Args:
        uri: Token metadata URI, ``None`` if not resolved yet
        gateway: Gateway prefix, the hash is appended to it

    Returns:
        Fetchable URL, ``None`` if ``uri`` is ``None``

    Examples:
        ::

            print(ipfs_to_http("ipfs://QmHash"))
            # https://gateway.pinata.cloud/ipfs/QmHash
    """
    if uri is None:
        return None
    if uri.startswith(IPFS_SCHEME):
        return gateway + uri[len(IPFS_SCHEME) :]
    return uri


def calldata(signature: str, abi_types: List[str], args: List[Any]) -> str:
    """
    Hex calldata for a contract function call

    Args:
        signature: Canonical function signature, e.g. ``tokenURI(uint256)``
        abi_types: Argument types
        args: Argument values

    Returns:
        Hex data (starting with 0x, lowercase)
    """
    selector = function_signature_to_4byte_selector(signature)
    return to_hex(selector + encode(abi_types, args))


_progress = {"width": 0, "shown": 0.0}


def print_progress(done: int, total: int, prefix: str = "", bar_length: int = 20):
    """
    Redraw a one-line progress bar on stderr.

    Updates smaller than 1% are not drawn. The line is finished
    with a newline once ``done == total``.
    """
    if total <= 0:
        return
    ratio = min(done / total, 1.0)
    if 0 < done < total and ratio - _progress["shown"] < 0.01:
        return

    _progress["shown"] = ratio
    filled = round(bar_length * ratio)
    line = f"{prefix} |{'█' * filled}{'-' * (bar_length - filled)}| {100 * ratio:.1f}%"
    sys.stderr.write("\r" + line.ljust(_progress["width"]))
    _progress["width"] = len(line)

    if done >= total:
        sys.stderr.write("\n")
        sys.stderr.flush()
        _progress.update(width=0, shown=0.0)
