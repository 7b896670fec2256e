"""
Utility functions.
"""

from typing import Any, Dict, Union
import json
from hexbytes import HexBytes
from eth_typing.encoding import HexStr
from web3 import Web3
from web3.datastructures import AttributeDict


class Web3JsonEncoder(json.JSONEncoder):
    """
    Custom encoder to parse `Web3 <https://web3py.readthedocs.io/en/stable/>`_ responses.
    By default `Web3 <https://web3py.readthedocs.io/en/stable/>`_ returns
    responses as ``AttributeDict`` with binary values.
    :class:`Web3JsonEncoder` transforms it into the :code:`0x...`
    hex format.
    """

    def default(self, o: Any) -> Union[Dict[Any, Any], HexStr]:
        """
        Convert Web3 response to ``dict``
        """
        if isinstance(o, AttributeDict):
            return {k: v for k, v in o.items()}
        if isinstance(o, (HexBytes, bytes, bytearray)):
            return to_hex(o)
        return json.JSONEncoder.default(self, o)


def json_response(response: Any) -> str:
    """
    Convert ``AttributeDict`` (or anything with nested web3 values)
    to standard json string

    Args:
        response: a `Web3 <https://web3py.readthedocs.io/en/stable/>`_ response

    Returns:
        json string
    """
    return json.dumps(response, cls=Web3JsonEncoder)


def to_hex(value: bytes) -> HexStr:
    """
    Lowercase :code:`0x...` hex for binary values.
    """
    return HexStr(Web3.to_hex(HexBytes(value)).lower())


def short_address(address: str | None) -> str:
    """
    Converts ethereum address to short version (for display purposes only).

    Args:
        address: Ethereum address to shorten

    Returns:
        Short version of the address.

    Examples:
        ::

            print(short_address("0x6B175474E89094C44Da98b954EedeAC495271d0F"))
            # 0x6B17...1d0F

    """
    if not address:
        return "*"
    if len(address) < 42:
        return address
    return f"{address[:6]}...{address[38:]}"
