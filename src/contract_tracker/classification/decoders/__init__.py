"""
Call-data decoders keyed by function selector.

Recognized call shapes live in ``CALL_DECODERS``, a table from 4-byte
selector to decoder function. Only ERC-20 ``transfer(address,uint256)`` is
registered; new signatures can be added with ``register_call_decoder``
without touching the dispatch logic.
"""

import logging
from typing import Callable

from hexbytes import HexBytes

from ..models import DecodedTransfer
from ..normalization import normalize_hex_field
from .erc20 import (
    SELECTOR_SIZE,
    TRANSFER_SELECTOR,
    decode_transfer_call,
    encode_transfer_call,
)

logger = logging.getLogger(__name__)

CallDecoder = Callable[[bytes, str | None], DecodedTransfer | None]

CALL_DECODERS: dict[bytes, CallDecoder] = {
    TRANSFER_SELECTOR: decode_transfer_call,
}


def register_call_decoder(selector: bytes | str, decoder: CallDecoder) -> None:
    """
    Register a decoder for an additional function selector.

    Args:
        selector: 4-byte selector (bytes or hex string)
        decoder: Callable taking (call_data, token_address) and returning a
            DecodedTransfer or None

    Raises:
        ValueError: If the selector is not exactly 4 bytes
    """
    selector_bytes = normalize_hex_field(selector)
    if len(selector_bytes) != SELECTOR_SIZE:
        raise ValueError(
            f"Selector must be {SELECTOR_SIZE} bytes, got {len(selector_bytes)}"
        )

    if selector_bytes in CALL_DECODERS:
        logger.warning(f"Replacing decoder for selector 0x{selector_bytes.hex()}")

    CALL_DECODERS[selector_bytes] = decoder


def decode_call(
    input_data: bytes | HexBytes | str | None, token_address: str | None = None
) -> DecodedTransfer | None:
    """
    Dispatch call data to the decoder registered for its selector.

    Args:
        input_data: Transaction call data
        token_address: Contract the call was sent to

    Returns:
        Decoder result, or None if no decoder is registered for the selector
        or the data cannot be parsed
    """
    try:
        data = normalize_hex_field(input_data)
    except ValueError as e:
        logger.debug(f"Call data is not valid hex: {e}")
        return None

    decoder = CALL_DECODERS.get(data[:SELECTOR_SIZE])
    if decoder is None:
        return None

    return decoder(data, token_address)


__all__ = [
    "CALL_DECODERS",
    "CallDecoder",
    "TRANSFER_SELECTOR",
    "decode_call",
    "decode_transfer_call",
    "encode_transfer_call",
    "register_call_decoder",
]
