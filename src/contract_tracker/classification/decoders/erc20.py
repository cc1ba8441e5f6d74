"""
Decode ERC-20 token transfer calls.

This module recognizes call data for the standard
``transfer(address,uint256)`` function and extracts the token recipient and
amount. Only this one signature is supported; ``transferFrom`` and general
ABI decoding are out of scope.

Call data layout (68 bytes):
    bytes 0-3    selector 0xa9059cbb
    bytes 4-35   ABI word: destination address in the low 20 bytes
    bytes 36-67  ABI word: big-endian uint256 amount

Usage:
    from contract_tracker.classification.decoders.erc20 import decode_transfer_call

    transfer = decode_transfer_call(tx.input_data, token_address=tx.recipient)
"""

import logging

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from hexbytes import HexBytes
from web3 import Web3

from ..models import DecodedTransfer
from ...errors import InvalidAddressError
from ..normalization import (
    normalize_address,
    normalize_hex_field,
    normalize_optional_address,
)

logger = logging.getLogger(__name__)

TRANSFER_FUNCTION_SIGNATURE = "transfer(address,uint256)"

# First four bytes of keccak256("transfer(address,uint256)") == 0xa9059cbb
TRANSFER_SELECTOR = bytes(Web3.keccak(text=TRANSFER_FUNCTION_SIGNATURE)[:4])

TRANSFER_ARGUMENT_TYPES = ["address", "uint256"]

ABI_WORD_SIZE = 32
SELECTOR_SIZE = 4
TRANSFER_CALL_LENGTH = SELECTOR_SIZE + 2 * ABI_WORD_SIZE


def decode_transfer_call(
    input_data: bytes | HexBytes | str | None, token_address: str | None = None
) -> DecodedTransfer | None:
    """
    Decode ERC-20 ``transfer(address,uint256)`` call data.

    Total over all inputs: anything that is not a well-formed transfer call
    yields None rather than an exception.

    Args:
        input_data: Transaction call data (raw bytes, HexBytes or hex string)
        token_address: Contract the call was sent to. Recorded on the result
            as the token address, since ERC-20 transfers are calls to the
            token contract itself. A malformed value is recorded as None.

    Returns:
        DecodedTransfer with checksummed destination and raw amount (in the
        token's smallest unit), or None if the data is not a transfer call

    Notes:
        - Returns None if the selector differs or data is shorter than 68 bytes
        - Bytes beyond the two argument words are ignored
        - An address word with non-zero high-order padding is rejected
          (eth_abi raises NonEmptyPaddingBytes), so the result is None
    """
    try:
        data = normalize_hex_field(input_data)
    except ValueError as e:
        logger.debug(f"Call data is not valid hex: {e}")
        return None

    if len(data) < TRANSFER_CALL_LENGTH:
        return None

    if data[:SELECTOR_SIZE] != TRANSFER_SELECTOR:
        return None

    try:
        destination, amount = decode(
            TRANSFER_ARGUMENT_TYPES, data[SELECTOR_SIZE:TRANSFER_CALL_LENGTH]
        )
    except DecodingError as e:
        logger.warning(f"Rejected malformed transfer call data: {e}")
        return None

    try:
        token_address = normalize_optional_address(token_address)
    except InvalidAddressError as e:
        logger.debug(f"Ignoring malformed token address: {e}")
        token_address = None

    decoded = DecodedTransfer(
        token_address=token_address,
        destination=Web3.to_checksum_address(destination),
        amount=amount,
    )

    logger.debug(
        f"Decoded ERC-20 transfer call: {decoded.amount} -> {decoded.destination} "
        f"(token {token_address or 'unknown'})"
    )

    return decoded


def encode_transfer_call(destination: str | bytes, amount: int) -> bytes:
    """
    Encode ``transfer(address,uint256)`` call data.

    Args:
        destination: Recipient address of the token transfer
        amount: Amount in the token's smallest unit (uint256)

    Returns:
        68 bytes of call data: selector followed by the two argument words

    Raises:
        InvalidAddressError: If destination is not a valid address
        ValueError: If amount does not fit in a uint256
    """
    if not 0 <= amount < 2**256:
        raise ValueError(f"Amount must fit in uint256, got {amount}")

    arguments = encode(TRANSFER_ARGUMENT_TYPES, [normalize_address(destination), amount])
    return TRANSFER_SELECTOR + arguments
