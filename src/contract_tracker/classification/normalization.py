"""
Data normalization utilities for transaction classification.

This module converts the field formats produced by Web3.py (HexBytes),
JSON storage (hex strings) and callers (raw bytes) into one canonical form
before the matcher and decoders look at them.

The normalization layer ensures:
- Call data is always handled as raw bytes
- Addresses are always compared in checksummed form
- Integer quantities may arrive as ints or hex strings

Usage:
    from contract_tracker.classification.normalization import (
        normalize_address,
        normalize_hex_field,
    )

    data_bytes = normalize_hex_field(tx["input"])
    target = normalize_address("0xdac17f958d2ee523a2206206994597c13d831ec7")
"""

import logging
import re
from typing import Any

from hexbytes import HexBytes
from web3 import Web3

from ..errors import InvalidAddressError

logger = logging.getLogger(__name__)

ADDRESS_BYTE_LENGTH = 20

_ADDRESS_PATTERN = re.compile(r"^(0[xX])?[0-9a-fA-F]{40}$")


def normalize_hex_field(hex_string: str | HexBytes | bytes | None) -> bytes:
    """
    Normalize a hex field to bytes, handling various input formats.

    Handles:
    - Strings with 0x (or 0X) prefix: "0x1234..."
    - Strings without 0x prefix: "1234..."
    - HexBytes objects (from Web3.py)
    - Raw bytes / bytearray objects
    - Empty values: "0x", "", None

    Args:
        hex_string: Hex data in any supported format

    Returns:
        Raw bytes representation of the hex data

    Raises:
        ValueError: If the input cannot be parsed as hex data

    Examples:
        >>> normalize_hex_field("0xa9059cbb")
        b'\\xa9\\x05\\x9c\\xbb'
        >>> normalize_hex_field(HexBytes("0xa9059cbb"))
        b'\\xa9\\x05\\x9c\\xbb'
    """
    if hex_string is None or hex_string in ("", "0x", "0X"):
        return b""

    # HexBytes is a bytes subclass, so this covers Web3.py values too
    if isinstance(hex_string, (bytes, bytearray)):
        return bytes(hex_string)

    if isinstance(hex_string, str):
        hex_clean = hex_string[2:] if hex_string[:2].lower() == "0x" else hex_string

        if not hex_clean:
            return b""

        # Odd-length quantities ("0x1") are left-padded to a whole byte
        if len(hex_clean) % 2:
            hex_clean = "0" + hex_clean

        try:
            return bytes.fromhex(hex_clean)
        except ValueError as e:
            raise ValueError(f"Invalid hex string: {hex_string}") from e

    raise ValueError(f"Unsupported hex field type: {type(hex_string)}")


def normalize_hex_string(
    hex_data: str | HexBytes | bytes | None, with_prefix: bool = True
) -> str:
    """
    Normalize hex data to a consistent string format.

    Args:
        hex_data: Hex data in any supported format
        with_prefix: If True, include '0x' prefix in output

    Returns:
        Hex string in consistent format

    Examples:
        >>> normalize_hex_string("1234", with_prefix=True)
        '0x1234'
        >>> normalize_hex_string(HexBytes("0x1234"), with_prefix=False)
        '1234'
    """
    hex_str = normalize_hex_field(hex_data).hex()
    return f"0x{hex_str}" if with_prefix else hex_str


def normalize_quantity(value: Any, default: int | None = None) -> int | None:
    """
    Normalize an integer quantity (wei, gas, nonce, block number).

    JSON-RPC encodes quantities as hex strings; Web3.py formatters and the
    JSON feed layout use plain ints. Both are accepted.

    Args:
        value: Integer, hex string ("0x1a"), decimal string, or None
        default: Value returned when the input is None

    Returns:
        Integer value, or default if value is None

    Raises:
        ValueError: If the value is negative or cannot be parsed
    """
    if value is None:
        return default

    if isinstance(value, bool):
        raise ValueError(f"Invalid quantity: {value!r}")

    if isinstance(value, int):
        quantity = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            quantity = int(text, 16) if text.lower().startswith("0x") else int(text)
        except ValueError as e:
            raise ValueError(f"Invalid quantity: {value!r}") from e
    else:
        raise ValueError(f"Unsupported quantity type: {type(value)}")

    if quantity < 0:
        raise ValueError(f"Quantity must be unsigned, got {quantity}")

    return quantity


def normalize_address(address: str | HexBytes | bytes) -> str:
    """
    Normalize an Ethereum address to checksummed form.

    Comparison is case-insensitive: mixed-case input with a wrong checksum is
    still accepted, since only the 20 address bytes matter for matching.

    Args:
        address: Hex string (with or without 0x prefix) or 20 raw bytes

    Returns:
        Checksummed address string (e.g. "0xdAC17F958D2ee523a2206206994597C13D831ec7")

    Raises:
        InvalidAddressError: If the input is not a well-formed 20-byte address
    """
    if isinstance(address, (bytes, bytearray)):
        if len(address) != ADDRESS_BYTE_LENGTH:
            raise InvalidAddressError(
                address, f"expected {ADDRESS_BYTE_LENGTH} bytes, got {len(address)}"
            )
        hex_address = "0x" + bytes(address).hex()
    elif isinstance(address, str):
        hex_address = address.strip()
        if not _ADDRESS_PATTERN.match(hex_address):
            raise InvalidAddressError(address, "expected 40 hex characters")
        if hex_address[:2].lower() == "0x":
            hex_address = hex_address[2:]
        hex_address = "0x" + hex_address
    else:
        raise InvalidAddressError(address, f"unsupported type {type(address).__name__}")

    return Web3.to_checksum_address(hex_address.lower())


def normalize_optional_address(address: str | HexBytes | bytes | None) -> str | None:
    """Normalize an address that may be absent (contract creation, pending block)."""
    if address is None or address == "":
        return None
    return normalize_address(address)
