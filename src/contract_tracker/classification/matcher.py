"""
Match transactions against a configured target contract address.

Addresses are compared in checksummed form, so letter-casing differences
between the feed and the configuration never cause false negatives.
"""

import logging

from hexbytes import HexBytes

from ..errors import InvalidAddressError
from .normalization import normalize_address

logger = logging.getLogger(__name__)


def matches(
    recipient: str | HexBytes | bytes | None, target: str | HexBytes | bytes
) -> bool:
    """
    Check whether a transaction recipient equals the target address.

    Args:
        recipient: Transaction ``to`` address, or None for contract creation
        target: Target contract address

    Returns:
        True iff recipient is present and equal to target. An absent or
        malformed recipient is a valid False result, not a failure.
    """
    if recipient is None:
        return False

    try:
        return normalize_address(recipient) == normalize_address(target)
    except InvalidAddressError as e:
        logger.debug(f"Address comparison failed: {e}")
        return False


class AddressMatcher:
    """
    Predicate for a single configured target address.

    The target is validated once at construction; a malformed target is a
    configuration error and is reported before any transaction is seen.

    Example:
        >>> matcher = AddressMatcher("0xdac17f958d2ee523a2206206994597c13d831ec7")
        >>> matcher.target
        '0xdAC17F958D2ee523a2206206994597C13D831ec7'
    """

    def __init__(self, target: str | HexBytes | bytes):
        self.target = normalize_address(target)

    def matches(self, recipient: str | HexBytes | bytes | None) -> bool:
        if recipient is None:
            return False

        try:
            return normalize_address(recipient) == self.target
        except InvalidAddressError as e:
            logger.debug(f"Ignoring malformed recipient: {e}")
            return False

    def __repr__(self) -> str:
        return f"AddressMatcher(target={self.target!r})"
