"""
Transaction classification and ERC-20 transfer decoding.

This package decides whether a transaction was sent to a target contract,
decodes ERC-20 transfer call data, and builds summary records in ETH and
Gwei units.
"""

from .decoders import TRANSFER_SELECTOR, decode_call, decode_transfer_call
from .matcher import AddressMatcher, matches
from .models import DecodedTransfer, RawTransaction, TransactionSummary
from .pipeline import classify_transaction, classify_transactions
from .summarizer import summarize

__all__ = [
    "AddressMatcher",
    "DecodedTransfer",
    "RawTransaction",
    "TRANSFER_SELECTOR",
    "TransactionSummary",
    "classify_transaction",
    "classify_transactions",
    "decode_call",
    "decode_transfer_call",
    "matches",
    "summarize",
]
