"""
Transaction feed adapters.

Sources of RawTransaction records for the classification pipeline: a live
pending-transaction feed over Web3.py and a JSON file feed for offline runs.
"""

from .connection import Web3ConnectionManager
from .pending import PendingTransactionFeed
from .storage import load_transactions, save_transactions

__all__ = [
    "PendingTransactionFeed",
    "Web3ConnectionManager",
    "load_transactions",
    "save_transactions",
]
