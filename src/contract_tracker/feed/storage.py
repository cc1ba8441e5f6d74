"""
JSON file feed for offline classification.

Stores transactions as a JSON list using the snake_case layout of
``RawTransaction.to_dict``. Records fetched with Web3.py (camelCase keys)
are accepted on load as well.
"""

import json
import logging
from pathlib import Path
from typing import Iterable

from ..classification.models import RawTransaction
from ..errors import TransactionParsingError

logger = logging.getLogger(__name__)


def load_transactions(file_path: str | Path) -> list[RawTransaction]:
    """
    Load transactions from a JSON file.

    Args:
        file_path: Path to a JSON file containing a list of transaction records

    Returns:
        List of RawTransaction in file order. Malformed records are skipped
        with a warning.

    Raises:
        FileNotFoundError: If file does not exist
        ValueError: If the file does not contain a JSON list
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Transactions file not found: {file_path}")

    with open(file_path, "r") as f:
        records = json.load(f)

    if not isinstance(records, list):
        raise ValueError(f"Expected a JSON list of transactions in {file_path}")

    transactions = []
    for index, record in enumerate(records):
        try:
            transactions.append(RawTransaction.from_web3(record))
        except TransactionParsingError as e:
            logger.warning(f"Record {index}: {e}")
            continue

    logger.info(f"Loaded {len(transactions)} transactions from {file_path}")
    return transactions


def save_transactions(
    transactions: Iterable[RawTransaction], output_path: str | Path, pretty: bool = True
) -> None:
    """Save transactions to a JSON file, creating parent directories."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    records = [tx.to_dict() for tx in transactions]

    with open(output_path, "w") as f:
        json.dump(records, f, indent=2 if pretty else None)

    logger.info(f"Saved {len(records)} transactions to {output_path}")
