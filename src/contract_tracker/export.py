"""
Export transaction summaries to CSV format.

Usage:
    from contract_tracker.export import export_to_csv

    export_to_csv(summaries, "data/processed/matches.csv")
"""

import logging
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from .classification.models import TransactionSummary

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "tx_hash",
    "block",
    "transaction_index",
    "from",
    "to",
    "value_wei",
    "value_eth",
    "gas_price_gwei",
    "gas",
    "nonce",
    "chain_id",
    "decoded_action",
    "token_address",
    "token_recipient",
    "token_amount",
]


def export_to_csv(
    summaries: Iterable[TransactionSummary], output_path: str | Path
) -> None:
    """
    Export summaries to a CSV file.

    Args:
        summaries: Transaction summaries, written in the given order
        output_path: Path to output CSV file (will create parent directories)

    Raises:
        ValueError: If summaries is empty
        IOError: If file cannot be written

    Notes:
        - Decimal and uint256 values are written as strings to keep full precision
        - Overwrites existing file at output_path
    """
    rows = [_summary_to_csv_row(summary) for summary in summaries]
    if not rows:
        raise ValueError("Cannot export empty transaction list")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    df.to_csv(output_path, index=False)

    logger.info(f"Exported {len(rows)} transactions to {output_path}")


def _summary_to_csv_row(summary: TransactionSummary) -> dict[str, Any]:
    transfer = summary.token_transfer

    return {
        "tx_hash": summary.hash,
        "block": summary.block_number if summary.block_number is not None else "",
        "transaction_index": (
            summary.transaction_index if summary.transaction_index is not None else ""
        ),
        "from": summary.sender,
        "to": summary.recipient or "",
        "value_wei": str(summary.value_wei),
        "value_eth": str(summary.value_eth),
        "gas_price_gwei": str(summary.gas_price_gwei),
        "gas": summary.gas,
        "nonce": summary.nonce,
        "chain_id": summary.chain_id,
        "decoded_action": "transfer" if transfer else "",
        "token_address": transfer.token_address if transfer else "",
        "token_recipient": transfer.destination if transfer else "",
        "token_amount": str(transfer.amount) if transfer else "",
    }
