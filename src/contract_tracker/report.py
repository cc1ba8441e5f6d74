"""
Console report for matched transactions.

Formats TransactionSummary records as the detail blocks printed at the end
of a tracking run, sorted by transferred value.
"""

from typing import Iterable

from .classification.models import TransactionSummary
from .classification.summarizer import wei_to_eth

SEPARATOR_WIDTH = 60


def sort_by_value(summaries: Iterable[TransactionSummary]) -> list[TransactionSummary]:
    """Sort summaries by ETH value, smallest first (stable for equal values)."""
    return sorted(summaries, key=lambda s: s.value_wei)


def _format_decimal(value) -> str:
    # Decimal("1E+1") -> "10", Decimal("2.50") -> "2.5"
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _or_pending(value) -> str:
    return "Pending" if value is None else str(value)


def format_summary(summary: TransactionSummary) -> str:
    """
    Format one summary as a multi-line detail block.

    Token amounts are shown in 18-decimal units; the token's real decimals
    are not looked up.
    """
    title = " Transaction Details "
    pad = (SEPARATOR_WIDTH - len(title)) // 2
    lines = [
        "=" * pad + title + "=" * (SEPARATOR_WIDTH - len(title) - pad),
        f"Transaction Hash: {summary.hash}",
        f"From Address: {summary.sender}",
        f"To Address: {summary.recipient or 'None (Contract Creation)'}",
        f"Value Transferred (ETH): {_format_decimal(summary.value_eth)}",
        f"Gas Price (Gwei): {_format_decimal(summary.gas_price_gwei)}",
        f"Gas: {summary.gas}",
        f"Nonce: {summary.nonce}",
        f"Block Number: {_or_pending(summary.block_number)}",
        f"Transaction Index in Block: {_or_pending(summary.transaction_index)}",
        f"Block Hash: {_or_pending(summary.block_hash)}",
        f"Chain ID: {summary.chain_id}",
    ]

    transfer = summary.token_transfer
    if transfer is not None:
        lines.extend(
            [
                "Token Transfer Detected:",
                f"  Token Contract: {transfer.token_address or 'unknown'}",
                f"  Recipient: {transfer.destination}",
                f"  Token Amount: {_format_decimal(wei_to_eth(transfer.amount))}",
            ]
        )
    else:
        lines.append("Token Information: Not available")

    lines.append("=" * SEPARATOR_WIDTH)
    return "\n".join(lines)


def format_report(summaries: Iterable[TransactionSummary], target: str) -> str:
    """Format all summaries, sorted by value, under a header naming the target."""
    ordered = sort_by_value(summaries)
    if not ordered:
        return f"No transactions related to contract {target} were found."

    blocks = [f"Sorted transactions related to contract {target}:"]
    blocks.extend(format_summary(summary) for summary in ordered)
    return "\n".join(blocks)
