"""
Assemble TransactionSummary records from raw transactions.

Unit conversion uses ``Web3.from_wei``, which divides in a 999-digit decimal
context, so every uint256 wei amount converts exactly.
"""

from decimal import Decimal

from web3 import Web3

from .models import DecodedTransfer, RawTransaction, TransactionSummary


def wei_to_eth(value_wei: int) -> Decimal:
    """Convert wei to ETH (value / 10**18) without loss of precision."""
    return Decimal(Web3.from_wei(value_wei, "ether"))


def wei_to_gwei(value_wei: int) -> Decimal:
    """Convert wei to Gwei (value / 10**9) without loss of precision."""
    return Decimal(Web3.from_wei(value_wei, "gwei"))


def summarize(
    tx: RawTransaction, transfer: DecodedTransfer | None = None
) -> TransactionSummary:
    """
    Build the summary record for a matched transaction.

    Args:
        tx: Raw transaction as observed on the node
        transfer: Decoded token transfer, or None if the call data was not
            a recognized transfer

    Returns:
        TransactionSummary with ETH and Gwei values alongside the raw wei
        amounts. Deterministic: equal inputs give equal summaries.
    """
    return TransactionSummary(
        hash=tx.hash,
        sender=tx.sender,
        recipient=tx.recipient,
        value_wei=tx.value_wei,
        value_eth=wei_to_eth(tx.value_wei),
        gas_price_wei=tx.gas_price_wei,
        gas_price_gwei=wei_to_gwei(tx.gas_price_wei),
        gas=tx.gas,
        nonce=tx.nonce,
        block_number=tx.block_number,
        transaction_index=tx.transaction_index,
        block_hash=tx.block_hash,
        chain_id=tx.chain_id,
        token_transfer=transfer,
    )
