"""
Classification pipeline: match, decode, summarize.

Control flow per transaction:
    RawTransaction -> AddressMatcher -> call-data decoder -> summarize

Every step is stateless; the only state is the match count kept by
``classify_transactions`` when a limit is given.
"""

import logging
from typing import Iterable, Iterator

from .decoders import decode_call
from .matcher import AddressMatcher
from .models import RawTransaction, TransactionSummary
from .summarizer import summarize

logger = logging.getLogger(__name__)


def classify_transaction(
    tx: RawTransaction, matcher: AddressMatcher
) -> TransactionSummary | None:
    """
    Classify a single transaction.

    Args:
        tx: Raw transaction from a feed
        matcher: Matcher for the target contract

    Returns:
        TransactionSummary if the transaction was sent to the target,
        otherwise None
    """
    if not matcher.matches(tx.recipient):
        return None

    transfer = decode_call(tx.input_data, token_address=matcher.target)

    logger.debug(
        f"Transaction {tx.hash} matched {matcher.target}"
        f"{' (token transfer)' if transfer else ''}"
    )

    return summarize(tx, transfer)


def classify_transactions(
    transactions: Iterable[RawTransaction],
    matcher: AddressMatcher,
    limit: int | None = None,
) -> Iterator[TransactionSummary]:
    """
    Classify a stream of transactions, yielding summaries in observed order.

    Args:
        transactions: Any iterable of RawTransaction (list, file feed, or a
            live PendingTransactionFeed)
        matcher: Matcher for the target contract
        limit: Stop after this many matches. None consumes the whole stream.

    Yields:
        TransactionSummary for each transaction sent to the target

    Raises:
        ValueError: If limit is not positive
    """
    if limit is not None and limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    matched = 0
    seen = 0

    for tx in transactions:
        seen += 1
        logger.debug(f"Analyzing transaction {tx.hash} to {tx.recipient}")

        summary = classify_transaction(tx, matcher)
        if summary is None:
            continue

        matched += 1
        yield summary

        if limit is not None and matched >= limit:
            logger.info(f"Reached limit of {limit} matched transactions")
            break

    logger.info(f"Matched {matched} of {seen} transactions to {matcher.target}")
