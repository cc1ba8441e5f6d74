"""
Live feed of pending transactions from an Ethereum node.

Polls a ``"pending"`` filter for new transaction hashes, fetches each
transaction, and yields RawTransaction records. The feed is unbounded;
consumers stop it by breaking out of iteration (for example through the
``limit`` of ``classify_transactions``). A failed poll ends the feed with
NodeConnectionError; a failed fetch of a single transaction is skipped.

Usage:
    manager = Web3ConnectionManager(rpc_url)
    feed = PendingTransactionFeed(manager)

    for summary in classify_transactions(feed, matcher, limit=5):
        ...
"""

import logging
import time
from typing import Iterator

from ..classification.models import RawTransaction
from ..errors import TransactionParsingError, TransactionRetrievalError
from .connection import Web3ConnectionManager

logger = logging.getLogger(__name__)


class PendingTransactionFeed:
    """Iterable of RawTransaction records observed in the node's mempool."""

    def __init__(
        self,
        manager: Web3ConnectionManager,
        poll_interval: float = 1.0,
        max_polls: int | None = None,
    ):
        """
        Args:
            manager: Connected Web3 connection manager
            poll_interval: Seconds to wait between filter polls
            max_polls: Stop after this many polls (None polls forever)
        """
        if poll_interval < 0:
            raise ValueError(f"poll_interval must be non-negative, got {poll_interval}")

        self.manager = manager
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self.fetched = 0
        self.failed = 0

    def __iter__(self) -> Iterator[RawTransaction]:
        pending_filter = self.manager.create_pending_filter()
        logger.info("Waiting for new transactions...")

        polls = 0
        while self.max_polls is None or polls < self.max_polls:
            polls += 1

            for tx_hash in self.manager.get_new_pending_hashes(pending_filter):
                tx = self._fetch(tx_hash)
                if tx is not None:
                    yield tx

            if self.max_polls is None or polls < self.max_polls:
                time.sleep(self.poll_interval)

        logger.info(
            f"Pending feed stopped after {polls} polls "
            f"({self.fetched} fetched, {self.failed} failed)"
        )

    def _fetch(self, tx_hash) -> RawTransaction | None:
        try:
            tx = self.manager.get_transaction(tx_hash)
        except TransactionRetrievalError as e:
            self.failed += 1
            logger.error(str(e))
            return None

        # Dropped from the mempool before we asked for it
        if tx is None:
            return None

        try:
            raw = RawTransaction.from_web3(tx)
        except TransactionParsingError as e:
            self.failed += 1
            logger.warning(f"Skipping unparseable transaction: {e}")
            return None

        self.fetched += 1
        return raw
