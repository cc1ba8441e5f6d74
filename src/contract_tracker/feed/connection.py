"""
Web3 connection management for the transaction feed.

Wraps a Web3 instance and translates node failures into the transport
error group, so callers never handle web3 or requests exceptions directly.
"""

import logging
from typing import Any

import requests.exceptions
from web3 import HTTPProvider, LegacyWebSocketProvider, Web3
from web3.exceptions import TransactionNotFound, Web3Exception

from ..classification.normalization import normalize_hex_string
from ..errors import NodeConnectionError, TransactionRetrievalError

logger = logging.getLogger(__name__)

PLACEHOLDER_RPC_URL = "PLACEHOLDER_RPC_URL"

_TRANSPORT_ERRORS = (
    requests.exceptions.RequestException,
    Web3Exception,
    OSError,
)


class Web3ConnectionManager:
    """
    Manages a Web3 connection to an Ethereum node.

    HTTP(S) URLs use ``HTTPProvider``; WS(S) URLs use the synchronous
    websocket provider. Failed calls are not retried: the feed logs them and
    moves on to the next transaction.
    """

    def __init__(self, rpc_url: str, timeout: int = 30):
        """
        Initialize Web3 connection manager.

        Args:
            rpc_url: Ethereum RPC endpoint URL (e.g., Infura, Alchemy)
            timeout: Request timeout in seconds

        Raises:
            NodeConnectionError: If RPC URL is invalid or connection cannot be established
        """
        if not rpc_url or rpc_url == PLACEHOLDER_RPC_URL:
            raise NodeConnectionError(
                "Invalid RPC URL. Please configure a valid Ethereum RPC endpoint "
                "in configs/tracker_config.yaml, ETH_RPC_URL, or --rpc-url"
            )

        self.rpc_url = rpc_url
        self.timeout = timeout
        self.w3 = Web3(self._build_provider(rpc_url, timeout))

        try:
            connected = self.w3.is_connected()
        except _TRANSPORT_ERRORS as e:
            raise NodeConnectionError(
                f"Failed to connect to Ethereum node at {rpc_url}: {e}"
            ) from e

        if not connected:
            raise NodeConnectionError(f"Failed to connect to Ethereum node at {rpc_url}")

        logger.info(f"Connected to Ethereum node at {rpc_url}")

    @staticmethod
    def _build_provider(rpc_url: str, timeout: int) -> Any:
        if rpc_url.startswith(("ws://", "wss://")):
            return LegacyWebSocketProvider(rpc_url, websocket_timeout=timeout)
        return HTTPProvider(rpc_url, request_kwargs={"timeout": timeout})

    def create_pending_filter(self) -> Any:
        """
        Install a filter for new pending transaction hashes.

        Returns:
            Web3 filter whose ``get_new_entries()`` returns transaction hashes

        Raises:
            NodeConnectionError: If the node rejects the filter
        """
        try:
            pending_filter = self.w3.eth.filter("pending")
        except _TRANSPORT_ERRORS as e:
            raise NodeConnectionError(
                f"Failed to subscribe to pending transactions: {e}"
            ) from e

        logger.info("Subscribed to pending transactions")
        return pending_filter

    def get_new_pending_hashes(self, pending_filter: Any) -> list[Any]:
        """
        Poll a pending filter for transaction hashes seen since the last poll.

        Args:
            pending_filter: Filter returned by ``create_pending_filter``

        Returns:
            List of transaction hashes (HexBytes or hex strings)

        Raises:
            NodeConnectionError: If the node call fails
        """
        try:
            return list(pending_filter.get_new_entries())
        except _TRANSPORT_ERRORS as e:
            raise NodeConnectionError(
                f"Failed to poll pending transactions: {e}"
            ) from e

    def get_transaction(self, tx_hash: str | bytes) -> dict[str, Any] | None:
        """
        Fetch a transaction by hash.

        Args:
            tx_hash: Transaction hash (hex string or HexBytes)

        Returns:
            Transaction mapping, or None if the node does not know the hash
            (pending transactions may already be dropped)

        Raises:
            TransactionRetrievalError: If the node call fails
        """
        tx_hash = normalize_hex_string(tx_hash)
        logger.debug(f"Fetching transaction: {tx_hash}")

        try:
            tx = self.w3.eth.get_transaction(tx_hash)
        except TransactionNotFound:
            logger.debug(f"Transaction {tx_hash} not found")
            return None
        except _TRANSPORT_ERRORS as e:
            raise TransactionRetrievalError(tx_hash, e) from e

        return dict(tx) if tx is not None else None
