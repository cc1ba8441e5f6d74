"""
Error types for the contract tracker.

Errors are split into two independent groups so that the classification
core and its tests never depend on network-layer error types:

- Configuration / data errors: raised while validating the target address
  or parsing a raw transaction record.
- Transport errors: raised by the feed adapters when talking to a node.

Unrecognized call data is never an error; decoders return None instead.
"""


class TrackerError(Exception):
    """Base class for all contract tracker errors."""


class ConfigurationError(TrackerError):
    """Invalid tracker configuration (missing or malformed settings)."""


class InvalidAddressError(ConfigurationError, ValueError):
    """An address is not a well-formed 20-byte Ethereum address."""

    def __init__(self, address: object, reason: str | None = None):
        self.address = address
        message = f"Invalid address format: {address!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class TransactionParsingError(TrackerError, ValueError):
    """A raw transaction record is missing fields or has malformed values."""


class TransportError(TrackerError):
    """Base class for failures talking to an Ethereum node."""


class NodeConnectionError(TransportError):
    """The node at the configured RPC URL could not be reached."""


class TransactionRetrievalError(TransportError):
    """A transaction could not be fetched from the node."""

    def __init__(self, tx_hash: str, cause: Exception | None = None):
        self.tx_hash = tx_hash
        self.cause = cause
        message = f"Error retrieving transaction {tx_hash}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
