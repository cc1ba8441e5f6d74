"""
Record types flowing through the classification pipeline.

RawTransaction is what a feed adapter observes, DecodedTransfer is the
result of a successful call-data decode, and TransactionSummary is the
terminal record handed to the presentation layer. All three are frozen:
records are never modified after they are built.
"""

import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Mapping

from ..errors import TransactionParsingError
from .normalization import (
    normalize_address,
    normalize_hex_field,
    normalize_hex_string,
    normalize_optional_address,
    normalize_quantity,
)

logger = logging.getLogger(__name__)


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present value among alternative field names."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class RawTransaction:
    """A transaction as observed on the node, before classification."""

    hash: str
    sender: str
    recipient: str | None
    value_wei: int
    gas_price_wei: int
    gas: int
    nonce: int
    block_number: int | None = None
    transaction_index: int | None = None
    block_hash: str | None = None
    chain_id: int = 0
    input_data: bytes = b""

    @property
    def is_pending(self) -> bool:
        return self.block_number is None

    @property
    def is_contract_creation(self) -> bool:
        return self.recipient is None

    @classmethod
    def from_web3(cls, tx: Mapping[str, Any]) -> "RawTransaction":
        """
        Build a RawTransaction from a Web3.py transaction or a stored JSON record.

        Accepts both the camelCase field names returned by
        ``w3.eth.get_transaction`` (``gasPrice``, ``blockNumber``, ``input``)
        and the snake_case layout written by ``save_transactions``
        (``tx_hash``, ``gas_price``, ``block_number``). Hex strings, HexBytes
        and ints are all accepted for quantities and byte fields.

        Args:
            tx: Transaction mapping (dict or Web3.py AttributeDict)

        Returns:
            RawTransaction with checksummed addresses and raw input bytes

        Raises:
            TransactionParsingError: If required fields are missing or malformed
        """
        tx_hash = _pick(tx, "hash", "tx_hash")
        sender = _pick(tx, "from", "sender")
        if tx_hash is None or sender is None:
            raise TransactionParsingError(
                f"Transaction record missing hash or sender: {dict(tx)!r}"
            )

        # EIP-1559 transactions may only carry fee caps
        gas_price = _pick(tx, "gasPrice", "gas_price", "maxFeePerGas")

        try:
            return cls(
                hash=normalize_hex_string(tx_hash),
                sender=normalize_address(sender),
                recipient=normalize_optional_address(_pick(tx, "to", "recipient")),
                value_wei=normalize_quantity(_pick(tx, "value", "value_wei"), 0),
                gas_price_wei=normalize_quantity(gas_price, 0),
                gas=normalize_quantity(_pick(tx, "gas"), 0),
                nonce=normalize_quantity(_pick(tx, "nonce"), 0),
                block_number=normalize_quantity(
                    _pick(tx, "blockNumber", "block_number")
                ),
                transaction_index=normalize_quantity(
                    _pick(tx, "transactionIndex", "transaction_index")
                ),
                block_hash=(
                    normalize_hex_string(_pick(tx, "blockHash", "block_hash"))
                    if _pick(tx, "blockHash", "block_hash") is not None
                    else None
                ),
                chain_id=normalize_quantity(_pick(tx, "chainId", "chain_id"), 0),
                input_data=normalize_hex_field(_pick(tx, "input", "data", "input_data")),
            )
        except ValueError as e:
            raise TransactionParsingError(
                f"Malformed transaction {tx_hash!r}: {e}"
            ) from e

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON layout read back by ``from_web3``."""
        return {
            "tx_hash": self.hash,
            "from": self.sender,
            "to": self.recipient,
            "value": self.value_wei,
            "gas_price": self.gas_price_wei,
            "gas": self.gas,
            "nonce": self.nonce,
            "block_number": self.block_number,
            "transaction_index": self.transaction_index,
            "block_hash": self.block_hash,
            "chain_id": self.chain_id,
            "input": "0x" + self.input_data.hex(),
        }


@dataclass(frozen=True)
class DecodedTransfer:
    """An ERC-20 ``transfer(address,uint256)`` call decoded from call data."""

    # Contract the call was sent to (None when decoded without tx context)
    token_address: str | None
    destination: str
    amount: int


@dataclass(frozen=True)
class TransactionSummary:
    """A matched transaction re-expressed in human-friendly units."""

    hash: str
    sender: str
    recipient: str | None
    value_wei: int
    value_eth: Decimal
    gas_price_wei: int
    gas_price_gwei: Decimal
    gas: int
    nonce: int
    block_number: int | None
    transaction_index: int | None
    block_hash: str | None
    chain_id: int
    token_transfer: DecodedTransfer | None = None

    @property
    def is_token_transfer(self) -> bool:
        return self.token_transfer is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary (nested transfer included)."""
        return asdict(self)
