"""
Exchange order-book snapshots.

This module defines the per-exchange records the router matches against:
the resting bids and asks of one exchange together with the funds
available there. Snapshots are built fresh for every matching pass and
are treated as read-only by the matching engine.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Tuple

from .order import Order, OrderEntry, get_field, to_decimal
from .order_types import OrderSide


@dataclass
class Balance:
    """
    Funds available on one exchange.

    - fiat: currency available for buying the asset
    - crypto: asset available for selling
    """

    fiat: Decimal = Decimal('0')
    crypto: Decimal = Decimal('0')

    def __post_init__(self):
        self.fiat = to_decimal(self.fiat)
        self.crypto = to_decimal(self.crypto)
        if self.fiat < 0:
            raise ValueError(f"Fiat balance cannot be negative, got: {self.fiat}")
        if self.crypto < 0:
            raise ValueError(f"Crypto balance cannot be negative, got: {self.crypto}")

    def available_for(self, side: OrderSide) -> Decimal:
        """
        Funds that limit a customer order of the given side.

        Buying spends fiat, selling spends the asset.
        """
        return self.fiat if side is OrderSide.BUY else self.crypto

    def to_dict(self) -> Dict[str, Any]:
        return {"fiat": str(self.fiat), "crypto": str(self.crypto)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Balance':
        return cls(
            fiat=get_field(data, "fiat", "euro", default=Decimal('0')),
            crypto=get_field(data, "crypto", default=Decimal('0')),
        )


@dataclass
class OrderBook:
    """
    Resting orders of one exchange, in book order.

    Unlike a live book, no price ordering is assumed here: the matching
    engine sorts contra-side orders across all exchanges itself.
    """

    bids: List[OrderEntry] = field(default_factory=list)
    asks: List[OrderEntry] = field(default_factory=list)

    def entries_for(self, side: OrderSide) -> List[OrderEntry]:
        """Entries resting on the given side (BUY -> bids, SELL -> asks)."""
        return self.bids if side is OrderSide.BUY else self.asks

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bids": [entry.to_dict() for entry in self.bids],
            "asks": [entry.to_dict() for entry in self.asks],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrderBook':
        bids = get_field(data, "bids", default=None) or []
        asks = get_field(data, "asks", default=None) or []
        return cls(
            bids=[OrderEntry.from_dict(entry) for entry in bids],
            asks=[OrderEntry.from_dict(entry) for entry in asks],
        )


@dataclass
class ExchangeSnapshot:
    """
    One exchange's order book plus its available funds, as of one pass.
    """

    exchange_id: str
    balance: Balance = field(default_factory=Balance)
    order_book: OrderBook = field(default_factory=OrderBook)

    def __post_init__(self):
        if not self.exchange_id:
            raise ValueError("Exchange id cannot be empty")

    def iter_orders(self, side: OrderSide) -> Iterator[Tuple[str, Order]]:
        """Yield (exchange_id, order) for every entry on the given book side."""
        for entry in self.order_book.entries_for(side):
            yield self.exchange_id, entry.order

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to dictionary for serialization."""
        return {
            "exchange_id": self.exchange_id,
            "balance": self.balance.to_dict(),
            "order_book": self.order_book.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExchangeSnapshot':
        """
        Create snapshot from a JSON object.

        Accepts the exchange export layout ("Id", "AvailableFunds",
        "OrderBook") as well as to_dict() keys.

        Raises:
            KeyError: If a required key is missing
            TypeError: If a nested value has the wrong shape
            ValueError: If a value cannot be parsed
        """
        funds = get_field(data, "balance", "availablefunds", "available_funds", default=None)
        book = get_field(data, "order_book", "orderbook", default=None)
        return cls(
            exchange_id=str(get_field(data, "exchange_id", "id") or ""),
            balance=Balance.from_dict(funds) if funds is not None else Balance(),
            order_book=OrderBook.from_dict(book) if book is not None else OrderBook(),
        )
