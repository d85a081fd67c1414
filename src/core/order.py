"""
Order and Fill data structures for the best-price router.

This module defines the orders found on exchange books, the customer
order being routed and the fills produced for it. All monetary values
use Decimal for precise arithmetic.
"""

import json
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from .order_types import OrderKind, OrderSide, parse_order_kind, parse_order_side

_MISSING = object()

# Up to 7 fractional digits are emitted by some exchange exporters
_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+")


def get_field(data: Dict[str, Any], *names: str, default: Any = _MISSING) -> Any:
    """
    Look up the first matching key of a JSON object, ignoring case.

    Args:
        data: Parsed JSON object
        *names: Accepted key names, in order of preference
        default: Value returned when no key matches

    Raises:
        KeyError: If no key matches and no default is given
        TypeError: If data is not a mapping
    """
    if not isinstance(data, dict):
        raise TypeError(f"Expected JSON object, got {type(data).__name__}")

    lowered = {str(key).lower(): value for key, value in data.items()}
    for name in names:
        if name.lower() in lowered:
            return lowered[name.lower()]

    if default is _MISSING:
        raise KeyError(names[0])
    return default


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON number or numeric string to Decimal."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise TypeError(f"Expected a number, got: {value!r}")
    return Decimal(str(value))


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO-8601 timestamp into a timezone-aware datetime.

    A trailing "Z" is accepted and naive values are assumed to be UTC.
    """
    if isinstance(value, datetime):
        timestamp = value
    else:
        text = _FRACTION_PATTERN.sub(r"\1", str(value).strip())
        timestamp = datetime.fromisoformat(text.replace("Z", "+00:00"))

    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


@dataclass
class Order:
    """
    Represents an order, either the customer's or one resting on a book.

    Amount and price are not range-checked here: resting orders read
    from exchange snapshots may carry zero or negative values and the
    matching engine decides what to do with them.
    """

    order_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    side: OrderSide = OrderSide.BUY
    kind: OrderKind = OrderKind.LIMIT
    amount: Decimal = Decimal('0')
    price: Decimal = Decimal('0')

    def __post_init__(self):
        self.amount = to_decimal(self.amount)
        self.price = to_decimal(self.price)

    @property
    def notional_value(self) -> Decimal:
        """Fiat value of the whole order."""
        return self.amount * self.price

    def to_dict(self) -> Dict[str, Any]:
        """Convert order to dictionary for serialization."""
        return {
            "order_id": self.order_id,
            "timestamp": self.timestamp.isoformat(),
            "side": self.side.value if isinstance(self.side, OrderSide) else str(self.side),
            "kind": self.kind.value if isinstance(self.kind, OrderKind) else str(self.kind),
            "amount": str(self.amount),
            "price": str(self.price),
        }

    def to_json(self) -> str:
        """Convert order to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        """
        Create order from a JSON object.

        Accepts both the exchange export format ("Id", "Time", "Type",
        "Kind", "Amount", "Price") and this module's own to_dict() keys.
        """
        timestamp = get_field(data, "timestamp", "time", default=None)
        return cls(
            order_id=str(get_field(data, "order_id", "id", default=None) or uuid.uuid4()),
            timestamp=parse_timestamp(timestamp) if timestamp else datetime.now(timezone.utc),
            side=parse_order_side(get_field(data, "side", "type")),
            kind=parse_order_kind(get_field(data, "kind", default=OrderKind.LIMIT.value)),
            amount=to_decimal(get_field(data, "amount")),
            price=to_decimal(get_field(data, "price")),
        )


@dataclass
class OrderEntry:
    """One order as it appears on one side of an exchange's book."""

    order: Order

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrderEntry':
        return cls(order=Order.from_dict(get_field(data, "order")))

    def to_dict(self) -> Dict[str, Any]:
        return {"order": self.order.to_dict()}


@dataclass
class Fill:
    """
    A portion of a resting order allocated to the customer order.

    Carries the resting order's identity, time, side, kind and price,
    with amount equal to the quantity actually allocated.
    """

    order_id: str
    timestamp: datetime
    side: OrderSide
    kind: OrderKind
    amount: Decimal
    price: Decimal
    exchange_id: str = ""

    @classmethod
    def from_order(cls, order: Order, amount: Decimal, exchange_id: str = "") -> 'Fill':
        """Clone a resting order with the allocated amount."""
        return cls(
            order_id=order.order_id,
            timestamp=order.timestamp,
            side=order.side,
            kind=order.kind,
            amount=amount,
            price=order.price,
            exchange_id=exchange_id,
        )

    @property
    def notional_value(self) -> Decimal:
        """Fiat value of this fill."""
        return self.amount * self.price

    def to_order(self) -> Order:
        """Return the fill as a plain Order."""
        return Order(
            order_id=self.order_id,
            timestamp=self.timestamp,
            side=self.side,
            kind=self.kind,
            amount=self.amount,
            price=self.price,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert fill to dictionary for serialization."""
        data = self.to_order().to_dict()
        data["exchange_id"] = self.exchange_id
        data["notional_value"] = str(self.notional_value)
        return data

    def to_json(self) -> str:
        """Convert fill to JSON string."""
        return json.dumps(self.to_dict(), indent=2)
