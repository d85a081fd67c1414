"""
Order side and kind definitions for the best-price router.

This module defines the closed sets of order sides and kinds understood
by the router, together with helpers for parsing them from external input.
"""

from enum import Enum


class OrderSide(Enum):
    """
    Order sides for buy and sell orders.

    - BUY: Customer wants to purchase the asset with fiat
    - SELL: Customer wants to sell the asset for fiat
    """
    BUY = "buy"
    SELL = "sell"

    @property
    def contra_side(self) -> "OrderSide":
        """The book side a customer order of this side is matched against."""
        return OrderSide.SELL if self is OrderSide.BUY else OrderSide.BUY


class OrderKind(Enum):
    """
    Order kinds carried on every order.

    The kind is passed through to fills unchanged; matching never
    looks at it.
    """
    LIMIT = "limit"
    MARKET = "market"


def parse_order_side(side: str) -> OrderSide:
    """
    Convert a string order side ("Buy", "sell", ...) to OrderSide.

    Args:
        side: String representation of order side

    Returns:
        OrderSide enum value

    Raises:
        ValueError: If side is invalid
    """
    if isinstance(side, OrderSide):
        return side
    try:
        return OrderSide(str(side).lower())
    except ValueError:
        raise ValueError(f"Invalid order side: {side}. Must be one of: {allowed_names(OrderSide)}")


def parse_order_kind(kind: str) -> OrderKind:
    """
    Convert a string order kind ("Limit", "market", ...) to OrderKind.

    Raises:
        ValueError: If kind is invalid
    """
    if isinstance(kind, OrderKind):
        return kind
    try:
        return OrderKind(str(kind).lower())
    except ValueError:
        raise ValueError(f"Invalid order kind: {kind}. Must be one of: {allowed_names(OrderKind)}")


def allowed_names(enum_cls) -> str:
    """Comma separated display names of an enum, e.g. "Buy, Sell"."""
    return ", ".join(member.value.capitalize() for member in enum_cls)
