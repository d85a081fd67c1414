"""
Core best-price matching components.

This module contains the data structures and the allocation logic
of the best-price router.
"""

from .exceptions import (
    MatchingEngineError,
    InvalidInputError,
    UnsupportedOperationError,
    SnapshotSourceError,
)
from .order import Order, OrderEntry, Fill
from .order_types import OrderSide, OrderKind
from .order_book import Balance, OrderBook, ExchangeSnapshot
from .matching_engine import MatchingEngine, BestPriceMatchingEngine

__all__ = [
    "MatchingEngineError",
    "InvalidInputError",
    "UnsupportedOperationError",
    "SnapshotSourceError",
    "Order",
    "OrderEntry",
    "Fill",
    "OrderSide",
    "OrderKind",
    "Balance",
    "OrderBook",
    "ExchangeSnapshot",
    "MatchingEngine",
    "BestPriceMatchingEngine",
]
