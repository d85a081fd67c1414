"""
Tests for the order manager.
"""

import unittest
from decimal import Decimal
from unittest.mock import Mock

from src.core.exceptions import InvalidInputError, SnapshotSourceError, UnsupportedOperationError
from src.core.matching_engine import BestPriceMatchingEngine, MatchingEngine
from src.core.order import Order, OrderEntry
from src.core.order_book import Balance, ExchangeSnapshot, OrderBook
from src.core.order_types import OrderSide
from src.services.order_manager import OrderManager
from src.sources.base import InMemorySnapshotSource, SnapshotSource


def ask_snapshot(exchange_id, amount, price, order_id):
    ask = Order(order_id=order_id, side=OrderSide.SELL, amount=Decimal(amount), price=Decimal(price))
    return ExchangeSnapshot(
        exchange_id=exchange_id,
        balance=Balance(fiat=Decimal('1000000'), crypto=Decimal('10')),
        order_book=OrderBook(asks=[OrderEntry(ask)]),
    )


class TestOrderManager(unittest.TestCase):
    """Test cases for the order manager."""

    def test_requires_snapshot_source(self):
        with self.assertRaises(InvalidInputError):
            OrderManager(None, BestPriceMatchingEngine())

    def test_requires_matching_engine(self):
        with self.assertRaises(InvalidInputError):
            OrderManager(InMemorySnapshotSource(), None)

    def test_uses_snapshots_from_source(self):
        """Snapshots are passed to the engine untouched."""
        snapshots = [ask_snapshot("ex1", "1", "50000", "a1")]
        source = Mock(spec=SnapshotSource)
        source.load_snapshots.return_value = snapshots
        engine = Mock(spec=MatchingEngine)
        engine.match.return_value = ["sentinel"]
        customer_order = Order(side=OrderSide.BUY, amount=Decimal('1'), price=Decimal('50000'))

        manager = OrderManager(source, engine)
        result = manager.provide_best_price_fills(customer_order)

        self.assertEqual(result, ["sentinel"])
        source.load_snapshots.assert_called_once_with()
        engine.match.assert_called_once_with(customer_order, snapshots)

    def test_end_to_end_best_price(self):
        source = InMemorySnapshotSource([
            ask_snapshot("ex1", "1.0", "52000", "expensive"),
            ask_snapshot("ex2", "1.0", "50000", "cheap"),
        ])
        manager = OrderManager(source, BestPriceMatchingEngine())

        fills = manager.provide_best_price_fills(
            Order(side=OrderSide.BUY, amount=Decimal('1.5'), price=Decimal('52000'))
        )

        self.assertEqual([fill.order_id for fill in fills], ["cheap", "expensive"])
        self.assertEqual([fill.amount for fill in fills], [Decimal('1.0'), Decimal('0.5')])

    def test_equal_prices_prefer_first_snapshot(self):
        source = InMemorySnapshotSource([
            ask_snapshot("ex1", "1.0", "50000", "first"),
            ask_snapshot("ex2", "1.0", "50000", "second"),
        ])
        manager = OrderManager(source, BestPriceMatchingEngine())

        fills = manager.provide_best_price_fills(
            Order(side=OrderSide.BUY, amount=Decimal('1.0'), price=Decimal('50000'))
        )

        self.assertEqual([fill.order_id for fill in fills], ["first"])

    def test_no_snapshots_returns_empty(self):
        manager = OrderManager(InMemorySnapshotSource(), BestPriceMatchingEngine())

        fills = manager.provide_best_price_fills(
            Order(side=OrderSide.SELL, amount=Decimal('1'), price=Decimal('50000'))
        )

        self.assertEqual(fills, [])

    def test_source_failure_propagates(self):
        source = Mock(spec=SnapshotSource)
        source.load_snapshots.side_effect = SnapshotSourceError("unreachable")
        engine = Mock(spec=MatchingEngine)

        manager = OrderManager(source, engine)

        with self.assertRaises(SnapshotSourceError):
            manager.provide_best_price_fills(Order(side=OrderSide.BUY, amount=Decimal('1')))
        engine.match.assert_not_called()

    def test_engine_failure_propagates(self):
        manager = OrderManager(InMemorySnapshotSource(), BestPriceMatchingEngine())

        with self.assertRaises(InvalidInputError):
            manager.provide_best_price_fills(None)
        with self.assertRaises(UnsupportedOperationError):
            manager.provide_best_price_fills(Order(side="hold", amount=Decimal('1')))


if __name__ == '__main__':
    unittest.main()
