"""
Tests for WebSocket message handling.
"""

import asyncio
import json
import unittest
from decimal import Decimal
from unittest.mock import Mock

from src.api.websocket_api import WebSocketServer
from src.core.exceptions import InvalidInputError
from src.core.matching_engine import BestPriceMatchingEngine
from src.core.order import Order, OrderEntry
from src.core.order_book import Balance, ExchangeSnapshot, OrderBook
from src.core.order_types import OrderSide
from src.services.order_manager import OrderManager
from src.sources.base import InMemorySnapshotSource


class TestWebSocketMessages(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures."""
        ask = Order(order_id="ask-1", side=OrderSide.SELL, amount=Decimal('1'), price=Decimal('50000'))
        snapshot = ExchangeSnapshot(
            "ex1",
            Balance(fiat=Decimal('1000000'), crypto=Decimal('1')),
            OrderBook(asks=[OrderEntry(ask)]),
        )
        manager = OrderManager(InMemorySnapshotSource([snapshot]), BestPriceMatchingEngine())
        self.server = WebSocketServer(manager)

    def send(self, message, server=None):
        if not isinstance(message, str):
            message = json.dumps(message)
        return asyncio.run((server or self.server).process_message(message))

    def test_ping(self):
        reply = self.send({"type": "ping"})

        self.assertEqual(reply['type'], 'pong')

    def test_best_price(self):
        reply = self.send({
            "type": "best_price",
            "order": {"type": "Buy", "kind": "Limit", "amount": "0.5", "price": "50000"},
        })

        self.assertEqual(reply['type'], 'fills')
        self.assertEqual(reply['fill_count'], 1)
        self.assertEqual(reply['fills'][0]['order_id'], 'ask-1')
        self.assertEqual(Decimal(reply['filled_amount']), Decimal('0.5'))
        json.dumps(reply)

    def test_invalid_order(self):
        reply = self.send({"type": "best_price", "order": {"type": "Buy", "kind": "Limit", "amount": "0", "price": "1"}})

        self.assertEqual(reply['type'], 'error')
        self.assertEqual(reply['message'], "Order Amount must be greater than 0")

    def test_missing_order(self):
        reply = self.send({"type": "best_price"})

        self.assertEqual(reply['type'], 'error')
        self.assertEqual(reply['message'], "Request body must be a JSON object")

    def test_invalid_json(self):
        reply = self.send("{not json")

        self.assertEqual(reply['type'], 'error')
        self.assertEqual(reply['message'], "Invalid JSON format")

    def test_non_object_message(self):
        self.assertEqual(self.send([1, 2])['message'], "Message must be a JSON object")

    def test_unknown_type(self):
        reply = self.send({"type": "subscribe"})

        self.assertEqual(reply['type'], 'error')
        self.assertIn("Unknown message type", reply['message'])

    def test_routing_errors(self):
        order = {"type": "Sell", "kind": "Market", "amount": "1", "price": "1"}
        manager = Mock(spec=OrderManager)
        server = WebSocketServer(manager)

        manager.provide_best_price_fills.side_effect = InvalidInputError("order")
        self.assertEqual(
            self.send({"type": "best_price", "order": order}, server)['message'],
            "Invalid argument: order is required",
        )

        manager.provide_best_price_fills.side_effect = RuntimeError("boom")
        with self.assertLogs('src.api.websocket_api', level='ERROR'):
            reply = self.send({"type": "best_price", "order": order}, server)
        self.assertEqual(reply['message'], "Internal server error")

    def test_client_count(self):
        self.assertEqual(self.server.get_client_count(), 0)


if __name__ == '__main__':
    unittest.main()
