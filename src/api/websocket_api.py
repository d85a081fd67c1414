"""
WebSocket API for best-price requests.

Clients send JSON messages and receive one JSON reply per message.
Supported message types:

- {"type": "ping"}
- {"type": "best_price", "order": {"type": "Buy", "kind": "Limit",
  "amount": "0.5", "price": "50000"}}
"""
import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import websockets

from ..config.settings import Settings
from ..core.exceptions import InvalidInputError
from ..services.order_manager import OrderManager
from ..utils.performance import get_performance_monitor, measure_latency
from .responses import build_fills_response
from .validators import validate_order_request, build_customer_order

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class WebSocketServer:
    """
    WebSocket server answering best-price requests.

    Each message is handled independently; the snapshot fetch and
    matching run in a worker thread so one slow request does not stall
    the other connections.
    """

    def __init__(self, order_manager: OrderManager, host: str = 'localhost', port: int = 8765,
                 settings: Optional[Settings] = None):
        """
        Initialize WebSocket server.

        Args:
            order_manager: Order manager to route requests through
            host: Host to bind to
            port: Port to bind to
            settings: Optional settings for validation bounds and pings
        """
        self.order_manager = order_manager
        self.host = host
        self.port = port
        self.settings = settings
        self.clients = set()
        self.monitor = get_performance_monitor()

        logger.info(f"WebSocket server initialized on {host}:{port}")

    async def start(self) -> None:
        """Start the WebSocket server and serve until cancelled."""
        logger.info(f"Starting WebSocket server on {self.host}:{self.port}")

        async with websockets.serve(
            self._handle_client,
            self.host,
            self.port,
            ping_interval=self.settings.websocket_ping_interval if self.settings else 20,
            ping_timeout=self.settings.websocket_ping_timeout if self.settings else 10,
            close_timeout=10
        ):
            await asyncio.Future()  # Run forever

    async def _handle_client(self, websocket) -> None:
        """
        Handle one client connection.

        Args:
            websocket: WebSocket connection
        """
        client_address = websocket.remote_address
        logger.info(f"Client connected: {client_address}")
        self.clients.add(websocket)

        try:
            await self._send_message(websocket, {
                'type': 'connection',
                'status': 'connected',
                'timestamp': _now(),
                'message': 'Connected to best-price router WebSocket'
            })

            async for message in websocket:
                reply = await self.process_message(message)
                await self._send_message(websocket, reply)

        except websockets.exceptions.ConnectionClosed:
            logger.info(f"Client disconnected: {client_address}")
        finally:
            self.clients.discard(websocket)

    async def process_message(self, message: str) -> Dict[str, Any]:
        """
        Handle one message from a client.

        Args:
            message: Raw JSON text

        Returns:
            The reply to send back
        """
        try:
            data = json.loads(message)
        except json.JSONDecodeError:
            return self._error("Invalid JSON format")

        if not isinstance(data, dict):
            return self._error("Message must be a JSON object")

        message_type = str(data.get('type', '')).lower()

        if message_type == 'ping':
            return {'type': 'pong', 'timestamp': _now()}
        elif message_type == 'best_price':
            return await self._handle_best_price(data)
        else:
            return self._error(f"Unknown message type: {message_type}")

    async def _handle_best_price(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate the embedded order and route it."""
        is_valid, error, validated_data = validate_order_request(data.get('order'), self.settings)
        if not is_valid:
            return self._error(error)

        customer_order = build_customer_order(validated_data)

        try:
            with measure_latency(self.monitor, 'best_price'):
                fills = await asyncio.to_thread(
                    self.order_manager.provide_best_price_fills, customer_order
                )
        except InvalidInputError as e:
            return self._error(str(e))
        except Exception as e:
            logger.exception(f"Error routing order {customer_order.order_id}: {str(e)}")
            return self._error("Internal server error")

        reply = build_fills_response(customer_order, fills)
        reply['type'] = 'fills'
        reply['timestamp'] = _now()
        return reply

    async def _send_message(self, websocket, message: Dict[str, Any]) -> None:
        """Send message to client."""
        try:
            await websocket.send(json.dumps(message))
        except websockets.exceptions.ConnectionClosed:
            logger.debug("Client connection closed while sending message")

    @staticmethod
    def _error(error_message: str) -> Dict[str, Any]:
        return {
            'type': 'error',
            'message': error_message,
            'timestamp': _now()
        }

    def get_client_count(self) -> int:
        """Get number of connected clients."""
        return len(self.clients)

