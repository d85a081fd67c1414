"""
API layer for the best-price router.

This module provides REST and WebSocket APIs for routing a customer
order to the best-priced resting orders across exchanges.
"""

from .rest_api import create_app, create_order_manager
from .websocket_api import WebSocketServer
from .validators import validate_order_request, build_customer_order

__all__ = [
    "create_app",
    "create_order_manager",
    "WebSocketServer",
    "validate_order_request",
    "build_customer_order",
]
