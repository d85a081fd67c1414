"""
Services that tie snapshot sources and the matching engine together.
"""

from .order_manager import OrderManager

__all__ = [
    "OrderManager",
]
