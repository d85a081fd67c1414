"""
Response payloads shared by the REST and WebSocket APIs.
"""

from decimal import Decimal
from typing import Any, Dict, List

from ..core.order import Fill, Order


def build_fills_response(customer_order: Order, fills: List[Fill]) -> Dict[str, Any]:
    """
    Render the fills for a customer order.

    The fills keep their price-priority order; the totals summarise
    how much of the customer order could be covered.
    """
    filled_amount = sum((fill.amount for fill in fills), Decimal('0'))
    total_cost = sum((fill.notional_value for fill in fills), Decimal('0'))
    average_price = total_cost / filled_amount if filled_amount > 0 else None

    return {
        'order_id': customer_order.order_id,
        'side': customer_order.side.value,
        'kind': customer_order.kind.value,
        'requested_amount': str(customer_order.amount),
        'filled_amount': str(filled_amount),
        'total_cost': str(total_cost),
        'average_price': str(average_price) if average_price is not None else None,
        'fill_count': len(fills),
        'fills': [fill.to_dict() for fill in fills],
    }
