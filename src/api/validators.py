"""
Input validation utilities for the API layer.

This module validates best-price requests before a customer order is
built from them. Every validator returns a tuple whose first two items
are (is_valid, error_message).
"""

from decimal import Decimal, InvalidOperation
from typing import Dict, Any, Optional, Tuple
import logging

from ..core.order import Order, get_field
from ..core.order_types import OrderKind, OrderSide, allowed_names

logger = logging.getLogger(__name__)

# Defaults, overridden by Settings when one is passed in
MIN_AMOUNT = Decimal('0.00000001')
MAX_AMOUNT = Decimal('1000000')
MIN_PRICE = Decimal('0.00000001')
MAX_PRICE = Decimal('10000000')

_SIDE_KEYS = ('type', 'side', 'order_side')
_KIND_KEYS = ('kind', 'order_type', 'order_kind')
_AMOUNT_KEYS = ('amount', 'quantity')
_PRICE_KEYS = ('price',)


def _parse_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    return parsed if parsed.is_finite() else None


def validate_amount(amount: Any, min_amount: Decimal = MIN_AMOUNT,
                    max_amount: Decimal = MAX_AMOUNT) -> Tuple[bool, Optional[str], Optional[Decimal]]:
    """
    Validate customer order amount.

    Args:
        amount: Amount to validate (asset units)
        min_amount: Smallest accepted amount
        max_amount: Largest accepted amount

    Returns:
        Tuple of (is_valid, error_message, parsed_amount)
    """
    if amount is None:
        return False, "Amount is required", None

    amt = _parse_decimal(amount)
    if amt is None:
        return False, f"Invalid amount format: {amount}", None

    if amt <= 0:
        return False, "Order Amount must be greater than 0", None

    if amt < min_amount:
        return False, f"Amount too small. Minimum: {min_amount}", None

    if amt > max_amount:
        return False, f"Amount too large. Maximum: {max_amount}", None

    return True, None, amt


def validate_price(price: Any, min_price: Decimal = MIN_PRICE,
                   max_price: Decimal = MAX_PRICE) -> Tuple[bool, Optional[str], Optional[Decimal]]:
    """
    Validate customer order price.

    Args:
        price: Price to validate (fiat per asset unit)
        min_price: Smallest accepted price
        max_price: Largest accepted price

    Returns:
        Tuple of (is_valid, error_message, parsed_price)
    """
    if price is None:
        return False, "Price is required", None

    prc = _parse_decimal(price)
    if prc is None:
        return False, f"Invalid price format: {price}", None

    if prc <= 0:
        return False, "Order Price must be greater than 0", None

    if prc < min_price:
        return False, f"Price too small. Minimum: {min_price}", None

    if prc > max_price:
        return False, f"Price too large. Maximum: {max_price}", None

    return True, None, prc


def validate_order_side(side: Any) -> Tuple[bool, Optional[str], Optional[OrderSide]]:
    """
    Validate order side ("Buy" or "Sell", case-insensitive).

    Returns:
        Tuple of (is_valid, error_message, parsed_order_side)
    """
    if not side:
        return False, "Order type is required", None

    if not isinstance(side, str):
        return False, "Order type must be a string", None

    try:
        return True, None, OrderSide(side.lower())
    except ValueError:
        return False, f"Invalid order type '{side}'. Allowed values: {allowed_names(OrderSide)}", None


def validate_order_kind(kind: Any) -> Tuple[bool, Optional[str], Optional[OrderKind]]:
    """
    Validate order kind ("Limit" or "Market", case-insensitive).

    Returns:
        Tuple of (is_valid, error_message, parsed_order_kind)
    """
    if not kind:
        return False, "Order kind is required", None

    if not isinstance(kind, str):
        return False, "Order kind must be a string", None

    try:
        return True, None, OrderKind(kind.lower())
    except ValueError:
        return False, f"Invalid order kind '{kind}'. Allowed values: {allowed_names(OrderKind)}", None


def validate_order_request(data: Any, settings=None) -> Tuple[bool, Optional[str], Optional[Dict[str, Any]]]:
    """
    Validate a complete best-price request.

    Request body:
    {
        "type": "Buy",
        "kind": "Limit",
        "amount": "0.5",
        "price": "50000"
    }

    Args:
        data: Parsed request body
        settings: Optional Settings supplying amount/price bounds

    Returns:
        Tuple of (is_valid, error_message, parsed_data)
    """
    if not isinstance(data, dict):
        return False, "Request body must be a JSON object", None

    fields = {}
    for name, keys in (('type', _SIDE_KEYS), ('kind', _KIND_KEYS),
                       ('amount', _AMOUNT_KEYS), ('price', _PRICE_KEYS)):
        value = get_field(data, *keys, default=None)
        if value is None:
            return False, f"Missing required field: {name}", None
        fields[name] = value

    is_valid, error, side = validate_order_side(fields['type'])
    if not is_valid:
        return False, error, None

    is_valid, error, kind = validate_order_kind(fields['kind'])
    if not is_valid:
        return False, error, None

    amount_bounds = (settings.min_amount, settings.max_amount) if settings else (MIN_AMOUNT, MAX_AMOUNT)
    is_valid, error, amount = validate_amount(fields['amount'], *amount_bounds)
    if not is_valid:
        return False, error, None

    price_bounds = (settings.min_price, settings.max_price) if settings else (MIN_PRICE, MAX_PRICE)
    is_valid, error, price = validate_price(fields['price'], *price_bounds)
    if not is_valid:
        return False, error, None

    validated_data = {
        'side': side,
        'kind': kind,
        'amount': amount,
        'price': price,
    }

    return True, None, validated_data


def build_customer_order(validated_data: Dict[str, Any]) -> Order:
    """Create the customer order from validated request data."""
    return Order(
        side=validated_data['side'],
        kind=validated_data['kind'],
        amount=validated_data['amount'],
        price=validated_data['price'],
    )
