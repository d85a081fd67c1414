"""
Best-price matching engine.

This module contains the MatchingEngine abstraction and the greedy
best-price implementation that allocates a customer order across the
resting orders of several exchanges, limited by the funds available
on each exchange.
"""

import logging
from abc import ABC, abstractmethod
from decimal import ROUND_DOWN, Decimal, localcontext
from typing import Callable, Dict, List, Optional, Tuple

from .exceptions import InvalidInputError, UnsupportedOperationError
from .order import Fill, Order
from .order_book import ExchangeSnapshot
from .order_types import OrderSide

logger = logging.getLogger(__name__)

ContraOrder = Tuple[str, Order]


class MatchingEngine(ABC):
    """Computes the fills for one customer order against a list of snapshots."""

    @abstractmethod
    def match(self, customer_order: Optional[Order],
              snapshots: Optional[List[ExchangeSnapshot]]) -> List[Fill]:
        """
        Match a customer order against exchange snapshots.

        Args:
            customer_order: The order to route
            snapshots: Exchange snapshots for this pass

        Returns:
            Fills in the order they were allocated
        """


class BestPriceMatchingEngine(MatchingEngine):
    """
    Greedy best-price allocation across exchanges.

    Features:
    - Price priority across all exchanges (cheapest asks / highest bids first)
    - Stable ordering for equal prices (snapshot order, then book order)
    - Per-exchange funding limits (fiat for buys, asset for sells)
    - No state kept between calls
    """

    def match(self, customer_order: Optional[Order],
              snapshots: Optional[List[ExchangeSnapshot]]) -> List[Fill]:
        """
        Match a customer order against exchange snapshots.

        Args:
            customer_order: The order to route
            snapshots: Exchange snapshots for this pass (may be empty)

        Returns:
            Fills in price-priority order

        Raises:
            InvalidInputError: If customer_order or snapshots is None
            UnsupportedOperationError: If the order side is not buy or sell
        """
        self._validate_inputs(customer_order, snapshots)

        if customer_order.side is OrderSide.BUY:
            return self._process_buy_order(customer_order, snapshots)
        elif customer_order.side is OrderSide.SELL:
            return self._process_sell_order(customer_order, snapshots)
        else:
            raise UnsupportedOperationError(f"Unsupported order side: {customer_order.side}")

    def _validate_inputs(self, customer_order: Optional[Order],
                         snapshots: Optional[List[ExchangeSnapshot]]) -> None:
        if customer_order is None:
            logger.warning("Invalid argument customer_order")
            raise InvalidInputError("customer_order")
        if snapshots is None:
            logger.warning("Invalid argument snapshots")
            raise InvalidInputError("snapshots")

    def _process_buy_order(self, customer_order: Order,
                           snapshots: List[ExchangeSnapshot]) -> List[Fill]:
        """
        Buy: take asks cheapest first, limited by the fiat on each exchange.
        """
        asks = self._sorted_contra_orders(snapshots, customer_order.side.contra_side, descending=False)
        logger.info(f"Found {len(asks)} ask order(s) across {len(snapshots)} exchange(s)")

        return self._process_orders(
            asks,
            customer_order.amount,
            self._initial_capacity(snapshots, OrderSide.BUY),
            max_amount=_amount_affordable,
            cost=lambda order, amount: amount * order.price,
        )

    def _process_sell_order(self, customer_order: Order,
                            snapshots: List[ExchangeSnapshot]) -> List[Fill]:
        """
        Sell: hit bids highest first, limited by the asset on each exchange.
        """
        bids = self._sorted_contra_orders(snapshots, customer_order.side.contra_side, descending=True)
        logger.info(f"Found {len(bids)} bid order(s) across {len(snapshots)} exchange(s)")

        return self._process_orders(
            bids,
            customer_order.amount,
            self._initial_capacity(snapshots, OrderSide.SELL),
            max_amount=lambda order, capacity: capacity,
            cost=lambda order, amount: amount,
        )

    @staticmethod
    def _sorted_contra_orders(snapshots: List[ExchangeSnapshot], book_side: OrderSide,
                              descending: bool) -> List[ContraOrder]:
        gathered = [
            contra
            for snapshot in snapshots
            for contra in snapshot.iter_orders(book_side)
        ]
        # sorted() is stable, also with reverse=True
        return sorted(gathered, key=lambda contra: contra[1].price, reverse=descending)

    @staticmethod
    def _initial_capacity(snapshots: List[ExchangeSnapshot], side: OrderSide) -> Dict[str, Decimal]:
        capacity: Dict[str, Decimal] = {}
        for snapshot in snapshots:
            if snapshot.exchange_id in capacity:
                logger.warning(f"Duplicate exchange id {snapshot.exchange_id}, keeping first balance")
                continue
            capacity[snapshot.exchange_id] = snapshot.balance.available_for(side)
        return capacity

    def _process_orders(
        self,
        sorted_orders: List[ContraOrder],
        remaining_amount: Decimal,
        remaining_capacity: Dict[str, Decimal],
        max_amount: Callable[[Order, Decimal], Decimal],
        cost: Callable[[Order, Decimal], Decimal],
    ) -> List[Fill]:
        fills: List[Fill] = []

        for exchange_id, order in sorted_orders:
            if remaining_amount <= 0:
                break

            if order.price <= 0:
                logger.warning(f"Skipping order {order.order_id} from {exchange_id}: non-positive price {order.price}")
                continue

            max_from_capacity = max_amount(order, remaining_capacity[exchange_id])
            amount = min(order.amount, remaining_amount, max_from_capacity)

            if amount > 0:
                fills.append(Fill.from_order(order, amount, exchange_id))
                if amount == max_from_capacity:
                    # Capped by funds: the exchange is exhausted, drop any rounding remainder
                    remaining_capacity[exchange_id] = Decimal('0')
                else:
                    remaining_capacity[exchange_id] -= cost(order, amount)
                remaining_amount -= amount

                logger.debug(f"Order {order.order_id} from {exchange_id} qualifies for {amount} @ {order.price}")

        logger.info(f"Found {len(fills)} contra-side order(s) to fill the customer order")
        return fills


def _amount_affordable(order: Order, capacity: Decimal) -> Decimal:
    """Asset amount purchasable with the remaining fiat, rounded towards zero."""
    with localcontext() as ctx:
        ctx.rounding = ROUND_DOWN
        return capacity / order.price
