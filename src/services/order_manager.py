"""
Order manager: load the current snapshots and route one customer order.
"""

import logging
from typing import List

from ..core.exceptions import InvalidInputError
from ..core.matching_engine import MatchingEngine
from ..core.order import Fill, Order
from ..sources.base import SnapshotSource

logger = logging.getLogger(__name__)


class OrderManager:
    """
    Sequences snapshot loading and matching for one customer order.

    Failures from either collaborator propagate unchanged.
    """

    def __init__(self, snapshot_source: SnapshotSource, matching_engine: MatchingEngine):
        if snapshot_source is None:
            raise InvalidInputError("snapshot_source")
        if matching_engine is None:
            raise InvalidInputError("matching_engine")

        self.snapshot_source = snapshot_source
        self.matching_engine = matching_engine

    def provide_best_price_fills(self, customer_order: Order) -> List[Fill]:
        """
        Get the best-price fills for a customer order.

        Args:
            customer_order: The validated customer order

        Returns:
            Fills in price-priority order
        """
        snapshots = self.snapshot_source.load_snapshots()
        logger.debug(f"Loaded {len(snapshots)} exchange snapshot(s)")
        return self.matching_engine.match(customer_order, snapshots)
