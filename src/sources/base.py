"""
Snapshot source abstraction.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..core.order_book import ExchangeSnapshot


class SnapshotSource(ABC):
    """Supplies the exchange snapshots for one matching pass."""

    @abstractmethod
    def load_snapshots(self) -> List[ExchangeSnapshot]:
        """
        Return the current list of exchange snapshots.

        The list may be empty. A failure to read the source as a whole
        is raised to the caller.
        """


class InMemorySnapshotSource(SnapshotSource):
    """Serves a fixed list of snapshots, e.g. for tests and benchmarks."""

    def __init__(self, snapshots: Optional[Iterable[ExchangeSnapshot]] = None):
        self.snapshots = list(snapshots or [])

    def load_snapshots(self) -> List[ExchangeSnapshot]:
        return list(self.snapshots)
