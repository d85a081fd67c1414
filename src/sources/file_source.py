"""
Directory-backed snapshot source.

Each file in the source directory holds one exchange's order book and
funds as a JSON document. Files are read in filename order so that the
snapshot order, and with it the tie-breaking between equal prices, is
deterministic.
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from ..core.exceptions import SnapshotSourceError
from ..core.order_book import ExchangeSnapshot
from .base import SnapshotSource

logger = logging.getLogger(__name__)

# Longest slice of a bad document echoed into the log
LOG_SNIPPET_LENGTH = 100


class FileSnapshotSource(SnapshotSource):
    """
    Loads one ExchangeSnapshot per JSON file in a directory.

    Unreadable or malformed files are logged and skipped; the pass
    continues with the remaining files.
    """

    def __init__(self, directory: Union[str, Path], pattern: str = "*.json"):
        """
        Initialize the source.

        Args:
            directory: Folder holding the snapshot files
            pattern: Glob pattern selecting snapshot files
        """
        self.directory = Path(directory)
        self.pattern = pattern

    def load_snapshots(self) -> List[ExchangeSnapshot]:
        """
        Read and parse every snapshot file.

        Returns:
            Parsed snapshots, in filename order

        Raises:
            SnapshotSourceError: If the path exists but cannot be listed
        """
        snapshots = []
        for path, content in self._read_source_files():
            snapshot = self._parse_snapshot(path, content)
            if snapshot is not None:
                snapshots.append(snapshot)

        logger.info(f"Loaded {len(snapshots)} exchange snapshot(s) from {self.directory}")
        return snapshots

    def _read_source_files(self) -> Iterator[Tuple[Path, str]]:
        logger.info(f"Reading order book files from folder: {self.directory}")

        if not self.directory.exists():
            logger.warning(f"Source folder does not exist: {self.directory}")
            return

        if not self.directory.is_dir():
            raise SnapshotSourceError(f"Snapshot source is not a directory: {self.directory}")

        try:
            files = sorted(path for path in self.directory.glob(self.pattern) if path.is_file())
        except OSError as e:
            raise SnapshotSourceError(f"Cannot list snapshot folder {self.directory}: {e}") from e

        logger.info(f"Found {len(files)} order book files.")

        for path in files:
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"Error reading file: {path}: {e}")
                continue
            yield path, content

    def _parse_snapshot(self, path: Path, content: str) -> Optional[ExchangeSnapshot]:
        try:
            return ExchangeSnapshot.from_dict(json.loads(content, parse_float=Decimal))
        except (ValueError, KeyError, TypeError, InvalidOperation) as e:
            # json.JSONDecodeError is a ValueError
            snippet = content[:LOG_SNIPPET_LENGTH]
            logger.error(f"Invalid JSON format in {path.name}: {e.__class__.__name__}: {e} | {snippet}")
            return None


def create_snapshot_source(settings) -> FileSnapshotSource:
    """Build the file snapshot source configured in settings."""
    return FileSnapshotSource(settings.snapshot_dir, settings.snapshot_pattern)
