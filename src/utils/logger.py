"""
Logging configuration for the best-price router.

Console output stays short; the optional rotating log file carries the
logger name and call site of every record. MatchingEngineLogger writes
pipe-delimited routing events on top of that.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Iterable, List, Optional

CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'

# Third-party loggers capped at WARNING
NOISY_LOGGERS = ('websockets', 'asyncio', 'werkzeug')


def _build_handlers(level: int, log_file: Optional[str], max_file_size: int,
                    backup_count: int) -> List[logging.Handler]:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    handlers = [console_handler]

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
    return handlers


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> None:
    """
    Configure the root logger for the router.

    Replaces any handlers already installed on the root logger, so it
    is safe to call again after the settings change.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Path of the rotating log file, console only when None
        max_file_size: Size in bytes at which the log file rotates
        backup_count: Rotated files to keep
    """
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    for handler in _build_handlers(numeric_level, log_file, max_file_size, backup_count):
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging initialized - Level: {logging.getLevelName(numeric_level)}, File: {log_file or 'Console only'}"
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module (usually __name__)."""
    return logging.getLogger(name)


class MatchingEngineLogger:
    """
    Structured logger for routing requests and their fills.

    Lines are pipe-delimited so they can be grepped and split easily.
    """

    def __init__(self, name: str = "best_price_router"):
        self.logger = logging.getLogger(name)
        self.request_logger = logging.getLogger(f"{name}.requests")
        self.fill_logger = logging.getLogger(f"{name}.fills")

    def log_match_request(self, order_id: str, side: str, kind: str, amount: str, price: str) -> None:
        """Log an incoming customer order."""
        self.request_logger.info(
            f"MATCH_REQUEST|{order_id}|{side}|{kind}|{amount}|{price}"
        )

    def log_fills(self, order_id: str, fills: Iterable) -> None:
        """Log each fill produced for a customer order."""
        for fill in fills:
            self.fill_logger.info(
                f"FILL|{order_id}|{fill.exchange_id}|{fill.order_id}|{fill.amount}|{fill.price}"
            )

    def log_match_result(self, order_id: str, fill_count: int, filled_amount: str, latency_ms: float) -> None:
        """Log the outcome of one routing request."""
        self.request_logger.info(
            f"MATCH_RESULT|{order_id}|{fill_count}|{filled_amount}|{latency_ms:.3f}ms"
        )

    def log_error(self, component: str, error: str, order_id: str = None) -> None:
        context = f"|{order_id}" if order_id else ""
        self.logger.error(f"ERROR|{component}|{error}{context}")
