#!/usr/bin/env python3
"""
Main entry point for the best-price router.

This script starts the REST API and, unless disabled, the WebSocket
server for the best-price router.
"""

import asyncio
import signal
import sys
import threading

from src.api.rest_api import create_app, create_order_manager
from src.api.websocket_api import WebSocketServer
from src.utils.logger import setup_logging, get_logger
from src.config.settings import get_settings

logger = get_logger(__name__)


class BestPriceServer:
    """
    Main server class that manages the REST and WebSocket servers.
    """

    def __init__(self):
        """Initialize the server."""
        self.settings = get_settings()

        setup_logging(
            level=self.settings.log_level,
            log_file=self.settings.log_file
        )

        self.order_manager = create_order_manager(self.settings)
        self.rest_app = create_app(self.order_manager, self.settings)
        self.websocket_server = None
        self.rest_thread = None

        logger.info(f"Best-price router initialized, snapshots from {self.settings.snapshot_dir}")

    def start(self) -> None:
        """Start the configured servers."""
        logger.info("Starting best-price router...")

        if not self.settings.enable_websocket:
            self._run_rest_server()
            return

        # REST in a background thread, WebSocket in the main thread
        self.rest_thread = threading.Thread(target=self._run_rest_server, daemon=True)
        self.rest_thread.start()
        self._start_websocket_server()

    def _run_rest_server(self) -> None:
        """Run the REST API server."""
        logger.info(f"Starting REST API server on {self.settings.rest_host}:{self.settings.rest_port}")
        self.rest_app.run(
            host=self.settings.rest_host,
            port=self.settings.rest_port,
            debug=self.settings.debug,
            use_reloader=False
        )

    def _start_websocket_server(self) -> None:
        """Start WebSocket server."""
        self.websocket_server = WebSocketServer(
            self.order_manager,
            host=self.settings.websocket_host,
            port=self.settings.websocket_port,
            settings=self.settings
        )

        logger.info(f"Starting WebSocket server on {self.settings.websocket_host}:{self.settings.websocket_port}")
        asyncio.run(self.websocket_server.start())


def signal_handler(signum, frame):
    """Handle shutdown signals."""
    logger.info(f"Received signal {signum}, shutting down...")
    sys.exit(0)


def main():
    """Main entry point."""
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        server = BestPriceServer()
        server.start()

    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    except Exception as e:
        logger.error(f"Fatal error: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
