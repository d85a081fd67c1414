"""
REST API for the best-price router.

This module provides HTTP endpoints for routing a customer order to the
best-priced resting orders across exchanges, plus health and statistics.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from ..config.settings import Settings, get_settings
from ..core.exceptions import InvalidInputError
from ..core.matching_engine import BestPriceMatchingEngine
from ..services.order_manager import OrderManager
from ..sources.file_source import create_snapshot_source
from ..utils.logger import MatchingEngineLogger
from ..utils.performance import get_performance_monitor, measure_latency
from .responses import build_fills_response
from .validators import validate_order_request, build_customer_order

logger = logging.getLogger(__name__)

API_VERSION = '1.0.0'


def create_order_manager(settings: Settings) -> OrderManager:
    """Wire the configured snapshot source to the best-price engine."""
    return OrderManager(create_snapshot_source(settings), BestPriceMatchingEngine())


def create_app(order_manager: Optional[OrderManager] = None,
               settings: Optional[Settings] = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        order_manager: Order manager to route requests through; built
            from settings when omitted
        settings: Settings to use; the global settings when omitted

    Returns:
        Configured Flask application
    """
    settings = settings or get_settings()
    order_manager = order_manager or create_order_manager(settings)

    app = Flask(__name__)
    if settings.enable_cors:
        CORS(app, origins=settings.cors_origins)

    register_routes(app, order_manager, settings)

    logger.info("REST API initialized")
    return app


def register_routes(app: Flask, order_manager: OrderManager, settings: Settings) -> None:
    """Register all API routes."""

    monitor = get_performance_monitor()
    event_logger = MatchingEngineLogger()

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'version': API_VERSION
        })

    @app.route('/orders/bestprice', methods=['POST'])
    def get_best_price_fills():
        """
        Route a customer order to the best-priced resting orders.

        Request body:
        {
            "type": "Buy",
            "kind": "Limit",
            "amount": "0.5",
            "price": "50000"
        }
        """
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({'error': 'Request body must be JSON'}), 400

        is_valid, error, validated_data = validate_order_request(data, settings)
        if not is_valid:
            count('rejected_requests')
            return jsonify({'error': error}), 400

        customer_order = build_customer_order(validated_data)
        event_logger.log_match_request(
            customer_order.order_id,
            customer_order.side.value,
            customer_order.kind.value,
            str(customer_order.amount),
            str(customer_order.price),
        )

        with measure_latency(monitor, 'best_price') as timing:
            fills = order_manager.provide_best_price_fills(customer_order)

        response_data = build_fills_response(customer_order, fills)
        count('routed_orders')
        count('fills', len(fills))

        event_logger.log_fills(customer_order.order_id, fills)
        event_logger.log_match_result(
            customer_order.order_id,
            len(fills),
            response_data['filled_amount'],
            timing['latency_ms'],
        )
        return jsonify(response_data), 200

    @app.route('/statistics', methods=['GET'])
    def get_statistics():
        """Get router statistics."""
        if not settings.enable_performance_monitoring:
            return jsonify({'error': 'Performance monitoring is disabled'}), 404
        return jsonify(monitor.get_summary()), 200

    def count(name: str, value: int = 1) -> None:
        if settings.enable_performance_monitoring:
            monitor.increment_counter(name, value)

    @app.errorhandler(InvalidInputError)
    def invalid_input(error):
        """Handle missing arguments raised by the engine."""
        logger.warning(f"Invalid input: {str(error)}")
        return jsonify({'error': str(error)}), 400

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({'error': 'Endpoint not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle 405 errors."""
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(HTTPException)
    def http_error(error):
        """Handle remaining HTTP errors as JSON."""
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        """Handle unexpected errors."""
        logger.exception(f"Internal server error: {str(error)}")
        event_logger.log_error('rest_api', str(error))
        return jsonify({'error': 'Internal server error'}), 500


def run_server(host: str = '0.0.0.0', port: int = 5000, debug: bool = False) -> None:
    """
    Run the REST API server.

    Args:
        host: Host to bind to
        port: Port to bind to
        debug: Enable debug mode
    """
    app = create_app()
    logger.info(f"Starting REST API server on {host}:{port}")
    app.run(host=host, port=port, debug=debug)


if __name__ == '__main__':
    run_server(debug=True)
