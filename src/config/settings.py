"""
Configuration settings for the best-price router.

This module provides centralized configuration management
with environment variable support and validation.
"""

import os
from typing import Optional, Dict, Any
from decimal import Decimal, InvalidOperation


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_decimal(name: str, default: str, errors: list) -> Decimal:
    raw = os.getenv(name, default)
    try:
        return Decimal(raw)
    except InvalidOperation:
        errors.append(f"Invalid decimal for {name}: {raw}")
        return Decimal(default)


def _env_int(name: str, default: str, errors: list) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        errors.append(f"Invalid integer for {name}: {raw}")
        return int(default)


class Settings:
    """
    Configuration settings for the best-price router.

    Supports environment variables and provides sensible defaults.
    """

    def __init__(self):
        """Initialize settings from environment variables."""
        # Parse errors are reported together by validate()
        self._parse_errors = []

        # Server configuration
        self.rest_host = os.getenv("REST_HOST", "0.0.0.0")
        self.rest_port = _env_int("REST_PORT", "5000", self._parse_errors)
        self.websocket_host = os.getenv("WEBSOCKET_HOST", "localhost")
        self.websocket_port = _env_int("WEBSOCKET_PORT", "8765", self._parse_errors)
        self.enable_websocket = _env_bool("ENABLE_WEBSOCKET", "true")

        # Logging configuration
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_file = os.getenv("LOG_FILE", "logs/best_price_router.log")

        # Snapshot source
        self.snapshot_dir = os.getenv("SNAPSHOT_DIR", "order_book_sources")
        self.snapshot_pattern = os.getenv("SNAPSHOT_PATTERN", "*.json")

        # Customer order validation
        self.min_amount = _env_decimal("MIN_AMOUNT", "0.00000001", self._parse_errors)
        self.max_amount = _env_decimal("MAX_AMOUNT", "1000000", self._parse_errors)
        self.min_price = _env_decimal("MIN_PRICE", "0.00000001", self._parse_errors)
        self.max_price = _env_decimal("MAX_PRICE", "10000000", self._parse_errors)

        # WebSocket configuration
        self.websocket_ping_interval = _env_int("WEBSOCKET_PING_INTERVAL", "20", self._parse_errors)
        self.websocket_ping_timeout = _env_int("WEBSOCKET_PING_TIMEOUT", "10", self._parse_errors)

        # Performance monitoring
        self.enable_performance_monitoring = _env_bool("ENABLE_PERFORMANCE_MONITORING", "true")

        # Security
        self.enable_cors = _env_bool("ENABLE_CORS", "true")
        self.cors_origins = os.getenv("CORS_ORIGINS", "*").split(",")

        # Debug mode
        self.debug = _env_bool("DEBUG", "false")

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return {
            "rest_host": self.rest_host,
            "rest_port": self.rest_port,
            "websocket_host": self.websocket_host,
            "websocket_port": self.websocket_port,
            "enable_websocket": self.enable_websocket,
            "log_level": self.log_level,
            "log_file": self.log_file,
            "snapshot_dir": self.snapshot_dir,
            "snapshot_pattern": self.snapshot_pattern,
            "min_amount": str(self.min_amount),
            "max_amount": str(self.max_amount),
            "min_price": str(self.min_price),
            "max_price": str(self.max_price),
            "websocket_ping_interval": self.websocket_ping_interval,
            "websocket_ping_timeout": self.websocket_ping_timeout,
            "enable_performance_monitoring": self.enable_performance_monitoring,
            "enable_cors": self.enable_cors,
            "cors_origins": self.cors_origins,
            "debug": self.debug,
        }

    def validate(self) -> None:
        """Validate configuration settings."""
        errors = list(self._parse_errors)

        # Validate ports
        if not (1 <= self.rest_port <= 65535):
            errors.append(f"Invalid REST port: {self.rest_port}")

        if not (1 <= self.websocket_port <= 65535):
            errors.append(f"Invalid WebSocket port: {self.websocket_port}")

        # Validate amounts and prices
        if self.min_amount <= 0:
            errors.append(f"Min amount must be positive: {self.min_amount}")

        if self.max_amount <= self.min_amount:
            errors.append(f"Max amount must be greater than min amount: {self.max_amount} <= {self.min_amount}")

        if self.min_price <= 0:
            errors.append(f"Min price must be positive: {self.min_price}")

        if self.max_price <= self.min_price:
            errors.append(f"Max price must be greater than min price: {self.max_price} <= {self.min_price}")

        if not self.snapshot_dir:
            errors.append("Snapshot directory cannot be empty")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings instance.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.validate()
    return _settings


def reload_settings() -> Settings:
    """
    Reload settings from environment variables.

    Returns:
        New settings instance
    """
    global _settings
    _settings = Settings()
    _settings.validate()
    return _settings
