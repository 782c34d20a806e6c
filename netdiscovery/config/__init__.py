"""
NetDiscovery - Configuration Module

Configuration loading and management.

Copyright (c) 2024-2025 ReGen Designs LLC
"""

from netdiscovery.config.loader import (
    load_config,
    save_config,
    NetDiscoveryConfig,
    DiscoveryConfig,
    LoggingConfig,
    DEFAULT_DISCOVERY_PORT,
    DEFAULT_SERVICE_PORT,
)

__all__ = [
    "load_config",
    "save_config",
    "NetDiscoveryConfig",
    "DiscoveryConfig",
    "LoggingConfig",
    "DEFAULT_DISCOVERY_PORT",
    "DEFAULT_SERVICE_PORT",
]
