"""
NetDiscovery - Utilities Module

Utility functions and helpers.
"""

from netdiscovery.utils.errors import (
    NetDiscoveryError,
    ConfigurationError,
    CodecError,
    InvalidPortError,
    SocketStateError,
    ReservedFieldError,
)
from netdiscovery.utils.logging import setup_logging, get_logger

__all__ = [
    "NetDiscoveryError",
    "ConfigurationError",
    "CodecError",
    "InvalidPortError",
    "SocketStateError",
    "ReservedFieldError",
    "setup_logging",
    "get_logger",
]
