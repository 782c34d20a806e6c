"""
NetDiscovery - Custom Exceptions

Custom exception classes for NetDiscovery.

Copyright (c) 2024-2025 ReGen Designs LLC
"""


class NetDiscoveryError(Exception):
    """Base exception for NetDiscovery errors."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code or "NETDISCOVERY_ERROR"
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(NetDiscoveryError):
    """Error in configuration."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, "CONFIG_ERROR", details)


class CodecError(NetDiscoveryError):
    """Fields cannot be represented in the discovery wire format."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, "CODEC_ERROR", details)


class InvalidPortError(NetDiscoveryError):
    """Advertised service port is missing or not a valid port number."""

    def __init__(self, value: str = None):
        if value is None:
            message = "Peer record has no service port"
        else:
            message = f"Invalid service port: {value!r}"
        super().__init__(message, "INVALID_PORT", {"value": value})


class SocketStateError(NetDiscoveryError):
    """Operation attempted on a discovery socket that is not bound."""

    def __init__(self, name: str, state: str):
        super().__init__(
            f"Socket '{name}' is not bound (state: {state})",
            "SOCKET_STATE_ERROR",
            {"socket": name, "state": state},
        )


class ReservedFieldError(NetDiscoveryError):
    """Attempt to change a response field the engine owns."""

    def __init__(self, key: str):
        super().__init__(
            f"Response field '{key}' is reserved",
            "RESERVED_FIELD",
            {"key": key},
        )
