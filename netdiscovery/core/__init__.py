"""
NetDiscovery - Core Module

Wire codec, broadcast address resolution, registration and the discovery
engine.

Copyright (c) 2024-2025 ReGen Designs LLC
"""

from netdiscovery.core.fields import FieldMap, FrozenFieldMap, SIGNATURE_KEY, PORT_KEY, MAP_KEY
from netdiscovery.core.codec import encode_fields, decode_fields
from netdiscovery.core.record import PeerRecord
from netdiscovery.core.resolver import (
    resolve_broadcast_addresses,
    compute_broadcast_address,
    default_subnet_mask,
    LIMITED_BROADCAST,
)
from netdiscovery.core.registration import RegistrationStore, compute_signature
from netdiscovery.core.sockets import DiscoverySocket, SocketState
from netdiscovery.core.engine import DiscoveryEngine, EngineStats, is_supported
from netdiscovery.core.browser import PeerBrowser

__all__ = [
    "FieldMap",
    "FrozenFieldMap",
    "SIGNATURE_KEY",
    "PORT_KEY",
    "MAP_KEY",
    "encode_fields",
    "decode_fields",
    "PeerRecord",
    "resolve_broadcast_addresses",
    "compute_broadcast_address",
    "default_subnet_mask",
    "LIMITED_BROADCAST",
    "RegistrationStore",
    "compute_signature",
    "DiscoverySocket",
    "SocketState",
    "DiscoveryEngine",
    "EngineStats",
    "is_supported",
    "PeerBrowser",
]
