"""
NetDiscovery - Discovery Engine

Broadcast discovery of peers on the local network.

Protocol:
1. Requester sends a packet holding only its signature to every broadcast
   address, at the discovery port
2. Advertisers with the same signature answer with all registered fields,
   sent straight back to the requester
3. Requester reports each valid answer to its listeners

Everything runs inside tick(), which the host calls periodically. There
are no background threads; sockets are only read when data is pending.

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import logging
import sys
import time
from dataclasses import dataclass
from ipaddress import IPv4Address
from typing import Callable, List, Optional, Tuple

from netdiscovery.config.loader import DiscoveryConfig
from netdiscovery.core.codec import decode_fields, encode_fields
from netdiscovery.core.fields import FieldMap, MAP_KEY, PORT_KEY, SIGNATURE_KEY
from netdiscovery.core.record import Address, PeerRecord
from netdiscovery.core.registration import RegistrationStore, compute_signature
from netdiscovery.core.resolver import resolve_broadcast_addresses
from netdiscovery.core.sockets import DiscoverySocket
from netdiscovery.utils.errors import ReservedFieldError

logger = logging.getLogger(__name__)

# Platforms without usable broadcast sockets
UNSUPPORTED_PLATFORMS = ("emscripten", "wasi")

PeerListener = Callable[[PeerRecord], None]


def is_supported() -> bool:
    """Check if this platform can send and receive UDP broadcasts."""
    return sys.platform not in UNSUPPORTED_PLATFORMS


def _check_writable(key: str) -> None:
    if key.casefold() == SIGNATURE_KEY.casefold():
        raise ReservedFieldError(key)


@dataclass
class EngineStats:
    """Packet counters for a discovery engine."""

    requests_sent: int = 0
    requests_received: int = 0
    responses_sent: int = 0
    responses_received: int = 0
    peers_discovered: int = 0
    packets_ignored: int = 0
    listener_errors: int = 0
    last_activity: Optional[float] = None


class DiscoveryEngine:
    """
    Answers discovery requests and discovers peers.

    The host owns the engine and hands it to whatever needs it (peer
    listings, connection logic).

    Example:
        engine = DiscoveryEngine(DiscoveryConfig(service_port=7777))
        engine.add_listener(lambda peer: print(peer.source_address))
        engine.start_advertising()
        engine.send_broadcast()

        while running:
            engine.tick()
            time.sleep(0.05)

        engine.shutdown()
    """

    def __init__(
        self,
        config: Optional[DiscoveryConfig] = None,
        signature: Optional[str] = None,
    ):
        """
        Initialize the engine.

        Args:
            config: Discovery configuration
            signature: Precomputed signature. Computed from the configured
                publisher, application and runtime version if not given.
        """
        self.config = config or DiscoveryConfig()
        self._signature = signature or compute_signature(
            self.config.publisher,
            self.config.application,
            self.config.runtime_version,
        )
        self._stats = EngineStats()
        self._listeners: List[PeerListener] = []

        self._registration = RegistrationStore(self.config.extra_fields)
        self._registration.set(SIGNATURE_KEY, self._signature)
        self._registration.set(PORT_KEY, str(self.config.service_port))
        self._registration.set(MAP_KEY, self.config.map_name)

        self._advertiser = DiscoverySocket(
            "advertiser",
            port=self.config.port,
            host=self.config.bind_host,
            buffer_size=self.config.buffer_size,
        )
        self._requester = DiscoverySocket(
            "requester",
            port=0,
            host=self.config.bind_host,
            buffer_size=self.config.buffer_size,
        )

    @property
    def signature(self) -> str:
        return self._signature

    @property
    def stats(self) -> EngineStats:
        return self._stats

    @property
    def registration(self) -> RegistrationStore:
        return self._registration

    @property
    def advertiser(self) -> DiscoverySocket:
        return self._advertiser

    @property
    def requester(self) -> DiscoverySocket:
        return self._requester

    @staticmethod
    def is_supported() -> bool:
        return is_supported()

    # Listeners

    def add_listener(self, listener: PeerListener) -> None:
        """
        Add a discovered-peer listener.

        Listeners are called synchronously from tick(), once per valid
        response. Repeated responses from the same peer are all delivered.
        """
        self._listeners.append(listener)

    def remove_listener(self, listener: PeerListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _dispatch_peer(self, record: PeerRecord) -> None:
        self._stats.peers_discovered += 1

        for listener in list(self._listeners):
            try:
                listener(record)
            except Exception as e:
                logger.error(f"Peer listener error: {e}")
                self._stats.listener_errors += 1

    # Registration

    def register_response_data(self, key: str, value: str) -> None:
        """
        Add or replace a field sent in discovery responses.

        Raises:
            ReservedFieldError: If key is the signature field
        """
        _check_writable(key)
        self._registration.set(key, value)

    def unregister_response_data(self, key: str) -> None:
        """Remove a field from discovery responses."""
        _check_writable(key)
        self._registration.unset(key)

    def set_map_name(self, name: str) -> None:
        """Update the advertised map / scene label."""
        self._registration.set(MAP_KEY, name)

    # Lifecycle

    def start_advertising(self) -> None:
        """
        Bind the advertiser socket so that tick() answers requests.

        Raises:
            OSError: If the discovery port cannot be bound
        """
        if not is_supported():
            return
        self._advertiser.ensure_bound()

    def _ensure_requester(self) -> None:
        self._requester.ensure_bound()

    def close_advertiser(self) -> None:
        self._advertiser.close()

    def close_requester(self) -> None:
        self._requester.close()

    def shutdown(self) -> None:
        """Close both sockets. They are recreated on next use."""
        self.close_advertiser()
        self.close_requester()

    def __enter__(self) -> "DiscoveryEngine":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    # Packet handling

    def _read_record(self, sock: DiscoverySocket) -> Optional[PeerRecord]:
        datagram = sock.poll()
        if datagram is None:
            return None

        data, addr = datagram
        if not data:
            return None

        self._stats.last_activity = time.time()
        return PeerRecord.create(addr, decode_fields(data))

    def is_signature_valid(self, fields) -> bool:
        return fields.get(SIGNATURE_KEY) == self._signature

    def is_response_valid(self, record: PeerRecord) -> bool:
        """A response must carry our signature and a port field."""
        return self.is_signature_valid(record.fields) and PORT_KEY in record.fields

    def tick(self) -> None:
        """Process at most one pending datagram on each socket."""
        self.update_advertiser()
        self.update_requester()

    def update_advertiser(self) -> None:
        """Answer a pending discovery request, if any."""
        record = self._read_record(self._advertiser)
        if record is None:
            return

        if not self.is_signature_valid(record.fields):
            self._stats.packets_ignored += 1
            return

        self._stats.requests_received += 1
        response = self._registration.snapshot()
        response[SIGNATURE_KEY] = self._signature
        data = encode_fields(response)
        if self._advertiser.send(data, record.source_address):
            self._stats.responses_sent += 1
            logger.debug(
                f"Sent discovery response to {record.host}:{record.source_address[1]}"
            )

    def update_requester(self) -> None:
        """Report a pending discovery response, if valid."""
        record = self._read_record(self._requester)
        if record is None:
            return

        if not self.is_response_valid(record):
            self._stats.packets_ignored += 1
            return

        self._stats.responses_received += 1
        logger.debug(f"Discovered peer at {record.host}:{record.source_address[1]}")
        self._dispatch_peer(record)

    # Requests

    def get_discovery_request_data(self) -> bytes:
        """Request packet: the signature and nothing else."""
        return encode_fields(FieldMap({SIGNATURE_KEY: self._signature}))

    def get_broadcast_addresses(self) -> List[IPv4Address]:
        """Current broadcast addresses (diagnostics)."""
        return resolve_broadcast_addresses()

    def send_broadcast(self) -> int:
        """
        Send a discovery request to every local broadcast address.

        Returns:
            Number of addresses the request was sent to

        Raises:
            OSError: On socket errors other than an unreachable network
        """
        if not is_supported():
            return 0

        data = self.get_discovery_request_data()
        sent = 0
        for address in resolve_broadcast_addresses():
            if self._send_request((str(address), self.config.port), data):
                sent += 1

        logger.debug(f"Discovery request broadcast to {sent} address(es)")
        return sent

    def send_discovery_request(self, host: str, port: Optional[int] = None) -> bool:
        """
        Send a discovery request straight to one address.

        Args:
            host: Target address
            port: Target discovery port (configured port if not given)

        Returns:
            True if the request was sent
        """
        if not is_supported():
            return False

        target: Address = (host, self.config.port if port is None else port)
        return self._send_request(target, self.get_discovery_request_data())

    def _send_request(self, target: Tuple[str, int], data: bytes) -> bool:
        self._ensure_requester()
        if not self._requester.send(data, target):
            return False
        self._stats.requests_sent += 1
        self._stats.last_activity = time.time()
        return True
