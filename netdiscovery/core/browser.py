"""
NetDiscovery - Peer Browser

Keeps the list of peers found by a discovery engine, for whatever presents
them (a server list, a CLI listing).

The engine reports every response it receives; the browser decides which
ones belong in the list:
- responses are only accepted during a refresh window, or from the peer
  currently being looked up
- a new response from an already listed address replaces the old record

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import logging
import socket
import time
from typing import Callable, List, Optional

from netdiscovery.core.engine import DiscoveryEngine
from netdiscovery.core.record import Address, PeerRecord

logger = logging.getLogger(__name__)

ConnectListener = Callable[[PeerRecord], None]


class PeerBrowser:
    """
    Discovered-peer list driven by a DiscoveryEngine.

    Example:
        browser = PeerBrowser(engine)
        browser.refresh()
        while browser.is_refreshing:
            engine.tick()
        for peer in browser.peers:
            print(peer.host, peer.try_get_service_port())
    """

    def __init__(
        self,
        engine: DiscoveryEngine,
        refresh_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            engine: Engine to listen to
            refresh_interval: Seconds responses are accepted after a refresh
                or lookup (engine config value if not given)
            clock: Monotonic time source
        """
        self.engine = engine
        self.refresh_interval = (
            engine.config.refresh_interval if refresh_interval is None else refresh_interval
        )
        self._clock = clock
        self._peers: List[PeerRecord] = []
        self._connect_listeners: List[ConnectListener] = []
        self._refreshed_at: Optional[float] = None
        self._lookup_address: Optional[Address] = None
        self._looked_up_at: Optional[float] = None
        self._attached = False
        self.attach()

    def attach(self) -> None:
        """Start receiving peers from the engine."""
        if not self._attached:
            self.engine.add_listener(self.on_peer_discovered)
            self._attached = True

    def detach(self) -> None:
        """Stop receiving peers from the engine."""
        if self._attached:
            self.engine.remove_listener(self.on_peer_discovered)
            self._attached = False

    @property
    def peers(self) -> List[PeerRecord]:
        return list(self._peers)

    @property
    def lookup_address(self) -> Optional[Address]:
        return self._lookup_address

    def _within_window(self, started_at: Optional[float]) -> bool:
        return started_at is not None and self._clock() - started_at < self.refresh_interval

    @property
    def is_refreshing(self) -> bool:
        return self._within_window(self._refreshed_at)

    @property
    def is_looking_up(self) -> bool:
        return self._lookup_address is not None and self._within_window(self._looked_up_at)

    def is_looking_up_address(self, address: Address) -> bool:
        return self.is_looking_up and tuple(address) == self._lookup_address

    def refresh(self) -> int:
        """
        Clear the list and broadcast a new discovery request.

        Returns:
            Number of broadcast addresses the request was sent to
        """
        self._peers.clear()
        self._refreshed_at = self._clock()
        return self.engine.send_broadcast()

    def lookup(self, host: str, port: Optional[int] = None) -> bool:
        """
        Send a discovery request to a single known address.

        Responses arrive from a numeric address, so a host name is resolved
        to its IPv4 address first.

        Args:
            host: Peer IPv4 address or host name
            port: Peer discovery port (engine's configured port if not given)

        Raises:
            OSError: If the host name cannot be resolved
        """
        address = socket.gethostbyname(host)
        target_port = self.engine.config.port if port is None else port
        self._lookup_address = (address, target_port)
        self._looked_up_at = self._clock()
        return self.engine.send_discovery_request(address, target_port)

    def on_peer_discovered(self, record: PeerRecord) -> None:
        """Engine listener: add or update a peer in the list."""
        if not self.is_refreshing and not self.is_looking_up_address(record.source_address):
            return

        for index, existing in enumerate(self._peers):
            if existing.source_address == record.source_address:
                self._peers[index] = record
                return

        self._peers.append(record)
        logger.debug(f"Listed peer {record.host}:{record.source_address[1]}")

    def add_connect_listener(self, listener: ConnectListener) -> None:
        self._connect_listeners.append(listener)

    def remove_connect_listener(self, listener: ConnectListener) -> None:
        if listener in self._connect_listeners:
            self._connect_listeners.remove(listener)

    def connect(self, record: PeerRecord) -> None:
        """Hand a chosen peer to the connect listeners."""
        for listener in list(self._connect_listeners):
            listener(record)
