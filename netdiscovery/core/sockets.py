"""
NetDiscovery - Discovery Sockets

UDP socket wrapper with an explicit lifecycle:

    UNINITIALIZED --ensure_bound()--> BOUND --close()--> CLOSED
                                        ^                  |
                                        +--ensure_bound()--+

Reads never block: poll() checks readability with a zero-timeout select
before calling recvfrom.

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import errno
import logging
import select
import socket
from enum import Enum, auto
from typing import Optional, Tuple

from netdiscovery.utils.errors import SocketStateError

logger = logging.getLogger(__name__)

Address = Tuple[str, int]

# "Network is unreachable": POSIX errno and its WinSock counterpart
NETWORK_UNREACHABLE_ERRORS = frozenset({errno.ENETUNREACH, 10051})

DEFAULT_BUFFER_SIZE = 65536


class SocketState(Enum):
    """Discovery socket lifecycle state."""
    UNINITIALIZED = auto()
    BOUND = auto()
    CLOSED = auto()


def is_network_unreachable(error: OSError) -> bool:
    """Check if a send failed because the target network has no route."""
    return (
        error.errno in NETWORK_UNREACHABLE_ERRORS
        or getattr(error, "winerror", None) in NETWORK_UNREACHABLE_ERRORS
    )


class DiscoverySocket:
    """
    Broadcast-enabled UDP socket used by the discovery engine.

    Args:
        name: Name used in logs ("advertiser" or "requester")
        port: Port to bind (0 lets the OS pick one)
        host: Interface address to bind ("" for all interfaces)
        buffer_size: Largest datagram read in one call

    Example:
        sock = DiscoverySocket("requester", port=0)
        sock.ensure_bound()
        sock.send(packet, ("192.168.1.255", 18418))
        datagram = sock.poll()
        sock.close()
    """

    def __init__(
        self,
        name: str,
        port: int = 0,
        host: str = "",
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ):
        self.name = name
        self.port = port
        self.host = host
        self.buffer_size = buffer_size
        self._sock: Optional[socket.socket] = None
        self._state = SocketState.UNINITIALIZED

    @property
    def state(self) -> SocketState:
        return self._state

    @property
    def is_bound(self) -> bool:
        return self._state == SocketState.BOUND

    @property
    def address(self) -> Optional[Address]:
        """Locally bound (host, port), or None when not bound."""
        if not self.is_bound:
            return None
        return self._sock.getsockname()[:2]

    def ensure_bound(self) -> None:
        """
        Create and bind the socket if it is not bound yet.

        Enabling broadcast and disabling loopback are best-effort; a failure
        is logged and binding continues.

        Raises:
            OSError: If the socket cannot be created or bound. The socket
                stays unbound and may be retried later.
        """
        if self.is_bound:
            return

        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.bind((self.host, self.port))
        except OSError:
            sock.close()
            raise

        # Enable broadcast
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        except OSError as e:
            logger.warning(f"Could not enable broadcast on {self.name} socket: {e}")

        # Don't receive our own packets
        try:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_LOOP, 0)
        except OSError as e:
            logger.warning(f"Could not disable loopback on {self.name} socket: {e}")

        self._sock = sock
        self._state = SocketState.BOUND
        logger.info(f"Discovery {self.name} socket bound to {self.address[0]}:{self.address[1]}")

    def close(self) -> None:
        """Close the socket. Closing an unbound socket does nothing."""
        if self._sock is None:
            return

        self._sock.close()
        self._sock = None
        self._state = SocketState.CLOSED
        logger.info(f"Discovery {self.name} socket closed")

    def _require_bound(self) -> socket.socket:
        if not self.is_bound:
            raise SocketStateError(self.name, self._state.name)
        return self._sock

    def pending(self) -> bool:
        """Check if a datagram is waiting, without blocking."""
        if not self.is_bound:
            return False
        readable, _, _ = select.select([self._sock], [], [], 0)
        return bool(readable)

    def receive(self) -> Tuple[bytes, Address]:
        """
        Read one datagram. Blocks if nothing is pending; use poll().

        Raises:
            SocketStateError: If the socket is not bound
        """
        sock = self._require_bound()
        data, addr = sock.recvfrom(self.buffer_size)
        return data, addr[:2]

    def poll(self) -> Optional[Tuple[bytes, Address]]:
        """
        Read one datagram if one is pending.

        Returns:
            (data, sender address), or None if nothing is pending or the
            socket is not bound
        """
        if not self.pending():
            return None
        return self.receive()

    def send(self, data: bytes, addr: Address) -> bool:
        """
        Send a datagram.

        Args:
            data: Payload
            addr: Target (host, port)

        Returns:
            True if sent, False if the target network is unreachable

        Raises:
            SocketStateError: If the socket is not bound
            OSError: For any other send failure
        """
        sock = self._require_bound()
        try:
            sock.sendto(data, addr)
        except OSError as e:
            if is_network_unreachable(e):
                logger.debug(f"Network unreachable for {addr[0]}:{addr[1]}, skipped")
                return False
            raise
        return True

    def __repr__(self) -> str:
        return f"DiscoverySocket(name={self.name!r}, port={self.port}, state={self._state.name})"
