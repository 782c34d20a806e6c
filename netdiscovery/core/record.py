"""
NetDiscovery - Peer Record

Read-only description of a peer that answered a discovery request.

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import time
from dataclasses import dataclass, field
from typing import Optional, Tuple

from netdiscovery.core.fields import FieldsLike, FrozenFieldMap, PORT_KEY
from netdiscovery.utils.errors import InvalidPortError

Address = Tuple[str, int]


def parse_port(value: Optional[str]) -> Optional[int]:
    """
    Parse an unsigned 16-bit decimal port number.

    Only plain ASCII digits are accepted (no sign, whitespace or separators).

    Returns:
        The port, or None if the value is missing or not a valid port
    """
    if not value or not value.isascii() or not value.isdigit():
        return None
    port = int(value)
    if port > 0xFFFF:
        return None
    return port


@dataclass(frozen=True)
class PeerRecord:
    """
    A discovery packet received from a peer.

    Attributes:
        source_address: (host, port) the packet came from
        fields: Read-only, case-insensitive field mapping
        received_at: time.monotonic() value when the record was created

    Example:
        record = PeerRecord(("192.168.1.7", 18418), {"Port": "7777"})
        record.try_get_service_port()   # 7777
        record.age                      # seconds since received
    """

    source_address: Address
    fields: FrozenFieldMap
    received_at: float = field(default_factory=time.monotonic)

    def __post_init__(self):
        if not isinstance(self.fields, FrozenFieldMap):
            object.__setattr__(self, "fields", FrozenFieldMap(self.fields))
        object.__setattr__(self, "source_address", tuple(self.source_address))

    @classmethod
    def create(cls, source_address: Address, fields: FieldsLike) -> "PeerRecord":
        return cls(source_address=source_address, fields=FrozenFieldMap(fields))

    @property
    def host(self) -> str:
        return self.source_address[0]

    @property
    def age(self) -> float:
        """Seconds elapsed since the record was received."""
        return time.monotonic() - self.received_at

    def try_get_service_port(self) -> Optional[int]:
        """Advertised service port, or None if missing or unparseable."""
        return parse_port(self.fields.get(PORT_KEY))

    def get_service_port(self) -> int:
        """
        Advertised service port.

        Raises:
            InvalidPortError: If the port field is missing or unparseable
        """
        value = self.fields.get(PORT_KEY)
        port = parse_port(value)
        if port is None:
            raise InvalidPortError(value)
        return port
