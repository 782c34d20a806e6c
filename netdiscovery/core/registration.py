"""
NetDiscovery - Registration Store

Fields a host advertises about itself, and the signature that keeps
unrelated applications sharing the discovery port apart.

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import hashlib
import logging
import threading
from typing import Iterable, Optional

from netdiscovery.core.fields import FieldMap, FieldsLike

logger = logging.getLogger(__name__)

SIGNATURE_SEPARATOR = "."


def stable_hash_code(value: str) -> int:
    """
    Signed 32-bit hash code of a string, identical across processes.

    The builtin hash() is salted per interpreter and cannot be shared
    between hosts.
    """
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return int.from_bytes(digest[:4], "big", signed=True)


def compute_signature(
    publisher: str,
    application: str,
    runtime_version: str,
) -> str:
    """
    Compute the discovery signature of an application.

    Only peers with the same signature answer each other. This is a
    compatibility filter, not a security measure.

    Args:
        publisher: Publisher / company id
        application: Application / product id
        runtime_version: Runtime or engine version

    Returns:
        Hash codes joined as "<h1>.<h2>.<h3>."
    """
    return "".join(
        f"{stable_hash_code(part)}{SIGNATURE_SEPARATOR}"
        for part in (publisher, application, runtime_version)
    )


class RegistrationStore:
    """
    Response fields sent to every requester with a matching signature.

    Keys are case-insensitive. Changes apply to the next response sent.
    Access is serialized with a lock so a host may update fields from
    another thread while the engine ticks.

    Example:
        store = RegistrationStore({"Port": "7777"})
        store.set("Map", "Arena")
        store.unset("Map")
    """

    def __init__(self, fields: FieldsLike = None):
        self._fields = FieldMap(fields)
        self._lock = threading.RLock()

    def set(self, key: str, value: str) -> None:
        """Add or replace a field."""
        with self._lock:
            self._fields[key] = value
        logger.debug(f"Registered response field {key!r}")

    def unset(self, key: str) -> None:
        """Remove a field. Removing a missing field does nothing."""
        with self._lock:
            self._fields.pop(key, None)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        with self._lock:
            return self._fields.get(key, default)

    def keys(self) -> Iterable[str]:
        with self._lock:
            return list(self._fields)

    def snapshot(self) -> FieldMap:
        """Copy of all fields."""
        with self._lock:
            return self._fields.copy()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._fields

    def __len__(self) -> int:
        with self._lock:
            return len(self._fields)
