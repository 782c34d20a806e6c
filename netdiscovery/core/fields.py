"""
NetDiscovery - Field Maps

Case-insensitive string mappings used for discovery packets, the
registration store and peer records.

Copyright (c) 2024-2025 ReGen Designs LLC
"""

from collections.abc import Mapping, MutableMapping
from typing import Dict, Iterable, Iterator, Optional, Tuple, Union

# Reserved field names
SIGNATURE_KEY = "Signature"
PORT_KEY = "Port"
MAP_KEY = "Map"

FieldsLike = Union[Mapping, Iterable[Tuple[str, str]], None]


def _fold(key: str) -> str:
    return key.casefold()


class FieldMap(MutableMapping):
    """
    Mapping of field name to field value with case-insensitive keys.

    Lookups ignore case (``str.casefold``), while iteration returns each key
    with the casing it was last written with.

    Example:
        fields = FieldMap({"Port": "7777"})
        fields["port"]      # "7777"
        "PORT" in fields    # True
    """

    def __init__(self, data: FieldsLike = None, **kwargs: str):
        self._store: Dict[str, Tuple[str, str]] = {}
        if data is not None:
            self.update(data)
        if kwargs:
            self.update(kwargs)

    def __getitem__(self, key: str) -> str:
        return self._store[_fold(key)][1]

    def __setitem__(self, key: str, value: str) -> None:
        self._store[_fold(key)] = (key, value)

    def __delitem__(self, key: str) -> None:
        del self._store[_fold(key)]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and _fold(key) in self._store

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        if len(other) != len(self):
            return False
        for key, value in other.items():
            if not isinstance(key, str) or self.get(key) != value:
                return False
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"

    def copy(self) -> "FieldMap":
        return FieldMap(self.items())

    def to_dict(self) -> Dict[str, str]:
        """Plain dict copy with original key casing."""
        return dict(self.items())


class FrozenFieldMap(Mapping):
    """Read-only view over a private ``FieldMap`` copy."""

    def __init__(self, data: FieldsLike = None):
        self._fields = FieldMap(data)

    def __getitem__(self, key: str) -> str:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __eq__(self, other: object) -> bool:
        return self._fields == other

    def __hash__(self) -> int:
        return hash(frozenset((_fold(k), v) for k, v in self._fields.items()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._fields.to_dict()!r})"

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._fields.get(key, default)

    def to_dict(self) -> Dict[str, str]:
        return self._fields.to_dict()
