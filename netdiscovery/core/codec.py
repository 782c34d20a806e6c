"""
NetDiscovery - Wire Codec

Serializes discovery fields to and from UDP payloads.

Packet layout:
    Text:   one "key: value" line per field, lines joined with "\\n"
    Binary: every character of the text as a big-endian 16-bit code unit

The fixed two-byte packing doubles the size of ASCII payloads but is what
every peer on the network expects, so it must not change.

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import logging
from collections.abc import Mapping

from netdiscovery.core.fields import FieldMap
from netdiscovery.utils.errors import CodecError

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"
KEY_VALUE_SEPARATOR = ": "


def fields_to_text(fields: Mapping) -> str:
    """Join fields into newline separated "key: value" lines."""
    return LINE_SEPARATOR.join(
        f"{key}{KEY_VALUE_SEPARATOR}{value}" for key, value in fields.items()
    )


def text_to_fields(text: str) -> FieldMap:
    """
    Parse newline separated "key: value" lines.

    Only the first ": " in a line separates key from value, so values may
    contain the separator. Empty lines and lines without a separator are
    skipped. A repeated key keeps its last value.
    """
    fields = FieldMap()
    for line in text.split(LINE_SEPARATOR):
        if not line:
            continue
        key, sep, value = line.partition(KEY_VALUE_SEPARATOR)
        if not sep:
            continue
        fields[key] = value
    return fields


def text_to_packet(text: str) -> bytes:
    """
    Pack text as big-endian 16-bit code units, two bytes per character.

    Raises:
        CodecError: If the text contains a character above U+FFFF
    """
    data = bytearray(len(text) * 2)
    for i, char in enumerate(text):
        code = ord(char)
        if code > 0xFFFF:
            raise CodecError(
                f"Character U+{code:X} cannot be packed into 16 bits",
                {"position": i},
            )
        data[i * 2] = (code >> 8) & 0xFF
        data[i * 2 + 1] = code & 0xFF
    return bytes(data)


def packet_to_text(data: bytes) -> str:
    """Unpack big-endian 16-bit code units. A trailing odd byte is ignored."""
    count = len(data) // 2
    return "".join(
        chr((data[i * 2] << 8) | data[i * 2 + 1]) for i in range(count)
    )


def encode_fields(fields: Mapping) -> bytes:
    """
    Encode fields into a discovery packet.

    Args:
        fields: Mapping of field name to field value

    Returns:
        Packet bytes (empty for an empty mapping)
    """
    return text_to_packet(fields_to_text(fields))


def decode_fields(data: bytes) -> FieldMap:
    """
    Decode a discovery packet into fields.

    Args:
        data: Packet bytes

    Returns:
        FieldMap with the decoded fields
    """
    return text_to_fields(packet_to_text(data))
