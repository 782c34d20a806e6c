"""
NetDiscovery - Wire Codec Tests

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import pytest

from netdiscovery.core.codec import (
    decode_fields,
    encode_fields,
    fields_to_text,
    packet_to_text,
    text_to_fields,
    text_to_packet,
)
from netdiscovery.core.fields import FieldMap
from netdiscovery.utils.errors import CodecError


class TestTextFraming:
    """Tests for the "key: value" line format."""

    def test_fields_to_text(self):
        """Test entries are joined with newlines."""
        text = fields_to_text({"Signature": "1.2.3.", "Port": "7777"})
        assert text == "Signature: 1.2.3.\nPort: 7777"

    def test_value_may_contain_separator(self):
        """Test only the first ': ' splits key from value."""
        fields = text_to_fields("Motd: welcome: have fun")
        assert fields["Motd"] == "welcome: have fun"

    def test_empty_lines_and_garbage_skipped(self):
        """Test empty lines and lines without a separator are ignored."""
        fields = text_to_fields("\n\nPort: 7777\nnot a field\n\nMap: Arena\n")
        assert fields.to_dict() == {"Port": "7777", "Map": "Arena"}

    def test_empty_value(self):
        """Test a key with an empty value survives."""
        fields = text_to_fields("Map: ")
        assert fields["Map"] == ""

    def test_duplicate_key_last_wins(self):
        """Test a repeated key keeps its last value."""
        fields = text_to_fields("Map: One\nMap: Two")
        assert fields.to_dict() == {"Map": "Two"}


class TestBinaryFraming:
    """Tests for the 16-bit big-endian packing."""

    def test_ascii_packing(self):
        """Test each character takes two bytes, high byte first."""
        assert text_to_packet("Ab") == b"\x00A\x00b"

    def test_non_ascii_packing(self):
        """Test characters above 0xFF use the high byte."""
        assert text_to_packet("€") == b"\x20\xac"
        assert packet_to_text(b"\x20\xac") == "€"

    def test_odd_trailing_byte_ignored(self):
        """Test a truncated trailing byte is dropped."""
        assert packet_to_text(b"\x00A\x00") == "A"

    def test_astral_character_rejected(self):
        """Test characters above U+FFFF cannot be packed."""
        with pytest.raises(CodecError):
            text_to_packet("map \U0001F600")


class TestEncodeDecode:
    """Tests for full packet encoding."""

    def test_round_trip(self):
        """Test decode(encode(m)) == m."""
        fields = {
            "Signature": "-1521.88.4096.",
            "Port": "7777",
            "Map": "Arena: Night",
            "Players": "3/8",
            "Name": "Café Ж",
        }
        assert decode_fields(encode_fields(fields)) == fields

    def test_empty_mapping(self):
        """Test the empty mapping encodes to an empty payload and back."""
        assert encode_fields({}) == b""
        assert len(decode_fields(b"")) == 0

    def test_field_map_input(self):
        """Test FieldMap instances encode like dicts."""
        fields = FieldMap({"Port": "7777"})
        assert encode_fields(fields) == encode_fields({"Port": "7777"})

    def test_decoded_keys_case_insensitive(self):
        """Test decoded fields are looked up without regard to case."""
        fields = decode_fields(encode_fields({"Port": "7777"}))
        assert fields["PORT"] == "7777"
        assert "port" in fields

    def test_payload_size(self):
        """Test payload is two bytes per character."""
        data = encode_fields({"Port": "7777"})
        assert len(data) == 2 * len("Port: 7777")
