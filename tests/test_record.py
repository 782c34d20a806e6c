"""
NetDiscovery - Field Map and Peer Record Tests

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import dataclasses
import time

import pytest

from netdiscovery.core.fields import FieldMap, FrozenFieldMap
from netdiscovery.core.record import PeerRecord, parse_port
from netdiscovery.utils.errors import InvalidPortError


class TestFieldMap:
    """Tests for case-insensitive field maps."""

    def test_case_insensitive_lookup(self):
        """Test keys match regardless of case."""
        fields = FieldMap({"Signature": "abc"})
        assert fields["signature"] == "abc"
        assert "SIGNATURE" in fields

    def test_last_write_keeps_casing(self):
        """Test writing a key with new casing replaces the entry."""
        fields = FieldMap({"map": "One"})
        fields["Map"] = "Two"
        assert len(fields) == 1
        assert list(fields) == ["Map"]
        assert fields["MAP"] == "Two"

    def test_delete(self):
        """Test deleting with different casing."""
        fields = FieldMap({"Port": "1"})
        del fields["port"]
        assert len(fields) == 0

    def test_equality_with_dict(self):
        """Test comparison against plain dicts."""
        assert FieldMap({"Port": "1"}) == {"port": "1"}
        assert FieldMap({"Port": "1"}) != {"Port": "2"}
        assert FieldMap({"Port": "1"}) != {"Port": "1", "Map": ""}

    def test_frozen_map_is_read_only(self):
        """Test frozen maps reject assignment and are detached from the source."""
        source = FieldMap({"Port": "1"})
        frozen = FrozenFieldMap(source)
        source["Port"] = "2"

        assert frozen["port"] == "1"
        with pytest.raises(TypeError):
            frozen["Port"] = "3"


class TestParsePort:
    """Tests for service port parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("7777", 7777),
        ("0", 0),
        ("65535", 65535),
        ("65536", None),
        ("abc", None),
        ("-1", None),
        (" 7777", None),
        ("", None),
        (None, None),
        ("٧", None),
    ])
    def test_parse_port(self, value, expected):
        """Test only plain decimal 16-bit values parse."""
        assert parse_port(value) == expected


class TestPeerRecord:
    """Tests for peer records."""

    def test_service_port(self):
        """Test both accessors return a valid port."""
        record = PeerRecord.create(("10.0.0.2", 18418), {"Port": "7777"})
        assert record.try_get_service_port() == 7777
        assert record.get_service_port() == 7777

    def test_invalid_service_port(self):
        """Test an unparseable port."""
        record = PeerRecord.create(("10.0.0.2", 18418), {"Port": "abc"})
        assert record.try_get_service_port() is None
        with pytest.raises(InvalidPortError):
            record.get_service_port()

    def test_missing_service_port(self):
        """Test a missing port."""
        record = PeerRecord.create(("10.0.0.2", 18418), {"Map": "Arena"})
        assert record.try_get_service_port() is None
        with pytest.raises(InvalidPortError) as exc_info:
            record.get_service_port()
        assert exc_info.value.code == "INVALID_PORT"

    def test_record_is_immutable(self):
        """Test records cannot be changed after construction."""
        record = PeerRecord.create(("10.0.0.2", 18418), {"Port": "7777"})
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.source_address = ("10.0.0.3", 1)
        with pytest.raises(TypeError):
            record.fields["Port"] = "1"

    def test_record_copies_fields(self):
        """Test later changes to the source mapping are not visible."""
        fields = {"Port": "7777"}
        record = PeerRecord.create(("10.0.0.2", 18418), fields)
        fields["Port"] = "1"
        assert record.fields["Port"] == "7777"

    def test_age(self):
        """Test age is measured from the monotonic receive time."""
        before = time.monotonic()
        record = PeerRecord.create(("10.0.0.2", 18418), {})
        assert record.received_at >= before
        assert record.age >= 0.0
        assert record.host == "10.0.0.2"
