"""
NetDiscovery - Broadcast Address Resolver Tests

Interface and hostname lookups are replaced with fakes so the tests do not
depend on the machine's network setup.

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import socket
from collections import namedtuple
from ipaddress import IPv4Address

import pytest

from netdiscovery.core import resolver
from netdiscovery.core.resolver import (
    LIMITED_BROADCAST,
    compute_broadcast_address,
    default_subnet_mask,
    resolve_broadcast_addresses,
)

FakeAddr = namedtuple("FakeAddr", "family address netmask broadcast ptp")
FakeStats = namedtuple("FakeStats", "isup")
FakeFlaggedStats = namedtuple("FakeFlaggedStats", "isup flags")


def ipv4(address, netmask):
    return FakeAddr(socket.AF_INET, address, netmask, None, None)


@pytest.fixture
def interfaces(monkeypatch):
    """Install fake psutil interface tables."""
    def install(addrs, stats=None):
        stats = stats or {name: FakeStats(True) for name in addrs}
        monkeypatch.setattr(resolver.psutil, "net_if_addrs", lambda: addrs)
        monkeypatch.setattr(resolver.psutil, "net_if_stats", lambda: stats)
    return install


@pytest.fixture
def host_addresses(monkeypatch):
    """Install a fake hostname lookup."""
    def install(addresses):
        monkeypatch.setattr(resolver.socket, "gethostname", lambda: "testhost")
        monkeypatch.setattr(
            resolver.socket,
            "gethostbyname_ex",
            lambda name: (name, [], list(addresses)),
        )
    return install


def broken(*args, **kwargs):
    raise PermissionError("not allowed")


class TestBroadcastComputation:
    """Tests for broadcast address math."""

    def test_class_c_subnet(self):
        """Test a /24 network."""
        assert compute_broadcast_address("192.168.1.42", "255.255.255.0") == IPv4Address("192.168.1.255")

    def test_class_a_subnet(self):
        """Test a /8 network."""
        assert compute_broadcast_address("10.0.0.5", "255.0.0.0") == IPv4Address("10.255.255.255")

    def test_non_octet_subnet(self):
        """Test a mask that does not fall on an octet boundary."""
        assert compute_broadcast_address("172.16.5.10", "255.255.252.0") == IPv4Address("172.16.7.255")

    def test_host_mask(self):
        """Test a /32 mask returns the address itself."""
        assert compute_broadcast_address("10.1.2.3", "255.255.255.255") == IPv4Address("10.1.2.3")

    @pytest.mark.parametrize("address,mask", [
        ("0.1.2.3", "255.0.0.0"),
        ("127.0.0.1", "255.0.0.0"),
        ("128.0.0.1", "255.255.0.0"),
        ("191.255.0.1", "255.255.0.0"),
        ("192.0.0.1", "255.255.255.0"),
        ("223.1.1.1", "255.255.255.0"),
        ("224.0.0.1", None),
        ("255.255.255.255", None),
    ])
    def test_default_subnet_mask(self, address, mask):
        """Test class-based mask inference."""
        expected = IPv4Address(mask) if mask else None
        assert default_subnet_mask(address) == expected


class TestResolver:
    """Tests for the resolver fallback chain."""

    def test_interfaces(self, interfaces, host_addresses):
        """Test each active interface contributes its broadcast address."""
        interfaces({
            "lo": [ipv4("127.0.0.1", "255.0.0.0")],
            "eth0": [ipv4("192.168.1.42", "255.255.255.0")],
            "wlan0": [
                ipv4("10.0.0.5", "255.0.0.0"),
                FakeAddr(socket.AF_INET6, "fe80::1", "ffff:ffff:ffff:ffff::", None, None),
            ],
        })
        host_addresses(["172.16.0.1"])

        assert resolve_broadcast_addresses() == [
            IPv4Address("192.168.1.255"),
            IPv4Address("10.255.255.255"),
        ]

    def test_down_interfaces_skipped(self, interfaces, host_addresses):
        """Test interfaces that are down are ignored."""
        interfaces(
            {
                "eth0": [ipv4("192.168.1.42", "255.255.255.0")],
                "eth1": [ipv4("192.168.2.42", "255.255.255.0")],
            },
            {"eth0": FakeStats(False), "eth1": FakeStats(True)},
        )
        host_addresses([])

        assert resolve_broadcast_addresses() == [IPv4Address("192.168.2.255")]

    def test_point_to_point_addresses_skipped(self, interfaces, host_addresses):
        """Test addresses with a peer or a /32 mask are ignored."""
        interfaces({
            "eth0": [ipv4("192.168.1.42", "255.255.255.0")],
            "tun0": [FakeAddr(socket.AF_INET, "10.8.0.6", "255.255.255.0", None, "10.8.0.5")],
            "wg0": [ipv4("10.66.0.2", "255.255.255.255")],
        })
        host_addresses([])

        assert resolve_broadcast_addresses() == [IPv4Address("192.168.1.255")]

    def test_point_to_point_interfaces_skipped(self, interfaces, host_addresses):
        """Test interfaces flagged point-to-point are ignored."""
        interfaces(
            {
                "eth0": [ipv4("192.168.1.42", "255.255.255.0")],
                "ppp0": [ipv4("100.64.3.9", "255.255.0.0")],
            },
            {
                "eth0": FakeFlaggedStats(True, "up,broadcast,running,multicast"),
                "ppp0": FakeFlaggedStats(True, "up,pointopoint,running,noarp"),
            },
        )
        host_addresses([])

        assert resolve_broadcast_addresses() == [IPv4Address("192.168.1.255")]

    def test_duplicates_removed(self, interfaces, host_addresses):
        """Test two interfaces on one subnet give one address."""
        interfaces({
            "eth0": [ipv4("192.168.1.42", "255.255.255.0")],
            "eth1": [ipv4("192.168.1.43", "255.255.255.0")],
        })
        host_addresses([])

        assert resolve_broadcast_addresses() == [IPv4Address("192.168.1.255")]

    def test_hostname_fallback(self, interfaces, host_addresses):
        """Test class-based addresses plus limited broadcast when no interfaces."""
        interfaces({})
        host_addresses(["192.168.7.20", "224.0.0.9"])

        assert resolve_broadcast_addresses() == [
            IPv4Address("192.168.7.255"),
            LIMITED_BROADCAST,
        ]

    def test_hostname_fallback_after_enumeration_error(self, monkeypatch, host_addresses):
        """Test interface enumeration errors fall through to the hostname lookup."""
        monkeypatch.setattr(resolver.psutil, "net_if_addrs", broken)
        monkeypatch.setattr(resolver.psutil, "net_if_stats", broken)
        host_addresses(["10.0.0.5"])

        assert resolve_broadcast_addresses() == [
            IPv4Address("10.255.255.255"),
            LIMITED_BROADCAST,
        ]

    def test_no_interfaces_no_host(self, interfaces, host_addresses):
        """Test the limited broadcast address is the last resort."""
        interfaces({})
        host_addresses([])

        assert resolve_broadcast_addresses() == [LIMITED_BROADCAST]

    def test_everything_fails(self, monkeypatch):
        """Test the resolver never raises."""
        monkeypatch.setattr(resolver.psutil, "net_if_addrs", broken)
        monkeypatch.setattr(resolver.psutil, "net_if_stats", broken)
        monkeypatch.setattr(resolver.socket, "gethostbyname_ex", broken)

        assert resolve_broadcast_addresses() == [LIMITED_BROADCAST]
