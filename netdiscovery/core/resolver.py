"""
NetDiscovery - Broadcast Address Resolver

Finds the IPv4 broadcast address of every local network.

Sending to 255.255.255.255 only reaches the interface the OS routes it
through, so discovery requests go to each interface's directed broadcast
address instead.

Fallback chain:
1. Interfaces (psutil) - address | ~netmask for every active interface
2. Hostname lookup - class-based default netmask, plus 255.255.255.255
3. Limited broadcast (255.255.255.255) only

Addresses from step 2 are a best guess: class-based masks predate CIDR and
are often wrong on subnetted networks.

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import ipaddress
import logging
import socket
from typing import Callable, List, Optional, Union

import psutil

logger = logging.getLogger(__name__)

LIMITED_BROADCAST = ipaddress.IPv4Address("255.255.255.255")

# Netmask of a single-host (point-to-point) address
HOST_MASK = "255.255.255.255"

AddressLike = Union[str, int, ipaddress.IPv4Address]


def compute_broadcast_address(
    address: AddressLike, mask: AddressLike
) -> ipaddress.IPv4Address:
    """
    Compute the directed broadcast address of a network.

    Host bits (zeros in the mask) are set to 1, network bits are kept.

    Args:
        address: IPv4 address on the network
        mask: Dotted subnet mask

    Returns:
        Broadcast address

    Example:
        compute_broadcast_address("192.168.1.42", "255.255.255.0")
        # IPv4Address('192.168.1.255')
    """
    addr = int(ipaddress.IPv4Address(address))
    netmask = int(ipaddress.IPv4Address(mask))
    return ipaddress.IPv4Address(addr | (~netmask & 0xFFFFFFFF))


def default_subnet_mask(address: AddressLike) -> Optional[ipaddress.IPv4Address]:
    """
    Class-based default mask for an address (A: /8, B: /16, C: /24).

    Returns:
        The mask, or None for class D/E addresses
    """
    first_octet = ipaddress.IPv4Address(address).packed[0]
    if first_octet <= 127:
        return ipaddress.IPv4Address("255.0.0.0")
    if first_octet <= 191:
        return ipaddress.IPv4Address("255.255.0.0")
    if first_octet <= 223:
        return ipaddress.IPv4Address("255.255.255.0")
    return None


def _dedupe(addresses: List[ipaddress.IPv4Address]) -> List[ipaddress.IPv4Address]:
    return list(dict.fromkeys(addresses))


def _is_point_to_point(nic) -> bool:
    # flags is only reported by newer psutil releases on POSIX
    flags = getattr(nic, "flags", "") or ""
    return "pointopoint" in flags.split(",")


def broadcast_addresses_from_interfaces() -> List[ipaddress.IPv4Address]:
    """
    Broadcast addresses of all active, non-loopback interfaces.

    Point-to-point links (a peer address or a /32 mask) have no broadcast
    domain and are skipped.
    """
    stats = psutil.net_if_stats()
    addresses = []

    for name, addrs in psutil.net_if_addrs().items():
        nic = stats.get(name)
        if nic is not None and (not nic.isup or _is_point_to_point(nic)):
            continue

        for addr in addrs:
            if addr.family != socket.AF_INET or not addr.netmask:
                continue
            if getattr(addr, "ptp", None) or addr.netmask == HOST_MASK:
                continue
            ip = ipaddress.IPv4Address(addr.address)
            if ip.is_loopback:
                continue
            addresses.append(compute_broadcast_address(ip, addr.netmask))

    return _dedupe(addresses)


def broadcast_addresses_from_hostname() -> List[ipaddress.IPv4Address]:
    """Broadcast addresses guessed from the host's own addresses."""
    hostname = socket.gethostname()
    _, _, host_addresses = socket.gethostbyname_ex(hostname)

    addresses = []
    for host_address in host_addresses:
        try:
            ip = ipaddress.IPv4Address(host_address)
        except ipaddress.AddressValueError:
            continue
        mask = default_subnet_mask(ip)
        if mask is not None:
            addresses.append(compute_broadcast_address(ip, mask))

    if addresses:
        # Compensates for a wrongly guessed mask
        addresses.append(LIMITED_BROADCAST)

    return _dedupe(addresses)


def _run_safe(
    method: Callable[[], List[ipaddress.IPv4Address]]
) -> List[ipaddress.IPv4Address]:
    try:
        return method()
    except Exception as e:
        logger.debug(f"Broadcast address lookup via {method.__name__} failed: {e}")
        return []


def resolve_broadcast_addresses() -> List[ipaddress.IPv4Address]:
    """
    Resolve broadcast addresses for all local networks.

    Never raises and never returns an empty list. Not cached, since
    interfaces come and go (e.g. Wi-Fi reconnects).

    Returns:
        List of IPv4 broadcast addresses
    """
    addresses = _run_safe(broadcast_addresses_from_interfaces)

    if not addresses:
        addresses = _run_safe(broadcast_addresses_from_hostname)
        if addresses:
            logger.debug("No usable interfaces, using class-based broadcast addresses")

    if not addresses:
        logger.debug("Falling back to limited broadcast address")
        addresses = [LIMITED_BROADCAST]

    return addresses
