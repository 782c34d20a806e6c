"""
NetDiscovery - Shared test fixtures

Engines bind to 127.0.0.1 with OS-assigned ports so tests can run in
parallel and without a real network.

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import socket
import time

import pytest

from netdiscovery.config import DiscoveryConfig
from netdiscovery.core.engine import DiscoveryEngine

LOCALHOST = "127.0.0.1"


def loopback_config(**kwargs) -> DiscoveryConfig:
    """Discovery config bound to loopback with an OS-assigned port."""
    values = {"port": 0, "bind_host": LOCALHOST, "refresh_interval": 2.0}
    values.update(kwargs)
    return DiscoveryConfig(**values)


def tick_until(engines, condition, timeout: float = 2.0) -> bool:
    """Tick engines until condition() is true or the timeout passes."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        for engine in engines:
            engine.tick()
        if condition():
            return True
        time.sleep(0.005)
    return condition()


@pytest.fixture
def advertiser():
    """Engine answering requests on a loopback port."""
    engine = DiscoveryEngine(loopback_config(service_port=7777, map_name="Arena"))
    engine.start_advertising()
    yield engine
    engine.shutdown()


@pytest.fixture
def requester():
    """Engine used to send requests."""
    engine = DiscoveryEngine(loopback_config())
    yield engine
    engine.shutdown()


@pytest.fixture
def raw_socket():
    """Plain UDP socket for sending hand-made packets."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind((LOCALHOST, 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()
