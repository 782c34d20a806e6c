"""
NetDiscovery - LAN peer discovery over UDP broadcast

Find other instances of an application on the local network without
knowing their addresses.

Copyright (c) 2024-2025 ReGen Designs LLC
Licensed under MIT License with Attribution

Quick Start:
    import time
    import netdiscovery

    engine = netdiscovery.start(service_port=7777, map_name="Arena")
    engine.add_listener(lambda peer: print(peer.source_address, dict(peer.fields)))
    engine.send_broadcast()

    while True:
        engine.tick()
        time.sleep(0.05)
"""

from netdiscovery.__version__ import (
    __title__,
    __description__,
    __version__,
    __author__,
    __license__,
    __copyright__,
    VERSION,
)


def start(config=None, advertise=True, **kwargs):
    """
    Create a discovery engine.

    Args:
        config: Path to YAML config file, or a DiscoveryConfig
        advertise: Bind the advertiser socket so requests get answered
        **kwargs: Override specific DiscoveryConfig fields

    Returns:
        DiscoveryEngine ready to tick

    Example:
        engine = netdiscovery.start()
        engine = netdiscovery.start(config="netdiscovery.yaml")
        engine = netdiscovery.start(port=18418, service_port=7777)
    """
    from dataclasses import replace
    from netdiscovery.config import DiscoveryConfig, load_config
    from netdiscovery.core.engine import DiscoveryEngine

    if config is None or isinstance(config, str):
        discovery_config = load_config(config).discovery
    else:
        discovery_config = config

    if kwargs:
        discovery_config = replace(discovery_config, **kwargs)

    engine = DiscoveryEngine(discovery_config)
    if advertise:
        engine.start_advertising()
    return engine


from netdiscovery.config import load_config, DiscoveryConfig, NetDiscoveryConfig
from netdiscovery.core import DiscoveryEngine, PeerBrowser, PeerRecord

__all__ = [
    # Version info
    "__title__",
    "__description__",
    "__version__",
    "__author__",
    "__license__",
    "__copyright__",
    "VERSION",
    # Functions
    "start",
    "load_config",
    # Config
    "DiscoveryConfig",
    "NetDiscoveryConfig",
    # Core
    "DiscoveryEngine",
    "PeerBrowser",
    "PeerRecord",
]
