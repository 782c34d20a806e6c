"""
NetDiscovery Version Information

LAN peer discovery by ReGen Designs LLC
"""

__title__ = "netdiscovery"
__description__ = "UDP broadcast peer discovery for local networks"
__version__ = "0.3.0"
__author__ = "ReGen Designs LLC"
__author_email__ = "contact@regendesigns.com"
__license__ = "MIT"
__copyright__ = "Copyright 2024-2025 ReGen Designs LLC"
__url__ = "https://github.com/ReGenNow/netdiscovery"

# Version tuple for programmatic access
VERSION = tuple(map(int, __version__.split(".")))
