"""
NetDiscovery - Main entry point

Allows running NetDiscovery as a module:
    python -m netdiscovery scan
    python -m netdiscovery advertise --map Arena
    python -m netdiscovery addresses

Copyright (c) 2024-2025 ReGen Designs LLC
"""

from netdiscovery.cli import main

if __name__ == "__main__":
    main()
