#!/usr/bin/env python3
"""
NetDiscovery - LAN Lobby Demo

Hosts a game lobby and lists other lobbies on the local network.

Run this script on several machines (or twice on one machine with
different --service-port values) and each will see the others.

Usage:
    python lobby_demo.py --map Arena --service-port 7777
    python lobby_demo.py --map Docks --service-port 7778

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import argparse
import time

from netdiscovery import DiscoveryConfig, DiscoveryEngine, PeerBrowser, PeerRecord
from netdiscovery.utils.logging import setup_logging


def main():
    parser = argparse.ArgumentParser(description="NetDiscovery LAN Lobby Demo")
    parser.add_argument("--map", default="Lobby", help="Map name to advertise")
    parser.add_argument("--service-port", type=int, default=7777, help="Advertised game port")
    parser.add_argument("--port", type=int, default=18418, help="UDP discovery port")
    parser.add_argument("--refresh", type=float, default=3.0, help="Seconds between refreshes")
    args = parser.parse_args()

    setup_logging(level="INFO")

    config = DiscoveryConfig(
        port=args.port,
        service_port=args.service_port,
        map_name=args.map,
        refresh_interval=args.refresh,
    )

    with DiscoveryEngine(config) as engine:
        engine.register_response_data("Players", "1/8")
        engine.start_advertising()

        browser = PeerBrowser(engine)

        def on_connect(peer: PeerRecord):
            print(f"Connecting to {peer.host}:{peer.get_service_port()} ...")

        browser.add_connect_listener(on_connect)

        print(f"Hosting '{args.map}' on port {args.service_port}. Press Ctrl+C to stop.")

        try:
            while True:
                browser.refresh()
                while browser.is_refreshing:
                    engine.tick()
                    time.sleep(config.tick_interval)

                print(f"\nLobbies [{len(browser.peers)}]:")
                for peer in browser.peers:
                    port = peer.try_get_service_port()
                    print(
                        f"  {peer.host}:{port if port is not None else '?'}"
                        f"  map={peer.fields.get('Map', '')}"
                        f"  players={peer.fields.get('Players', '-')}"
                    )
        except KeyboardInterrupt:
            print("\nShutting down...")


if __name__ == "__main__":
    main()
