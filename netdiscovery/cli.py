"""
NetDiscovery - Command Line Interface

CLI for NetDiscovery.

Usage:
    netdiscovery scan [--timeout SECONDS]
    netdiscovery lookup <host> [<port>]
    netdiscovery advertise [--service-port PORT] [--map NAME] [--field KEY=VALUE]
    netdiscovery addresses
    netdiscovery --version

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import logging
import socket
import time
from dataclasses import replace
from typing import List, Optional, Tuple

import click

from netdiscovery.__version__ import __version__, __title__
from netdiscovery.config import DiscoveryConfig, load_config
from netdiscovery.core.browser import PeerBrowser
from netdiscovery.core.engine import DiscoveryEngine, is_supported
from netdiscovery.core.fields import MAP_KEY, SIGNATURE_KEY
from netdiscovery.core.record import PeerRecord
from netdiscovery.core.resolver import resolve_broadcast_addresses
from netdiscovery.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def parse_field(value: str) -> Tuple[str, str]:
    """Parse a KEY=VALUE command line field."""
    key, sep, field_value = value.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected KEY=VALUE, got {value!r}")
    if "\n" in key or ": " in key or "\n" in field_value:
        raise click.BadParameter(f"field {key!r} cannot be sent in a discovery packet")
    if key.casefold() == SIGNATURE_KEY.casefold():
        raise click.BadParameter(f"field {key!r} is reserved")
    return key, field_value


def format_peer(record: PeerRecord, columns: List[str]) -> str:
    port = record.try_get_service_port()
    endpoint = record.host + (f":{port}" if port is not None else "")
    values = [record.fields.get(column, "") for column in columns]
    return "  ".join([f"{endpoint:<22}"] + [f"{value:<16}" for value in values])


def print_peers(peers: List[PeerRecord], columns: List[str]) -> None:
    header = "  ".join([f"{'Address':<22}"] + [f"{column:<16}" for column in columns])
    click.echo(f"Peers [{len(peers)}]:")
    click.echo(header)
    click.echo("-" * len(header))
    for record in peers:
        click.echo(format_peer(record, columns))


def run_until(engine: DiscoveryEngine, deadline: float, interval: float) -> None:
    """Tick the engine until the monotonic deadline passes."""
    while time.monotonic() < deadline:
        engine.tick()
        time.sleep(interval)


@click.group()
@click.version_option(version=__version__, prog_name=__title__)
@click.option("--config", "-c", "config_path", default=None, help="Path to configuration file")
@click.option("--port", "-p", default=None, type=click.IntRange(0, 65535), help="Discovery port")
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, config_path: Optional[str], port: Optional[int], debug: bool):
    """NetDiscovery - find peers on the local network.

    \b
    Quick start:
      netdiscovery advertise --map Arena   Answer discovery requests
      netdiscovery scan                    List peers on the LAN
      netdiscovery addresses               Show broadcast addresses
    """
    config = load_config(config_path)
    setup_logging(
        level="DEBUG" if debug else config.logging.level,
        log_file=config.logging.file,
        console=config.logging.console,
    )

    discovery = config.discovery
    if port is not None:
        discovery = replace(discovery, port=port)

    ctx.obj = discovery


@cli.command()
@click.option("--timeout", "-t", default=None, type=float, help="Seconds to wait for responses")
@click.option("--column", "columns", multiple=True, default=[MAP_KEY], help="Field to display")
@click.pass_obj
def scan(config: DiscoveryConfig, timeout: Optional[float], columns: Tuple[str, ...]):
    """Broadcast a discovery request and list responding peers."""
    if not is_supported():
        raise click.ClickException("Network broadcast is not supported on this platform")

    with DiscoveryEngine(config) as engine:
        browser = PeerBrowser(engine, refresh_interval=timeout)
        sent = browser.refresh()
        click.echo(f"Discovery request sent to {sent} broadcast address(es)")

        run_until(engine, time.monotonic() + browser.refresh_interval, config.tick_interval)
        print_peers(browser.peers, list(columns))


@cli.command()
@click.argument("host")
@click.argument("port", required=False, type=click.IntRange(0, 65535))
@click.option("--timeout", "-t", default=None, type=float, help="Seconds to wait for a response")
@click.option("--column", "columns", multiple=True, default=[MAP_KEY], help="Field to display")
@click.pass_obj
def lookup(
    config: DiscoveryConfig,
    host: str,
    port: Optional[int],
    timeout: Optional[float],
    columns: Tuple[str, ...],
):
    """Send a discovery request to a single host."""
    if not is_supported():
        raise click.ClickException("Network broadcast is not supported on this platform")

    with DiscoveryEngine(config) as engine:
        browser = PeerBrowser(engine, refresh_interval=timeout)
        try:
            sent = browser.lookup(host, port)
        except socket.gaierror as e:
            raise click.BadParameter(f"cannot resolve {host!r}: {e}", param_hint="HOST")
        if not sent:
            raise click.ClickException(f"Network unreachable: {host}")

        deadline = time.monotonic() + browser.refresh_interval
        while time.monotonic() < deadline and not browser.peers:
            engine.tick()
            time.sleep(config.tick_interval)

        if not browser.peers:
            click.echo(f"No response from {host}")
            return
        print_peers(browser.peers, list(columns))


@cli.command()
@click.option("--service-port", "-s", default=None, type=click.IntRange(0, 65535), help="Advertised service port")
@click.option("--map", "-m", "map_name", default=None, help="Advertised map / label")
@click.option("--field", "-f", "fields", multiple=True, help="Extra field as KEY=VALUE")
@click.pass_obj
def advertise(
    config: DiscoveryConfig,
    service_port: Optional[int],
    map_name: Optional[str],
    fields: Tuple[str, ...],
):
    """Answer discovery requests until interrupted."""
    if not is_supported():
        raise click.ClickException("Network broadcast is not supported on this platform")

    extra = [parse_field(value) for value in fields]

    if service_port is not None:
        config = replace(config, service_port=service_port)
    if map_name is not None:
        config = replace(config, map_name=map_name)

    with DiscoveryEngine(config) as engine:
        for key, value in extra:
            engine.register_response_data(key, value)

        try:
            engine.start_advertising()
        except OSError as e:
            raise click.ClickException(f"Cannot listen on port {config.port}: {e}")

        click.echo(
            f"Advertising service port {config.service_port} on discovery port "
            f"{engine.advertiser.address[1]}. Press Ctrl+C to stop."
        )

        try:
            while True:
                engine.tick()
                time.sleep(config.tick_interval)
        except KeyboardInterrupt:
            click.echo("\nShutting down...")

        stats = engine.stats
        click.echo(
            f"Answered {stats.responses_sent} of {stats.requests_received} request(s)"
        )


@cli.command()
def addresses():
    """Show the broadcast addresses discovery requests are sent to."""
    for address in resolve_broadcast_addresses():
        click.echo(str(address))


def main():
    """Main entry point for CLI."""
    cli()
