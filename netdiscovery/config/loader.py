"""
NetDiscovery - Configuration Loader

Unified configuration loading from YAML files.

Copyright (c) 2024-2025 ReGen Designs LLC
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from netdiscovery.__version__ import __version__
from netdiscovery.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DISCOVERY_PORT = 18418
DEFAULT_SERVICE_PORT = 7777

CONFIG_SEARCH_PATHS = ["netdiscovery-config.yaml", "netdiscovery.yaml"]


@dataclass
class DiscoveryConfig:
    """Discovery engine configuration."""
    port: int = DEFAULT_DISCOVERY_PORT
    bind_host: str = ""
    service_port: int = DEFAULT_SERVICE_PORT
    map_name: str = ""
    publisher: str = "DefaultCompany"
    application: str = "netdiscovery"
    runtime_version: str = __version__
    buffer_size: int = 65536
    refresh_interval: float = 3.0
    tick_interval: float = 0.05
    extra_fields: Dict[str, str] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    console: bool = True


@dataclass
class NetDiscoveryConfig:
    """Complete NetDiscovery configuration."""
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: Optional[str] = None) -> NetDiscoveryConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: Config file path. If None, the default file names are
            searched in the working directory.

    Returns:
        Parsed configuration, or defaults if no file is found or the file
        cannot be read

    Raises:
        ConfigurationError: If a value is out of range
    """
    if path is None:
        for p in CONFIG_SEARCH_PATHS:
            if os.path.exists(p):
                path = p
                break

    if path is None or not os.path.exists(path):
        return NetDiscoveryConfig()

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading config: {e}")
        return NetDiscoveryConfig()

    if not isinstance(data, dict):
        logger.error(f"Error loading config: {path} does not contain a mapping")
        return NetDiscoveryConfig()

    logger.info(f"Loaded config from {path}")
    return _parse_config(data)


def _check_port(name: str, value: Any, allow_zero: bool = True) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer", {name: value})
    low = 0 if allow_zero else 1
    if not low <= port <= 65535:
        raise ConfigurationError(f"{name} out of range: {port}", {name: port})
    return port


def _check_number(name: str, value: Any, cast: type, minimum: float, allow_equal: bool = False):
    try:
        number = cast(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number", {name: value})
    if number < minimum or (number == minimum and not allow_equal):
        raise ConfigurationError(f"{name} out of range: {number}", {name: number})
    return number


def _check_level(value: Any) -> str:
    # Numeric levels such as 10 map to their names
    if isinstance(value, int):
        return logging.getLevelName(value)
    return str(value)


def _parse_config(data: Dict[str, Any]) -> NetDiscoveryConfig:
    """Parse config dictionary."""
    config = NetDiscoveryConfig()

    if "discovery" in data:
        disc = data["discovery"] or {}
        defaults = config.discovery
        config.discovery.port = _check_port("port", disc.get("port", defaults.port))
        config.discovery.bind_host = disc.get("bind_host", defaults.bind_host)
        config.discovery.service_port = _check_port(
            "service_port", disc.get("service_port", defaults.service_port)
        )
        config.discovery.map_name = str(disc.get("map_name", defaults.map_name))
        config.discovery.publisher = str(disc.get("publisher", defaults.publisher))
        config.discovery.application = str(disc.get("application", defaults.application))
        config.discovery.runtime_version = str(
            disc.get("runtime_version", defaults.runtime_version)
        )
        config.discovery.buffer_size = _check_number(
            "buffer_size", disc.get("buffer_size", defaults.buffer_size), int, 0
        )
        config.discovery.refresh_interval = _check_number(
            "refresh_interval", disc.get("refresh_interval", defaults.refresh_interval), float, 0
        )
        config.discovery.tick_interval = _check_number(
            "tick_interval",
            disc.get("tick_interval", defaults.tick_interval),
            float,
            0,
            allow_equal=True,
        )
        extra = disc.get("extra_fields") or {}
        config.discovery.extra_fields = {str(k): str(v) for k, v in extra.items()}

    if "logging" in data:
        log = data["logging"] or {}
        config.logging.level = _check_level(log.get("level", "INFO"))
        config.logging.file = log.get("file")
        config.logging.console = log.get("console", True)

    return config


def save_config(config: NetDiscoveryConfig, path: str) -> bool:
    """Save configuration to a YAML file."""
    disc = config.discovery
    data = {
        "discovery": {
            "port": disc.port,
            "bind_host": disc.bind_host,
            "service_port": disc.service_port,
            "map_name": disc.map_name,
            "publisher": disc.publisher,
            "application": disc.application,
            "runtime_version": disc.runtime_version,
            "buffer_size": disc.buffer_size,
            "refresh_interval": disc.refresh_interval,
            "tick_interval": disc.tick_interval,
            "extra_fields": dict(disc.extra_fields),
        },
        "logging": {
            "level": config.logging.level,
            "file": config.logging.file,
            "console": config.logging.console,
        },
    }

    try:
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)
        return True
    except OSError as e:
        logger.error(f"Error saving config: {e}")
        return False
