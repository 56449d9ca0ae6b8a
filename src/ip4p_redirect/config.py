"""Configuration for the ip4p-redirect service.

Reads from config/ip4p-redirect.ini if present, environment variables
override the [server] values. Mappings come only from the file.
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass, field
from pathlib import Path

from ip4p_redirect.mappings import Mapping, MappingTable

_CONFIG_FILE = (
    Path(__file__).resolve().parent.parent.parent / "config" / "ip4p-redirect.ini"
)

LOG_LEVELS = ("critical", "error", "warning", "info", "debug")

_NO_DEFAULT_SECTION = "ip4p-redirect:no-defaults"


class ConfigError(Exception):
    """Configuration could not be loaded. Fatal at startup."""


@dataclass(frozen=True)
class RedirectConfig:
    """Service configuration. Immutable once loaded."""

    host: str = "0.0.0.0"
    port: int = 443
    cert_file: str = ""
    key_file: str = ""
    log_level: str = "info"
    mappings: tuple[Mapping, ...] = field(default_factory=tuple)

    def mapping_table(self) -> MappingTable:
        return MappingTable(self.mappings)


def _parse_port(value: str, source: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise ConfigError(f"{source}: port {value!r} is not an integer") from None
    if not 0 < port <= 65535:
        raise ConfigError(f"{source}: port {port} out of range")
    return port


def _parse_log_level(value: str, source: str) -> str:
    level = value.strip().lower()
    if level not in LOG_LEVELS:
        raise ConfigError(f"{source}: unknown log level {value!r}")
    return level


def load_config(config_path: Path | None = None) -> RedirectConfig:
    """Load config from INI file, then override with environment variables."""
    env_path = os.getenv("IP4P_REDIRECT_CONFIG")
    path = config_path or (Path(env_path) if env_path else _CONFIG_FILE)
    kwargs: dict = {}

    if path.exists():
        # no implicit defaults: a [DEFAULT] key must not become an identifier
        parser = configparser.ConfigParser(
            interpolation=None, default_section=_NO_DEFAULT_SECTION
        )
        # identifiers are case-sensitive
        parser.optionxform = str
        try:
            with path.open(encoding="utf-8") as fh:
                parser.read_file(fh)
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"failed to read config file {path}: {exc}") from exc
        except configparser.Error as exc:
            raise ConfigError(f"failed to parse config file {path}: {exc}") from exc

        if parser.has_section("server"):
            for ini_key in ("host", "cert_file", "key_file"):
                val = parser.get("server", ini_key, fallback=None)
                if val is not None:
                    kwargs[ini_key] = val
            port_str = parser.get("server", "port", fallback=None)
            if port_str is not None:
                kwargs["port"] = _parse_port(port_str, str(path))
            level = parser.get("server", "log_level", fallback=None)
            if level is not None:
                kwargs["log_level"] = _parse_log_level(level, str(path))

        if parser.has_section("mappings"):
            kwargs["mappings"] = tuple(
                Mapping(identifier=identifier, domain=domain.strip())
                for identifier, domain in parser.items("mappings")
            )
    elif config_path is not None or env_path:
        raise ConfigError(f"config file {path} does not exist")

    env_map = {
        "IP4P_REDIRECT_HOST": "host",
        "IP4P_REDIRECT_PORT": "port",
        "IP4P_REDIRECT_CERT_FILE": "cert_file",
        "IP4P_REDIRECT_KEY_FILE": "key_file",
        "IP4P_REDIRECT_LOG_LEVEL": "log_level",
    }
    for env_key, config_key in env_map.items():
        val = os.getenv(env_key)
        if val is not None:
            if config_key == "port":
                kwargs[config_key] = _parse_port(val, env_key)
            elif config_key == "log_level":
                kwargs[config_key] = _parse_log_level(val, env_key)
            else:
                kwargs[config_key] = val

    return RedirectConfig(**kwargs)


def check_startup(config: RedirectConfig) -> None:
    """Raise ConfigError if the service cannot start serving with this config."""
    if not config.cert_file or not config.key_file:
        raise ConfigError("cert_file and key_file are required")
    for label, name in (("certificate", config.cert_file), ("key", config.key_file)):
        if not Path(name).is_file():
            raise ConfigError(f"TLS {label} file {name} not found")
    if not config.mappings:
        raise ConfigError("no mappings configured")
