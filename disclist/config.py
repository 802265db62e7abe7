"""
The config module provides the config schema and parsing logic.

We provide detailed errors when an invalid configuration is detected, and emit warnings when
unrecognized keys are found.
"""

from __future__ import annotations

import functools
import logging
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import appdirs
import tomllib

from disclist.catalog import DEFAULT_REFRESH_INTERVAL
from disclist.common import DisclistExpectedError

XDG_CONFIG_DISCLIST = Path(appdirs.user_config_dir("disclist"))
CONFIG_PATH = XDG_CONFIG_DISCLIST / "config.toml"

XDG_CACHE_DISCLIST = Path(appdirs.user_cache_dir("disclist"))

DEFAULT_LISTEN_ADDR = ":2002"

logger = logging.getLogger(__name__)


class ConfigNotFoundError(DisclistExpectedError):
    pass


class ConfigDecodeError(DisclistExpectedError):
    pass


class MissingConfigKeyError(DisclistExpectedError):
    pass


class InvalidConfigValueError(DisclistExpectedError, ValueError):
    pass


@dataclass(frozen=True)
class Config:
    music_source_dir: Path
    cache_dir: Path
    # Address to serve the catalog on, as host:port. An empty host listens on all interfaces.
    listen_addr: str = DEFAULT_LISTEN_ADDR
    # Seconds between background rescans of the source directory.
    refresh_interval: int = DEFAULT_REFRESH_INTERVAL

    @classmethod
    def parse(cls, config_path_override: Path | None = None) -> Config:
        # As we parse, delete consumed values from the data dictionary. If any are left over at the
        # end of the config, warn that unknown config keys were found.
        cfgpath = config_path_override or CONFIG_PATH
        try:
            with cfgpath.open("r") as fp:
                data = tomllib.loads(fp.read())
        except FileNotFoundError as e:
            raise ConfigNotFoundError(f"Configuration file not found ({cfgpath})") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigDecodeError(
                f"Failed to decode configuration file: invalid TOML: {e}"
            ) from e

        try:
            music_source_dir = Path(data["music_source_dir"]).expanduser()
            del data["music_source_dir"]
        except KeyError as e:
            raise MissingConfigKeyError(
                f"Missing key music_source_dir in configuration file ({cfgpath})"
            ) from e
        except (ValueError, TypeError) as e:
            raise InvalidConfigValueError(
                f"Invalid value for music_source_dir in configuration file ({cfgpath}): must be a path"
            ) from e

        try:
            cache_dir = Path(data["cache_dir"]).expanduser()
            del data["cache_dir"]
        except KeyError:
            cache_dir = XDG_CACHE_DISCLIST
        except (TypeError, ValueError) as e:
            raise InvalidConfigValueError(
                f"Invalid value for cache_dir in configuration file ({cfgpath}): must be a path"
            ) from e

        try:
            listen_addr = data["listen_addr"]
            del data["listen_addr"]
            parse_listen_addr(listen_addr)
        except KeyError:
            listen_addr = DEFAULT_LISTEN_ADDR
        except ValueError as e:
            raise InvalidConfigValueError(
                f"Invalid value for listen_addr in configuration file ({cfgpath}): {e}"
            ) from e

        try:
            refresh_interval = data["refresh_interval"]
            del data["refresh_interval"]
            if not isinstance(refresh_interval, int) or isinstance(refresh_interval, bool):
                raise ValueError(f"must be an integer: got {type(refresh_interval)}")
            if refresh_interval <= 0:
                raise ValueError(f"must be a positive integer: got {refresh_interval}")
        except KeyError:
            refresh_interval = DEFAULT_REFRESH_INTERVAL
        except ValueError as e:
            raise InvalidConfigValueError(
                f"Invalid value for refresh_interval in configuration file ({cfgpath}): {e}"
            ) from e

        if data:
            unrecognized_accessors: list[str] = []
            # Do a DFS over the data keys to assemble the map of unknown keys. State is a tuple of
            # ("accessor", node).
            dfs_state: deque[tuple[str, dict[str, Any]]] = deque([("", data)])
            while dfs_state:
                accessor, node = dfs_state.pop()
                if isinstance(node, dict):
                    for k, v in node.items():
                        child_accessor = k if not accessor else f"{accessor}.{k}"
                        dfs_state.append((child_accessor, v))
                    continue
                unrecognized_accessors.append(accessor)
            logger.warning(
                f"Unrecognized options found in configuration file: {', '.join(unrecognized_accessors)}"
            )

        return Config(
            music_source_dir=music_source_dir,
            cache_dir=cache_dir,
            listen_addr=listen_addr,
            refresh_interval=refresh_interval,
        )

    @functools.cached_property
    def listen_host(self) -> str:
        return parse_listen_addr(self.listen_addr)[0]

    @functools.cached_property
    def listen_port(self) -> int:
        return parse_listen_addr(self.listen_addr)[1]

    @functools.cached_property
    def pid_path(self) -> Path:
        return self.cache_dir / "server.pid"


def parse_listen_addr(addr: Any) -> tuple[str, int]:
    """Split a host:port address. The host may be empty, as in ":2002"."""
    if not isinstance(addr, str):
        raise ValueError(f"must be a host:port string: got {type(addr)}")
    host, sep, port = addr.rpartition(":")
    if not sep:
        raise ValueError(f"must be a host:port string: got {addr!r}")
    try:
        portnum = int(port)
    except ValueError as e:
        raise ValueError(f"port must be an integer: got {port!r}") from e
    if not 0 <= portnum <= 65535:
        raise ValueError(f"port must be between 0 and 65535: got {portnum}")
    return host.removeprefix("[").removesuffix("]"), portnum
