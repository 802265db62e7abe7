"""
The cli module defines the CLI interface. It does not have any domain logic of its own. It is
dedicated to parsing, resolving arguments, and delegating to the appropriate module.
"""

import dataclasses
import logging
import os
import signal
from dataclasses import dataclass
from pathlib import Path

import click

from disclist.common import DisclistExpectedError
from disclist.config import CONFIG_PATH, Config, InvalidConfigValueError, parse_listen_addr

logger = logging.getLogger(__name__)


class DaemonAlreadyRunningError(DisclistExpectedError):
    pass


@dataclass
class Context:
    config: Config


# fmt: off
@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Emit verbose logging.")
@click.option("--config", "-c", type=click.Path(path_type=Path), help="Override the config file location.")
@click.pass_context
# fmt: on
def cli(cc: click.Context, verbose: bool, config: Path | None = None) -> None:
    """Serve a plain text catalog of a music library over HTTP."""
    logging.getLogger().setLevel(logging.DEBUG if verbose else logging.INFO)
    # The config subcommands must work before a config file exists.
    if cc.invoked_subcommand == "config":
        return
    cc.obj = Context(
        config=Config.parse(config_path_override=config),
    )


@cli.group(name="config")
def config_group() -> None:
    """Utilities for configuring disclist."""


@config_group.command()
def path() -> None:
    """Print the default location of the config file."""
    click.echo(str(CONFIG_PATH))


# fmt: off
@cli.command()
@click.option("--music-dir", type=click.Path(path_type=Path), help="Override the music source directory.")
@click.option("--addr", help="Override the listen address (host:port).")
@click.option("--refresh-interval", type=click.IntRange(min=1), help="Override the seconds between catalog refreshes.")
@click.option("--daemon", "-d", is_flag=True, help="Fork the server into the background.")
@click.pass_obj
# fmt: on
def serve(
    ctx: Context,
    music_dir: Path | None,
    addr: str | None,
    refresh_interval: int | None,
    daemon: bool,
) -> None:
    """Serve the catalog over HTTP, refreshing it in the background."""
    from disclist.catalog import CatalogCache
    from disclist.server import serve_catalog

    c = _apply_overrides(ctx.config, music_dir=music_dir, addr=addr, refresh_interval=refresh_interval)
    cache = CatalogCache(c.music_source_dir, c.refresh_interval)
    # Scan before forking, so that an unreadable library fails in the foreground.
    cache.initialize()
    if daemon:
        daemonize(pid_path=c.pid_path)

    serve_catalog(cache, c.listen_host, c.listen_port)


@cli.command()
@click.pass_obj
def stop(ctx: Context) -> None:
    """Stop the server running in the background."""
    if not ctx.config.pid_path.exists():
        logger.info("No-Op: No known server running")
        exit(1)
    with ctx.config.pid_path.open("r") as fp:
        pid = int(fp.read())
    try:
        os.kill(pid, signal.SIGTERM)
        logger.info(f"Killed server at process {pid}")
    except ProcessLookupError:
        logger.info(f"No-Op: Process {pid} not found")
    ctx.config.pid_path.unlink()


@cli.command(name="list")
@click.option("--music-dir", type=click.Path(path_type=Path), help="Override the music source directory.")
@click.pass_obj
def list_command(ctx: Context, music_dir: Path | None) -> None:
    """Scan the library once and print the catalog."""
    from disclist.library import build_catalog_text

    c = _apply_overrides(ctx.config, music_dir=music_dir)
    click.echo(build_catalog_text(c.music_source_dir), nl=False)


def _apply_overrides(
    c: Config,
    *,
    music_dir: Path | None = None,
    addr: str | None = None,
    refresh_interval: int | None = None,
) -> Config:
    if music_dir is not None:
        c = dataclasses.replace(c, music_source_dir=music_dir.expanduser())
    if addr is not None:
        try:
            parse_listen_addr(addr)
        except ValueError as e:
            raise InvalidConfigValueError(f"Invalid value for --addr: {e}") from e
        c = dataclasses.replace(c, listen_addr=addr)
    if refresh_interval is not None:
        c = dataclasses.replace(c, refresh_interval=refresh_interval)
    return c


def daemonize(pid_path: Path | None = None) -> None:
    """Forks into a background daemon and exits the foreground process."""
    if pid_path and pid_path.exists():
        # Parse the PID. If it's not a valid integer, just skip and move on.
        try:
            with pid_path.open("r") as fp:
                existing_pid = int(fp.read())
        except ValueError:
            logger.debug(f"Ignoring improperly formatted pid file at {pid_path}")
        else:
            # Otherwise, Check to see if existing_pid is running. Kill 0 does nothing, but errors if
            # the process doesn't exist.
            try:
                os.kill(existing_pid, 0)
            except OSError:
                logger.debug(f"Ignoring pid file with a pid that isn't running: {existing_pid}")
            else:
                raise DaemonAlreadyRunningError(
                    f"Server is already running in process {existing_pid}"
                )

    pid = os.fork()
    if pid == 0:
        # Child process. Detach and keep going!
        os.setsid()
        return
    # Parent process, let's exit now!
    if pid_path:
        pid_path.parent.mkdir(parents=True, exist_ok=True)
        with pid_path.open("w") as fp:
            fp.write(str(pid))
    os._exit(0)
