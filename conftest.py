import logging
import struct
import time
from collections.abc import Iterator
from pathlib import Path

import mutagen.flac
import pytest
from click.testing import CliRunner

from disclist.config import Config

logger = logging.getLogger(__name__)


@pytest.fixture(autouse=True)
def debug_logging() -> None:
    logging.getLogger().setLevel(logging.DEBUG)


@pytest.fixture()
def isolated_dir() -> Iterator[Path]:
    with CliRunner().isolated_filesystem():
        yield Path.cwd()


@pytest.fixture()
def config(isolated_dir: Path) -> Config:
    cache_dir = isolated_dir / "cache"
    cache_dir.mkdir()

    music_source_dir = isolated_dir / "source"
    music_source_dir.mkdir()

    return Config(
        music_source_dir=music_source_dir,
        cache_dir=cache_dir,
        listen_addr="127.0.0.1:0",
        refresh_interval=3600,
    )


@pytest.fixture()
def source_dir(config: Config) -> Path:
    """
    A small library: one fully tagged artist, one artist without any tags, one artist whose directory
    name carries a leading article, and one artist without any discs.
    """
    src = config.music_source_dir

    write_flac(src / "artist-a" / "x" / "01.flac", artist="Artist A", album="Album X")
    write_flac(src / "artist-a" / "x" / "02.flac", artist="Artist A", album="Album X")
    (src / "artist-a" / "x" / "cover.jpg").write_bytes(b"\xff\xd8\xff\xe0")

    (src / "Nobody" / "Live Session").mkdir(parents=True)
    (src / "Nobody" / "Live Session" / "notes.txt").write_text("no tags here")

    (src / "The Band" / "02 Disc Two").mkdir(parents=True)
    (src / "The Band" / "01 Disc One").mkdir(parents=True)

    (src / "Empty").mkdir()
    (src / "README.txt").write_text("not an artist")
    return src


def write_flac(path: Path, **tags: str) -> Path:
    """
    Write a minimal, valid FLAC file (a single STREAMINFO block and no audio frames) and tag it. That
    is all mutagen needs to read the tags back.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    # 44.1kHz, 2 channels, 16 bits per sample, 1 second of samples.
    packed = (44100 << 44) | ((2 - 1) << 41) | ((16 - 1) << 36) | 44100
    streaminfo = (
        struct.pack(">HH", 4096, 4096)
        + (0).to_bytes(3, "big")
        + (0).to_bytes(3, "big")
        + struct.pack(">Q", packed)
        + bytes(16)
    )
    with path.open("wb") as fp:
        # Block header: last-metadata-block flag set, block type 0 (STREAMINFO), 24-bit length.
        fp.write(b"fLaC" + bytes([0x80]) + len(streaminfo).to_bytes(3, "big") + streaminfo)

    if tags:
        f = mutagen.flac.FLAC(path)
        for k, v in tags.items():
            f[k] = v
        f.save()
    return path


def retry_for_sec(timeout_sec: float) -> Iterator[None]:
    start = time.time()
    while True:
        yield
        time.sleep(0.01)
        if time.time() - start >= timeout_sec:
            break
