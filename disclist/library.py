"""
The library module scans the music source directory and builds the catalog listing.

The source directory is expected to be laid out as::

    <music_source_dir>/
        <artist>/
            <disc>/
                01. Track.flac
                ...

Artist and disc names come from the tags of the first readable audio file (by file name) in each
disc directory, falling back to the directory names when no file in it has tags. Directories are
always listed in name order and symlinked directories are not followed, so a tree renders the same
way on every scan.

An unreadable directory anywhere in the tree aborts the whole scan with a LibraryReadError: we never
return a partial catalog as if it were complete. An unreadable file, on the other hand, is common
(cover art, cue sheets, permissions) and is simply skipped.
"""

import logging
import os
import time
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from disclist.audiotags import AlbumTags, UnreadableTagsError
from disclist.common import DisclistExpectedError
from disclist.names import display_name, sort_key

logger = logging.getLogger(__name__)


class LibraryReadError(DisclistExpectedError):
    pass


@dataclass(frozen=True)
class Artist:
    name: str
    discs: tuple[str, ...] = ()


def _scandir(d: Path) -> Iterator[os.DirEntry[str]]:
    """List a directory, sorted by entry name so that every scan of the same tree agrees."""
    try:
        with os.scandir(d) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise LibraryReadError(f"Failed to read directory {d}: {e}") from e
    yield from entries


def _subdirectories(d: Path) -> Iterator[Path]:
    for entry in _scandir(d):
        # Symlinked directories are not followed.
        if entry.is_dir(follow_symlinks=False):
            yield Path(entry.path)


def probe_album(disc_dir: Path) -> tuple[str, str]:
    """
    Return the (artist, album) of the first file in the disc directory with readable tags. The
    artist falls back to the album artist. Returns empty strings if no file has readable tags.
    """
    for entry in _scandir(disc_dir):
        p = Path(entry.path)
        try:
            tags = AlbumTags.from_file(p)
        except UnreadableTagsError as e:
            logger.debug(f"Skipping {p} while probing {disc_dir.name}: {e}")
            continue
        logger.debug(f"Read album tags for {disc_dir.name} from {p.name}")
        return tags.display_artist, tags.album or ""
    return "", ""


def scan_artist_discs(artist_dir: Path) -> tuple[str, list[str]]:
    """
    Return the artist name found in the tags of the artist's discs, and the names of the discs in
    the order of their directory names.

    The artist name comes from the last disc probed, even if that disc had no tags and thus
    overwrote a name found in an earlier disc with an empty string.
    """
    artist = ""
    discs: list[str] = []
    for disc_dir in _subdirectories(artist_dir):
        artist, album = probe_album(disc_dir)
        if not album:
            album = display_name(disc_dir.name)
        discs.append(album)
    return artist, discs


def scan_library(music_source_dir: Path) -> list[Artist]:
    """Scan the source directory into a list of artists, each with their discs, all sorted."""
    artists: list[Artist] = []
    for artist_dir in _subdirectories(music_source_dir):
        name, discs = scan_artist_discs(artist_dir)
        if not name:
            name = display_name(artist_dir.name)
        logger.debug(f"Scanned artist {name} with {len(discs)} discs from {artist_dir.name}")
        artists.append(Artist(name=name, discs=tuple(sorted(discs, key=sort_key))))
    return sorted(artists, key=lambda a: sort_key(a.name))


def render_catalog(catalog: list[Artist]) -> str:
    lines: list[str] = []
    for artist in catalog:
        lines.append(artist.name + "\n")
        for disc in artist.discs:
            lines.append(f"    {disc}\n")
        lines.append("\n")
    return "".join(lines)


def build_catalog_text(music_source_dir: Path) -> str:
    """Run one full scan of the source directory and render it."""
    start = time.time()
    catalog = scan_library(music_source_dir)
    text = render_catalog(catalog)
    logger.debug(f"Catalog scan time {time.time() - start=}")
    logger.info(
        f"Scanned {len(catalog)} artists and {sum(len(a.discs) for a in catalog)} discs "
        f"in {music_source_dir}"
    )
    return text
