"""
The audiotags module abstracts over tag reading for the audio formats mutagen understands, exposing
the handful of album-level tags the catalog cares about through a single interface.

The format of a file is sniffed from its contents, not its extension, so any file in a disc
directory is a candidate. Files that are not audio, or audio files without a tag block, raise
UnreadableTagsError so that callers can skip them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import mutagen
import mutagen.flac
import mutagen.id3
import mutagen.mp3
import mutagen.mp4
import mutagen.oggopus
import mutagen.oggvorbis

from disclist.common import DisclistExpectedError

logger = logging.getLogger(__name__)


class UnreadableTagsError(DisclistExpectedError):
    pass


class UnsupportedFiletypeError(UnreadableTagsError):
    pass


class UnsupportedTagValueTypeError(UnreadableTagsError):
    pass


@dataclass(frozen=True)
class AlbumTags:
    artist: str | None
    albumartist: str | None
    album: str | None

    path: Path

    @property
    def display_artist(self) -> str:
        """The track artist, or the album artist when the track artist is blank."""
        return self.artist or self.albumartist or ""

    @classmethod
    def from_file(cls, p: Path) -> AlbumTags:
        """Read the album-level tags of an audio file on disk."""
        try:
            m = mutagen.File(p)  # type: ignore
        except (mutagen.MutagenError, OSError) as e:  # type: ignore
            raise UnreadableTagsError(f"Failed to open file: {e}") from e
        if m is None:
            raise UnsupportedFiletypeError(f"{p} is not a supported audio file")
        if m.tags is None:
            raise UnreadableTagsError(f"{p} does not contain any tags")

        if isinstance(m, mutagen.mp3.MP3):
            return AlbumTags(
                artist=_get_tag(m.tags, ["TPE1"]),
                albumartist=_get_tag(m.tags, ["TPE2"]),
                album=_get_tag(m.tags, ["TALB"]),
                path=p,
            )
        if isinstance(m, mutagen.mp4.MP4):
            return AlbumTags(
                artist=_get_tag(m.tags, ["\xa9ART"]),
                albumartist=_get_tag(m.tags, ["aART"]),
                album=_get_tag(m.tags, ["\xa9alb"]),
                path=p,
            )
        if isinstance(m, (mutagen.flac.FLAC, mutagen.oggvorbis.OggVorbis, mutagen.oggopus.OggOpus)):
            return AlbumTags(
                artist=_get_tag(m.tags, ["artist"]),
                albumartist=_get_tag(m.tags, ["albumartist", "album artist"]),
                album=_get_tag(m.tags, ["album"]),
                path=p,
            )
        raise UnsupportedFiletypeError(f"{p} is not a supported audio file ({type(m).__name__})")


def _get_tag(t: Any, keys: list[str]) -> str | None:
    if not t:
        return None
    for k in keys:
        try:
            values: list[str] = []
            raw_values = t[k].text if isinstance(t, mutagen.id3.ID3) else t[k]
            for val in raw_values:
                if isinstance(val, str):
                    values.append(val)
                elif isinstance(val, bytes):
                    values.append(val.decode())
                elif isinstance(val, mutagen.id3.ID3TimeStamp):  # type: ignore
                    values.append(val.text)
                else:
                    raise UnsupportedTagValueTypeError(
                        f"Encountered a tag value of type {type(val)}"
                    )
            values = [v for v in values if v]
            if values:
                return r" \\ ".join(values)
        except (KeyError, ValueError):
            pass
    return None
