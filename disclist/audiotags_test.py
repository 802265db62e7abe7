from pathlib import Path

import mutagen.flac
import pytest

from conftest import write_flac
from disclist.audiotags import AlbumTags, UnreadableTagsError, UnsupportedFiletypeError


def test_read_flac(isolated_dir: Path) -> None:
    p = write_flac(isolated_dir / "01.flac", artist="Artist A", albumartist="Various", album="Album X")
    tags = AlbumTags.from_file(p)
    assert tags == AlbumTags(artist="Artist A", albumartist="Various", album="Album X", path=p)
    assert tags.display_artist == "Artist A"


def test_display_artist_falls_back_to_albumartist(isolated_dir: Path) -> None:
    p = write_flac(isolated_dir / "01.flac", albumartist="Artist B", album="Album Y")
    tags = AlbumTags.from_file(p)
    assert tags.artist is None
    assert tags.display_artist == "Artist B"


def test_display_artist_blank(isolated_dir: Path) -> None:
    p = write_flac(isolated_dir / "01.flac", album="Album Z")
    assert AlbumTags.from_file(p).display_artist == ""


def test_multivalued_tags_are_joined(isolated_dir: Path) -> None:
    p = isolated_dir / "01.flac"
    write_flac(p, album="Split")
    f = mutagen.flac.FLAC(p)
    f["artist"] = ["Artist A", "Artist B"]
    f.save()
    assert AlbumTags.from_file(p).artist == r"Artist A \\ Artist B"


def test_format_detected_from_contents(isolated_dir: Path) -> None:
    p = write_flac(isolated_dir / "01.flac", artist="Artist A", album="Album X")
    renamed = p.rename(isolated_dir / "track.dat")
    assert AlbumTags.from_file(renamed).album == "Album X"


def test_untagged_audio_file(isolated_dir: Path) -> None:
    p = write_flac(isolated_dir / "01.flac")
    with pytest.raises(UnreadableTagsError):
        AlbumTags.from_file(p)


def test_empty_tag_block_reads_as_blank(isolated_dir: Path) -> None:
    p = write_flac(isolated_dir / "01.flac")
    f = mutagen.flac.FLAC(p)
    f.add_tags()
    f.save()
    tags = AlbumTags.from_file(p)
    assert tags == AlbumTags(artist=None, albumartist=None, album=None, path=p)
    assert tags.display_artist == ""


def test_non_audio_file(isolated_dir: Path) -> None:
    p = isolated_dir / "cover.jpg"
    p.write_bytes(b"\xff\xd8\xff\xe0 not really a jpeg")
    with pytest.raises(UnsupportedFiletypeError):
        AlbumTags.from_file(p)


def test_missing_file(isolated_dir: Path) -> None:
    with pytest.raises(UnreadableTagsError):
        AlbumTags.from_file(isolated_dir / "nope.flac")


def test_directory(isolated_dir: Path) -> None:
    (isolated_dir / "subdir").mkdir()
    with pytest.raises(UnreadableTagsError):
        AlbumTags.from_file(isolated_dir / "subdir")
