import pytest

from disclist.names import display_name, sort_key


def test_display_name_is_identity() -> None:
    assert display_name("01. Some Disc [FLAC]") == "01. Some Disc [FLAC]"
    assert display_name("") == ""


@pytest.mark.parametrize(
    ("name", "key"),
    [
        ("The Beatles", "beatles"),
        ("THE WHO", "who"),
        ("ABBA", "abba"),
        ("  Zz Top  ", "zz top"),
        ("Theatre of Tragedy", "theatre of tragedy"),
        ("The", "the"),
        ("The ", ""),
        ("", ""),
        # Only a leading article is dropped.
        ("Into the Void", "into the void"),
        # Whitespace is trimmed after the article check, so leading whitespace shields the article.
        (" The Cure", "the cure"),
    ],
)
def test_sort_key(name: str, key: str) -> None:
    assert sort_key(name) == key


@pytest.mark.parametrize("name", ["ABBA", "The Beatles", "  Zz Top ", "Sigur Rós", ""])
def test_sort_key_stable_on_keys(name: str) -> None:
    key = sort_key(name)
    assert sort_key(key) == key


@pytest.mark.parametrize("name", ["Beatles", "Rolling Stones", "xx", "Velvet Underground "])
def test_sort_key_strips_article(name: str) -> None:
    assert sort_key("The " + name) == sort_key(name)
    assert sort_key("the " + name) == sort_key(name)


def test_sort_key_ordering() -> None:
    names = ["The Beatles", "ABBA", "Zz Top"]
    assert sorted(names, key=sort_key) == ["ABBA", "The Beatles", "Zz Top"]
