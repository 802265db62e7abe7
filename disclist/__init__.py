from disclist.audiotags import (
    AlbumTags,
    UnreadableTagsError,
    UnsupportedFiletypeError,
)
from disclist.catalog import DEFAULT_REFRESH_INTERVAL, CatalogCache
from disclist.common import (
    VERSION,
    DisclistError,
    DisclistExpectedError,
    initialize_logging,
)
from disclist.config import Config
from disclist.library import (
    Artist,
    LibraryReadError,
    build_catalog_text,
    probe_album,
    render_catalog,
    scan_artist_discs,
    scan_library,
)
from disclist.names import display_name, sort_key
from disclist.server import ListingServer, serve_catalog

__all__ = [
    # Plumbing
    "initialize_logging",
    "VERSION",
    # Errors
    "DisclistError",
    "DisclistExpectedError",
    "LibraryReadError",
    "UnreadableTagsError",
    "UnsupportedFiletypeError",
    # Configuration
    "Config",
    # Tagging
    "AlbumTags",
    # Names
    "display_name",
    "sort_key",
    # Library
    "Artist",
    "build_catalog_text",
    "probe_album",
    "render_catalog",
    "scan_artist_discs",
    "scan_library",
    # Catalog
    "DEFAULT_REFRESH_INTERVAL",
    "CatalogCache",
    # Server
    "ListingServer",
    "serve_catalog",
]

initialize_logging(__name__)
