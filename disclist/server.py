"""
The server module serves the cached catalog over HTTP. It has no logic of its own: every request,
whatever its path, gets the current snapshot as a plain text body.
"""

import logging
import socket
from email.utils import formatdate
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

from disclist.catalog import CatalogCache
from disclist.common import VERSION

logger = logging.getLogger(__name__)


class ListingHandler(BaseHTTPRequestHandler):
    server_version = f"disclist/{VERSION}"

    @property
    def cache(self) -> CatalogCache:
        assert isinstance(self.server, ListingServer)
        return self.server.cache

    def do_GET(self) -> None:  # noqa: N802
        self._send_listing(with_body=True)

    def do_HEAD(self) -> None:  # noqa: N802
        self._send_listing(with_body=False)

    def _send_listing(self, *, with_body: bool) -> None:
        snapshot, refreshed_at = self.cache.current_snapshot_with_timestamp()
        data = snapshot.encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(data)))
        if refreshed_at is not None:
            self.send_header("Last-Modified", formatdate(refreshed_at, usegmt=True))
        self.end_headers()
        if with_body:
            self.wfile.write(data)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug(f"{self.address_string()} - {format % args}")


class ListingServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, bind: tuple[str, int], cache: CatalogCache) -> None:
        if ":" in bind[0]:
            self.address_family = socket.AF_INET6
        super().__init__(bind, ListingHandler)
        self.cache = cache


def serve_catalog(cache: CatalogCache, host: str, port: int) -> None:
    """
    Build the first snapshot, then serve the catalog until interrupted while the refresh thread keeps
    it fresh. The first scan finishes before we bind, so no request ever sees an empty catalog.
    """
    if cache.refreshed_at is None:
        cache.initialize()
    with ListingServer((host, port), cache) as server, cache.running():
        logger.info(f"Serving catalog of {cache.music_source_dir} on {host or '*'}:{server.server_port}")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("Interrupted: shutting down")
