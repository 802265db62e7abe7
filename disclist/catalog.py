"""
The catalog module holds the rendered catalog text that the server hands out, and keeps it fresh.

Scanning a large library takes a while, so we never scan on a request. Instead we scan once at
startup, and then a background thread rescans on a fixed interval. Request threads and the refresh
thread share a single snapshot string:

    Refresh Thread -> wait interval -> scan + render (no lock held) -> swap snapshot (lock held)
    Request Thread -> copy out snapshot (lock held) -> write response

The lock is only ever held for the swap and the copy, so a request is never blocked behind a scan,
and a reader always sees a complete snapshot, either the old one or the new one.

A failed scheduled refresh keeps the previous snapshot and tries again after the next interval.
The failure at startup is not caught here: without a first snapshot there is nothing to serve.
"""

import contextlib
import logging
import threading
import time
from collections.abc import Iterator
from pathlib import Path

from disclist.library import build_catalog_text

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL = 6 * 60 * 60


class CatalogCache:
    def __init__(self, music_source_dir: Path, refresh_interval: float = DEFAULT_REFRESH_INTERVAL):
        self.music_source_dir = music_source_dir
        self.refresh_interval = refresh_interval
        self._lock = threading.Lock()
        self._snapshot = ""
        self._refreshed_at: float | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def initialize(self) -> None:
        """Build the first snapshot. Must be called before serving any requests."""
        logger.info(f"Building initial catalog of {self.music_source_dir}")
        self.refresh()

    def refresh(self) -> None:
        text = build_catalog_text(self.music_source_dir)
        with self._lock:
            self._snapshot = text
            self._refreshed_at = time.time()

    def current_snapshot(self) -> str:
        with self._lock:
            return self._snapshot

    def current_snapshot_with_timestamp(self) -> tuple[str, float | None]:
        """Return the snapshot together with the time it was built, read under one lock."""
        with self._lock:
            return self._snapshot, self._refreshed_at

    @property
    def refreshed_at(self) -> float | None:
        with self._lock:
            return self._refreshed_at

    def start(self) -> None:
        """Start the background refresh thread."""
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._refresh_loop, name="catalog-refresh", daemon=True)
        logger.info(f"Refreshing catalog every {self.refresh_interval} seconds")
        self._thread.start()

    def stop(self) -> None:
        """Signal the refresh thread to stop and wait for it to finish.

        A refresh that is already scanning runs to completion first.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    @contextlib.contextmanager
    def running(self) -> Iterator["CatalogCache"]:
        self.start()
        try:
            yield self
        finally:
            self.stop()

    def _refresh_loop(self) -> None:
        while not self._stop_event.wait(self.refresh_interval):
            logger.info(f"Refreshing catalog of {self.music_source_dir}")
            try:
                self.refresh()
            except Exception:
                logger.exception("Failed to refresh catalog: keeping the previous snapshot")
