"""Watch mode for sitesmith.

Watches the theme directory and the content posts/assets directories and
rebuilds the site whenever a relevant file changes. Three stages cooperate:

1. A watchdog observer thread turns filesystem notifications into
   ChangeEvents on a bounded queue.
2. A Debouncer collapses bursts of events into one trigger.
3. WatchLoop.run, on the caller's thread, takes triggers one at a time and
   runs the build synchronously, so builds never overlap.

Failed builds are logged and the loop keeps going. Problems with the watcher
itself (a root that cannot be watched or disappears) stop the loop with a
WatchError.

Key classes:
- WatchLoop: Owns the observer, the debouncer and the build loop.
- _ChangeHandler: Watchdog event handler feeding the debouncer.
"""

from __future__ import annotations

import logging
import os
import queue
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .build import build_site
from .config import SiteConfig
from .debounce import DEFAULT_INTERVAL, ChangeEvent, Debouncer, EventKind, offer_latest
from .errors import BuildError, WatchError

logger = logging.getLogger(__name__)

REBUILD_SUFFIXES = frozenset({".md", ".html", ".css", ".markdown"})

_KIND_BY_EVENT_TYPE = {
    EVENT_TYPE_CREATED: EventKind.CREATED,
    EVENT_TYPE_MODIFIED: EventKind.WRITTEN,
    EVENT_TYPE_DELETED: EventKind.REMOVED,
    EVENT_TYPE_MOVED: EventKind.RENAMED,
}


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, events: queue.Queue):
        super().__init__()
        self.events = events

    def on_any_event(self, event):
        if event.is_directory:
            return
        kind = _KIND_BY_EVENT_TYPE.get(event.event_type, EventKind.METADATA)
        # Renames report the new name, which is what the build will see.
        path = getattr(event, "dest_path", "") or event.src_path
        self.events.put(ChangeEvent(Path(os.fsdecode(path)), kind))


class WatchLoop:
    """Rebuilds the site when watched files change.

    Attributes:
        config: Site configuration.
        builder: Callable run with the config for every rebuild.
        interval: Debounce quiet period in seconds.
        health_interval: How often to check the watched roots while idle.
        builds: Number of rebuilds attempted so far.
        ready: Set once the observer is running.
    """

    def __init__(
        self,
        config: SiteConfig,
        builder: Callable[[SiteConfig], Any] = build_site,
        interval: float = DEFAULT_INTERVAL,
        observer_factory: Callable[[], Any] = Observer,
        health_interval: float = 1.0,
    ):
        self.config = config
        self.builder = builder
        self.interval = interval
        self.health_interval = health_interval
        self.builds = 0
        self.ready = threading.Event()
        self._observer_factory = observer_factory
        self._events: queue.Queue = queue.Queue(maxsize=1)
        self._triggers: queue.Queue = queue.Queue(maxsize=1)
        self._stopping = threading.Event()

    @property
    def roots(self) -> list[Path]:
        """The three directories watched for changes."""
        return [self.config.theme_dir, self.config.posts_dir, self.config.assets_dir]

    @staticmethod
    def should_rebuild(path: Path) -> bool:
        return path.suffix.lower() in REBUILD_SUFFIXES

    def handle_trigger(self, event: ChangeEvent) -> bool:
        """Rebuild the site if the changed file is one a build depends on.

        Build errors are logged, not raised.

        Args:
            event: The debounced change.

        Returns:
            True if a rebuild was attempted.
        """
        if not self.should_rebuild(event.path):
            logger.debug("Ignoring change in %s", event.path)
            return False
        logger.info("Detected change in %s; rebuilding...", event.path)
        self.builds += 1
        try:
            self.builder(self.config)
        except BuildError as exc:
            logger.error("Build failed: %s", exc)
        else:
            logger.info("Rebuild complete")
        return True

    def run(self) -> None:
        """Watch and rebuild until stop() is called.

        Raises:
            WatchError: If a root cannot be watched or stops existing.
        """
        observer = self._observer_factory()
        debouncer = Debouncer(self._events, self._triggers, self.interval)
        debouncer.start()
        try:
            self._schedule(observer)
            self.ready.set()
            logger.info("Watching %s", ", ".join(str(r) for r in self.roots))
            while not self._stopping.is_set():
                try:
                    trigger = self._triggers.get(timeout=self.health_interval)
                except queue.Empty:
                    self._check_health(observer)
                    continue
                if trigger is None:
                    break
                self.handle_trigger(trigger)
        finally:
            self.ready.clear()
            if observer.is_alive():
                observer.stop()
                observer.join()
            debouncer.close()

    def stop(self) -> None:
        """Ask a running loop to return. Safe to call from any thread."""
        self._stopping.set()
        offer_latest(self._triggers, None)

    def _schedule(self, observer) -> None:
        handler = _ChangeHandler(self._events)
        for root in self.roots:
            if not root.is_dir():
                raise WatchError("Watched directory does not exist", root)
            try:
                observer.schedule(handler, str(root), recursive=False)
            except OSError as exc:
                raise WatchError(f"Could not watch directory: {exc}", root, exc) from exc
        try:
            observer.start()
        except OSError as exc:
            raise WatchError(f"Could not start file watcher: {exc}", None, exc) from exc

    def _check_health(self, observer) -> None:
        for root in self.roots:
            if not root.is_dir():
                raise WatchError("Watched directory disappeared", root)
        if not observer.is_alive():
            raise WatchError("File watcher stopped unexpectedly")
