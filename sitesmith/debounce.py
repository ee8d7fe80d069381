"""Change event debouncing for sitesmith.

Editors tend to produce a burst of filesystem events for a single save
(create a temp file, write, rename, chmod). The Debouncer collapses such a
burst into one trigger carrying the last interesting event, emitted once the
stream has been quiet for ``interval`` seconds.

The debouncer sits between two bounded queues: raw events come in on
``source`` and triggers go out on ``sink``. The quiet-window timer is the
timeout on ``source.get`` and restarts on every event.

Key objects:
- EventKind / ChangeEvent: A single filesystem notification.
- Debouncer: Trailing-edge debounce stage run on its own thread.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 0.5


class EventKind(Enum):
    CREATED = "created"
    WRITTEN = "written"
    REMOVED = "removed"
    RENAMED = "renamed"
    METADATA = "metadata"

    @property
    def interesting(self) -> bool:
        """Whether this kind of event can change what a build produces."""
        return self is not EventKind.METADATA


@dataclass(frozen=True)
class ChangeEvent:
    path: Path
    kind: EventKind


_STOP = object()


def offer_latest(target: queue.Queue, item) -> None:
    """Put item on a bounded queue, replacing the oldest entry when full.

    Used for hand-offs where only the newest value matters, so the producer
    never blocks on a busy consumer.
    """
    while True:
        try:
            target.put_nowait(item)
            return
        except queue.Full:
            try:
                target.get_nowait()
            except queue.Empty:
                pass


class Debouncer:
    """Collapses bursts of change events into single triggers.

    Attributes:
        source: Queue of incoming ChangeEvents.
        sink: Queue receiving debounced ChangeEvents.
        interval: Quiet period in seconds.
    """

    def __init__(
        self,
        source: queue.Queue,
        sink: queue.Queue,
        interval: float = DEFAULT_INTERVAL,
    ):
        self.source = source
        self.sink = sink
        self.interval = interval
        self._thread: threading.Thread | None = None

    def run(self) -> None:
        """Consume events until close() is called.

        A pending event that has not been emitted when the debouncer is
        closed is dropped.
        """
        pending: ChangeEvent | None = None
        while True:
            try:
                event = self.source.get(timeout=self.interval)
            except queue.Empty:
                if pending is not None:
                    logger.debug("Debounced change: %s", pending.path)
                    offer_latest(self.sink, pending)
                    pending = None
                continue
            if event is _STOP:
                return
            if event.kind.interesting:
                pending = event

    def start(self) -> threading.Thread:
        """Run the debouncer on a daemon thread."""
        self._thread = threading.Thread(
            target=self.run, name="sitesmith-debouncer", daemon=True
        )
        self._thread.start()
        return self._thread

    def close(self, timeout: float | None = None) -> None:
        """Stop the debouncer and wait for its thread to finish."""
        offer_latest(self.source, _STOP)
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
