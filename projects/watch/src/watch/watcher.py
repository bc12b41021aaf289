"""Polling directory watcher that hands over files once writes settle."""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, NamedTuple

from convert import SUPPORTED_EXTENSIONS

if TYPE_CHECKING:
    from collections.abc import Callable, Collection
    from pathlib import Path

logger = logging.getLogger(__name__)


class FileState(NamedTuple):
    """Size and modification time, the signature of a file's content."""

    size: int
    mtime_ns: int


class DirectoryWatcher:
    """Watch a directory and process new or changed files.

    A file is handed to the handler once its size and modification time have
    been unchanged for ``stability`` seconds. A file that changes after being
    processed is processed again. Dotfiles and files with other extensions are
    ignored.
    """

    def __init__(
        self,
        input_dir: Path,
        handler: Callable[[Path], object],
        *,
        stability: float = 2.0,
        poll_interval: float = 0.5,
        extensions: Collection[str] = SUPPORTED_EXTENSIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the watcher.

        Args:
            input_dir: Directory to watch
            handler: Called with each settled file
            stability: Seconds a file must stay unchanged before processing
            poll_interval: Seconds between directory scans
            extensions: Lower-case extensions to process
            clock: Monotonic time source

        """
        self.input_dir = input_dir
        self.handler = handler
        self.stability = stability
        self.poll_interval = poll_interval
        self.extensions = frozenset(extensions)
        self._clock = clock
        self._stop = threading.Event()
        # Files waiting to settle: last seen state and when it was first seen
        self._pending: dict[Path, tuple[FileState, float]] = {}
        # State of each file when it was last handed over
        self._processed: dict[Path, FileState] = {}

    def accepts(self, path: Path) -> bool:
        """Whether a path is a file the watcher should process."""
        return not path.name.startswith(".") and path.suffix.lower() in self.extensions

    def scan(self) -> dict[Path, FileState]:
        """Current state of every candidate file in the directory."""
        states: dict[Path, FileState] = {}
        for path in sorted(self.input_dir.iterdir()):
            if not self.accepts(path):
                continue
            try:
                stat = path.stat()
            except FileNotFoundError:
                # Removed between listing and stat
                continue
            if path.is_file():
                states[path] = FileState(stat.st_size, stat.st_mtime_ns)
        return states

    def settled(self) -> list[Path]:
        """Scan once and return the files that are ready to process."""
        now = self._clock()
        states = self.scan()

        for path in [p for p in self._processed if p not in states]:
            logger.info("File removed: %s", path)
            del self._processed[path]
        for path in [p for p in self._pending if p not in states]:
            del self._pending[path]

        ready: list[Path] = []
        for path, state in states.items():
            if self._processed.get(path) == state:
                continue

            seen = self._pending.get(path)
            if seen is None or seen[0] != state:
                if seen is None:
                    event = "changed" if path in self._processed else "detected"
                    logger.info("File %s: %s", event, path)
                self._pending[path] = (state, now)
            elif now - seen[1] >= self.stability:
                ready.append(path)

        return ready

    def process(self, path: Path) -> None:
        """Hand a file to the handler, logging any failure."""
        state, _ = self._pending.pop(path)
        self._processed[path] = state
        logger.info("Processing file: %s", path)
        try:
            self.handler(path)
        except Exception:  # noqa: BLE001
            logger.exception("Error processing file %s", path)
        else:
            logger.info("Successfully processed file: %s", path)

    def poll(self) -> list[Path]:
        """Run one scan and process every settled file.

        Returns:
            The files handed to the handler

        """
        handled: list[Path] = []
        for path in self.settled():
            if self._stop.is_set():
                break
            self.process(path)
            handled.append(path)
        return handled

    def run(self) -> None:
        """Poll until :meth:`stop` is called."""
        logger.info("Starting file watcher on %s", self.input_dir)
        while not self._stop.is_set():
            self.poll()
            self._stop.wait(self.poll_interval)
        logger.info("File watcher stopped")

    def stop(self) -> None:
        """Stop accepting files; the file in progress finishes first."""
        self._stop.set()
