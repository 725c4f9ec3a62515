"""Watch mode: re-transform files when they change.

A PollingWatcher compares modification-time snapshots of the watched
files and hands changes to a DebouncedScheduler, which keeps at most one
pending run per path. Rapid successive changes collapse into a single run;
different paths run concurrently on their own timer threads, while runs and
deletions of the same path are serialized.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable

from gachiscript.files.extensions import GACHI_EXTENSION
from gachiscript.files.processor import GachiFileProcessor

logger = logging.getLogger(__name__)


class DebouncedScheduler:
    """Run an action for a path once changes to it settle.

    Re-scheduling a path replaces its pending run. A per-path generation
    counter drops runs that were superseded, checked again once the run
    holds the path lock, so a superseded run never writes output.
    """

    def __init__(
        self,
        action: Callable[[Path], Any],
        on_delete: Callable[[Path], Any] | None = None,
        delay: float = 0.3,
    ):
        self.action = action
        self.on_delete = on_delete
        self.delay = delay
        self._timers: dict[Path, threading.Timer] = {}
        self._generations: dict[Path, int] = {}
        self._lock = threading.Lock()
        self._path_locks: dict[Path, threading.Lock] = {}

    def schedule(self, path: str | Path) -> None:
        path = Path(path)
        with self._lock:
            generation = self._bump(path)
            timer = threading.Timer(self.delay, self._fire, args=(path, generation))
            timer.daemon = True
            self._timers[path] = timer
        timer.start()

    def deleted(self, path: str | Path) -> bool:
        """Cancel the pending run for path and remove its output.

        Returns:
            True if the output is gone, including when it never existed
        """
        path = Path(path)
        with self._lock:
            self._bump(path)
        if self.on_delete is None:
            return True
        # Waits for a run already in flight; later runs see the new generation.
        with self._path_lock(path):
            try:
                self.on_delete(path)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.error(f"Failed to remove output for {path}: {e}")
                return False
        return True

    def pending(self) -> list[Path]:
        with self._lock:
            return sorted(self._timers)

    def flush(self) -> int:
        """Run every pending action now, on the calling thread.

        Returns:
            Number of runs dispatched
        """
        with self._lock:
            due = [(path, self._bump(path)) for path in list(self._timers)]
        for path, generation in due:
            self._run(path, generation)
        return len(due)

    def cancel_all(self) -> None:
        with self._lock:
            for path in list(self._timers):
                self._bump(path)

    def _bump(self, path: Path) -> int:
        # Caller holds the lock.
        timer = self._timers.pop(path, None)
        if timer is not None:
            timer.cancel()
        generation = self._generations.get(path, 0) + 1
        self._generations[path] = generation
        return generation

    def _path_lock(self, path: Path) -> threading.Lock:
        with self._lock:
            return self._path_locks.setdefault(path, threading.Lock())

    def _is_current(self, path: Path, generation: int) -> bool:
        with self._lock:
            return self._generations.get(path) == generation

    def _fire(self, path: Path, generation: int) -> None:
        with self._lock:
            if self._generations.get(path) != generation:
                return
            self._timers.pop(path, None)
        self._run(path, generation)

    def _run(self, path: Path, generation: int) -> None:
        with self._path_lock(path):
            if not self._is_current(path, generation):
                logger.debug(f"Skipping superseded run for {path}")
                return
            try:
                self.action(path)
            except Exception as e:
                logger.error(f"Processing {path} failed: {e}")


class PollingWatcher:
    """Detect created, modified and deleted files by polling mtimes."""

    def __init__(
        self,
        list_files: Callable[[], list[Path]],
        scheduler: DebouncedScheduler,
        interval: float = 0.5,
    ):
        self.list_files = list_files
        self.scheduler = scheduler
        self.interval = interval
        # Files present at start are not processed until they change.
        self._snapshot = self.snapshot()

    def snapshot(self) -> dict[Path, int]:
        result: dict[Path, int] = {}
        for path in self.list_files():
            try:
                result[path] = path.stat().st_mtime_ns
            except FileNotFoundError:
                continue
        return result

    def poll_once(self) -> tuple[list[Path], list[Path]]:
        """Compare against the previous snapshot and dispatch changes.

        Returns:
            (changed or created paths, deleted paths)
        """
        current = self.snapshot()
        changed = sorted(
            path for path, mtime in current.items() if self._snapshot.get(path) != mtime
        )
        deleted = sorted(path for path in self._snapshot if path not in current)
        self._snapshot = current

        for path in changed:
            logger.info(f"Changed: {path}")
            self.scheduler.schedule(path)
        for path in deleted:
            logger.info(f"Deleted: {path}")
            self.scheduler.deleted(path)
        return changed, deleted

    def run(self, stop: threading.Event) -> None:
        """Poll until stop is set."""
        while not stop.wait(self.interval):
            self.poll_once()
        self.scheduler.cancel_all()


def create_watcher(
    processor: GachiFileProcessor,
    target: str | Path,
    to_gachi: bool = True,
    interval: float = 0.5,
    delay: float = 0.3,
) -> PollingWatcher:
    """Wire a processor into a watcher for one direction."""
    if to_gachi:
        patterns = processor.options.patterns
        action = processor.process_file_to_gachi
    else:
        patterns = (f"*{GACHI_EXTENSION}",)
        action = processor.process_file_to_js

    scheduler = DebouncedScheduler(action, on_delete=processor.remove_output, delay=delay)
    return PollingWatcher(
        lambda: processor.find_files(target, patterns),
        scheduler,
        interval=interval,
    )
