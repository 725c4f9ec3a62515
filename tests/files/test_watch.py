"""Tests for watch mode."""

import os
import threading

import pytest

from gachiscript.files import (
    DebouncedScheduler,
    GachiFileProcessor,
    PollingWatcher,
    ProcessingOptions,
    create_watcher,
)
from gachiscript.transpiler import create_transpiler


class TestDebouncedScheduler:
    """Tests for DebouncedScheduler."""

    @pytest.fixture
    def calls(self):
        return []

    @pytest.fixture
    def scheduler(self, calls):
        # Long delay so timers never fire during a test; flush() runs them.
        return DebouncedScheduler(calls.append, delay=60)

    def test_rescheduling_replaces_pending_run(self, scheduler, calls, tmp_path):
        """Rapid changes to one path collapse into a single run."""
        path = tmp_path / "a.js"
        scheduler.schedule(path)
        scheduler.schedule(path)
        scheduler.schedule(path)

        assert scheduler.pending() == [path]
        assert scheduler.flush() == 1
        assert calls == [path]
        assert scheduler.pending() == []

    def test_paths_are_independent(self, scheduler, calls, tmp_path):
        scheduler.schedule(tmp_path / "a.js")
        scheduler.schedule(tmp_path / "b.js")
        assert scheduler.flush() == 2
        assert sorted(calls) == [tmp_path / "a.js", tmp_path / "b.js"]

    def test_delete_cancels_pending_run(self, calls, tmp_path):
        """A deleted path is not processed and its output is removed."""
        removed = []
        scheduler = DebouncedScheduler(calls.append, on_delete=removed.append, delay=60)
        path = tmp_path / "a.js"
        scheduler.schedule(path)

        assert scheduler.deleted(path)
        assert scheduler.flush() == 0
        assert calls == []
        assert removed == [path]

    def test_missing_output_counts_as_removed(self, calls, tmp_path):
        def on_delete(path):
            raise FileNotFoundError(path)

        scheduler = DebouncedScheduler(calls.append, on_delete=on_delete, delay=60)
        assert scheduler.deleted(tmp_path / "a.js")

    def test_failed_removal(self, calls, tmp_path):
        def on_delete(path):
            raise PermissionError(path)

        scheduler = DebouncedScheduler(calls.append, on_delete=on_delete, delay=60)
        assert not scheduler.deleted(tmp_path / "a.js")

    def test_action_errors_are_contained(self, tmp_path):
        """A failing action does not propagate out of the scheduler."""
        def action(path):
            raise RuntimeError("boom")

        scheduler = DebouncedScheduler(action, delay=60)
        scheduler.schedule(tmp_path / "a.js")
        assert scheduler.flush() == 1

    def test_cancel_all(self, scheduler, calls, tmp_path):
        scheduler.schedule(tmp_path / "a.js")
        scheduler.cancel_all()
        assert scheduler.flush() == 0
        assert calls == []

    def test_delete_waits_for_run_in_flight(self, tmp_path):
        """Output written by a run already in progress is still removed."""
        output = tmp_path / "a.gachi"
        started = threading.Event()
        release = threading.Event()

        def action(path):
            started.set()
            release.wait(5)
            output.write_text("firmConst a = 1;", encoding="utf-8")

        scheduler = DebouncedScheduler(
            action, on_delete=lambda path: output.unlink(), delay=60
        )
        path = tmp_path / "a.js"
        scheduler.schedule(path)

        runner = threading.Thread(target=scheduler.flush)
        runner.start()
        assert started.wait(5)

        results = []
        deleter = threading.Thread(target=lambda: results.append(scheduler.deleted(path)))
        deleter.start()
        # The deletion blocks until the run finishes.
        deleter.join(0.2)
        release.set()
        runner.join(5)
        deleter.join(5)

        assert results == [True]
        assert not output.exists()

    def test_superseded_run_is_skipped(self, calls, tmp_path):
        """A run whose generation is stale by the time it starts does nothing."""
        path = tmp_path / "a.js"
        scheduler = DebouncedScheduler(calls.append, delay=60)
        scheduler.schedule(path)
        scheduler.deleted(path)

        # Timer callback arriving late with the first generation.
        scheduler._fire(path, 1)
        scheduler._run(path, 1)
        assert calls == []

    def test_later_run_writes_last(self, tmp_path):
        """Runs of one path never overlap, so the newest run's output wins."""
        output = tmp_path / "a.gachi"
        started = threading.Event()
        release = threading.Event()
        contents = iter(["old", "new"])

        def action(path):
            text = next(contents)
            if text == "old":
                started.set()
                release.wait(5)
            output.write_text(text, encoding="utf-8")

        scheduler = DebouncedScheduler(action, delay=60)
        path = tmp_path / "a.js"
        scheduler.schedule(path)
        first = threading.Thread(target=scheduler.flush)
        first.start()
        assert started.wait(5)

        scheduler.schedule(path)
        second = threading.Thread(target=scheduler.flush)
        second.start()
        release.set()
        first.join(5)
        second.join(5)

        assert output.read_text(encoding="utf-8") == "new"


class TestPollingWatcher:
    """Tests for PollingWatcher."""

    def test_detects_changes_and_deletions(self, tmp_path):
        """Created, modified and deleted files are dispatched."""
        existing = tmp_path / "a.js"
        existing.write_text("1", encoding="utf-8")
        files = {existing}
        scheduled, deleted = [], []

        scheduler = DebouncedScheduler(scheduled.append, on_delete=deleted.append, delay=60)
        watcher = PollingWatcher(lambda: sorted(files), scheduler)

        assert watcher.poll_once() == ([], [])

        created = tmp_path / "b.js"
        created.write_text("2", encoding="utf-8")
        files.add(created)
        stat = existing.stat()
        os.utime(existing, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))

        changed, removed = watcher.poll_once()
        assert changed == [existing, created]
        assert removed == []
        assert scheduler.pending() == [existing, created]

        files.discard(created)
        changed, removed = watcher.poll_once()
        assert changed == []
        assert removed == [created]
        assert deleted == [created]
        assert scheduler.pending() == [existing]


class TestCreateWatcher:
    """Tests for create_watcher."""

    def test_forward_watch(self, tmp_path):
        """A new host file is transformed once its run is flushed."""
        processor = GachiFileProcessor(create_transpiler(), ProcessingOptions())
        watcher = create_watcher(processor, tmp_path, delay=60)

        (tmp_path / "a.js").write_text("const a = 1;", encoding="utf-8")
        changed, _ = watcher.poll_once()
        watcher.scheduler.flush()

        assert changed == [tmp_path / "a.js"]
        assert (tmp_path / "a.gachi").read_text(encoding="utf-8") == "firmConst a = 1;"

    def test_deleting_input_removes_output(self, tmp_path):
        processor = GachiFileProcessor(create_transpiler(), ProcessingOptions())
        source = tmp_path / "a.js"
        source.write_text("const a = 1;", encoding="utf-8")
        processor.process_file_to_gachi(source)
        watcher = create_watcher(processor, tmp_path, delay=60)

        source.unlink()
        _, removed = watcher.poll_once()

        assert removed == [source]
        assert not (tmp_path / "a.gachi").exists()

    def test_reverse_watch_ignores_host_files(self, tmp_path):
        processor = GachiFileProcessor(create_transpiler(), ProcessingOptions())
        watcher = create_watcher(processor, tmp_path, to_gachi=False, delay=60)

        (tmp_path / "a.js").write_text("const a = 1;", encoding="utf-8")
        (tmp_path / "b.gachi").write_text("firmConst b = 1;", encoding="utf-8")
        changed, _ = watcher.poll_once()
        watcher.scheduler.flush()

        assert changed == [tmp_path / "b.gachi"]
        assert (tmp_path / "b.js").read_text(encoding="utf-8") == "const b = 1;"
