"""Batch processing of source files in both directions.

Each file is transformed independently on a worker thread. A file whose
transformation reports an Error diagnostic is not written, and a failure
on one file never stops the rest of the batch.
"""

from __future__ import annotations

import fnmatch
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from gachiscript.files.extensions import GACHI_EXTENSION, guess_original_extension
from gachiscript.transpiler.diagnostics import Diagnostic, TranspileResult
from gachiscript.transpiler.transpiler import GachiTranspiler

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ("*.ts", "*.js", "*.tsx", "*.jsx")
DEFAULT_EXCLUDE = ("node_modules", "dist", ".git", "*.d.ts")


@dataclass
class ProcessingOptions:
    """Options for batch processing.

    Attributes:
        output_dir: Write outputs here instead of next to the inputs
        input_root: Directory layout under output_dir is kept relative to this
        patterns: Glob patterns selecting host files for to-gachi runs
        exclude: Patterns for files and directories to skip
        workers: Thread pool size
        recursive: Descend into subdirectories
    """

    output_dir: Path | None = None
    input_root: Path | None = None
    patterns: tuple[str, ...] = DEFAULT_PATTERNS
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE
    workers: int = 4
    recursive: bool = True


@dataclass
class FileOutcome:
    input_path: Path
    output_path: Path | None
    success: bool
    diagnostics: tuple[Diagnostic, ...] = ()
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "input": str(self.input_path),
            "output": str(self.output_path) if self.output_path else None,
            "success": self.success,
            "error": self.error,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


@dataclass
class BatchReport:
    outcomes: list[FileOutcome] = field(default_factory=list)
    total_files: int = 0
    success_count: int = 0
    error_count: int = 0
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error_count == 0

    def to_dict(self) -> dict:
        return {
            "total_files": self.total_files,
            "success_count": self.success_count,
            "error_count": self.error_count,
            "duration_ms": self.duration_ms,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


class GachiFileProcessor:
    """Transform files and directories between host source and GachiScript."""

    def __init__(self, transpiler: GachiTranspiler, options: ProcessingOptions | None = None):
        self.transpiler = transpiler
        self.options = options or ProcessingOptions()
        # input path -> last output written for it, used when the input is deleted
        self._outputs: dict[Path, Path] = {}
        self._outputs_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Batch entry points
    # ------------------------------------------------------------------

    def process_to_gachi(self, target: str | Path) -> BatchReport:
        """Transform a host file, or every host file under a directory."""
        files = self.find_files(target, self.options.patterns)
        return self._run_batch(files, self.process_file_to_gachi)

    def process_to_js(self, target: str | Path) -> BatchReport:
        """Transform a .gachi file, or every .gachi file under a directory."""
        files = self.find_files(target, (f"*{GACHI_EXTENSION}",))
        return self._run_batch(files, self.process_file_to_js)

    def _run_batch(
        self,
        files: list[Path],
        process: Callable[[Path], FileOutcome],
    ) -> BatchReport:
        started = time.perf_counter()
        outcomes: list[FileOutcome] = []

        if files:
            logger.info(f"Processing {len(files)} files with {self.options.workers} workers")
            with ThreadPoolExecutor(max_workers=max(1, self.options.workers)) as executor:
                futures = {executor.submit(process, path): path for path in files}

                for future in as_completed(futures):
                    path = futures[future]
                    try:
                        outcome = future.result()
                    except Exception as e:
                        logger.error(f"Processing {path} failed: {e}")
                        outcome = FileOutcome(path, None, success=False, error=str(e))
                    outcomes.append(outcome)

        outcomes.sort(key=lambda outcome: str(outcome.input_path))
        success_count = sum(1 for outcome in outcomes if outcome.success)
        return BatchReport(
            outcomes=outcomes,
            total_files=len(files),
            success_count=success_count,
            error_count=len(outcomes) - success_count,
            duration_ms=(time.perf_counter() - started) * 1000,
        )

    # ------------------------------------------------------------------
    # Single files
    # ------------------------------------------------------------------

    def process_file_to_gachi(self, path: str | Path) -> FileOutcome:
        path = Path(path)
        output_path = self.output_path(path, GACHI_EXTENSION)

        def transform(code: str) -> tuple[TranspileResult, Path]:
            return self.transpiler.transform_forward(code), output_path

        return self._process_file(path, transform)

    def process_file_to_js(self, path: str | Path) -> FileOutcome:
        path = Path(path)

        def transform(code: str) -> tuple[TranspileResult, Path]:
            result = self.transpiler.transform_reverse(code)
            return result, self.output_path(path, guess_original_extension(result.code))

        return self._process_file(path, transform)

    def _process_file(
        self,
        path: Path,
        transform: Callable[[str], tuple[TranspileResult, Path]],
    ) -> FileOutcome:
        try:
            code = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.info(f"Cannot read {path}: {e}")
            return FileOutcome(path, None, success=False, error=str(e))

        result, output_path = transform(code)
        if result.has_errors():
            message = "; ".join(d.message for d in result.errors)
            logger.info(f"Not writing {output_path}: {message}")
            return FileOutcome(
                path, output_path, success=False, diagnostics=result.diagnostics, error=message
            )

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(result.code, encoding="utf-8")
        except OSError as e:
            logger.info(f"Cannot write {output_path}: {e}")
            return FileOutcome(
                path, output_path, success=False, diagnostics=result.diagnostics, error=str(e)
            )

        with self._outputs_lock:
            self._outputs[path.resolve()] = output_path
        logger.debug(f"Wrote {output_path}")
        return FileOutcome(path, output_path, success=True, diagnostics=result.diagnostics)

    def remove_output(self, path: str | Path) -> Path | None:
        """Delete the output previously written for an input path.

        A missing output file is not an error. For host files that were not
        processed in this session the .gachi location is derived from the
        path; the extension of a .gachi file's output cannot be derived.

        Returns:
            The output path that was targeted, or None if none is known
        """
        path = Path(path)
        with self._outputs_lock:
            output_path = self._outputs.pop(path.resolve(), None)
        if output_path is None:
            if path.suffix == GACHI_EXTENSION:
                return None
            output_path = self.output_path(path, GACHI_EXTENSION)
        output_path.unlink(missing_ok=True)
        logger.info(f"Deleted {output_path}")
        return output_path

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def output_path(self, path: Path, extension: str) -> Path:
        """Output location for an input path with a new extension."""
        name = path.stem + extension
        if self.options.output_dir is None:
            return path.with_name(name)

        output_dir = Path(self.options.output_dir)
        if self.options.input_root is not None:
            root = Path(self.options.input_root).resolve()
            try:
                return output_dir / path.resolve().parent.relative_to(root) / name
            except ValueError:
                pass
        return output_dir / name

    def is_excluded(self, path: Path) -> bool:
        parts = path.parts
        for pattern in self.options.exclude:
            if fnmatch.fnmatch(path.name, pattern) or pattern in parts:
                return True
            if fnmatch.fnmatch(str(path), pattern) or fnmatch.fnmatch(str(path), f"*/{pattern}"):
                return True
        return False

    def find_files(self, target: str | Path, patterns: tuple[str, ...]) -> list[Path]:
        """Files under target matching any pattern, minus excluded ones.

        A file target is returned as-is when it is not excluded.
        """
        target = Path(target)
        if target.is_file():
            return [] if self.is_excluded(target) else [target]
        if not target.is_dir():
            logger.info(f"No such file or directory: {target}")
            return []

        found: set[Path] = set()
        for pattern in patterns:
            matches = target.rglob(pattern) if self.options.recursive else target.glob(pattern)
            for match in matches:
                if match.is_file() and not self.is_excluded(match.relative_to(target)):
                    found.add(match)
        return sorted(found)
