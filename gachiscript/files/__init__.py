from gachiscript.files.extensions import (
    GACHI_EXTENSION,
    HOST_EXTENSIONS,
    guess_original_extension,
    has_type_syntax,
)
from gachiscript.files.processor import (
    BatchReport,
    FileOutcome,
    GachiFileProcessor,
    ProcessingOptions,
)
from gachiscript.files.watch import DebouncedScheduler, PollingWatcher, create_watcher

__all__ = [
    # Extensions
    "GACHI_EXTENSION",
    "HOST_EXTENSIONS",
    "guess_original_extension",
    "has_type_syntax",
    # Batch processing
    "ProcessingOptions",
    "FileOutcome",
    "BatchReport",
    "GachiFileProcessor",
    # Watch mode
    "DebouncedScheduler",
    "PollingWatcher",
    "create_watcher",
]
