"""Command-line interface.

Usage:
    gachi to-gachi src/ --out-dir build/ --framework react
    gachi to-js build/ --out-dir restored/
    gachi validate app.gachi
    gachi detect src/App.tsx
    gachi watch src/ --direction to-gachi
    gachi dictionary stats --framework angular

Defaults for transformation options come from GACHI_* environment
variables (a .env file is loaded first); command-line flags override them.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
from pathlib import Path

from dotenv import load_dotenv

from gachiscript.dictionary import DictionaryError, MappingTable, build_default_table
from gachiscript.files import (
    BatchReport,
    GachiFileProcessor,
    ProcessingOptions,
    create_watcher,
)
from gachiscript.files.processor import DEFAULT_EXCLUDE
from gachiscript.transpiler import (
    Framework,
    GachiTranspiler,
    Severity,
    TranspilerOptions,
    collisions_to_diagnostics,
    create_transpiler,
    detect_framework,
)


def _add_transform_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--framework",
        type=str,
        default=None,
        help="Framework vocabulary: react, angular, vue or none (default: $GACHI_FRAMEWORK)",
    )
    parser.add_argument(
        "--dialect",
        type=str,
        choices=["javascript", "typescript", "tsx"],
        default=None,
        help="Force a grammar instead of choosing one per file",
    )
    parser.add_argument(
        "--dictionary",
        type=str,
        default=None,
        help="JSON dictionary exported with 'gachi dictionary export'",
    )


def _add_processing_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", type=str, help="File or directory to process")
    parser.add_argument(
        "--out-dir", "-o",
        type=str,
        default=None,
        help="Output directory (default: next to each input)",
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=4,
        help="Number of worker threads (default: 4)",
    )
    parser.add_argument(
        "--exclude",
        type=str,
        nargs="*",
        default=None,
        help=f"Patterns to skip (default: {' '.join(DEFAULT_EXCLUDE)})",
    )
    parser.add_argument(
        "--no-recursive",
        action="store_true",
        help="Do not descend into subdirectories",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gachi",
        description="Rewrite JavaScript/TypeScript into GachiScript and back",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    to_gachi = subparsers.add_parser("to-gachi", help="Transform JS/TS files into GachiScript")
    _add_processing_options(to_gachi)
    _add_transform_options(to_gachi)
    to_gachi.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Annotate mapped operators with inline comments",
    )
    to_gachi.add_argument(
        "--no-comments",
        action="store_true",
        help="Drop comments from the output",
    )
    to_gachi.add_argument(
        "--quotes",
        action="store_true",
        default=None,
        help="Decorate functions and classes with quotes",
    )
    to_gachi.add_argument("--seed", type=int, default=None, help="Seed for decorative quotes")

    to_js = subparsers.add_parser("to-js", help="Transform .gachi files back into JS/TS")
    _add_processing_options(to_js)
    _add_transform_options(to_js)

    validate = subparsers.add_parser("validate", help="Check a GachiScript file for unknown words")
    validate.add_argument("path", type=str, help="GachiScript file")
    _add_transform_options(validate)

    detect = subparsers.add_parser("detect", help="Detect the framework a file targets")
    detect.add_argument("path", type=str, help="Source file")

    watch = subparsers.add_parser("watch", help="Re-transform files when they change")
    _add_processing_options(watch)
    _add_transform_options(watch)
    watch.add_argument(
        "--direction",
        type=str,
        choices=["to-gachi", "to-js"],
        default="to-gachi",
        help="Transformation direction (default: to-gachi)",
    )
    watch.add_argument(
        "--interval",
        type=float,
        default=0.5,
        help="Polling interval in seconds (default: 0.5)",
    )

    dictionary = subparsers.add_parser("dictionary", help="Inspect the mapping table")
    dictionary.add_argument("action", choices=["stats", "export", "check"])
    _add_transform_options(dictionary)
    dictionary.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the export to a file instead of stdout",
    )

    return parser


def build_options(args: argparse.Namespace) -> TranspilerOptions:
    """Environment defaults overridden by command-line flags."""
    options = TranspilerOptions.from_env()
    overrides = {
        "framework": getattr(args, "framework", None),
        "dialect": getattr(args, "dialect", None),
        "strict_mode": getattr(args, "strict", None),
        "add_random_quotes": getattr(args, "quotes", None),
        "seed": getattr(args, "seed", None),
    }
    if getattr(args, "no_comments", False):
        overrides["preserve_comments"] = False
    return options.merged(**overrides)


def build_transpiler(args: argparse.Namespace) -> GachiTranspiler:
    """Create the transpiler for a command.

    Raises:
        DictionaryError: If --dictionary points at an invalid file
    """
    options = build_options(args)
    table = None
    if getattr(args, "dictionary", None):
        table = MappingTable.from_json_file(args.dictionary)
    return create_transpiler(options, table)


def build_processor(args: argparse.Namespace, transpiler: GachiTranspiler) -> GachiFileProcessor:
    target = Path(args.path)
    options = ProcessingOptions(
        output_dir=Path(args.out_dir) if args.out_dir else None,
        input_root=target if target.is_dir() else target.parent,
        workers=args.workers,
        recursive=not args.no_recursive,
    )
    if args.exclude is not None:
        options.exclude = tuple(args.exclude)
    return GachiFileProcessor(transpiler, options)


def print_report(report: BatchReport) -> None:
    for outcome in report.outcomes:
        if outcome.success:
            print(f"  OK    {outcome.input_path} -> {outcome.output_path}")
        else:
            print(f"  FAIL  {outcome.input_path}: {outcome.error}")
        for diagnostic in outcome.diagnostics:
            if not outcome.success or diagnostic.severity != Severity.INFO:
                print(f"        {diagnostic}")
    print(
        f"\n{report.success_count}/{report.total_files} files transformed "
        f"({report.error_count} failed) in {report.duration_ms:.0f}ms"
    )


def cmd_transform(args: argparse.Namespace, to_gachi: bool) -> int:
    transpiler = build_transpiler(args)
    processor = build_processor(args, transpiler)
    if to_gachi:
        report = processor.process_to_gachi(args.path)
    else:
        report = processor.process_to_js(args.path)

    if report.total_files == 0:
        print(f"No matching files found at {args.path}")
        return 1
    print_report(report)
    return 0 if report.ok else 1


def cmd_validate(args: argparse.Namespace) -> int:
    transpiler = build_transpiler(args)
    source = Path(args.path).read_text(encoding="utf-8")
    report = transpiler.validate(source)

    if report.valid:
        print(f"{args.path}: valid GachiScript")
        return 0
    for error in report.errors:
        print(f"  {error}")
    for suggestion in report.suggestions:
        print(f"  {suggestion}")
    return 1


def cmd_detect(args: argparse.Namespace) -> int:
    source = Path(args.path).read_text(encoding="utf-8")
    print(detect_framework(source).value)
    return 0


def cmd_watch(args: argparse.Namespace) -> int:
    transpiler = build_transpiler(args)
    processor = build_processor(args, transpiler)
    to_gachi = args.direction == "to-gachi"
    watcher = create_watcher(processor, args.path, to_gachi=to_gachi, interval=args.interval)

    print(f"Watching {args.path} ({args.direction}); press Ctrl+C to stop")
    stop = threading.Event()
    try:
        watcher.run(stop)
    except KeyboardInterrupt:
        stop.set()
        watcher.scheduler.cancel_all()
        print("\nStopped watching")
    return 0


def cmd_dictionary(args: argparse.Namespace) -> int:
    if args.dictionary:
        table = MappingTable.from_json_file(args.dictionary)
    else:
        table = build_default_table(Framework(args.framework or "none").value)

    if args.action == "stats":
        print(json.dumps(table.stats(), indent=2))
        return 0

    if args.action == "export":
        exported = table.to_json()
        if args.output:
            Path(args.output).write_text(exported + "\n", encoding="utf-8")
            print(f"Exported {len(table)} mappings to {args.output}")
        else:
            print(exported)
        return 0

    diagnostics = collisions_to_diagnostics(table.check_integrity())
    if not diagnostics:
        print(f"No collisions in {len(table)} mappings")
        return 0
    for diagnostic in diagnostics:
        print(f"  {diagnostic}")
    return 1


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "to-gachi":
            return cmd_transform(args, to_gachi=True)
        if args.command == "to-js":
            return cmd_transform(args, to_gachi=False)
        if args.command == "validate":
            return cmd_validate(args)
        if args.command == "detect":
            return cmd_detect(args)
        if args.command == "watch":
            return cmd_watch(args)
        return cmd_dictionary(args)
    except (DictionaryError, OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
