"""GachiTranspiler: the public forward/reverse/validate operations.

Usage:
    transpiler = create_transpiler(TranspilerOptions(framework="react"))

    result = transpiler.transform_forward(source)
    if result.has_errors():
        for diagnostic in result.errors:
            print(diagnostic)
    back = transpiler.transform_reverse(result.code)
"""

from __future__ import annotations

import logging
import random
import re
import threading
from dataclasses import dataclass, field

from gachiscript.dictionary.table import MappingTable, build_default_table
from gachiscript.transpiler.config import Framework, TranspilerOptions
from gachiscript.transpiler.diagnostics import (
    Diagnostic,
    DiagnosticsCollector,
    Position,
    Severity,
    TranspileResult,
    collisions_to_diagnostics,
)
from gachiscript.transpiler.parser import SourceParseError, parse_source, select_dialect
from gachiscript.transpiler.walker import ForwardWalker, ReverseRewriter

logger = logging.getLogger(__name__)

# Framework markers, checked in priority order.
FRAMEWORK_MARKERS: tuple[tuple[Framework, tuple[str, ...]], ...] = (
    (Framework.REACT, ("import React", "from 'react'", 'from "react"', "jsx")),
    (Framework.ANGULAR, ("@Component", "@Injectable", "angular")),
    (Framework.VUE, ("Vue", "vue", "<template>")),
)

# Comments and string literals are ignored by validate().
_NON_CODE = re.compile(
    r"//[^\n]*"
    r"|/\*[\s\S]*?\*/"
    r"|'(?:\\.|[^'\\\n])*'"
    r'|"(?:\\.|[^"\\\n])*"'
    r"|`(?:\\.|[^`\\])*`"
)
_WORD = re.compile(r"@?[^\W\d][\w$]*")
_HOST_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def detect_framework(source: str) -> Framework:
    """Guess the framework a source file targets from textual markers."""
    for framework, markers in FRAMEWORK_MARKERS:
        if any(marker in source for marker in markers):
            return framework
    return Framework.NONE


@dataclass
class ValidationReport:
    """Outcome of validate().

    Attributes:
        valid: True when no unknown words were found
        errors: One message per unknown word
        suggestions: One "Did you mean" line per unknown word with matches
    """

    valid: bool
    errors: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    def to_diagnostics(self, severity: Severity = Severity.ERROR) -> list[Diagnostic]:
        return [Diagnostic(message, severity) for message in self.errors]

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "suggestions": list(self.suggestions),
        }


class GachiTranspiler:
    """Bidirectional JS/TS <-> GachiScript rewriter.

    Holds default options and one mapping table per framework. Tables are
    built lazily and then only read, so one transpiler can serve
    concurrent calls. Passing a custom table pins it for every framework.
    """

    def __init__(
        self,
        options: TranspilerOptions | None = None,
        table: MappingTable | None = None,
        rng: random.Random | None = None,
    ):
        self.options = options or TranspilerOptions()
        self._custom_table = table
        self._rng = rng
        self._tables: dict[Framework, MappingTable] = {}
        self._lock = threading.Lock()

    def table_for(self, framework: Framework | str | None = None) -> MappingTable:
        """Mapping table for a framework (defaults to the configured one)."""
        if self._custom_table is not None:
            return self._custom_table
        framework = Framework(framework) if framework is not None else self.options.framework
        with self._lock:
            table = self._tables.get(framework)
            if table is None:
                table = build_default_table(framework.value)
                self._tables[framework] = table
        return table

    @property
    def table(self) -> MappingTable:
        return self.table_for()

    def _resolve(self, options: TranspilerOptions | None) -> TranspilerOptions:
        return options if options is not None else self.options

    def transform_forward(
        self, source: str, options: TranspilerOptions | None = None
    ) -> TranspileResult:
        """Rewrite JS/TS source into GachiScript.

        Args:
            source: Host-language source text
            options: Per-call options; the transpiler defaults if None

        Returns:
            TranspileResult; on a parse failure code is "" with one Error
        """
        options = self._resolve(options)
        table = self.table_for(options.framework)
        dialect = select_dialect(source, options)

        try:
            parsed = parse_source(source, dialect)
        except SourceParseError as e:
            position = Position(e.line, e.column) if e.line is not None else None
            return TranspileResult.failure(f"Transpilation failed: {e}", position)

        diagnostics = DiagnosticsCollector()
        walker = ForwardWalker(table, options, rng=self._rng)
        code = walker.rewrite(parsed, diagnostics)

        logger.debug(
            f"Forward transform ({dialect.value}, {options.framework.value}): "
            f"{len(diagnostics)} diagnostics"
        )
        return TranspileResult(code=code, diagnostics=diagnostics.freeze())

    def transform_reverse(
        self, source: str, options: TranspilerOptions | None = None
    ) -> TranspileResult:
        """Rewrite GachiScript back into JS/TS source.

        The rewritten text is parsed to check it is valid host syntax.
        """
        options = self._resolve(options)
        table = self.table_for(options.framework)

        code = ReverseRewriter(table).rewrite(source)

        try:
            parse_source(code, select_dialect(code, options))
        except SourceParseError as e:
            position = Position(e.line, e.column) if e.line is not None else None
            return TranspileResult.failure(f"Reverse transpilation failed: {e}", position)

        return TranspileResult(code=code)

    def validate(self, source: str, framework: Framework | str | None = None) -> ValidationReport:
        """Check GachiScript text for words that are neither mapped forms nor identifiers."""
        table = self.table_for(framework)
        code = _NON_CODE.sub(" ", source)

        errors: list[str] = []
        suggestions: list[str] = []
        seen: set[str] = set()

        for match in _WORD.finditer(code):
            word = match.group(0)
            if word in seen:
                continue
            seen.add(word)
            if table.has_substituted(word) or _HOST_IDENTIFIER.match(word):
                continue

            errors.append(f'Unknown GachiScript keyword: "{word}"')
            similar = table.suggestions(word)
            if similar:
                suggestions.append(f"Did you mean: {', '.join(similar)}?")

        return ValidationReport(valid=not errors, errors=errors, suggestions=suggestions)

    def detect_framework(self, source: str) -> Framework:
        return detect_framework(source)

    def integrity_diagnostics(self, framework: Framework | str | None = None) -> list[Diagnostic]:
        """Collisions in a framework's table, as Warning diagnostics."""
        return collisions_to_diagnostics(self.table_for(framework).check_integrity())


def create_transpiler(
    options: TranspilerOptions | None = None,
    table: MappingTable | None = None,
) -> GachiTranspiler:
    """Composition-root factory for GachiTranspiler."""
    return GachiTranspiler(options=options, table=table)
