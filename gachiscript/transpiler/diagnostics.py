"""Diagnostics produced by transformations.

Every public operation reports problems as Diagnostic records instead of
raising. A DiagnosticsCollector is created per call and frozen into the
TranspileResult, so concurrent calls never share diagnostic state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from gachiscript.dictionary.reverse_index import Collision


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Position:
    """1-based line and column in the source text."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Diagnostic:
    message: str
    severity: Severity
    position: Position | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.position is not None:
            result["line"] = self.position.line
            result["column"] = self.position.column
        return result

    def __str__(self) -> str:
        where = f" at {self.position}" if self.position is not None else ""
        return f"[{self.severity.value}]{where} {self.message}"


class DiagnosticsCollector:
    """Append-only list of diagnostics for a single call."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        self._items.append(diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        self._items.extend(diagnostics)

    def error(self, message: str, position: Position | None = None) -> None:
        self.add(Diagnostic(message, Severity.ERROR, position))

    def warning(self, message: str, position: Position | None = None) -> None:
        self.add(Diagnostic(message, Severity.WARNING, position))

    def info(self, message: str, position: Position | None = None) -> None:
        self.add(Diagnostic(message, Severity.INFO, position))

    def by_severity(self, severity: Severity) -> list[Diagnostic]:
        return [d for d in self._items if d.severity == severity]

    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self._items)

    def freeze(self) -> tuple[Diagnostic, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)


@dataclass(frozen=True)
class TranspileResult:
    """Output text plus the diagnostics of one transformation.

    On a fatal failure code is the empty string and diagnostics hold at
    least one Error.
    """

    code: str
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @classmethod
    def failure(cls, message: str, position: Position | None = None) -> TranspileResult:
        return cls(code="", diagnostics=(Diagnostic(message, Severity.ERROR, position),))

    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def infos(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.INFO]

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


def collisions_to_diagnostics(collisions: Iterable[Collision]) -> list[Diagnostic]:
    """Report mapping-table collisions as Warning diagnostics."""
    return [Diagnostic(c.describe(), Severity.WARNING) for c in collisions]
