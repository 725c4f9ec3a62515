"""GachiScript: a bidirectional JavaScript/TypeScript token rewriter."""

from gachiscript.dictionary import Category, MappingTable, build_default_table
from gachiscript.transpiler import (
    Diagnostic,
    Framework,
    GachiTranspiler,
    Severity,
    TranspileResult,
    TranspilerOptions,
    create_transpiler,
    detect_framework,
)

__version__ = "0.1.0"

__all__ = [
    "Category",
    "MappingTable",
    "build_default_table",
    "Diagnostic",
    "Framework",
    "GachiTranspiler",
    "Severity",
    "TranspileResult",
    "TranspilerOptions",
    "create_transpiler",
    "detect_framework",
]
