from gachiscript.transpiler.classifier import (
    Action,
    Decision,
    NodeContext,
    RUNTIME_GLOBALS,
    classify,
)
from gachiscript.transpiler.config import Dialect, Framework, TranspilerOptions
from gachiscript.transpiler.diagnostics import (
    Diagnostic,
    DiagnosticsCollector,
    Position,
    Severity,
    TranspileResult,
    collisions_to_diagnostics,
)
from gachiscript.transpiler.nodes import NodeKind, SourceNode, iter_source_nodes
from gachiscript.transpiler.parser import (
    ParsedSource,
    SourceParseError,
    parse_source,
    select_dialect,
)
from gachiscript.transpiler.printer import Edit, apply_edits
from gachiscript.transpiler.roundtrip import RoundTripReport, check_round_trip, token_stream
from gachiscript.transpiler.transpiler import (
    GachiTranspiler,
    ValidationReport,
    create_transpiler,
    detect_framework,
)
from gachiscript.transpiler.walker import ForwardWalker, NodeTransformError, ReverseRewriter

__all__ = [
    # Configuration
    "Framework",
    "Dialect",
    "TranspilerOptions",
    # Diagnostics
    "Severity",
    "Position",
    "Diagnostic",
    "DiagnosticsCollector",
    "TranspileResult",
    "collisions_to_diagnostics",
    # Parsing
    "ParsedSource",
    "SourceParseError",
    "parse_source",
    "select_dialect",
    "NodeKind",
    "SourceNode",
    "iter_source_nodes",
    # Rewriting
    "Action",
    "Decision",
    "NodeContext",
    "RUNTIME_GLOBALS",
    "classify",
    "Edit",
    "apply_edits",
    "ForwardWalker",
    "ReverseRewriter",
    "NodeTransformError",
    # Operations
    "GachiTranspiler",
    "ValidationReport",
    "create_transpiler",
    "detect_framework",
    "RoundTripReport",
    "check_round_trip",
    "token_stream",
]
