"""Round-trip check: forward then reverse must give back the same tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from gachiscript.transpiler.config import Dialect, TranspilerOptions
from gachiscript.transpiler.diagnostics import TranspileResult
from gachiscript.transpiler.parser import parse_source, select_dialect

if TYPE_CHECKING:
    from gachiscript.transpiler.transpiler import GachiTranspiler

_COMMENT_TYPES = ("comment", "html_comment")


def token_stream(code: str, dialect: Dialect) -> Iterator[tuple[str, str]]:
    """Leaf tokens of code as (grammar type, text), comments excluded.

    Raises:
        SourceParseError: If code does not parse
    """
    parsed = parse_source(code, dialect)
    stack = [parsed.root]
    while stack:
        node = stack.pop()
        if node.type in _COMMENT_TYPES:
            continue
        if node.child_count == 0 or node.type == "string":
            yield node.type, parsed.node_text(node)
            continue
        stack.extend(reversed(node.children))


@dataclass(frozen=True)
class RoundTripReport:
    """Result of check_round_trip().

    Attributes:
        equivalent: Token streams of source and reverse(forward(source)) match
        forward: Forward transformation result
        reverse: Reverse transformation result (None if forward failed)
        mismatch: Description of the first differing token, if any
    """

    equivalent: bool
    forward: TranspileResult
    reverse: TranspileResult | None = None
    mismatch: str | None = None


def check_round_trip(
    transpiler: GachiTranspiler,
    source: str,
    options: TranspilerOptions | None = None,
) -> RoundTripReport:
    """Transform source forward and back and compare token streams."""
    options = options if options is not None else transpiler.options
    forward = transpiler.transform_forward(source, options)
    if forward.has_errors():
        return RoundTripReport(False, forward, mismatch="forward transformation failed")

    reverse = transpiler.transform_reverse(forward.code, options)
    if reverse.has_errors():
        return RoundTripReport(False, forward, reverse, mismatch="reverse transformation failed")

    original = list(token_stream(source, select_dialect(source, options)))
    restored = list(token_stream(reverse.code, select_dialect(reverse.code, options)))

    for index, (expected, actual) in enumerate(zip(original, restored)):
        if expected != actual:
            return RoundTripReport(
                False,
                forward,
                reverse,
                mismatch=f"token {index}: expected {expected[1]!r}, got {actual[1]!r}",
            )
    if len(original) != len(restored):
        return RoundTripReport(
            False,
            forward,
            reverse,
            mismatch=f"token count differs: {len(original)} vs {len(restored)}",
        )

    return RoundTripReport(True, forward, reverse)
