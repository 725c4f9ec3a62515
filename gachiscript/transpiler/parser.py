"""Host-language parsing via tree-sitter.

The JavaScript/TypeScript grammars come from tree-sitter-language-pack.
A fresh Parser is created per call: tree-sitter parsers are not safe to
share between threads, and the batch processor transforms files
concurrently.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from tree_sitter import Node, Tree
from tree_sitter_language_pack import get_parser

from gachiscript.transpiler.config import Dialect, Framework, TranspilerOptions

logger = logging.getLogger(__name__)

# Closing tags or self-closing elements; a bare '<' is too ambiguous with
# comparisons and generics.
MARKUP_PATTERN = re.compile(r"</[A-Za-z][\w.:-]*\s*>|<[A-Za-z][\w.:-]*(?:\s[^<>]*)?/>|<>")


class SourceParseError(Exception):
    """Raised when host-language source does not parse cleanly."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} at line {line}, column {column}"
        super().__init__(message)


@dataclass
class ParsedSource:
    """A parse tree together with the bytes it was built from."""

    text: str
    source_bytes: bytes
    tree: Tree
    dialect: Dialect

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def node_text(self, node: Node) -> str:
        return self.source_bytes[node.start_byte:node.end_byte].decode("utf-8")


def contains_markup(text: str) -> bool:
    return MARKUP_PATTERN.search(text) is not None


def select_dialect(text: str, options: TranspilerOptions | None = None) -> Dialect:
    """Pick the grammar for a piece of source.

    An explicit dialect option wins. Otherwise React sources and anything
    containing markup use TSX; everything else uses TypeScript, which also
    accepts plain JavaScript.
    """
    if options is not None and options.dialect is not None:
        return options.dialect
    if options is not None and options.framework == Framework.REACT:
        return Dialect.TSX
    if contains_markup(text):
        return Dialect.TSX
    return Dialect.TYPESCRIPT


def first_error_node(node: Node) -> Node | None:
    """Find the first ERROR or MISSING node in source order."""
    if node.is_error or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = first_error_node(child)
        if found is not None:
            return found
    return node


def parse_source(text: str, dialect: Dialect = Dialect.TYPESCRIPT) -> ParsedSource:
    """Parse source text with the grammar for dialect.

    Raises:
        SourceParseError: If the tree contains syntax errors
    """
    dialect = Dialect(dialect)
    parser = get_parser(dialect.value)
    source_bytes = text.encode("utf-8")
    tree = parser.parse(source_bytes)

    if tree.root_node.has_error:
        bad = first_error_node(tree.root_node)
        line, column = bad.start_point if bad is not None else (0, 0)
        kind = "Missing token" if bad is not None and bad.is_missing else "Syntax error"
        logger.info(f"Parse failed ({dialect.value}) at {line + 1}:{column + 1}")
        raise SourceParseError(kind, line + 1, column + 1)

    return ParsedSource(text=text, source_bytes=source_bytes, tree=tree, dialect=dialect)
