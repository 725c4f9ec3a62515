"""Adapt tree-sitter nodes into the closed node-kind set the rewriter uses.

The rewriter never looks at grammar node types directly. Each node is
tagged with a NodeKind, the kind of its parent, the field ("slot") it
occupies in that parent, and for object-literal values the key it belongs
to ("owner").
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from tree_sitter import Node

from gachiscript.transpiler.parser import ParsedSource


class NodeKind(str, Enum):
    IDENTIFIER = "identifier"
    PROPERTY_NAME = "property_name"
    KEYWORD = "keyword"
    OPERATOR = "operator"
    STRING_LITERAL = "string_literal"
    TEMPLATE_LITERAL = "template_literal"
    COMMENT = "comment"
    DECORATOR = "decorator"
    PROPERTY_ASSIGNMENT = "property_assignment"
    METHOD_DECLARATION = "method_declaration"
    FUNCTION_DECLARATION = "function_declaration"
    CLASS_DECLARATION = "class_declaration"
    VARIABLE_DECLARATION = "variable_declaration"
    TYPE_REFERENCE = "type_reference"
    MARKUP_ELEMENT = "markup_element"
    MEMBER_ACCESS = "member_access"
    METHOD_CALL = "method_call"
    CALL_EXPRESSION = "call_expression"
    IMPORT_SPECIFIER = "import_specifier"
    EXPORT_SPECIFIER = "export_specifier"
    OTHER = "other"


# Kinds whose text is a name a user could also have written by hand.
IDENTIFIER_LIKE = frozenset({
    NodeKind.IDENTIFIER,
    NodeKind.PROPERTY_NAME,
    NodeKind.TYPE_REFERENCE,
})

_DIRECT_KINDS: dict[str, NodeKind] = {
    "identifier": NodeKind.IDENTIFIER,
    "statement_identifier": NodeKind.IDENTIFIER,
    "property_identifier": NodeKind.PROPERTY_NAME,
    "private_property_identifier": NodeKind.PROPERTY_NAME,
    "shorthand_property_identifier": NodeKind.PROPERTY_NAME,
    "shorthand_property_identifier_pattern": NodeKind.PROPERTY_NAME,
    "type_identifier": NodeKind.TYPE_REFERENCE,
    "string": NodeKind.STRING_LITERAL,
    "template_string": NodeKind.TEMPLATE_LITERAL,
    "comment": NodeKind.COMMENT,
    "html_comment": NodeKind.COMMENT,
    "decorator": NodeKind.DECORATOR,
    "pair": NodeKind.PROPERTY_ASSIGNMENT,
    "method_definition": NodeKind.METHOD_DECLARATION,
    "method_signature": NodeKind.METHOD_DECLARATION,
    "abstract_method_signature": NodeKind.METHOD_DECLARATION,
    "function_declaration": NodeKind.FUNCTION_DECLARATION,
    "generator_function_declaration": NodeKind.FUNCTION_DECLARATION,
    "class_declaration": NodeKind.CLASS_DECLARATION,
    "abstract_class_declaration": NodeKind.CLASS_DECLARATION,
    "lexical_declaration": NodeKind.VARIABLE_DECLARATION,
    "variable_declaration": NodeKind.VARIABLE_DECLARATION,
    "variable_declarator": NodeKind.VARIABLE_DECLARATION,
    "jsx_opening_element": NodeKind.MARKUP_ELEMENT,
    "jsx_closing_element": NodeKind.MARKUP_ELEMENT,
    "jsx_self_closing_element": NodeKind.MARKUP_ELEMENT,
    "import_specifier": NodeKind.IMPORT_SPECIFIER,
    "export_specifier": NodeKind.EXPORT_SPECIFIER,
}

# Named leaves that are keywords in the grammar.
_KEYWORD_LEAVES = frozenset({
    "this", "super", "true", "false", "null", "undefined", "import", "predefined_type",
})

_WORD_TOKEN = re.compile(r"^[A-Za-z_$][\w$]*$")

# Only declarations carry line-start facts; the walker decorates them.
_DECLARATION_KINDS = frozenset({NodeKind.FUNCTION_DECLARATION, NodeKind.CLASS_DECLARATION})


@dataclass(frozen=True)
class SourceNode:
    """One node of the parse tree, positioned and tagged.

    Attributes:
        kind: Node kind from the closed set
        grammar_type: tree-sitter node type, kept for diagnostics
        text: Source text covered by the node (leaves only)
        start_byte: Byte offset of the first byte
        end_byte: Byte offset one past the last byte
        line: 1-based line of the first character
        column: 1-based column (byte based) of the first character
        parent: Kind of the enclosing node
        slot: Field name the node occupies in its parent, if any
        owner: Key of the object-literal property whose value this is
        is_leaf: Whether the rewriter inspects the node as a token
        starts_line: Only whitespace precedes the node on its line
        indent: Leading whitespace of the node's line
    """

    kind: NodeKind
    grammar_type: str
    text: str
    start_byte: int
    end_byte: int
    line: int
    column: int
    parent: NodeKind
    slot: str | None
    owner: str | None
    is_leaf: bool
    starts_line: bool = False
    indent: str = ""


def node_kind(node: Node, slot: str | None = None, parent: Node | None = None) -> NodeKind:
    """Map a tree-sitter node to its NodeKind given where it sits."""
    node_type = node.type

    if node_type == "member_expression":
        if parent is not None and parent.type == "call_expression" and slot == "function":
            return NodeKind.METHOD_CALL
        return NodeKind.MEMBER_ACCESS
    if node_type == "call_expression":
        if parent is not None and parent.type == "decorator":
            return NodeKind.DECORATOR
        return NodeKind.CALL_EXPRESSION

    # Anonymous tokens can share a type name with a named node ("string").
    kind = _DIRECT_KINDS.get(node_type) if node.is_named else None
    if kind is not None:
        return kind

    if node.child_count == 0:
        if node.is_named:
            return NodeKind.KEYWORD if node_type in _KEYWORD_LEAVES else NodeKind.OTHER
        return NodeKind.KEYWORD if _WORD_TOKEN.match(node_type) else NodeKind.OPERATOR

    return NodeKind.OTHER


def _children(node: Node) -> list[tuple[Node, str | None]]:
    """Children of node paired with the field name each one occupies."""
    result = []
    cursor = node.walk()
    if cursor.goto_first_child():
        while True:
            result.append((cursor.node, cursor.field_name))
            if not cursor.goto_next_sibling():
                break
    return result


def _owner_key(parsed: ParsedSource, pair: Node) -> str | None:
    key = pair.child_by_field_name("key")
    if key is None:
        return None
    text = parsed.node_text(key)
    if key.type == "string" and len(text) >= 2:
        text = text[1:-1]
    return text


def _line_prefix(source_bytes: bytes, node: Node) -> bytes:
    # tree-sitter columns are byte offsets from the start of the line
    column = node.start_point[1]
    return source_bytes[node.start_byte - column:node.start_byte]


def iter_source_nodes(parsed: ParsedSource) -> Iterator[SourceNode]:
    """Depth-first, source-order traversal of the whole tree.

    String literals are yielded as leaves and not descended into; template
    literals are descended so their substitutions are visited.
    """
    # (node, slot, parent node, parent kind, owner)
    stack: list[tuple[Node, str | None, Node | None, NodeKind, str | None]] = [
        (parsed.root, None, None, NodeKind.OTHER, None)
    ]

    while stack:
        node, slot, parent, parent_kind, owner = stack.pop()
        kind = node_kind(node, slot, parent)
        is_leaf = node.child_count == 0 or kind == NodeKind.STRING_LITERAL

        starts_line = False
        indent = ""
        if kind in _DECLARATION_KINDS:
            prefix = _line_prefix(parsed.source_bytes, node)
            starts_line = prefix.strip() == b""
            indent = prefix.decode("utf-8", errors="replace") if starts_line else ""

        line, column = node.start_point
        yield SourceNode(
            kind=kind,
            grammar_type=node.type,
            text=parsed.node_text(node) if is_leaf else "",
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            line=line + 1,
            column=column + 1,
            parent=parent_kind,
            slot=slot,
            owner=owner,
            is_leaf=is_leaf,
            starts_line=starts_line,
            indent=indent,
        )

        if is_leaf:
            continue

        child_owner = _owner_key(parsed, node) if kind == NodeKind.PROPERTY_ASSIGNMENT else None
        children = _children(node)
        for child, child_slot in reversed(children):
            stack.append((child, child_slot, node, kind, child_owner))
