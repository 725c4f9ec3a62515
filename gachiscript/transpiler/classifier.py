"""Decide, per token, whether forward mode rewrites it.

classify() is a pure function of the token's local context. It does not
look anything up in the mapping table; it only says whether a lookup is
allowed and which category it may resolve in. Keeping it pure makes the
rules testable without a parser.

Rules, first match wins:
- runtime globals (console, window, process, ...) are never renamed
- comments, template text and other punctuation are skipped
- string literals are skipped unless they are the value of a framework
  metadata key (Angular `selector`)
- decorator names are rewritten
- markup tag names are rewritten for React only
- import/export specifiers: the imported name is kept, the alias rewritten
- property names are kept, except the callee of a method call (builtin
  methods only) and the name of a method declaration
- identifiers, type references and keywords are rewritten
- operators in an operator slot are annotated (strict mode only)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gachiscript.dictionary.atoms import Category
from gachiscript.transpiler.config import Framework
from gachiscript.transpiler.nodes import NodeKind

RUNTIME_GLOBALS = frozenset({
    "console",
    "window",
    "document",
    "global",
    "globalThis",
    "process",
    "Buffer",
    "fs",
    "path",
    "__dirname",
    "__filename",
})

# Object-literal keys whose string value is framework vocabulary.
METADATA_STRING_FIELDS: dict[Framework, frozenset[str]] = {
    Framework.ANGULAR: frozenset({"selector"}),
}


class Action(str, Enum):
    SUBSTITUTE = "substitute"
    SKIP = "skip"
    ANNOTATE = "annotate"


@dataclass(frozen=True)
class NodeContext:
    """Everything classify() may look at."""

    kind: NodeKind
    parent: NodeKind
    slot: str | None
    text: str
    framework: Framework = Framework.NONE
    owner: str | None = None


@dataclass(frozen=True)
class Decision:
    action: Action
    category: Category | None = None
    reason: str = ""

    @property
    def substitutes(self) -> bool:
        return self.action == Action.SUBSTITUTE


def _skip(reason: str) -> Decision:
    return Decision(Action.SKIP, reason=reason)


def _substitute(reason: str, category: Category | None = None) -> Decision:
    return Decision(Action.SUBSTITUTE, category=category, reason=reason)


def classify(ctx: NodeContext) -> Decision:
    """Classify one token.

    Args:
        ctx: Kind, parent kind, slot, text, framework and owner key

    Returns:
        Decision with the action and the category the lookup is limited to
        (None = all categories in priority order)
    """
    kind = ctx.kind

    if kind in (NodeKind.IDENTIFIER, NodeKind.PROPERTY_NAME, NodeKind.TYPE_REFERENCE):
        if ctx.text in RUNTIME_GLOBALS:
            return _skip("runtime global")

    if kind in (NodeKind.COMMENT, NodeKind.TEMPLATE_LITERAL):
        return _skip(f"{kind.value} text")

    if kind == NodeKind.STRING_LITERAL:
        allowed = METADATA_STRING_FIELDS.get(ctx.framework, frozenset())
        if (
            ctx.parent == NodeKind.PROPERTY_ASSIGNMENT
            and ctx.slot == "value"
            and ctx.owner in allowed
        ):
            return _substitute(f"{ctx.framework.value} metadata value")
        return _skip("string literal")

    if kind == NodeKind.IDENTIFIER and ctx.parent == NodeKind.DECORATOR:
        return _substitute("decorator name")

    if ctx.parent == NodeKind.MARKUP_ELEMENT and kind == NodeKind.IDENTIFIER:
        if ctx.framework == Framework.REACT:
            return _substitute("markup tag name")
        return _skip("markup tag name outside react")

    if kind == NodeKind.IDENTIFIER and ctx.parent in (
        NodeKind.IMPORT_SPECIFIER,
        NodeKind.EXPORT_SPECIFIER,
    ):
        if ctx.slot == "alias":
            return _substitute("specifier alias")
        return _skip("imported or exported name")

    if kind == NodeKind.PROPERTY_NAME:
        if ctx.parent == NodeKind.METHOD_CALL and ctx.slot == "property":
            return _substitute("called method", Category.BUILTIN_METHOD)
        if ctx.parent == NodeKind.METHOD_DECLARATION and ctx.slot == "name":
            return _substitute("method declaration name")
        return _skip("property name")

    if kind in (NodeKind.IDENTIFIER, NodeKind.TYPE_REFERENCE):
        return _substitute(kind.value)

    if kind == NodeKind.KEYWORD:
        return _substitute("keyword")

    if kind == NodeKind.OPERATOR and ctx.slot == "operator":
        return Decision(Action.ANNOTATE, category=Category.OPERATOR, reason="operator")

    return _skip("not rewritable")
