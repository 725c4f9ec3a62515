"""Forward and reverse rewriting.

Forward mode walks the parse tree, asks the classifier about every token
and records text edits for the splice printer. Reverse mode has no tree to
walk (GachiScript is not valid host syntax), so it works on the text: it
strips the comments forward mode generated and then replaces every
whole-word substituted form in a single regex pass.
"""

from __future__ import annotations

import logging
import random
import re

from gachiscript.dictionary.atoms import Category
from gachiscript.dictionary.definitions import BILLY_QUOTES, VAN_QUOTES
from gachiscript.dictionary.table import MappingTable
from gachiscript.transpiler.classifier import Action, Decision, NodeContext, classify
from gachiscript.transpiler.config import Framework, TranspilerOptions
from gachiscript.transpiler.diagnostics import DiagnosticsCollector, Position
from gachiscript.transpiler.nodes import IDENTIFIER_LIKE, NodeKind, SourceNode, iter_source_nodes
from gachiscript.transpiler.parser import ParsedSource
from gachiscript.transpiler.printer import Edit, apply_edits

logger = logging.getLogger(__name__)

ANNOTATION_TEMPLATE = " /* GACHI: {op} -> {form} */"
QUOTE_TEMPLATE = "/* ♂ {quote} ♂ */"

ANNOTATION_PATTERN = re.compile(r" ?/\* GACHI: .*? -> [\w$]+ \*/")
QUOTE_PATTERN = re.compile(r"/\* ♂ .*? ♂ \*/(?:\n[ \t]*| )")

# A substituted form must still lex as a single identifier (or decorator).
_IDENTIFIER_FORM = re.compile(r"^@?[A-Za-z_$][\w$]*$")

QUOTES: tuple[str, ...] = BILLY_QUOTES + VAN_QUOTES


class NodeTransformError(Exception):
    """Raised when a single node cannot be rewritten."""

    pass


class ForwardWalker:
    """Rewrite host source into GachiScript, one token at a time."""

    def __init__(
        self,
        table: MappingTable,
        options: TranspilerOptions,
        rng: random.Random | None = None,
    ):
        self.table = table
        self.options = options
        self.rng = rng if rng is not None else random.Random(options.seed)

    def rewrite(self, parsed: ParsedSource, diagnostics: DiagnosticsCollector) -> str:
        """Rewrite a parsed source.

        Per-node failures are reported as warnings on diagnostics and the
        node is left unchanged.
        """
        edits: list[Edit] = []

        for node in iter_source_nodes(parsed):
            if node.kind in (NodeKind.FUNCTION_DECLARATION, NodeKind.CLASS_DECLARATION):
                if self.options.add_random_quotes:
                    edits.append(self._quote_edit(node))
                continue

            if not node.is_leaf:
                continue

            if node.kind == NodeKind.COMMENT:
                if not self.options.preserve_comments:
                    edits.append(Edit.delete(node.start_byte, node.end_byte))
                continue

            try:
                edit = self._visit_token(node)
            except Exception as e:
                logger.debug(f"Failed to transform {node.grammar_type} '{node.text}': {e}")
                diagnostics.warning(
                    f"Failed to transform node at line {node.line}: {e}",
                    Position(node.line, node.column),
                )
                continue

            if edit is not None:
                edits.append(edit)
            elif node.kind in IDENTIFIER_LIKE and self.table.rewrites_in_reverse(node.text):
                diagnostics.info(
                    f"'{node.text}' is a GachiScript form left unchanged here; "
                    f"reverse transformation will rewrite it to '{self.table.reverse(node.text)}'",
                    Position(node.line, node.column),
                )

        return apply_edits(parsed.source_bytes, edits)

    def _visit_token(self, node: SourceNode) -> Edit | None:
        decision = classify(NodeContext(
            kind=node.kind,
            parent=node.parent,
            slot=node.slot,
            text=node.text,
            framework=self.options.framework,
            owner=node.owner,
        ))

        if decision.action == Action.SKIP:
            return None
        if decision.action == Action.ANNOTATE:
            return self._annotation_edit(node)

        if node.kind == NodeKind.STRING_LITERAL:
            return self._string_edit(node, decision)

        mapped = self._substitute(node, decision)
        if mapped == node.text:
            return None
        if not _IDENTIFIER_FORM.match(mapped):
            raise NodeTransformError(
                f"'{node.text}' maps to '{mapped}', which is not a valid identifier"
            )
        return Edit(node.start_byte, node.end_byte, mapped)

    def _substitute(self, node: SourceNode, decision: Decision) -> str:
        if node.parent == NodeKind.DECORATOR and self.options.framework == Framework.ANGULAR:
            decorated = self.table.forward(f"@{node.text}", Category.FRAMEWORK_IDENTIFIER)
            if decorated != f"@{node.text}" and decorated.startswith("@"):
                return decorated[1:]
        return self.table.forward(node.text, decision.category)

    def _string_edit(self, node: SourceNode, decision: Decision) -> Edit | None:
        if len(node.text) < 2:
            return None
        content = node.text[1:-1]
        mapped = self.table.forward(content, decision.category)
        if mapped == content:
            return None
        # Quote characters are single bytes.
        return Edit(node.start_byte + 1, node.end_byte - 1, mapped)

    def _annotation_edit(self, node: SourceNode) -> Edit | None:
        if not self.options.strict_mode:
            return None
        if not self.table.has_host(node.text, Category.OPERATOR):
            return None
        form = self.table.forward(node.text, Category.OPERATOR)
        return Edit.insert(node.end_byte, ANNOTATION_TEMPLATE.format(op=node.text, form=form))

    def _quote_edit(self, node: SourceNode) -> Edit:
        comment = QUOTE_TEMPLATE.format(quote=self.rng.choice(QUOTES))
        if node.starts_line:
            return Edit.insert(node.start_byte, f"{comment}\n{node.indent}")
        return Edit.insert(node.start_byte, f"{comment} ")


class ReverseRewriter:
    """Rewrite GachiScript text back into host source."""

    def __init__(self, table: MappingTable):
        self.table = table

    @staticmethod
    def strip_generated_comments(text: str) -> str:
        """Remove operator annotations and decorative quotes."""
        text = ANNOTATION_PATTERN.sub("", text)
        return QUOTE_PATTERN.sub("", text)

    def rewrite(self, text: str) -> str:
        """Replace every whole-word substituted form with its host form.

        One pass over the text; replacement output is never re-scanned.
        """
        text = self.strip_generated_comments(text)
        pattern = self.table.reverse_pattern()
        if pattern is None:
            return text
        return pattern.sub(lambda match: self.table.reverse(match.group(0)), text)
