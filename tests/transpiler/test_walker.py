"""Tests for the splice printer and the forward/reverse rewriters."""

import random

import pytest

from gachiscript.dictionary import Category, MappingTable, build_default_table
from gachiscript.transpiler import (
    DiagnosticsCollector,
    Edit,
    ForwardWalker,
    ReverseRewriter,
    TranspilerOptions,
    apply_edits,
    parse_source,
)
from gachiscript.transpiler.walker import QUOTES


class TestApplyEdits:
    """Tests for the splice printer."""

    def test_replacements(self):
        """Edits replace byte ranges, everything else is copied."""
        source = b"const a = 1;"
        assert apply_edits(source, [Edit(0, 5, "firmConst")]) == "firmConst a = 1;"

    def test_unordered_edits(self):
        """Edits may be given in any order."""
        source = b"a b c"
        edits = [Edit(4, 5, "z"), Edit(0, 1, "x")]
        assert apply_edits(source, edits) == "x b z"

    def test_insertion_before_replacement(self):
        """An insertion at a replacement's start lands before it."""
        source = b"function f() {}"
        edits = [Edit(0, 8, "initWorkout"), Edit.insert(0, "/* hi */ ")]
        assert apply_edits(source, edits) == "/* hi */ initWorkout f() {}"

    def test_delete(self):
        """Deletions remove text."""
        assert apply_edits(b"a /* x */b", [Edit.delete(2, 9)]) == "a b"

    def test_overlap_rejected(self):
        """Overlapping edits raise ValueError."""
        with pytest.raises(ValueError, match="Overlapping"):
            apply_edits(b"abcdef", [Edit(0, 3, "x"), Edit(2, 4, "y")])

    def test_multibyte_source(self):
        """Offsets are bytes, so non-ASCII text before an edit is kept."""
        source = "'héllo'; const a = 1;".encode("utf-8")
        start = source.index(b"const")
        assert apply_edits(source, [Edit(start, start + 5, "firmConst")]) == "'héllo'; firmConst a = 1;"


class TestForwardWalker:
    """Tests for ForwardWalker."""

    @pytest.fixture
    def table(self):
        return build_default_table()

    def rewrite(self, table, code, **options):
        collector = DiagnosticsCollector()
        walker = ForwardWalker(table, TranspilerOptions(**options), rng=random.Random(7))
        return walker.rewrite(parse_source(code), collector), collector

    def test_rewrites_keywords(self, table):
        """Keywords are replaced in place, whitespace kept."""
        code, diagnostics = self.rewrite(table, "const  a =\n  1;")
        assert code == "firmConst  a =\n  1;"
        assert len(diagnostics) == 0

    def test_strict_mode_annotates_operators(self, table):
        """Strict mode adds an annotation after mapped operators."""
        code, _ = self.rewrite(table, "total += item;", strict_mode=True)
        assert code == "total += /* GACHI: += -> addTo */ item;"

    def test_operators_untouched_without_strict_mode(self, table):
        """Operators are never replaced in place."""
        code, _ = self.rewrite(table, "total += item;")
        assert code == "total += item;"

    def test_drops_comments(self, table):
        """preserve_comments=False removes comments."""
        code, _ = self.rewrite(table, "// note\nconst a = 1; /* x */", preserve_comments=False)
        assert code == "\nfirmConst a = 1; "

    def test_keeps_comments(self, table):
        """Comment text is never rewritten."""
        code, _ = self.rewrite(table, "// const stays\nconst a = 1;")
        assert code == "// const stays\nfirmConst a = 1;"

    def test_random_quotes(self, table):
        """Declarations get a decorative quote on the line above."""
        code, _ = self.rewrite(table, "  function f() {}", add_random_quotes=True)
        prefix, rest = code.split(" ♂ */\n", 1)
        assert prefix.startswith("  /* ♂ ")
        assert prefix[len("  /* ♂ "):] in QUOTES
        assert rest == "  initWorkout f() {}"

    def test_random_quotes_inline(self, table):
        """Declarations that do not start their line get an inline quote."""
        code, _ = self.rewrite(table, "export class A {}", add_random_quotes=True)
        assert code.startswith("exportLoad /* ♂ ")
        assert code.endswith(" ♂ */ hotClass A {}")

    def test_seeded_quotes_are_reproducible(self, table):
        """The same seed picks the same quotes."""
        options = TranspilerOptions(add_random_quotes=True, seed=3)
        source = "function a() {}\nfunction b() {}\nclass C {}"
        first = ForwardWalker(table, options).rewrite(parse_source(source), DiagnosticsCollector())
        second = ForwardWalker(table, options).rewrite(parse_source(source), DiagnosticsCollector())
        assert first == second

    def test_invalid_form_becomes_warning(self, table):
        """A node that cannot be rewritten is reported and left alone."""
        table.add("greet", "not valid")
        code, diagnostics = self.rewrite(table, "function greet() {\n  return 1;\n}")

        assert code == "initWorkout greet() {\n  sweatReturn 1;\n}"
        warnings = diagnostics.freeze()
        assert len(warnings) == 1
        assert warnings[0].message.startswith("Failed to transform node at line 1:")
        assert warnings[0].position.line == 1
        assert warnings[0].position.column == 10

    def test_info_for_unchanged_substituted_form(self, table):
        """Unchanged names that reverse mode would rewrite are flagged."""
        code, diagnostics = self.rewrite(table, "const x = obj.thisBoy;")
        assert code == "firmConst x = obj.thisBoy;"
        infos = diagnostics.freeze()
        assert len(infos) == 1
        assert "'thisBoy'" in infos[0].message
        assert "'this'" in infos[0].message

    def test_operator_form_names_are_not_flagged(self, table):
        """Names that match only operator forms survive reverse mode as is."""
        code, diagnostics = self.rewrite(table, "const next = list[count];")
        assert code == "firmConst next = list[count];"
        assert len(diagnostics) == 0


class TestReverseRewriter:
    """Tests for ReverseRewriter."""

    @pytest.fixture
    def rewriter(self):
        return ReverseRewriter(build_default_table())

    def test_rewrites_forms(self, rewriter):
        """Substituted forms become host text again."""
        assert rewriter.rewrite("firmConst a = 1;") == "const a = 1;"

    def test_word_boundaries(self, rewriter):
        """Only whole words are replaced."""
        text = "firmConstly firmConst $firmConst firmConst_x firmConst$ x.firmConst"
        assert rewriter.rewrite(text) == "firmConstly const $firmConst firmConst_x firmConst$ x.const"

    def test_word_containing_form(self, rewriter):
        """Identifiers that merely start with a form are untouched."""
        assert rewriter.rewrite("firmConst dominateIfValue = 1;") == "const dominateIfValue = 1;"

    def test_single_pass(self):
        """Replacement output is never re-scanned."""
        table = MappingTable({Category.PHRASE: {"alpha": "beta", "beta": "gamma"}})
        assert ReverseRewriter(table).rewrite("beta gamma") == "alpha beta"

    def test_longest_form_first(self):
        """A longer form wins over a shorter form it starts with."""
        table = MappingTable({Category.PHRASE: {"x": "@Do", "y": "@DoMore"}})
        assert ReverseRewriter(table).rewrite("@DoMore @Do") == "y x"

    def test_strips_annotations(self, rewriter):
        """Operator annotations are removed."""
        assert rewriter.rewrite("total += /* GACHI: += -> addTo */ item;") == "total += item;"

    def test_strips_quotes(self, rewriter):
        """Decorative quotes are removed."""
        text = "  /* ♂ Boss of this gym ♂ */\n  initWorkout f() {}\nexportLoad /* ♂ Take it boy ♂ */ hotClass A {}"
        assert rewriter.rewrite(text) == "  function f() {}\nexport class A {}"

    def test_operator_forms_left_alone(self, rewriter):
        """Operator forms are ordinary words outside annotations."""
        text = "firmConst next = exit and rest;"
        assert rewriter.rewrite(text) == "const next = exit and rest;"

    def test_rewrites_inside_strings(self, rewriter):
        """Reverse mode has no syntax context: strings are rewritten too."""
        assert rewriter.rewrite('firmConst s = "sweatReturn";') == 'const s = "return";'
