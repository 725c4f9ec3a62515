"""Tests for reverse index construction."""

import logging

from gachiscript.dictionary import Category, build_reverse_index


class TestBuildReverseIndex:
    """Tests for build_reverse_index."""

    def test_inverts_tables(self):
        """Each substituted form points at its host."""
        index = build_reverse_index({
            Category.KEYWORD: {"const": "tight"},
            Category.PHRASE: {"error": "pain"},
        })
        assert index.entries["tight"].host == "const"
        assert index.entries["pain"].category == Category.PHRASE
        assert index.collisions == []

    def test_later_entry_wins_within_category(self):
        """Inside one category the later entry keeps the form."""
        index = build_reverse_index({Category.PHRASE: {"first": "same", "second": "same"}})

        assert index.entries["same"].host == "second"
        assert len(index.collisions) == 1
        collision = index.collisions[0]
        assert collision.same_category
        assert collision.kept.host == "second"
        assert collision.dropped.host == "first"

    def test_higher_priority_wins_across_categories(self):
        """Across categories the higher-priority category keeps the form."""
        index = build_reverse_index({
            Category.PHRASE: {"greet": "tight"},
            Category.KEYWORD: {"const": "tight"},
        })

        assert index.entries["tight"].host == "const"
        collision = index.collisions[0]
        assert not collision.same_category
        assert collision.dropped.category == Category.PHRASE

    def test_same_host_in_two_categories_is_not_a_collision(self):
        """A host listed twice with the same form is not reported."""
        index = build_reverse_index({
            Category.KEYWORD: {"catch": "handle"},
            Category.BUILTIN_METHOD: {"catch": "handle"},
        })
        assert index.collisions == []
        assert index.entries["handle"].category == Category.KEYWORD

    def test_collisions_are_logged(self, caplog):
        """Each collision is logged as a warning."""
        with caplog.at_level(logging.WARNING):
            build_reverse_index({Category.PHRASE: {"a": "x", "b": "x"}})
        assert "Mapping collision within a category: 'x'" in caplog.text

    def test_logging_can_be_disabled(self, caplog):
        """log_collisions=False keeps the log quiet."""
        with caplog.at_level(logging.WARNING):
            index = build_reverse_index(
                {Category.PHRASE: {"a": "x", "b": "x"}},
                log_collisions=False,
            )
        assert len(index.collisions) == 1
        assert caplog.text == ""

    def test_describe(self):
        """Collision descriptions name both hosts and the winner."""
        index = build_reverse_index(
            {Category.KEYWORD: {"const": "tight"}, Category.PHRASE: {"greet": "tight"}},
            log_collisions=False,
        )
        message = index.collisions[0].describe()
        assert "'const' (keyword)" in message
        assert "'greet' (phrase)" in message
        assert message.endswith("reverse mode resolves it to 'const'")
