"""Bidirectional mapping table between host atoms and GachiScript atoms.

A MappingTable owns the forward tables (one per category) and the reverse
index derived from them. It is built once per transformation session and
shared read-only by concurrent transformations. It is not lock-protected:
add() and remove() must only run while no transformation is in flight.

Usage:
    table = build_default_table(framework="react")

    table.forward("const")            # 'firmConst'
    table.forward("catch")            # 'catchRelease' (keyword wins)
    table.forward("catch", Category.BUILTIN_METHOD)  # 'catchLoad'
    table.reverse("firmConst")        # 'const'
    table.forward("greet")            # 'greet' (identity fallback)
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Iterator

from pydantic import ValidationError

from gachiscript.dictionary import definitions
from gachiscript.dictionary.atoms import CATEGORY_PRIORITY, Category, LexicalAtom
from gachiscript.dictionary.reverse_index import Collision, build_reverse_index
from gachiscript.dictionary.schema import SCHEMA_VERSION, DictionaryRecord

logger = logging.getLogger(__name__)

# Characters that may continue a host identifier; substituted forms are only
# replaced when not surrounded by one of these.
WORD_CHARS = r"\w$"


class DictionaryError(Exception):
    """Raised when a dictionary record cannot be loaded."""

    pass


class MappingTable:
    """Forward tables per category plus the precomputed reverse index."""

    def __init__(
        self,
        tables: dict[Category, dict[str, str]] | None = None,
        framework: str = "none",
        log_collisions: bool = True,
    ) -> None:
        self.framework = framework
        self._forward: dict[Category, dict[str, str]] = {
            category: {} for category in CATEGORY_PRIORITY
        }
        for category, entries in (tables or {}).items():
            self._forward[Category(category)].update(entries)

        index = build_reverse_index(self._forward, log_collisions=log_collisions)
        self._reverse: dict[str, LexicalAtom] = index.entries
        # Found at build time; add() and remove() do not update this list.
        self.collisions: list[Collision] = index.collisions
        self._pattern: re.Pattern[str] | None = None

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def forward(self, host: str, category: Category | None = None) -> str:
        """Map a host form to its substituted form.

        Args:
            host: Host-language text (keyword, operator, identifier)
            category: Restrict the lookup to one category; if None the
                categories are consulted in priority order

        Returns:
            The substituted form, or host unchanged when it is not mapped
        """
        if category is not None:
            return self._forward[category].get(host, host)
        for candidate in CATEGORY_PRIORITY:
            substituted = self._forward[candidate].get(host)
            if substituted is not None:
                return substituted
        return host

    def reverse(self, substituted: str) -> str:
        """Map a substituted form back to its host form (identity fallback)."""
        atom = self._reverse.get(substituted)
        return atom.host if atom is not None else substituted

    def lookup_reverse(self, substituted: str) -> LexicalAtom | None:
        """Return the atom the reverse index resolves substituted to."""
        return self._reverse.get(substituted)

    def has_host(self, host: str, category: Category | None = None) -> bool:
        if category is not None:
            return host in self._forward[category]
        return self.category_of(host) is not None

    def has_substituted(self, substituted: str) -> bool:
        return substituted in self._reverse

    def rewrites_in_reverse(self, word: str) -> bool:
        """Whether reverse mode replaces word when it occurs in plain text.

        Operator forms only occur inside strict-mode annotations, which are
        stripped as a whole, so they are never matched as words.
        """
        atom = self._reverse.get(word)
        return atom is not None and atom.category != Category.OPERATOR

    def category_of(self, host: str) -> Category | None:
        """Category forward() would resolve host in, if any."""
        for category in CATEGORY_PRIORITY:
            if host in self._forward[category]:
                return category
        return None

    def entries(self, category: Category) -> dict[str, str]:
        """Copy of one category's forward table."""
        return dict(self._forward[category])

    def atoms(self) -> Iterator[LexicalAtom]:
        """Iterate every forward entry in priority order."""
        for category in CATEGORY_PRIORITY:
            for host, substituted in self._forward[category].items():
                yield LexicalAtom(category, host, substituted)

    def substituted_forms(self) -> list[str]:
        """Substituted forms in reverse-index iteration order."""
        return list(self._reverse)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._forward.values())

    # ------------------------------------------------------------------
    # Runtime extension
    # ------------------------------------------------------------------

    def add(self, host: str, substituted: str, category: Category | None = None) -> None:
        """Insert or overwrite a mapping in both indices.

        Overwrites are silent. Without a category the entry forward() would
        resolve is overwritten; a new host lands in PHRASE. A form that is
        already taken is resolved by the same winner rule the reverse-index
        builder applies; run check_integrity() after a batch of adds to
        surface collisions.
        """
        if category is None:
            category = self.category_of(host) or Category.PHRASE

        previous = self._forward[category].get(host)
        self._forward[category][host] = substituted

        if previous is not None and previous != substituted:
            self._resolve_reverse(previous)
        if substituted in self._reverse:
            self._resolve_reverse(substituted)
        else:
            self._reverse[substituted] = LexicalAtom(category, host, substituted)
        self._pattern = None

    def remove(self, host: str, category: Category | None = None) -> bool:
        """Remove a mapping from both indices.

        A form the removed host held falls back to the next host claiming it.

        Returns:
            True if a mapping was removed
        """
        if category is None:
            category = self.category_of(host)
            if category is None:
                return False

        substituted = self._forward[category].pop(host, None)
        if substituted is None:
            return False

        atom = self._reverse.get(substituted)
        if atom is not None and atom.host == host and atom.category == category:
            self._resolve_reverse(substituted)
        self._pattern = None
        return True

    def _resolve_reverse(self, substituted: str) -> None:
        """Recompute the reverse entry of one form from the forward tables.

        The first category in priority order claiming the form wins; inside
        it the last entry wins, as in build_reverse_index().
        """
        winner: LexicalAtom | None = None
        for category in CATEGORY_PRIORITY:
            for host, form in self._forward[category].items():
                if form == substituted:
                    winner = LexicalAtom(category, host, form)
            if winner is not None:
                break

        if winner is None:
            self._reverse.pop(substituted, None)
        else:
            self._reverse[substituted] = winner

    def check_integrity(self) -> list[Collision]:
        """Rebuild the reverse index from scratch and report collisions.

        The live index is left untouched; this only reports. The winner of
        each collision is the atom reverse() resolves the form to.
        """
        return build_reverse_index(self._forward, log_collisions=False).collisions

    def clone(self) -> MappingTable:
        """Independent copy, e.g. for per-invocation extension."""
        return MappingTable(
            {category: dict(entries) for category, entries in self._forward.items()},
            framework=self.framework,
            log_collisions=False,
        )

    # ------------------------------------------------------------------
    # Reverse-mode support
    # ------------------------------------------------------------------

    def reverse_pattern(self) -> re.Pattern[str] | None:
        """Boundary-delimited alternation of every non-operator form.

        Forms are ordered longest first, then lexicographically, so a form
        is always tried before any shorter form it starts with.
        """
        if self._pattern is None:
            forms = [form for form in self._reverse if self.rewrites_in_reverse(form)]
            if forms:
                ordered = sorted(forms, key=lambda form: (-len(form), form))
                alternation = "|".join(re.escape(form) for form in ordered)
                self._pattern = re.compile(
                    rf"(?<![{WORD_CHARS}])(?:{alternation})(?![{WORD_CHARS}])"
                )
        return self._pattern

    def suggestions(self, word: str, limit: int = 5) -> list[str]:
        """Known substituted forms similar to word.

        Case-insensitive substring match in either direction, in
        reverse-index iteration order (not ranked by relevance).
        """
        needle = word.lower()
        matches: list[str] = []
        for form in self._reverse:
            candidate = form.lower()
            if needle in candidate or candidate in needle:
                matches.append(form)
                if len(matches) >= limit:
                    break
        return matches

    # ------------------------------------------------------------------
    # Stats and serialization
    # ------------------------------------------------------------------

    def stats(self) -> dict[str, Any]:
        return {
            "total_mappings": len(self),
            "reverse_mappings": len(self._reverse),
            "categories": {
                category.value: len(self._forward[category])
                for category in CATEGORY_PRIORITY
            },
            "collisions": len(self.check_integrity()),
        }

    def to_record(self) -> DictionaryRecord:
        return DictionaryRecord(
            schema_version=SCHEMA_VERSION,
            framework=self.framework,
            categories={
                category: dict(entries)
                for category, entries in self._forward.items()
                if entries
            },
        )

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_record().to_plain(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_record(cls, record: DictionaryRecord | dict[str, Any]) -> MappingTable:
        """Build a table from an exported record.

        Raises:
            DictionaryError: If the record does not validate
        """
        if not isinstance(record, DictionaryRecord):
            try:
                record = DictionaryRecord.model_validate(record)
            except ValidationError as e:
                raise DictionaryError(f"Invalid dictionary record: {e}") from e
        return cls(dict(record.categories), framework=record.framework)

    @classmethod
    def from_json(cls, text: str) -> MappingTable:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DictionaryError(f"Dictionary is not valid JSON: {e}") from e
        return cls.from_record(data)

    @classmethod
    def from_json_file(cls, path: str | Path) -> MappingTable:
        return cls.from_json(Path(path).read_text(encoding="utf-8"))


def build_default_table(framework: str = "none") -> MappingTable:
    """Build the default table for a framework.

    This is the composition-root factory; there is no shared global table.

    Args:
        framework: 'react', 'angular', 'vue' or 'none'
    """
    framework = str(getattr(framework, "value", framework))
    tables = {
        Category.KEYWORD: dict(definitions.KEYWORDS),
        Category.OPERATOR: dict(definitions.OPERATORS),
        Category.TYPE: dict(definitions.TYPES),
        Category.BUILTIN_METHOD: dict(definitions.BUILTIN_METHODS),
        Category.BUILTIN_OBJECT: dict(definitions.BUILTIN_OBJECTS),
        Category.FRAMEWORK_IDENTIFIER: dict(
            definitions.FRAMEWORK_IDENTIFIERS.get(framework, {})
        ),
        Category.PHRASE: dict(definitions.PHRASES),
    }
    logger.debug(f"Building default mapping table for framework={framework}")
    return MappingTable(tables, framework=framework)
