"""Reverse index construction and collision detection.

The forward tables are not guaranteed to be injective: two host forms can
map to the same substituted form, either inside one category (a data
defect) or across categories. The reverse index can only hold one host per
substituted form, so the builder picks a deterministic winner and records
every displaced pair as a Collision instead of dropping it silently.

Winner rule:
- Categories are visited in CATEGORY_PRIORITY order, entries in insertion
  order.
- Inside one category the later entry wins.
- Across categories the higher-priority category wins, matching the order
  MappingTable.forward() resolves host forms in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from gachiscript.dictionary.atoms import CATEGORY_PRIORITY, Category, LexicalAtom

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Collision:
    """Two host forms competing for one substituted form.

    Attributes:
        substituted: The contested substituted form
        kept: Atom the reverse index resolves to
        dropped: Atom that lost and is unreachable in reverse mode
    """

    substituted: str
    kept: LexicalAtom
    dropped: LexicalAtom

    @property
    def same_category(self) -> bool:
        return self.kept.category == self.dropped.category

    def describe(self) -> str:
        scope = "within a category" if self.same_category else "across categories"
        return (
            f"Mapping collision {scope}: '{self.substituted}' is the "
            f"substituted form of both '{self.kept.host}' ({self.kept.category.value}) "
            f"and '{self.dropped.host}' ({self.dropped.category.value}); "
            f"reverse mode resolves it to '{self.kept.host}'"
        )


@dataclass
class ReverseIndex:
    """Inverse mapping plus the collisions found while building it."""

    entries: dict[str, LexicalAtom] = field(default_factory=dict)
    collisions: list[Collision] = field(default_factory=list)


def build_reverse_index(
    tables: Mapping[Category, Mapping[str, str]],
    log_collisions: bool = True,
) -> ReverseIndex:
    """Invert per-category forward tables into one reverse index.

    Args:
        tables: Forward tables keyed by category
        log_collisions: Emit a logger warning for each collision

    Returns:
        ReverseIndex with the winning atom per substituted form
    """
    index = ReverseIndex()

    for category in CATEGORY_PRIORITY:
        for host, substituted in tables.get(category, {}).items():
            atom = LexicalAtom(category, host, substituted)
            previous = index.entries.get(substituted)

            if previous is None:
                index.entries[substituted] = atom
                continue

            # Same host listed under a lower-priority category as well
            if previous.host == host:
                continue

            if previous.category == category:
                index.entries[substituted] = atom
                collision = Collision(substituted, kept=atom, dropped=previous)
            else:
                collision = Collision(substituted, kept=previous, dropped=atom)

            index.collisions.append(collision)
            if log_collisions:
                logger.warning(collision.describe())

    return index
