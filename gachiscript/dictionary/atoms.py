"""Lexical atoms and their categories."""

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """Lexical category of a mapped atom."""

    KEYWORD = "keyword"
    OPERATOR = "operator"
    TYPE = "type"
    BUILTIN_METHOD = "builtin_method"
    BUILTIN_OBJECT = "builtin_object"
    FRAMEWORK_IDENTIFIER = "framework_identifier"
    PHRASE = "phrase"

    @classmethod
    def _missing_(cls, value: object) -> "Category | None":
        if not isinstance(value, str):
            return None
        normalized = value.lower().strip().replace("-", "_").replace(" ", "_")
        for member in cls:
            if member.value == normalized:
                return member
        return None


# Lookup order when no category is given: first match wins.
CATEGORY_PRIORITY: tuple[Category, ...] = (
    Category.KEYWORD,
    Category.OPERATOR,
    Category.TYPE,
    Category.BUILTIN_METHOD,
    Category.BUILTIN_OBJECT,
    Category.FRAMEWORK_IDENTIFIER,
    Category.PHRASE,
)


@dataclass(frozen=True)
class LexicalAtom:
    """One mapped unit: a host form and its substituted form."""

    category: Category
    host: str
    substituted: str

    def to_dict(self) -> dict[str, str]:
        return {
            "category": self.category.value,
            "host": self.host,
            "substituted": self.substituted,
        }
