"""Configuration for forward and reverse transformations."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any


class Framework(str, Enum):
    """Framework vocabulary selected for a transformation."""

    REACT = "react"
    ANGULAR = "angular"
    VUE = "vue"
    NONE = "none"

    @classmethod
    def _missing_(cls, value: object) -> "Framework | None":
        """Accept loose spellings like 'React', 'react-like' or 'vanilla'."""
        if value is None:
            return cls.NONE
        if not isinstance(value, str):
            return None
        normalized = value.lower().strip()
        if normalized in ("", "vanilla", "node", "plain", "js", "ts"):
            return cls.NONE
        for member in cls:
            if normalized == member.value or normalized.startswith(member.value + "-"):
                return member
        return None


class Dialect(str, Enum):
    """Grammar used to parse host-language source."""

    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    TSX = "tsx"


_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass
class TranspilerOptions:
    """Options for one transformation call.

    Attributes:
        framework: Framework vocabulary to activate
        preserve_comments: Keep comments from the source in the output
        strict_mode: Annotate mapped operators with inline comments
        add_random_quotes: Decorate function and class declarations
        seed: Seed for the decorative-quote RNG (None = nondeterministic)
        dialect: Force a grammar instead of choosing one from the source
    """

    framework: Framework = Framework.NONE
    preserve_comments: bool = True
    strict_mode: bool = False
    add_random_quotes: bool = False
    seed: int | None = None
    dialect: Dialect | None = None

    def __post_init__(self) -> None:
        self.framework = Framework(self.framework)
        if self.dialect is not None:
            self.dialect = Dialect(self.dialect)

    def merged(self, **overrides: Any) -> TranspilerOptions:
        """Copy with the given fields replaced; None values are ignored."""
        known = {f.name for f in fields(self)}
        changes = {
            key: value
            for key, value in overrides.items()
            if key in known and value is not None
        }
        return replace(self, **changes)

    @classmethod
    def from_env(cls) -> TranspilerOptions:
        """Build options from GACHI_* environment variables."""
        seed = os.environ.get("GACHI_SEED")
        dialect = os.environ.get("GACHI_DIALECT")
        return cls(
            framework=Framework(os.environ.get("GACHI_FRAMEWORK", "none")),
            preserve_comments=_env_flag("GACHI_PRESERVE_COMMENTS", True),
            strict_mode=_env_flag("GACHI_STRICT_MODE", False),
            add_random_quotes=_env_flag("GACHI_RANDOM_QUOTES", False),
            seed=int(seed) if seed else None,
            dialect=Dialect(dialect.lower()) if dialect else None,
        )
