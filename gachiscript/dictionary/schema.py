"""Serializable dictionary records.

These Pydantic models define the plain record a MappingTable is exported
to and imported from, so tables can be persisted as JSON and shared
between processes.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from gachiscript.dictionary.atoms import Category

SCHEMA_VERSION = "1.0.0"


class DictionaryRecord(BaseModel):
    """Exported form of a mapping table."""

    schema_version: str = Field(default=SCHEMA_VERSION)
    framework: str = Field(default="none", description="Framework the table was built for")
    categories: dict[Category, dict[str, str]] = Field(
        default_factory=dict,
        description="Forward tables keyed by category",
    )

    @field_validator("categories")
    @classmethod
    def entries_must_be_non_empty(
        cls, value: dict[Category, dict[str, str]]
    ) -> dict[Category, dict[str, str]]:
        for category, entries in value.items():
            for host, substituted in entries.items():
                if not host or not substituted:
                    raise ValueError(
                        f"Empty form in {category.value} mapping: {host!r} -> {substituted!r}"
                    )
                if host != host.strip() or substituted != substituted.strip():
                    raise ValueError(
                        f"Forms must not carry surrounding whitespace: {host!r} -> {substituted!r}"
                    )
        return value

    def to_plain(self) -> dict[str, Any]:
        """Dump with category enums flattened to their string values."""
        return {
            "schema_version": self.schema_version,
            "framework": self.framework,
            "categories": {
                category.value: dict(entries)
                for category, entries in self.categories.items()
            },
        }
