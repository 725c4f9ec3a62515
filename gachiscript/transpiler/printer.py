"""Splice printer: apply byte-range edits to the original source.

Everything outside an edit is copied byte for byte, so whitespace,
formatting and untouched comments survive a transformation unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Edit:
    """Replace source_bytes[start:end] with text.

    start == end is an insertion.
    """

    start: int
    end: int
    text: str

    @classmethod
    def insert(cls, at: int, text: str) -> Edit:
        return cls(at, at, text)

    @classmethod
    def delete(cls, start: int, end: int) -> Edit:
        return cls(start, end, "")

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end


def apply_edits(source_bytes: bytes, edits: Iterable[Edit]) -> str:
    """Apply non-overlapping edits and decode the result.

    Edits are applied in (start, end) order, so an insertion at a position
    lands before a replacement starting there. Insertions at the same
    position keep the order they were given in.

    Raises:
        ValueError: If two edits overlap
    """
    ordered = sorted(edits, key=lambda edit: (edit.start, edit.end))

    parts: list[bytes] = []
    cursor = 0
    for edit in ordered:
        if edit.start < cursor:
            raise ValueError(
                f"Overlapping edits at byte {edit.start} (previous edit ends at {cursor})"
            )
        parts.append(source_bytes[cursor:edit.start])
        parts.append(edit.text.encode("utf-8"))
        cursor = edit.end
    parts.append(source_bytes[cursor:])

    return b"".join(parts).decode("utf-8")
