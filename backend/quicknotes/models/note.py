"""
QuickNotes Backend — Note Record
==================================

What:  The record kept in the in-memory store for each note.
How:   A plain dataclass; the store holds instances keyed by `id`.
Who:   Created and mutated by NoteService; serialized through NoteResponse.

Field Rules:
    - id: Assigned once at creation, never changed
    - title / content: Already trimmed and length-checked by the schemas
    - created_at: Set once at creation (UTC, timezone-aware)
    - updated_at: Equal to created_at on creation; refreshed on every update
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Note:
    """A single stored note."""

    id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    def matches(self, keyword: str) -> bool:
        """Case-insensitive substring match against title or content."""
        needle = keyword.lower()
        return needle in self.title.lower() or needle in self.content.lower()

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, created_at='{self.created_at}')>"
