"""
QuickNotes Backend — In-Memory Note Store
===========================================

What:  Process-wide mapping from note ID to Note record, plus the FastAPI
       dependency that hands it to route handlers.
How:   A dict wrapped in a small class exposing get / list / insert / replace /
       delete. All operations are synchronous and O(1) except list_all.
Who:   Used by NoteService; injected into routes via get_note_store().
When:  Created at module import; cleared on application shutdown.

Concurrency:
    There is no lock. Route handlers run on the asyncio event loop and never
    await while touching the store, so each operation completes before the
    next request is scheduled. Running several worker processes gives each
    worker its own independent store.

Durability:
    None. Every note disappears when the process exits.
"""

import logging
from typing import Dict, List, Optional

from quicknotes.models.note import Note

logger = logging.getLogger(__name__)


class NoteStore:
    """Dict-backed note storage with no eviction and no size bound."""

    def __init__(self) -> None:
        self._notes: Dict[str, Note] = {}

    def get(self, note_id: str) -> Optional[Note]:
        """Returns the note with the given ID, or None if absent."""
        return self._notes.get(note_id)

    def list_all(self) -> List[Note]:
        """Returns every stored note in insertion order."""
        return list(self._notes.values())

    def insert(self, note: Note) -> Note:
        self._notes[note.id] = note
        return note

    def replace(self, note: Note) -> Note:
        """Overwrites the stored record that shares `note.id`."""
        self._notes[note.id] = note
        return note

    def delete(self, note_id: str) -> bool:
        """Removes a note. Returns False if nothing was stored under the ID."""
        return self._notes.pop(note_id, None) is not None

    def clear(self) -> None:
        count = len(self._notes)
        self._notes.clear()
        if count:
            logger.debug("Cleared %d notes from store", count)

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._notes


# ── Singleton Instance ────────────────────────────────────────────────────
note_store = NoteStore()


# ── Store Dependency ──────────────────────────────────────────────────────
def get_note_store() -> NoteStore:
    """
    FastAPI dependency that provides the process-wide note store.

    Tests override it with `app.dependency_overrides[get_note_store]` when they
    need an isolated store.
    """
    return note_store
