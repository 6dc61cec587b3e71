"""
QuickNotes Backend — Note Service (Business Logic)
====================================================

What:  One method per CRUD operation: validate → store op → serialize.
How:   Request payloads are validated with the schemas in
       quicknotes.schemas.note; missing notes raise NotFoundError; results are
       returned as response schemas ready for FastAPI to serialize.
Who:   Called by the route handlers in quicknotes.routes.notes.

Operation Flow (PUT / PATCH / DELETE):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌───────────┐
    │  Route   │───▶│  Look up ID │───▶│  Validate    │───▶│  Store    │
    │          │    │  (404 here) │    │  (400 here)  │    │  write    │
    └──────────┘    └─────────────┘    └──────────────┘    └───────────┘

    The existence check runs before body validation, so an invalid body sent
    to a missing note reports 404 rather than 400.

NoteService keeps no per-request state. The store is passed into each call
(the way a DB session would be); the clock is fixed at construction so tests
can control timestamps.
"""

import logging
import math
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from quicknotes.exceptions import NotFoundError
from quicknotes.models.note import Note
from quicknotes.schemas.note import (
    DeleteResponse,
    NoteCreate,
    NoteListQuery,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    PageMeta,
    parse_model,
)
from quicknotes.store import NoteStore

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_note_id() -> str:
    """Random UUID4 string. No collision check is made against the store."""
    return str(uuid.uuid4())


def to_response(note: Note) -> NoteResponse:
    return NoteResponse(
        id=note.id,
        title=note.title,
        content=note.content,
        created_at=note.created_at,
        updated_at=note.updated_at,
    )


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - list_notes(): Sort, filter, and paginate
        - get_note(): Single note retrieval with not-found handling
        - create_note(): Validate and insert
        - replace_note(): Full update (PUT)
        - update_note(): Partial update (PATCH)
        - delete_note(): Remove

    Error Handling Strategy:
        Only ValidationError and NotFoundError are raised here. Anything else
        propagates untouched and is reported as a 500 by the global handler.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = generate_note_id,
    ):
        self._clock = clock
        self._id_factory = id_factory

    def _require(self, store: NoteStore, note_id: str) -> Note:
        note = store.get(note_id)
        if note is None:
            raise NotFoundError(note_id=note_id)
        return note

    def list_notes(self, store: NoteStore, params: Optional[Dict[str, Any]] = None) -> NoteListResponse:
        """
        List notes newest first, optionally filtered by keyword, one page at a time.

        Args:
            store:  Note store
            params: Raw query values (strings or ints) for page / limit / q;
                    missing keys take their defaults

        Returns:
            NoteListResponse with the page's items and pagination meta.
            A page past the end is clamped to the last page.

        Raises:
            ValidationError: Query values out of range or not integers
        """
        query = parse_model(NoteListQuery, params or {})

        # Stable sort: notes created in the same instant keep insertion order
        notes = sorted(store.list_all(), key=lambda n: n.created_at, reverse=True)

        if query.q:
            notes = [note for note in notes if note.matches(query.q)]

        total = len(notes)
        total_pages = max(1, math.ceil(total / query.limit))
        page = min(query.page, total_pages)

        start = (page - 1) * query.limit
        page_items = notes[start:start + query.limit]

        return NoteListResponse(
            items=[to_response(note) for note in page_items],
            meta=PageMeta(page=page, limit=query.limit, total=total, total_pages=total_pages),
        )

    def get_note(self, store: NoteStore, note_id: str) -> NoteResponse:
        """
        Raises:
            NotFoundError: No note with that ID (→ 404)
        """
        return to_response(self._require(store, note_id))

    def create_note(self, store: NoteStore, payload: Any) -> NoteResponse:
        """
        Validate a {title, content} payload and store a new note.

        createdAt and updatedAt are the same instant on a fresh note.

        Raises:
            ValidationError: Missing field, wrong type, or length out of range (→ 400)
        """
        body = parse_model(NoteCreate, payload)
        now = self._clock()
        note = store.insert(
            Note(
                id=self._id_factory(),
                title=body.title,
                content=body.content,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("Note created: %s", note.id)
        return to_response(note)

    def replace_note(self, store: NoteStore, note_id: str, payload: Any) -> NoteResponse:
        """
        Full update: both title and content are required and overwritten.

        Raises:
            NotFoundError: No note with that ID (→ 404), checked first
            ValidationError: Payload fails the create rules (→ 400)
        """
        existing = self._require(store, note_id)
        body = parse_model(NoteCreate, payload)

        updated = Note(
            id=existing.id,
            title=body.title,
            content=body.content,
            created_at=existing.created_at,
            updated_at=self._clock(),
        )
        store.replace(updated)
        logger.info("Note replaced: %s", note_id)
        return to_response(updated)

    def update_note(self, store: NoteStore, note_id: str, payload: Any) -> NoteResponse:
        """
        Partial update: merges whichever of title/content were sent.

        Raises:
            NotFoundError: No note with that ID (→ 404), checked first
            ValidationError: Empty payload or a field out of range (→ 400)
        """
        existing = self._require(store, note_id)
        changes = parse_model(NoteUpdate, payload).changes()

        updated = Note(
            id=existing.id,
            title=changes.get("title", existing.title),
            content=changes.get("content", existing.content),
            created_at=existing.created_at,
            updated_at=self._clock(),
        )
        store.replace(updated)
        logger.info("Note updated: %s (fields: %s)", note_id, ", ".join(sorted(changes)))
        return to_response(updated)

    def delete_note(self, store: NoteStore, note_id: str) -> DeleteResponse:
        """
        Raises:
            NotFoundError: No note with that ID (→ 404)
        """
        self._require(store, note_id)
        store.delete(note_id)
        logger.info("Note deleted: %s", note_id)
        return DeleteResponse(deleted=True)


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
