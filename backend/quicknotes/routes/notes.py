"""
QuickNotes Backend — Notes Route Handlers
===========================================

What:  CRUD endpoints under /notes.
How:   Each handler pulls raw input from the request, delegates to NoteService,
       and returns the service's response schema. Validation happens inside
       the service, so bodies and query values are accepted untyped here.
Who:   Any HTTP client.

Route Inventory:
    GET    /notes            list (page, limit, q)
    GET    /notes/{note_id}  fetch one
    POST   /notes            create → 201
    PUT    /notes/{note_id}  full replacement (title and content required)
    PATCH  /notes/{note_id}  partial update (at least one field)
    DELETE /notes/{note_id}  remove → {"deleted": true}
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from quicknotes.schemas.note import (
    DeleteResponse,
    ErrorResponse,
    NoteListResponse,
    NoteResponse,
)
from quicknotes.services.note_service import note_service
from quicknotes.store import NoteStore, get_note_store

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/notes", tags=["Notes"])

_VALIDATION = {400: {"description": "Invalid request data", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}

_CREATE_EXAMPLE = {"title": "Groceries", "content": "Milk, eggs, coffee"}
_PATCH_EXAMPLE = {"content": "Milk, eggs, coffee, bread"}


@router.get(
    "",
    response_model=NoteListResponse,
    responses={**_VALIDATION},
    summary="List notes with pagination and keyword search",
    description=(
        "Returns notes newest first. `q` keeps only notes whose title or content "
        "contains it (case-insensitive). A page past the end is clamped to the last page."
    ),
)
async def list_notes(
    page: Optional[str] = Query(default=None, description="Page number, ≥ 1 (default 1)"),
    limit: Optional[str] = Query(default=None, description="Items per page, 1–100 (default 10)"),
    q: Optional[str] = Query(default=None, description="Keyword to search in title and content"),
    store: NoteStore = Depends(get_note_store),
) -> NoteListResponse:
    params = {
        key: value
        for key, value in (("page", page), ("limit", limit), ("q", q))
        if value is not None
    }
    return note_service.list_notes(store, params)


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**_NOT_FOUND},
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    store: NoteStore = Depends(get_note_store),
) -> NoteResponse:
    return note_service.get_note(store, note_id)


@router.post(
    "",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_VALIDATION},
    summary="Create a note",
)
async def create_note(
    payload: Any = Body(default=None, examples=[_CREATE_EXAMPLE]),
    store: NoteStore = Depends(get_note_store),
) -> NoteResponse:
    """
    Create a note from `{title, content}`.

    Both fields are trimmed; title must be 1–200 characters and content
    1–10,000 characters after trimming.
    """
    return note_service.create_note(store, payload)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**_VALIDATION, **_NOT_FOUND},
    summary="Replace a note's title and content",
)
async def replace_note(
    note_id: str,
    payload: Any = Body(default=None, examples=[_CREATE_EXAMPLE]),
    store: NoteStore = Depends(get_note_store),
) -> NoteResponse:
    """Full update: both `title` and `content` are required."""
    return note_service.replace_note(store, note_id, payload)


@router.patch(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**_VALIDATION, **_NOT_FOUND},
    summary="Update some fields of a note",
)
async def update_note(
    note_id: str,
    payload: Any = Body(default=None, examples=[_PATCH_EXAMPLE]),
    store: NoteStore = Depends(get_note_store),
) -> NoteResponse:
    """Partial update: send `title`, `content`, or both."""
    return note_service.update_note(store, note_id, payload)


@router.delete(
    "/{note_id}",
    response_model=DeleteResponse,
    responses={**_NOT_FOUND},
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    store: NoteStore = Depends(get_note_store),
) -> DeleteResponse:
    return note_service.delete_note(store, note_id)
