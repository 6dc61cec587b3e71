"""
QuickNotes Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract: request validation for
       create / update / list, and the shapes every response takes.
How:   Request schemas are applied by NoteService through `parse_model()`,
       which converts pydantic errors into our ValidationError (→ 400).
       Response schemas are used as FastAPI `response_model`s and serialize
       with camelCase aliases (createdAt, updatedAt, totalPages).
Who:   Used by NoteService (input) and route handlers (output).

Field Limits:
    title    1–200 characters after trimming
    content  1–10,000 characters after trimming
    page     integer ≥ 1, default 1
    limit    integer 1–100, default 10
    q        optional, non-empty after trimming
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from quicknotes.exceptions import ValidationError

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 10_000
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

ModelT = TypeVar("ModelT", bound=BaseModel)


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the client sends
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    What:  Body of POST /notes, and of PUT /notes/{id} (full replacement).
    Both fields are required. Surrounding whitespace is stripped before the
    length checks run, so "   " fails as too short.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH, description="Note title")
    content: str = Field(
        min_length=1, max_length=CONTENT_MAX_LENGTH, description="Note body text"
    )


class NoteUpdate(BaseModel):
    """
    What:  Body of PATCH /notes/{id}.
    Both fields optional, same limits as NoteCreate, but at least one must be
    present. An explicit null is rejected rather than treated as absent.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: Optional[str] = Field(
        default=None, min_length=1, max_length=TITLE_MAX_LENGTH, description="New title"
    )
    content: Optional[str] = Field(
        default=None, min_length=1, max_length=CONTENT_MAX_LENGTH, description="New body text"
    )

    @field_validator("title", "content", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Runs only for keys present in the payload
        if v is None:
            raise PydanticCustomError("string_type", "Input should be a valid string")
        return v

    @model_validator(mode="after")
    def require_one_field(self) -> "NoteUpdate":
        if not self.model_fields_set:
            raise PydanticCustomError(
                "missing_fields", "At least one of title/content must be provided"
            )
        return self

    def changes(self) -> Dict[str, str]:
        """Only the fields the client actually sent."""
        return self.model_dump(include=self.model_fields_set)


class NoteListQuery(BaseModel):
    """
    What:  Query parameters of GET /notes.
    Values arrive as strings and are coerced to integers here.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    page: int = Field(default=1, ge=1, description="1-based page number")
    limit: int = Field(
        default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"
    )
    q: Optional[str] = Field(
        default=None, min_length=1, description="Case-insensitive keyword filter"
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns
# ══════════════════════════════════════════════════════════════════════════


class CamelModel(BaseModel):
    """Response base: snake_case attributes, camelCase JSON keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class NoteResponse(CamelModel):
    """A stored note as returned by every single-note endpoint."""
    id: str = Field(description="Unique note identifier")
    title: str
    content: str
    created_at: datetime = Field(description="Creation time (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last modification time (UTC ISO 8601)")


class PageMeta(CamelModel):
    """
    Pagination block of GET /notes.

    `page` is the page actually served: a requested page beyond the last one
    is clamped to `total_pages`. `total_pages` is at least 1, even when there
    are no matching notes.
    """
    page: int
    limit: int
    total: int = Field(description="Number of notes matching the filter")
    total_pages: int


class NoteListResponse(CamelModel):
    items: List[NoteResponse]
    meta: PageMeta


class DeleteResponse(BaseModel):
    deleted: bool = True


class ErrorBody(BaseModel):
    code: str = Field(description="Machine-readable error code, e.g. NOTE_NOT_FOUND")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Field issues for validation errors")


class ErrorResponse(BaseModel):
    """
    What:  Envelope shared by every error response.

    Example:
        {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "details": [{"path": ["title"], "message": "...", "code": "string_too_short"}]
            }
        }
    """
    error: ErrorBody


class HealthResponse(BaseModel):
    status: str = Field(default="ok", description="Always 'ok' while the process serves requests")


# ══════════════════════════════════════════════════════════════════════════
# Validation Helpers
# ══════════════════════════════════════════════════════════════════════════


def format_issues(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Reduces pydantic error dicts to the public issue shape.

    Only `loc`, `msg` and `type` are kept: `input` may echo large payloads and
    `ctx` can hold exception objects that are not JSON serializable.
    """
    return [
        {
            "path": list(error.get("loc", ())),
            "message": error.get("msg", ""),
            "code": error.get("type", "invalid"),
        }
        for error in errors
    ]


def parse_model(model: Type[ModelT], data: Any) -> ModelT:
    """
    Validates `data` against `model`, raising ValidationError on failure.

    Raises:
        ValidationError: With one issue per failing field (→ 400)
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(issues=format_issues(e.errors()))
