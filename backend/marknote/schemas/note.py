"""
Marknote Backend — Note Request/Response Schemas
================================================

What:  Pydantic models defining the notes API contract.
How:   FastAPI validates request bodies against NotePayload and serializes
       responses through the envelope models below.
Who:   Used by the notes router, NoteService, and the client form helpers.

NotePayload is the only shape that reaches business logic. Anything the
client sends beyond title/content/tags (owner, owner_id, user, id,
created_at, ...) is dropped here.
"""

import uuid
from datetime import datetime
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from marknote.exceptions import ValidationError
from marknote.schemas.common import describe_validation_errors, ensure_utc

TITLE_MAX_LENGTH = 200


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NotePayload(BaseModel):
    """
    Body of POST /api/notes and PUT /api/notes/{id}.

    Rules:
        - title: required, at most 200 characters, must contain a
          non-whitespace character
        - content: required, must contain a non-whitespace character
        - tags: optional list of strings

    Values are stored exactly as sent: markdown is whitespace-sensitive and
    tags are free-form. Blank tags are dropped only when the client builds
    its tag index.
    """
    title: str = Field(description="Note title (max 200 characters)")
    content: str = Field(description="Markdown source")
    tags: List[str] = Field(default_factory=list, description="Free-form tags")

    model_config = {"extra": "ignore"}

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        if len(v) > TITLE_MAX_LENGTH:
            raise ValueError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
        return v

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content is required")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, v: Any) -> Any:
        return [] if v is None else v


def validate_note_payload(raw: Mapping[str, Any]) -> NotePayload:
    """
    Validate an untyped note body into a NotePayload.

    Raises:
        ValidationError: with the first offending field and a readable message
    """
    try:
        return NotePayload.model_validate(dict(raw))
    except PydanticValidationError as e:
        errors = e.errors()
        message, field = describe_validation_errors(errors)
        raise ValidationError(
            message=message,
            field=field,
            context={"error_count": len(errors)},
        ) from e


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """Full representation of a note, as stored."""
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    owner_id: uuid.UUID = Field(description="Identifier of the owning user")
    title: str = Field(description="Note title")
    content: str = Field(description="Markdown source")
    tags: List[str] = Field(description="Tags in caller order")
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the note was last modified (UTC ISO 8601)")

    model_config = {"from_attributes": True}

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class NoteEnvelope(BaseModel):
    """Envelope for a single note (GET/POST/PUT)."""
    success: bool = Field(default=True)
    data: NoteResponse
    message: Optional[str] = Field(default=None)


class NoteListEnvelope(BaseModel):
    """Envelope for GET /api/notes: every matching note, newest first."""
    success: bool = Field(default=True)
    count: int = Field(description="Number of notes in data")
    data: List[NoteResponse] = Field(description="Matching notes, newest first")
