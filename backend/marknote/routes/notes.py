"""
Marknote Backend — Notes Route Handlers
=======================================

What:  CRUD endpoints for the caller's notes under /api/notes.
How:   Resolves the caller from the session, delegates to NoteService,
       wraps results in the success envelope.
Who:   Called by the client sync controller.

Route Inventory:
    GET    /api/notes?tag=&search=   list (newest first)
    GET    /api/notes/{note_id}      read
    POST   /api/notes                create (201)
    PUT    /api/notes/{note_id}      replace title/content/tags
    DELETE /api/notes/{note_id}      delete, returns {"success": true, "data": {}}

note_id is taken as a plain string: an id that is not a UUID names no
note and is answered with 404 by the service.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from marknote.database import get_db_session
from marknote.deps import get_current_user_id
from marknote.schemas.common import AckResponse, ErrorResponse
from marknote.schemas.note import NoteEnvelope, NoteListEnvelope, NotePayload
from marknote.services.note_service import note_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api/notes", tags=["Notes"])

_AUTH_ERRORS = {401: {"description": "Not logged in", "model": ErrorResponse}}
_OWNERSHIP_ERRORS = {
    **_AUTH_ERRORS,
    403: {"description": "Note belongs to another user", "model": ErrorResponse},
    404: {"description": "Note not found", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=NoteListEnvelope,
    responses=_AUTH_ERRORS,
    summary="List the caller's notes",
    description=(
        "Returns every note owned by the caller, newest first. `tag` keeps notes "
        "carrying that exact tag; `search` keeps notes whose title or content "
        "contains the term, case-insensitively. Both filters combine with AND."
    ),
)
async def list_notes(
    response: Response,
    tag: str | None = Query(default=None, description="Exact tag to filter by"),
    search: str | None = Query(default=None, description="Case-insensitive text search"),
    owner_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteListEnvelope:
    notes = await note_service.list_notes(db=db, owner_id=owner_id, tag=tag, search=search)

    # Personal data: never cache in shared caches, always revalidate
    response.headers["Cache-Control"] = "private, no-cache"
    return NoteListEnvelope(count=len(notes), data=notes)


@router.get(
    "/{note_id}",
    response_model=NoteEnvelope,
    responses=_OWNERSHIP_ERRORS,
    summary="Get a single note",
)
async def get_note(
    note_id: str,
    response: Response,
    owner_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteEnvelope:
    note = await note_service.get_note(db=db, owner_id=owner_id, note_id=note_id)
    response.headers["Cache-Control"] = "private, no-cache"
    return NoteEnvelope(data=note)


@router.post(
    "",
    status_code=201,
    response_model=NoteEnvelope,
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Missing or invalid title/content/tags", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a note",
    description="The note's owner is always the logged-in user; owner fields in the body are ignored.",
)
async def create_note(
    payload: NotePayload,
    owner_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteEnvelope:
    note = await note_service.create_note(db=db, owner_id=owner_id, payload=payload)
    return NoteEnvelope(data=note, message="Note created successfully")


@router.put(
    "/{note_id}",
    response_model=NoteEnvelope,
    responses={
        **_OWNERSHIP_ERRORS,
        400: {"description": "Missing or invalid title/content/tags", "model": ErrorResponse},
    },
    summary="Update a note",
    description="Replaces title, content and tags. id and owner cannot be changed.",
)
async def update_note(
    note_id: str,
    payload: NotePayload,
    owner_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteEnvelope:
    note = await note_service.update_note(
        db=db, owner_id=owner_id, note_id=note_id, payload=payload
    )
    return NoteEnvelope(data=note, message="Note updated successfully")


@router.delete(
    "/{note_id}",
    response_model=AckResponse,
    responses=_OWNERSHIP_ERRORS,
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    owner_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> AckResponse:
    await note_service.delete_note(db=db, owner_id=owner_id, note_id=note_id)
    return AckResponse(message="Note deleted successfully")
