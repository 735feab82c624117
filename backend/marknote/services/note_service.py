"""
Marknote Backend — Note Service (Ownership-Scoped CRUD)
=======================================================

What:  List, read, create, update and delete notes on behalf of one user.
How:   Every operation receives the caller's id from the session dependency
       and an AsyncSession; it never trusts an owner supplied by the client.
Who:   Called by the notes router.

Ownership Protocol (get / update / delete):
    ┌──────────────┐   absent    ┌───────────────┐
    │ SELECT by id │───────────▶│ NotFoundError │  404
    └──────┬───────┘             └───────────────┘
           │ exists
           ▼
    ┌──────────────┐  other owner ┌────────────────┐
    │ owner check  │────────────▶│ ForbiddenError │  403
    └──────┬───────┘              └────────────────┘
           │ caller owns it
           ▼
       act on note

    Existence is always checked before ownership.

List Filtering:
    WHERE owner_id = :caller
      [AND (title ILIKE %search% OR content ILIKE %search%)]
    ORDER BY created_at DESC, id DESC
    then, if a tag is given, keep notes whose tag list contains it exactly.
    The tag test runs in Python because the tags column is a portable JSON
    array; the owner-scoped result set is already small.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from marknote.exceptions import (
    DatabaseError,
    ForbiddenError,
    NotFoundError,
)
from marknote.models.note import Note
from marknote.schemas.note import NotePayload, NoteResponse

logger = logging.getLogger(__name__)


def _clean_filter(value: Optional[str]) -> Optional[str]:
    """Blank filter values count as absent."""
    if value is None or not value.strip():
        return None
    return value


def _parse_note_id(note_id: str | UUID) -> Optional[UUID]:
    if isinstance(note_id, UUID):
        return note_id
    try:
        return UUID(str(note_id))
    except ValueError:
        return None


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        NotFoundError and ForbiddenError propagate unchanged with specific
        messages. Any other failure is logged and wrapped in DatabaseError,
        whose message is generic.
    """

    async def list_notes(
        self,
        db: AsyncSession,
        owner_id: UUID,
        tag: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[NoteResponse]:
        """
        Return every note owned by `owner_id` matching the optional filters.

        Args:
            db: Async database session
            owner_id: Authenticated caller
            tag: Exact tag the note must carry
            search: Case-insensitive substring of title or content

        Returns:
            Matching notes, newest first; empty list when nothing matches.
        """
        tag = _clean_filter(tag)
        search = _clean_filter(search)

        try:
            query = select(Note).where(Note.owner_id == owner_id)

            if search:
                term = search.strip()
                query = query.where(
                    or_(
                        Note.title.icontains(term, autoescape=True),
                        Note.content.icontains(term, autoescape=True),
                    )
                )

            query = query.order_by(desc(Note.created_at), desc(Note.id))

            result = await db.execute(query)
            notes = list(result.scalars().all())

        except Exception as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

        if tag:
            notes = [note for note in notes if tag in (note.tags or [])]

        logger.debug(
            "Listed %d notes for %s (tag=%r, search=%r)", len(notes), owner_id, tag, search
        )
        return [NoteResponse.model_validate(note) for note in notes]

    async def get_note(
        self, db: AsyncSession, owner_id: UUID, note_id: str | UUID
    ) -> NoteResponse:
        """
        Retrieve a single note owned by the caller.

        Raises:
            NotFoundError: no note has this id (→ 404)
            ForbiddenError: the note belongs to another user (→ 403)
            DatabaseError: query execution failed (→ 500)
        """
        note = await self._get_owned_note(db, owner_id, note_id, action="access")
        return NoteResponse.model_validate(note)

    async def create_note(
        self, db: AsyncSession, owner_id: UUID, payload: NotePayload
    ) -> NoteResponse:
        """
        Persist a new note for the caller.

        The owner is always `owner_id`; the payload schema has no owner field.

        Returns:
            The stored note, including its id and timestamps.
        """
        try:
            now = datetime.now(timezone.utc)
            note = Note(
                owner_id=owner_id,
                title=payload.title,
                content=payload.content,
                tags=list(payload.tags),
                created_at=now,
                updated_at=now,
            )
            db.add(note)
            await db.flush()
            logger.info("Note created: %s (owner=%s)", note.id, owner_id)
            return NoteResponse.model_validate(note)

        except Exception as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the note. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def update_note(
        self,
        db: AsyncSession,
        owner_id: UUID,
        note_id: str | UUID,
        payload: NotePayload,
    ) -> NoteResponse:
        """
        Replace title, content and tags of a note owned by the caller.

        id, owner_id and created_at never change; updated_at is refreshed.

        Raises:
            NotFoundError / ForbiddenError: see get_note
        """
        note = await self._get_owned_note(db, owner_id, note_id, action="update")

        try:
            note.title = payload.title
            note.content = payload.content
            note.tags = list(payload.tags)
            note.updated_at = datetime.now(timezone.utc)
            await db.flush()
            logger.info("Note updated: %s", note.id)
            return NoteResponse.model_validate(note)

        except Exception as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the note. Please try again.",
                context={"note_id": str(note_id)},
            )

    async def delete_note(
        self, db: AsyncSession, owner_id: UUID, note_id: str | UUID
    ) -> None:
        """
        Permanently remove a note owned by the caller.

        Raises:
            NotFoundError / ForbiddenError: see get_note
        """
        note = await self._get_owned_note(db, owner_id, note_id, action="delete")

        try:
            await db.delete(note)
            await db.flush()
            logger.info("Note deleted: %s", note_id)

        except Exception as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": str(note_id)},
            )

    async def _get_owned_note(
        self,
        db: AsyncSession,
        owner_id: UUID,
        note_id: str | UUID,
        action: str,
    ) -> Note:
        """Load a note by id, then check that `owner_id` owns it."""
        parsed_id = _parse_note_id(note_id)
        if parsed_id is None:
            # A malformed id cannot name any stored note
            raise NotFoundError(resource="note", resource_id=str(note_id))

        try:
            result = await db.execute(select(Note).where(Note.id == parsed_id))
            note = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(note_id)},
            )

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(parsed_id))

        if note.owner_id != owner_id:
            logger.warning(
                "User %s attempted to %s note %s owned by another user",
                owner_id, action, parsed_id,
            )
            raise ForbiddenError(action=action, resource="note")

        return note


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
