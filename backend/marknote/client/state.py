"""
Marknote Client — Client State
==============================

What:  The single, immutable snapshot of everything the client knows:
       who is logged in, the note list, the tag index, the active filters,
       the open note, the edit form, and pending notifications.
How:   A frozen dataclass. Handlers in SyncController take a ClientState and
       return the next one; the helpers below build common transitions.

Views:
    UNAUTHENTICATED ──login/register/probe──▶ IDLE ◀──close── DETAIL_OPEN
                                              │  ▲              │
                                    start_create  save/cancel   start_edit
                                              ▼  │              │
                                             EDITING ◀──────────┘

    `loading` names the in-flight action; while it is set the phase is
    LOADING and the view underneath is the one to return to.
"""

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from marknote.schemas.auth import UserResponse
from marknote.schemas.note import NoteResponse

# Seconds a notification stays visible unless dismissed earlier
NOTIFICATION_TTL = 5.0

LOADING = "loading"


class View(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    IDLE = "idle"
    DETAIL_OPEN = "detail_open"
    EDITING = "editing"


@dataclass(frozen=True)
class Notification:
    message: str
    kind: str  # "success" or "error"
    expires_at: float
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])


@dataclass(frozen=True)
class NoteForm:
    """Create/edit form contents. `note_id` is None when creating."""
    return_view: View
    note_id: Optional[str] = None
    title: str = ""
    content: str = ""
    tags_text: str = ""

    @property
    def is_edit(self) -> bool:
        return self.note_id is not None


@dataclass(frozen=True)
class ClientState:
    view: View = View.UNAUTHENTICATED
    loading: Optional[str] = None
    user: Optional[UserResponse] = None
    notes: Tuple[NoteResponse, ...] = ()
    tags: Tuple[str, ...] = ()
    active_tag: Optional[str] = None
    search: str = ""
    current_note: Optional[NoteResponse] = None
    form: Optional[NoteForm] = None
    notifications: Tuple[Notification, ...] = ()

    @property
    def phase(self) -> str:
        return LOADING if self.loading else self.view.value

    @property
    def authenticated(self) -> bool:
        return self.view is not View.UNAUTHENTICATED

    @property
    def current_note_id(self) -> Optional[str]:
        return str(self.current_note.id) if self.current_note else None

    def find_note(self, note_id: str) -> Optional[NoteResponse]:
        for note in self.notes:
            if str(note.id) == note_id:
                return note
        if self.current_note is not None and str(self.current_note.id) == note_id:
            return self.current_note
        return None


def build_tag_index(notes: Iterable[NoteResponse]) -> Tuple[str, ...]:
    """Distinct non-blank tags, trimmed and sorted."""
    return tuple(sorted({tag.strip() for note in notes for tag in note.tags if tag.strip()}))


def parse_tags_input(text: str) -> List[str]:
    """'home, todo,, work ' -> ['home', 'todo', 'work']"""
    return [tag.strip() for tag in text.split(",") if tag.strip()]


def with_snapshot(
    state: ClientState,
    notes: Iterable[NoteResponse],
    active_tag: Optional[str],
    search: str,
) -> ClientState:
    """Install a fresh List response together with the filters that produced it."""
    snapshot = tuple(notes)
    return replace(
        state,
        notes=snapshot,
        tags=build_tag_index(snapshot),
        active_tag=active_tag,
        search=search,
    )


def notify(state: ClientState, message: str, kind: str, now: float) -> ClientState:
    notification = Notification(message=message, kind=kind, expires_at=now + NOTIFICATION_TTL)
    return replace(state, notifications=state.notifications + (notification,))


def dismiss(state: ClientState, notification_id: str) -> ClientState:
    remaining = tuple(n for n in state.notifications if n.id != notification_id)
    return replace(state, notifications=remaining)


def prune_notifications(state: ClientState, now: float) -> ClientState:
    remaining = tuple(n for n in state.notifications if n.expires_at > now)
    if len(remaining) == len(state.notifications):
        return state
    return replace(state, notifications=remaining)


def reset_session(state: ClientState) -> ClientState:
    """Back to UNAUTHENTICATED with the snapshot discarded; notifications survive."""
    return ClientState(notifications=state.notifications)
