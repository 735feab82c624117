"""
Marknote Client — Derived Views
===============================

What:  Render-ready view models computed from a ClientState: the note grid,
       the tag sidebar and the detail pane. Markdown stays as source; turning
       it into HTML is the presentation layer's job.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Tuple

from marknote.client.state import ClientState, View

PREVIEW_LENGTH = 100
ALL_NOTES_LABEL = "All Notes"
EMPTY_GRID_MESSAGE = "No notes found"


@dataclass(frozen=True)
class NoteCard:
    id: str
    title: str
    preview: str
    created_on: date
    tags: Tuple[str, ...]


@dataclass(frozen=True)
class GridView:
    cards: Tuple[NoteCard, ...]

    @property
    def is_empty(self) -> bool:
        return not self.cards

    @property
    def empty_message(self) -> Optional[str]:
        return EMPTY_GRID_MESSAGE if self.is_empty else None


@dataclass(frozen=True)
class TagButton:
    label: str
    tag: Optional[str]  # None is the "All Notes" pseudo-tag
    active: bool


@dataclass(frozen=True)
class DetailView:
    id: str
    title: str
    content: str
    created_at: datetime
    tags: Tuple[str, ...]


def preview_text(content: str, length: int = PREVIEW_LENGTH) -> str:
    if len(content) <= length:
        return content
    return content[:length] + "..."


def grid_view(state: ClientState) -> GridView:
    cards = tuple(
        NoteCard(
            id=str(note.id),
            title=note.title,
            preview=preview_text(note.content),
            created_on=note.created_at.date(),
            tags=tuple(tag for tag in note.tags if tag.strip()),
        )
        for note in state.notes
    )
    return GridView(cards=cards)


def tag_view(state: ClientState) -> List[TagButton]:
    buttons = [TagButton(label=ALL_NOTES_LABEL, tag=None, active=state.active_tag is None)]
    buttons.extend(
        TagButton(label=f"#{tag}", tag=tag, active=state.active_tag == tag)
        for tag in state.tags
    )
    return buttons


def detail_view(state: ClientState) -> Optional[DetailView]:
    note = state.current_note
    if note is None or state.view is not View.DETAIL_OPEN:
        return None
    return DetailView(
        id=str(note.id),
        title=note.title,
        content=note.content,
        created_at=note.created_at,
        tags=tuple(note.tags),
    )
