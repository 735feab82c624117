"""
Marknote Client
===============

Python-side client for the notes API: an httpx wrapper (NotesAPI), an
explicit immutable ClientState, the SyncController that moves between states,
and render-ready view models derived from a state.
"""

from marknote.client.api import ClientAuthError, ClientRequestError, NotesAPI
from marknote.client.controller import SyncController
from marknote.client.state import ClientState, Notification, NoteForm, View

__all__ = [
    "ClientAuthError",
    "ClientRequestError",
    "ClientState",
    "NoteForm",
    "NotesAPI",
    "Notification",
    "SyncController",
    "View",
]
