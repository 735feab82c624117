"""
Marknote Client — Sync Controller
=================================

What:  Turns user intents (log in, pick a tag, search, open, edit, save,
       delete) into API calls and returns the next ClientState.
How:   Every handler is `async def handler(state, ...) -> ClientState`.
       Requests run through `_run`, which:
         1. rejects a second submission of an action already in flight,
         2. publishes the LOADING phase to `on_change`,
         3. on ClientAuthError resets to UNAUTHENTICATED,
         4. on any other failure keeps the prior state and adds an error
            notification.
       The server stays the source of truth: every mutation is followed by a
       fresh List call rather than patching the local snapshot.
"""

import logging
import time
from dataclasses import replace
from typing import Any, Awaitable, Callable, NamedTuple, Optional, Set

from marknote.client.api import ClientAuthError, ClientRequestError, NotesAPI
from marknote.client.state import (
    ClientState,
    NoteForm,
    View,
    notify,
    parse_tags_input,
    reset_session,
    with_snapshot,
)
from marknote.exceptions import ValidationError
from marknote.schemas.note import validate_note_payload

logger = logging.getLogger(__name__)

StateListener = Callable[[ClientState], None]


class _Outcome(NamedTuple):
    state: ClientState
    value: Any
    ok: bool


class SyncController:
    """Stateless between calls apart from the in-flight action set."""

    def __init__(
        self,
        api: NotesAPI,
        on_change: Optional[StateListener] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._api = api
        self._on_change = on_change
        self._clock = clock
        self._in_flight: Set[str] = set()

    # ── Session ───────────────────────────────────────────────────────────

    async def probe_session(self, state: ClientState) -> ClientState:
        """Check for an existing session; stays UNAUTHENTICATED quietly if none."""
        outcome = await self._run(state, "probe", self._api.me, quiet_auth=True)
        if not outcome.ok:
            return outcome.state
        return await self.refresh(replace(outcome.state, view=View.IDLE, user=outcome.value))

    async def login(self, state: ClientState, email: str, password: str) -> ClientState:
        outcome = await self._run(state, "login", lambda: self._api.login(email, password))
        if not outcome.ok:
            return outcome.state
        next_state = replace(reset_session(outcome.state), view=View.IDLE, user=outcome.value)
        next_state = self._notify(next_state, "Logged in successfully!", "success")
        return await self.refresh(next_state)

    async def register(
        self, state: ClientState, name: str, email: str, password: str
    ) -> ClientState:
        outcome = await self._run(
            state, "register", lambda: self._api.register(name, email, password)
        )
        if not outcome.ok:
            return outcome.state
        next_state = replace(reset_session(outcome.state), view=View.IDLE, user=outcome.value)
        next_state = self._notify(next_state, "Account created successfully!", "success")
        return await self.refresh(next_state)

    async def logout(self, state: ClientState) -> ClientState:
        outcome = await self._run(state, "logout", self._api.logout)
        if not outcome.ok:
            return outcome.state
        return self._publish(
            self._notify(reset_session(outcome.state), "Logged out successfully!", "success")
        )

    # ── List & filters ────────────────────────────────────────────────────

    async def refresh(self, state: ClientState) -> ClientState:
        """Re-fetch the list with the current filters."""
        return await self._fetch_list(state, state.active_tag, state.search)

    async def select_tag(self, state: ClientState, tag: Optional[str]) -> ClientState:
        """`None` selects "All Notes"."""
        tag = tag.strip() if tag else None
        return await self._fetch_list(state, tag or None, state.search)

    async def submit_search(self, state: ClientState, term: str) -> ClientState:
        return await self._fetch_list(state, state.active_tag, term.strip())

    async def clear_search(self, state: ClientState) -> ClientState:
        return await self._fetch_list(state, state.active_tag, "")

    async def _fetch_list(
        self, state: ClientState, tag: Optional[str], search: str
    ) -> ClientState:
        outcome = await self._run(
            state, "list", lambda: self._api.list_notes(tag=tag, search=search or None)
        )
        if not outcome.ok:
            return outcome.state
        return self._publish(with_snapshot(outcome.state, outcome.value, tag, search))

    # ── Detail ────────────────────────────────────────────────────────────

    async def open_note(self, state: ClientState, note_id: str) -> ClientState:
        outcome = await self._run(state, "open", lambda: self._api.get_note(note_id))
        if not outcome.ok:
            return outcome.state
        return self._publish(
            replace(outcome.state, view=View.DETAIL_OPEN, current_note=outcome.value, form=None)
        )

    def close_note(self, state: ClientState) -> ClientState:
        return self._publish(replace(state, view=View.IDLE, current_note=None))

    # ── Editing ───────────────────────────────────────────────────────────

    def start_create(self, state: ClientState) -> ClientState:
        if not state.authenticated:
            return state
        form = NoteForm(return_view=state.view if state.view is not View.EDITING else View.IDLE)
        return self._publish(replace(state, view=View.EDITING, form=form))

    def start_edit(self, state: ClientState, note_id: Optional[str] = None) -> ClientState:
        """Prefill the form from the local snapshot; defaults to the open note."""
        note_id = note_id or state.current_note_id
        note = state.find_note(note_id) if note_id else None
        if note is None:
            return self._publish(self._notify(state, "Note not found", "error"))
        form = NoteForm(
            return_view=state.view if state.view is not View.EDITING else View.IDLE,
            note_id=str(note.id),
            title=note.title,
            content=note.content,
            tags_text=", ".join(note.tags),
        )
        return self._publish(replace(state, view=View.EDITING, form=form))

    def cancel_edit(self, state: ClientState) -> ClientState:
        if state.form is None:
            return state
        view = state.form.return_view
        if view is View.DETAIL_OPEN and state.current_note is None:
            view = View.IDLE
        return self._publish(replace(state, view=view, form=None))

    async def save_note(
        self, state: ClientState, title: str, content: str, tags_text: str = ""
    ) -> ClientState:
        """
        Validate locally, then Create or Update depending on the form.

        Editing the note that is open in the detail pane re-fetches it and
        returns to DETAIL_OPEN; otherwise the editor closes to IDLE. The list
        is refreshed either way.
        """
        form = state.form
        if form is None:
            return state
        form = replace(form, title=title, content=content, tags_text=tags_text)
        state = replace(state, form=form)

        try:
            payload = validate_note_payload(
                {"title": title, "content": content, "tags": parse_tags_input(tags_text)}
            )
        except ValidationError as e:
            return self._publish(self._notify(state, e.message, "error"))

        if form.is_edit:
            call = lambda: self._api.update_note(form.note_id, payload)  # noqa: E731
        else:
            call = lambda: self._api.create_note(payload)  # noqa: E731

        outcome = await self._run(state, "save", call)
        if not outcome.ok:
            return outcome.state

        message = "Note updated successfully!" if form.is_edit else "Note created successfully!"
        next_state = self._notify(
            replace(outcome.state, view=View.IDLE, form=None), message, "success"
        )
        if form.is_edit and form.note_id == state.current_note_id:
            next_state = await self.open_note(next_state, form.note_id)
            if next_state.view is not View.DETAIL_OPEN:
                next_state = replace(next_state, current_note=None)
        else:
            next_state = replace(next_state, current_note=None)
        return await self.refresh(next_state)

    async def delete_current(self, state: ClientState) -> ClientState:
        note_id = state.current_note_id
        if note_id is None:
            return state
        outcome = await self._run(state, "delete", lambda: self._api.delete_note(note_id))
        if not outcome.ok:
            return outcome.state
        next_state = replace(outcome.state, view=View.IDLE, current_note=None, form=None)
        next_state = self._notify(next_state, "Note deleted successfully!", "success")
        return await self.refresh(next_state)

    # ── Internals ─────────────────────────────────────────────────────────

    async def _run(
        self,
        state: ClientState,
        action: str,
        call: Callable[[], Awaitable[Any]],
        quiet_auth: bool = False,
    ) -> _Outcome:
        if action in self._in_flight:
            logger.debug("Ignoring duplicate '%s' while one is in flight", action)
            return _Outcome(state, None, False)

        self._in_flight.add(action)
        self._publish(replace(state, loading=action))
        try:
            value = await call()
        except ClientAuthError as e:
            logger.info("'%s' rejected: session is not authenticated", action)
            next_state = reset_session(state)
            if not quiet_auth:
                next_state = self._notify(next_state, e.message, "error")
            return _Outcome(self._publish(next_state), None, False)
        except ClientRequestError as e:
            logger.warning("'%s' failed: %s", action, e.message)
            return _Outcome(self._publish(self._notify(state, e.message, "error")), None, False)
        finally:
            self._in_flight.discard(action)

        return _Outcome(state, value, True)

    def _notify(self, state: ClientState, message: str, kind: str) -> ClientState:
        return notify(state, message, kind, now=self._clock())

    def _publish(self, state: ClientState) -> ClientState:
        if self._on_change is not None:
            self._on_change(state)
        return state
