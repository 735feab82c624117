"""
Marknote Client — State & View Tests
====================================

What:  Pure helpers on ClientState: tag index, tag parsing, notifications,
       session reset, and the grid/tag/detail view models.
"""

import pytest
from dataclasses import replace
from datetime import datetime, timezone
from uuid import uuid4

from marknote.client.state import (
    LOADING,
    NOTIFICATION_TTL,
    ClientState,
    View,
    build_tag_index,
    dismiss,
    notify,
    parse_tags_input,
    prune_notifications,
    reset_session,
    with_snapshot,
)
from marknote.client.views import (
    ALL_NOTES_LABEL,
    EMPTY_GRID_MESSAGE,
    detail_view,
    grid_view,
    preview_text,
    tag_view,
)
from marknote.schemas.note import NoteResponse

OWNER = uuid4()


def note(title="Note", content="Body", tags=None, created_at=None) -> NoteResponse:
    when = created_at or datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)
    return NoteResponse(
        id=uuid4(),
        owner_id=OWNER,
        title=title,
        content=content,
        tags=tags or [],
        created_at=when,
        updated_at=when,
    )


class TestTagIndex:

    def test_distinct_trimmed_sorted_without_blanks(self):
        notes = [note(tags=["work", " home", ""]), note(tags=["  ", "work", "alpha"])]

        assert build_tag_index(notes) == ("alpha", "home", "work")

    def test_empty_snapshot(self):
        assert build_tag_index([]) == ()

    def test_with_snapshot_recomputes_tags_and_records_filters(self):
        state = ClientState(view=View.IDLE, tags=("stale",))

        result = with_snapshot(state, [note(tags=["b", "a"])], active_tag="a", search="x")

        assert result.tags == ("a", "b")
        assert result.active_tag == "a"
        assert result.search == "x"
        assert len(result.notes) == 1


class TestParseTagsInput:

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("home, todo", ["home", "todo"]),
            (" a ,, b ,", ["a", "b"]),
            ("", []),
            ("  ,  ", []),
            ("dup, dup", ["dup", "dup"]),
        ],
    )
    def test_parse(self, text, expected):
        assert parse_tags_input(text) == expected


class TestNotifications:

    def test_notify_sets_expiry(self):
        state = notify(ClientState(), "Saved", "success", now=100.0)

        (n,) = state.notifications
        assert n.message == "Saved"
        assert n.kind == "success"
        assert n.expires_at == 100.0 + NOTIFICATION_TTL

    def test_dismiss_removes_only_that_notification(self):
        state = notify(ClientState(), "one", "error", now=0.0)
        state = notify(state, "two", "error", now=0.0)
        first = state.notifications[0]

        state = dismiss(state, first.id)

        assert [n.message for n in state.notifications] == ["two"]

    def test_prune_drops_expired(self):
        state = notify(ClientState(), "old", "error", now=0.0)
        state = notify(state, "new", "error", now=4.0)

        pruned = prune_notifications(state, now=NOTIFICATION_TTL + 1.0)

        assert [n.message for n in pruned.notifications] == ["new"]

    def test_prune_without_expiry_returns_same_state(self):
        state = notify(ClientState(), "fresh", "error", now=0.0)
        assert prune_notifications(state, now=1.0) is state


class TestClientState:

    def test_phase_reports_loading_while_an_action_runs(self):
        state = ClientState(view=View.DETAIL_OPEN)

        assert state.phase == "detail_open"
        assert replace(state, loading="open").phase == LOADING

    def test_reset_session_discards_snapshot_but_keeps_notifications(self):
        state = notify(
            ClientState(
                view=View.DETAIL_OPEN,
                notes=(note(),),
                tags=("a",),
                active_tag="a",
                search="milk",
            ),
            "Bye",
            "success",
            now=0.0,
        )

        result = reset_session(state)

        assert result.view is View.UNAUTHENTICATED
        assert result.notes == ()
        assert result.tags == ()
        assert result.active_tag is None
        assert result.search == ""
        assert len(result.notifications) == 1

    def test_find_note_checks_snapshot_then_open_note(self):
        listed, opened = note("listed"), note("opened")
        state = ClientState(view=View.DETAIL_OPEN, notes=(listed,), current_note=opened)

        assert state.find_note(str(listed.id)) is listed
        assert state.find_note(str(opened.id)) is opened
        assert state.find_note(str(uuid4())) is None


class TestViews:

    def test_preview_truncates_long_content(self):
        assert preview_text("x" * 100) == "x" * 100
        assert preview_text("x" * 101) == "x" * 100 + "..."

    def test_grid_cards(self):
        state = ClientState(
            view=View.IDLE,
            notes=(note("Groceries", content="y" * 150, tags=["home", " "]),),
        )

        grid = grid_view(state)

        (card,) = grid.cards
        assert card.title == "Groceries"
        assert card.preview.endswith("...")
        assert card.created_on.isoformat() == "2026-03-01"
        assert card.tags == ("home",)
        assert grid.empty_message is None

    def test_empty_grid(self):
        grid = grid_view(ClientState(view=View.IDLE))

        assert grid.is_empty
        assert grid.empty_message == EMPTY_GRID_MESSAGE

    def test_tag_view_marks_active_tag(self):
        state = ClientState(view=View.IDLE, tags=("home", "work"), active_tag="work")

        buttons = tag_view(state)

        assert [b.label for b in buttons] == [ALL_NOTES_LABEL, "#home", "#work"]
        assert [b.active for b in buttons] == [False, False, True]
        assert buttons[0].tag is None

    def test_all_notes_is_active_without_a_tag(self):
        buttons = tag_view(ClientState(view=View.IDLE))

        assert len(buttons) == 1
        assert buttons[0].active

    def test_detail_view_only_when_open(self):
        opened = note("Open me", content="# Title\n\ntext", tags=["a"])

        assert detail_view(ClientState(view=View.IDLE, current_note=opened)) is None

        detail = detail_view(ClientState(view=View.DETAIL_OPEN, current_note=opened))
        assert detail.title == "Open me"
        assert detail.content == "# Title\n\ntext"
        assert detail.tags == ("a",)
