"""
Marknote Client — NotesAPI Envelope Tests
=========================================

What:  How NotesAPI maps server responses onto results and exceptions.
How:   httpx.MockTransport serves canned bodies; no app or database.

What we test:
    ✅ Well-formed envelopes are unwrapped into models
    ✅ Success envelopes with missing or malformed data become ClientRequestError
    ✅ 401 becomes ClientAuthError, transport failures become ClientRequestError
    ✅ The controller turns a malformed response into a notification
"""

import httpx
import pytest
from datetime import datetime, timezone
from uuid import uuid4

from marknote.client.api import (
    CONNECTION_ERROR_MESSAGE,
    UNEXPECTED_RESPONSE_MESSAGE,
    ClientAuthError,
    ClientRequestError,
    NotesAPI,
)
from marknote.client.controller import SyncController
from marknote.client.state import ClientState, View


def note_json(title="Note") -> dict:
    now = datetime(2026, 3, 1, tzinfo=timezone.utc).isoformat()
    return {
        "id": str(uuid4()),
        "owner_id": str(uuid4()),
        "title": title,
        "content": "Body",
        "tags": [],
        "created_at": now,
        "updated_at": now,
    }


def api_returning(status_code: int, body) -> NotesAPI:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)

    return NotesAPI(httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test"))


class TestEnvelopeParsing:

    @pytest.mark.asyncio
    async def test_note_is_unwrapped(self):
        payload = note_json("Groceries")
        api = api_returning(200, {"success": True, "data": payload})

        result = await api.get_note(payload["id"])

        assert str(result.id) == payload["id"]
        assert result.title == "Groceries"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"success": True},
            {"success": True, "data": None},
            {"success": True, "data": {"title": "no id"}},
            {"success": True, "data": "note"},
        ],
    )
    async def test_malformed_note_data_is_a_request_error(self, body):
        api = api_returning(200, body)

        with pytest.raises(ClientRequestError) as exc_info:
            await api.get_note(str(uuid4()))

        assert exc_info.value.message == UNEXPECTED_RESPONSE_MESSAGE
        assert not isinstance(exc_info.value, ClientAuthError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"success": True, "count": 0},
            {"success": True, "data": {"id": "x"}},
            {"success": True, "data": [{"title": "no id"}]},
            {"success": True, "data": 3},
        ],
    )
    async def test_malformed_list_data_is_a_request_error(self, body):
        api = api_returning(200, body)

        with pytest.raises(ClientRequestError) as exc_info:
            await api.list_notes()

        assert exc_info.value.message == UNEXPECTED_RESPONSE_MESSAGE

    @pytest.mark.asyncio
    async def test_malformed_user_data_is_a_request_error(self):
        api = api_returning(200, {"success": True, "data": {"name": "Alice"}})

        with pytest.raises(ClientRequestError):
            await api.me()

    @pytest.mark.asyncio
    async def test_unauthorized_is_an_auth_error(self):
        api = api_returning(401, {"success": False, "message": "Please log in to access this resource"})

        with pytest.raises(ClientAuthError) as exc_info:
            await api.list_notes()

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Please log in to access this resource"

    @pytest.mark.asyncio
    async def test_transport_failure_is_a_request_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        api = NotesAPI(httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test"))

        with pytest.raises(ClientRequestError) as exc_info:
            await api.list_notes()

        assert exc_info.value.message == CONNECTION_ERROR_MESSAGE


class TestControllerWithMalformedResponse:

    @pytest.mark.asyncio
    async def test_open_note_keeps_state_and_notifies(self):
        controller = SyncController(
            api_returning(200, {"success": True}), clock=lambda: 100.0
        )
        state = ClientState(view=View.IDLE)

        result = await controller.open_note(state, str(uuid4()))

        assert result.view is View.IDLE
        assert result.current_note is None
        assert [n.message for n in result.notifications] == [UNEXPECTED_RESPONSE_MESSAGE]
