"""
Marknote Client — HTTP API Wrapper
==================================

What:  Async access to /api/auth/* and /api/notes* over one httpx.AsyncClient.
How:   The AsyncClient's cookie jar carries the session cookie between calls.
       Every response is unwrapped from its envelope; failures become
       exceptions the sync controller turns into notifications.

Failure mapping:
    transport error (connect, read, timeout) → ClientRequestError
    HTTP 401                                 → ClientAuthError
    any other `success: false` / non-2xx     → ClientRequestError
    success envelope without usable `data`   → ClientRequestError
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from marknote.schemas.auth import UserResponse
from marknote.schemas.note import NotePayload, NoteResponse

logger = logging.getLogger(__name__)

CONNECTION_ERROR_MESSAGE = "Unable to connect to server. Please try again later."
UNEXPECTED_RESPONSE_MESSAGE = "Unexpected response from server"

ModelT = TypeVar("ModelT", bound=BaseModel)


class ClientRequestError(Exception):
    """A request failed; `message` is safe to show to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ClientAuthError(ClientRequestError):
    """The server rejected the session (HTTP 401)."""

    def __init__(self, message: str = "Please log in to continue"):
        super().__init__(message, status_code=401)


class NotesAPI:
    """
    Thin client for the Marknote REST API.

    Usage:
        async with NotesAPI.connect("http://localhost:8000") as api:
            await api.login("me@example.com", "secret")
            notes = await api.list_notes(tag="todo")
    """

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    @classmethod
    def connect(cls, base_url: str, **client_kwargs: Any) -> "NotesAPI":
        return cls(httpx.AsyncClient(base_url=base_url, **client_kwargs))

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "NotesAPI":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ── Auth ──────────────────────────────────────────────────────────────

    async def me(self) -> UserResponse:
        body = await self._request("GET", "/api/auth/me")
        return self._parse(body, UserResponse)

    async def login(self, email: str, password: str) -> UserResponse:
        body = await self._request(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )
        return self._parse(body, UserResponse)

    async def register(self, name: str, email: str, password: str) -> UserResponse:
        body = await self._request(
            "POST",
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        return self._parse(body, UserResponse)

    async def logout(self) -> None:
        await self._request("GET", "/api/auth/logout")

    # ── Notes ─────────────────────────────────────────────────────────────

    async def list_notes(
        self, tag: Optional[str] = None, search: Optional[str] = None
    ) -> List[NoteResponse]:
        params: Dict[str, str] = {}
        if tag:
            params["tag"] = tag
        if search:
            params["search"] = search
        body = await self._request("GET", "/api/notes", params=params)
        return self._parse_list(body, NoteResponse)

    async def get_note(self, note_id: str) -> NoteResponse:
        body = await self._request("GET", f"/api/notes/{note_id}")
        return self._parse(body, NoteResponse)

    async def create_note(self, payload: NotePayload) -> NoteResponse:
        body = await self._request("POST", "/api/notes", json=payload.model_dump())
        return self._parse(body, NoteResponse)

    async def update_note(self, note_id: str, payload: NotePayload) -> NoteResponse:
        body = await self._request("PUT", f"/api/notes/{note_id}", json=payload.model_dump())
        return self._parse(body, NoteResponse)

    async def delete_note(self, note_id: str) -> None:
        await self._request("DELETE", f"/api/notes/{note_id}")

    # ── Internals ─────────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, str(e))
            raise ClientRequestError(CONNECTION_ERROR_MESSAGE) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        message = body.get("message")
        if response.status_code == 401:
            raise ClientAuthError(message or "Please log in to continue")
        if response.is_error or not body.get("success", False):
            logger.warning("%s %s -> %d: %s", method, path, response.status_code, message)
            raise ClientRequestError(
                message or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
            )
        return body

    @staticmethod
    def _parse(body: Dict[str, Any], model: Type[ModelT]) -> ModelT:
        try:
            return model.model_validate(body["data"])
        except (KeyError, TypeError, PydanticValidationError) as e:
            logger.error("Malformed %s in response: %s", model.__name__, str(e))
            raise ClientRequestError(UNEXPECTED_RESPONSE_MESSAGE) from e

    @staticmethod
    def _parse_list(body: Dict[str, Any], model: Type[ModelT]) -> List[ModelT]:
        try:
            items = body["data"]
            if not isinstance(items, list):
                raise TypeError(f"expected a list, got {type(items).__name__}")
            return [model.model_validate(item) for item in items]
        except (KeyError, TypeError, PydanticValidationError) as e:
            logger.error("Malformed %s list in response: %s", model.__name__, str(e))
            raise ClientRequestError(UNEXPECTED_RESPONSE_MESSAGE) from e
