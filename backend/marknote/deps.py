"""
Marknote Backend — Request Dependencies
=======================================

What:  Resolves the caller's identity from the signed session cookie.
How:   SessionMiddleware (main.py) decodes the cookie into request.session;
       the login and register routes store the user id there.
Who:   Every notes route depends on get_current_user_id, so an anonymous
       request fails with 401 before any note operation runs.
"""

from uuid import UUID

from fastapi import Request

from marknote.exceptions import AuthenticationRequiredError

SESSION_USER_KEY = "user_id"


def get_current_user_id(request: Request) -> UUID:
    """
    Return the authenticated user's id.

    Raises:
        AuthenticationRequiredError: no session, or a session holding a
            value that is not a user id (→ 401)
    """
    raw = request.session.get(SESSION_USER_KEY)
    if not raw:
        raise AuthenticationRequiredError()
    try:
        return UUID(str(raw))
    except ValueError:
        request.session.clear()
        raise AuthenticationRequiredError()


def start_session(request: Request, user_id: UUID) -> None:
    """Bind the session cookie to `user_id`, dropping any previous identity."""
    request.session.clear()
    request.session[SESSION_USER_KEY] = str(user_id)


def end_session(request: Request) -> None:
    request.session.clear()
