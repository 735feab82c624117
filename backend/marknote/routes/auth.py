"""
Marknote Backend — Auth Route Handlers
======================================

What:  Registration, login, session probe and logout under /api/auth.
How:   Credentials are checked by AuthService; on success the user id is
       written to the signed session cookie, which every notes route reads.

Route Inventory:
    POST /api/auth/register   create account and log in (201)
    POST /api/auth/login      log in
    GET  /api/auth/me         current user, or 401
    GET  /api/auth/logout     clear the session (always succeeds)
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from marknote.database import get_db_session
from marknote.deps import end_session, get_current_user_id, start_session
from marknote.exceptions import AuthenticationRequiredError
from marknote.schemas.auth import LoginRequest, RegisterRequest, UserEnvelope
from marknote.schemas.common import AckResponse, ErrorResponse
from marknote.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=UserEnvelope,
    responses={400: {"description": "Invalid input or email taken", "model": ErrorResponse}},
    summary="Create an account",
)
async def register(
    payload: RegisterRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> UserEnvelope:
    user = await auth_service.register(db=db, payload=payload)
    start_session(request, user.id)
    return UserEnvelope(data=user, message="Account created successfully")


@router.post(
    "/login",
    response_model=UserEnvelope,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Log in",
)
async def login(
    payload: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> UserEnvelope:
    user = await auth_service.authenticate(db=db, payload=payload)
    start_session(request, user.id)
    logger.info("User logged in: %s", user.id)
    return UserEnvelope(data=user, message="Logged in successfully")


@router.get(
    "/me",
    response_model=UserEnvelope,
    responses={401: {"description": "Not logged in", "model": ErrorResponse}},
    summary="Current user",
)
async def me(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> UserEnvelope:
    user_id = get_current_user_id(request)
    try:
        user = await auth_service.get_user(db=db, user_id=user_id)
    except AuthenticationRequiredError:
        # Session outlived its account
        end_session(request)
        raise
    return UserEnvelope(data=user)


@router.get(
    "/logout",
    response_model=AckResponse,
    summary="Log out",
)
async def logout(request: Request) -> AckResponse:
    end_session(request)
    return AckResponse(message="Logged out successfully")
