"""
Marknote Backend — Auth Request/Response Schemas
================================================

What:  Registration and login bodies, and the public user representation.
Who:   Used by the auth router and AuthService.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from marknote.schemas.common import ensure_utc

PASSWORD_MIN_LENGTH = 6


def _lower_email(v: str) -> str:
    """EmailStr normalizes the domain; accounts are matched on the whole address lower-cased."""
    return v.lower()


class LoginRequest(BaseModel):
    email: EmailStr = Field(description="Account email (case-insensitive)")
    password: str = Field(min_length=1, description="Account password")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _lower_email(v)


class RegisterRequest(BaseModel):
    """
    Body of POST /api/auth/register.

    Rules:
        - name: required, stripped, at most 100 characters
        - email: valid address, stored lower-cased, unique
        - password: at least 6 characters
    """
    name: str = Field(description="Display name")
    email: EmailStr = Field(description="Account email")
    password: str = Field(description="Password (min 6 characters)")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        if len(v) > 100:
            raise ValueError("Name cannot exceed 100 characters")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _lower_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        return v


class UserResponse(BaseModel):
    """Public user fields. The password hash never leaves the service layer."""
    id: uuid.UUID
    name: str
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("created_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class UserEnvelope(BaseModel):
    success: bool = Field(default=True)
    data: UserResponse
    message: Optional[str] = Field(default=None)
