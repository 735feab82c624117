"""
Marknote Backend — User SQLAlchemy Model
========================================

What:  ORM model representing the `users` table.
Who:   Used by AuthService (registration, login, session probe) and as the
       owner reference of every Note.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from marknote.database import Base
from marknote.models.note import utcnow


class User(Base):
    """An account that owns notes. Emails are stored lower-cased and unique."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login identifier, lower-cased",
    )

    # Format: pbkdf2:sha256:<iterations>$<salt>$<digest hex>
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
