"""
MessageWall Backend - Message SQLAlchemy Model
================================================

What:  ORM model representing the `messages` table.
Who:   Used by MessageService for reads and writes, and by Alembic for schema management.

Table Design Rationale:
    - UUID primary key: opaque, assigned at insert, never reused
    - content: required free text (emptiness is rejected in the service layer)
    - image_url: optional reference to an externally hosted image, not validated
    - likes: counter, nullable for rows written by other clients; NULL reads as 0
    - created_at: UTC with timezone; the only sort key

    Index on created_at DESC:
        The listing endpoint always returns newest first.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Message(Base):
    """
    A single wall post with a like counter.

    Lifecycle:
        1. Created by POST /api/messages with likes = 0
        2. likes adjusted by POST /api/messages/{id}/like
        3. Never deleted
    """

    __tablename__ = "messages"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    likes: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        default=0,
        server_default=text("0"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_messages_created_at", created_at.desc()),
        CheckConstraint("likes IS NULL OR likes >= 0", name="ck_messages_likes_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, likes={self.likes}, created_at='{self.created_at}')>"
