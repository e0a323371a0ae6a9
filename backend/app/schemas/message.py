"""
MessageWall Backend - Pydantic Request/Response Schemas
=========================================================

What:  Pydantic models defining the API contract between frontend and backend.
How:   FastAPI uses these models to validate request bodies, serialize responses,
       and generate OpenAPI documentation.

Request bodies deliberately keep `content` optional at the schema level: an
absent or empty value must come back as a 400 with a readable message from
the service layer, not as FastAPI's generic 422.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class MessageCreate(BaseModel):
    """Body of POST /api/messages."""
    content: Optional[str] = Field(default=None, description="Message text (required, non-empty)")
    image_url: Optional[str] = Field(default=None, description="Optional image URL, stored as-is")


class LikeRequest(BaseModel):
    """
    Body of POST /api/messages/{id}/like.

    Under the directional policy, "add" increments and every other value
    (including an absent field or body) decrements. The increment policy
    ignores the body entirely.
    """
    action: Optional[Any] = Field(default=None, description="'add' increments, any other value decrements")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    """Full representation of a stored message."""
    id: uuid.UUID = Field(description="Unique message identifier")
    content: str = Field(description="Message text")
    image_url: Optional[str] = Field(default=None, description="Attached image URL, if any")
    likes: int = Field(default=0, ge=0, description="Current like count")
    created_at: datetime = Field(description="When the message was created (UTC ISO 8601)")

    model_config = {"from_attributes": True}

    @field_validator("likes", mode="before")
    @classmethod
    def default_missing_likes(cls, v: Optional[int]) -> int:
        """Rows with a NULL counter are reported as 0 likes."""
        return 0 if v is None else v


class CreateMessageResponse(BaseModel):
    success: bool = True
    message: str = Field(default="Message saved", description="Human-readable acknowledgment")
    data: MessageResponse = Field(description="The stored message")


class LikeCountResponse(BaseModel):
    """Directional policy result: only the new counter value."""
    success: bool = True
    new_likes: int = Field(alias="newLikes", ge=0, description="Like count after the update")

    model_config = {"populate_by_name": True}


class LikeRecordResponse(BaseModel):
    """Increment policy result: the record re-read after the write."""
    success: bool = True
    data: MessageResponse


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body shared by every endpoint.

    Example:
        {"error": "Message content must not be empty", "request_id": "a1b2c3d4"}
    """
    error: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
