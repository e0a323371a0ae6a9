"""
MessageWall Backend - Message Route Handlers
==============================================

What:  GET /api/messages, POST /api/messages, POST /api/messages/{id}/like.
How:   Extracts path and body, delegates to MessageService, returns JSON.
Who:   Called by the frontend message wall.

Routes stay thin: validation rules, the like policy and the update strategy
all live in MessageService, which is injected from app.state.
"""

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.message import (
    CreateMessageResponse,
    ErrorResponse,
    LikeCountResponse,
    LikeRecordResponse,
    LikeRequest,
    MessageCreate,
    MessageResponse,
)
from app.services.message_service import MessageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Messages"])


def get_message_service(request: Request) -> MessageService:
    """Returns the MessageService built at startup."""
    return request.app.state.message_service


@router.get(
    "/messages",
    response_model=List[MessageResponse],
    responses={
        500: {"description": "Messages could not be read", "model": ErrorResponse},
    },
    summary="List all messages, newest first",
)
async def list_messages(
    db: AsyncSession = Depends(get_db_session),
    service: MessageService = Depends(get_message_service),
) -> List[MessageResponse]:
    return await service.list_messages(db)


@router.post(
    "/messages",
    response_model=CreateMessageResponse,
    responses={
        400: {"description": "Content missing or empty", "model": ErrorResponse},
        500: {"description": "Message could not be stored", "model": ErrorResponse},
    },
    summary="Create a message",
)
async def create_message(
    payload: MessageCreate,
    db: AsyncSession = Depends(get_db_session),
    service: MessageService = Depends(get_message_service),
) -> CreateMessageResponse:
    """
    Store a new message with zero likes.

    Empty content is rejected with 400 before the database is touched.
    """
    return await service.create_message(db, payload)


@router.post(
    "/messages/{message_id}/like",
    response_model=Union[LikeCountResponse, LikeRecordResponse],
    responses={
        500: {"description": "Unknown message or storage failure", "model": ErrorResponse},
    },
    summary="Like or unlike a message",
    description=(
        "Directional policy (default): body {\"action\": \"add\"} increments, any other "
        "action decrements, never below zero; responds with {success, newLikes}. "
        "Increment policy: body ignored, always +1; responds with {success, data}."
    ),
)
async def like_message(
    message_id: str,
    payload: Optional[LikeRequest] = None,
    db: AsyncSession = Depends(get_db_session),
    service: MessageService = Depends(get_message_service),
) -> Union[LikeCountResponse, LikeRecordResponse]:
    action = payload.action if payload else None
    return await service.like_message(db, message_id, action)
