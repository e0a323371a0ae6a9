"""
MessageWall Backend - Message Service (Business Logic)
=======================================================

What:  List, create, and like/unlike messages.
How:   Receives an AsyncSession per call; holds only immutable configuration
       (like policy, update strategy), so one instance serves all requests.
Who:   Built once in the application lifespan; injected into route handlers.

Like/Unlike Flow (read_write, the default):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │  Read    │───▶│  Policy      │───▶│  UPDATE      │───▶│ Respond  │
    │  likes   │    │  (new count) │    │  likes = new │    │          │
    └──────────┘    └──────────────┘    └──────────────┘    └──────────┘

    Two concurrent requests for the same message can both read n and both
    write n±1, losing one update. The alternative strategies close this gap:

    atomic      One UPDATE computes clamp(coalesce(likes, 0) + delta) in the
                database and RETURNs the stored value. No read step.
    optimistic  Read n, then UPDATE ... WHERE likes = n (compare-and-swap).
                Zero matched rows means another request won; re-read and try
                again, up to like_max_attempts (tenacity).

Error Handling Strategy:
    Our own exceptions propagate unchanged. Anything else raised while talking
    to the database is logged and wrapped in StorageError (generic 500).
    A write failure after a successful read leaves the row untouched: the
    session dependency rolls the transaction back.
"""

import logging
from typing import Any, List, Optional, Union
from uuid import UUID

from sqlalchemy import case, desc, func, select, update
from sqlalchemy.exc import MultipleResultsFound, NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random,
)

from app.exceptions import (
    ConcurrentUpdateError,
    MessageNotFoundError,
    MessageWallError,
    StorageError,
    ValidationError,
)
from app.models.message import Message
from app.schemas.message import (
    CreateMessageResponse,
    LikeCountResponse,
    LikeRecordResponse,
    MessageCreate,
    MessageResponse,
)
from app.services.like_policy import DirectionalPolicy, LikePolicy

logger = logging.getLogger(__name__)

UPDATE_STRATEGIES = ("read_write", "atomic", "optimistic")

LikeResult = Union[LikeCountResponse, LikeRecordResponse]


def _parse_message_id(message_id: Union[UUID, str]) -> UUID:
    # A malformed id can never match a row, so it fails like an unknown one
    if isinstance(message_id, UUID):
        return message_id
    try:
        return UUID(str(message_id))
    except ValueError as e:
        raise MessageNotFoundError(message_id=str(message_id)) from e


class MessageService:
    """
    Business logic layer for message operations.

    Responsibilities:
        - list_messages(): every message, newest first
        - create_message(): validate content, then insert
        - like_message(): adjust the like counter under the configured policy
    """

    def __init__(
        self,
        policy: Optional[LikePolicy] = None,
        strategy: str = "read_write",
        max_attempts: int = 5,
    ):
        if strategy not in UPDATE_STRATEGIES:
            raise ValueError(
                f"Unknown like update strategy '{strategy}'. Must be one of: {UPDATE_STRATEGIES}"
            )
        self.policy = policy or DirectionalPolicy()
        self.strategy = strategy
        self.max_attempts = max_attempts

    # ── Listing ───────────────────────────────────────────────────────────

    async def list_messages(self, db: AsyncSession) -> List[MessageResponse]:
        """
        Return every message ordered by created_at descending.

        Query plan:
            SELECT * FROM messages ORDER BY created_at DESC
            → idx_messages_created_at
        """
        try:
            result = await db.execute(
                select(Message).order_by(desc(Message.created_at))
            )
            messages = result.scalars().all()
            return [MessageResponse.model_validate(m) for m in messages]
        except Exception as e:
            logger.error("Database error listing messages: %s", str(e), exc_info=True)
            raise StorageError(
                message="Could not read messages from the database.",
                context={"error_type": type(e).__name__},
            ) from e

    # ── Creation ──────────────────────────────────────────────────────────

    async def create_message(
        self, db: AsyncSession, payload: MessageCreate
    ) -> CreateMessageResponse:
        """
        Validate and store a new message.

        Raises:
            ValidationError: content missing or empty (checked before any DB call)
            StorageError: the insert failed
        """
        if not payload.content:
            raise ValidationError(
                message="Message content must not be empty",
                field="content",
            )

        try:
            message = Message(content=payload.content, image_url=payload.image_url)
            db.add(message)
            await db.flush()  # Assigns id, likes and created_at defaults
            logger.info("Message created: %s", message.id)
            return CreateMessageResponse(data=MessageResponse.model_validate(message))
        except Exception as e:
            logger.error("Database error creating message: %s", str(e), exc_info=True)
            raise StorageError(
                message="Could not save the message.",
                context={"error_type": type(e).__name__},
            ) from e

    # ── Like / Unlike ─────────────────────────────────────────────────────

    async def like_message(
        self,
        db: AsyncSession,
        message_id: Union[UUID, str],
        action: Any = None,
    ) -> LikeResult:
        """
        Adjust the like counter of one message and report the result.

        Args:
            db: Async database session (committed by the request dependency)
            message_id: Target message, as a UUID or its raw path segment
            action: "add" or anything else; only the directional policy reads it

        Returns:
            LikeCountResponse (directional) or LikeRecordResponse (increment)

        Raises:
            MessageNotFoundError: no row with this id, or the id is not a UUID
            ConcurrentUpdateError: optimistic strategy ran out of attempts
            StorageError: any other database failure
        """
        message_id = _parse_message_id(message_id)

        try:
            if self.strategy == "atomic":
                new_likes = await self._update_atomic(db, message_id, action)
            elif self.strategy == "optimistic":
                new_likes = await self._update_optimistic(db, message_id, action)
            else:
                new_likes = await self._update_read_write(db, message_id, action)

            logger.info(
                "Message %s likes -> %d (policy=%s, strategy=%s)",
                message_id, new_likes, self.policy.name, self.strategy,
            )

            if self.policy.returns_record:
                record = await self._fetch_message(db, message_id)
                return LikeRecordResponse(data=MessageResponse.model_validate(record))
            return LikeCountResponse(new_likes=new_likes)

        except MessageWallError:
            raise
        except Exception as e:
            logger.error(
                "Database error updating likes for %s: %s", message_id, str(e), exc_info=True
            )
            raise StorageError(
                message="Could not update the like count.",
                context={"message_id": str(message_id), "error_type": type(e).__name__},
            ) from e

    async def _read_likes(self, db: AsyncSession, message_id: UUID) -> Optional[int]:
        # Single-row fetch: zero or several matches both count as failure
        result = await db.execute(
            select(Message.likes).where(Message.id == message_id)
        )
        try:
            return result.scalar_one()
        except (NoResultFound, MultipleResultsFound) as e:
            raise MessageNotFoundError(message_id=str(message_id)) from e

    async def _fetch_message(self, db: AsyncSession, message_id: UUID) -> Message:
        result = await db.execute(
            select(Message)
            .where(Message.id == message_id)
            .execution_options(populate_existing=True)
        )
        try:
            return result.scalar_one()
        except (NoResultFound, MultipleResultsFound) as e:
            raise MessageNotFoundError(message_id=str(message_id)) from e

    async def _update_read_write(
        self, db: AsyncSession, message_id: UUID, action: Any
    ) -> int:
        current = await self._read_likes(db, message_id)
        new_likes = self.policy.apply(current, action)
        await db.execute(
            update(Message)
            .where(Message.id == message_id)
            .values(likes=new_likes)
            .execution_options(synchronize_session=False)
        )
        return new_likes

    async def _update_atomic(
        self, db: AsyncSession, message_id: UUID, action: Any
    ) -> int:
        stepped = func.coalesce(Message.likes, 0) + self.policy.delta(action)
        result = await db.execute(
            update(Message)
            .where(Message.id == message_id)
            .values(likes=case((stepped < 0, 0), else_=stepped))
            .returning(Message.likes)
            .execution_options(synchronize_session=False)
        )
        new_likes = result.scalar_one_or_none()
        if new_likes is None:
            raise MessageNotFoundError(message_id=str(message_id))
        return new_likes

    async def _update_optimistic(
        self, db: AsyncSession, message_id: UUID, action: Any
    ) -> int:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(ConcurrentUpdateError),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_random(0, 0.05),
            before_sleep=before_sleep_log(logger, logging.DEBUG),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                current = await self._read_likes(db, message_id)
                new_likes = self.policy.apply(current, action)
                unchanged = (
                    Message.likes.is_(None) if current is None else Message.likes == current
                )
                result = await db.execute(
                    update(Message)
                    .where(Message.id == message_id, unchanged)
                    .values(likes=new_likes)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    raise ConcurrentUpdateError(
                        attempts=attempt.retry_state.attempt_number,
                        context={"message_id": str(message_id), "seen": current},
                    )
        return new_likes
