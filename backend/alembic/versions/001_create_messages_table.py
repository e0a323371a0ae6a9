"""Create messages table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `messages` table backing the message wall.
How:   PostgreSQL: UUID primary key generated server-side, TIMESTAMP WITH TIME ZONE.

Rollback: downgrade() drops the table entirely (destructive - all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "messages",

        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),

        # Required text; emptiness is rejected by the API before insert
        sa.Column("content", sa.Text(), nullable=False),

        sa.Column("image_url", sa.Text(), nullable=True),

        # Nullable for rows written by other clients; NULL reads as 0
        sa.Column(
            "likes",
            sa.Integer(),
            nullable=True,
            server_default=sa.text("0"),
        ),

        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),

        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("likes IS NULL OR likes >= 0", name="ck_messages_likes_non_negative"),
    )

    # Listing is always newest first
    op.create_index(
        "idx_messages_created_at",
        "messages",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_messages_created_at", table_name="messages")
    op.drop_table("messages")
