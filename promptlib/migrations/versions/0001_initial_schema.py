"""initial prompt library schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-10-02 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from promptlib.migrations.util import get_uuid_type, get_timestamp_default


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, prompts, tags, prompt_tags and votes."""
    uuid = get_uuid_type()
    now = get_timestamp_default()

    op.create_table(
        "profiles",
        sa.Column("id", uuid, nullable=False),
        sa.Column("username", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username", name="uq_profiles_username"),
    )

    op.create_table(
        "prompts",
        sa.Column("id", uuid, nullable=False),
        sa.Column("author_id", uuid, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["author_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_prompts_author_id", "prompts", ["author_id"])
    op.create_index("ix_prompts_created_at", "prompts", ["created_at"])
    op.create_index("ix_prompts_updated_at", "prompts", ["updated_at"])
    op.create_index("ix_prompts_deleted_at", "prompts", ["deleted_at"])

    op.create_table(
        "tags",
        sa.Column("id", uuid, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_tags_name"),
    )

    op.create_table(
        "prompt_tags",
        sa.Column("prompt_id", uuid, nullable=False),
        sa.Column("tag_id", uuid, nullable=False),
        sa.ForeignKeyConstraint(["prompt_id"], ["prompts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_id"], ["tags.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("prompt_id", "tag_id"),
    )
    op.create_index("ix_prompt_tags_tag_id", "prompt_tags", ["tag_id"])

    op.create_table(
        "votes",
        sa.Column("id", uuid, nullable=False),
        sa.Column("prompt_id", uuid, nullable=False),
        sa.Column("user_id", uuid, nullable=False),
        sa.Column("vote_value", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.ForeignKeyConstraint(["prompt_id"], ["prompts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("prompt_id", "user_id", name="uq_votes_prompt_user"),
        sa.CheckConstraint("vote_value IN (-1, 0, 1)", name="ck_votes_vote_value"),
    )
    op.create_index("ix_votes_prompt_id", "votes", ["prompt_id"])
    op.create_index("ix_votes_user_id", "votes", ["user_id"])


def downgrade() -> None:
    """Drop the prompt library schema."""
    op.drop_index("ix_votes_user_id", table_name="votes")
    op.drop_index("ix_votes_prompt_id", table_name="votes")
    op.drop_table("votes")
    op.drop_index("ix_prompt_tags_tag_id", table_name="prompt_tags")
    op.drop_table("prompt_tags")
    op.drop_table("tags")
    op.drop_index("ix_prompts_deleted_at", table_name="prompts")
    op.drop_index("ix_prompts_updated_at", table_name="prompts")
    op.drop_index("ix_prompts_created_at", table_name="prompts")
    op.drop_index("ix_prompts_author_id", table_name="prompts")
    op.drop_table("prompts")
    op.drop_table("profiles")
