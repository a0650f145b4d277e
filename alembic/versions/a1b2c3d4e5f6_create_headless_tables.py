"""Create headless CMS tables

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-17 12:00:00.000000

This migration adds:
- users table referenced by entries as createdBy / updatedBy
- cms_content_models table holding content model definitions
- cms_content_entries table holding entries of every model
"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_username", "users", ["username"])

    op.create_table(
        "cms_content_models",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("model_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("fields", sa.JSON(), nullable=False),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_on", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cms_content_models_id", "cms_content_models", ["id"])
    op.create_index("ix_cms_content_models_model_id", "cms_content_models", ["model_id"], unique=True)

    op.create_table(
        "cms_content_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("model_id", sa.String(), nullable=False),
        sa.Column("values", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("updated_by", sa.Integer(), nullable=True),
        sa.Column("created_on", sa.DateTime(), nullable=False),
        sa.Column("updated_on", sa.DateTime(), nullable=False),
        sa.Column("saved_on", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
        sa.ForeignKeyConstraint(["updated_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cms_content_entries_id", "cms_content_entries", ["id"])
    op.create_index("idx_content_entry_model", "cms_content_entries", ["model_id"])


def downgrade() -> None:
    op.drop_index("idx_content_entry_model", table_name="cms_content_entries")
    op.drop_index("ix_cms_content_entries_id", table_name="cms_content_entries")
    op.drop_table("cms_content_entries")
    op.drop_index("ix_cms_content_models_model_id", table_name="cms_content_models")
    op.drop_index("ix_cms_content_models_id", table_name="cms_content_models")
    op.drop_table("cms_content_models")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
