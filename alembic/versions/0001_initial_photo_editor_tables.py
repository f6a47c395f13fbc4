# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""initial photo editor tables

Revision ID: 0001_initial
Revises:
Create Date: 2025-12-15 10:00:00.000000+08:00

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLE_KWARGS = {
    "mysql_engine": "InnoDB",
    "mysql_charset": "utf8mb4",
    "mysql_collate": "utf8mb4_unicode_ci",
}


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "photo_sessions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=256), nullable=False),
        sa.Column("first_prompt", sa.Text(), nullable=True),
        sa.Column("task_count", sa.Integer(), nullable=False),
        sa.Column("last_activity", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        **TABLE_KWARGS,
    )
    op.create_index("ix_photo_sessions_user_id", "photo_sessions", ["user_id"])
    op.create_index(
        "ix_photo_sessions_user_last_activity",
        "photo_sessions",
        ["user_id", "last_activity"],
    )

    op.create_table(
        "photo_tasks",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("session_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("prompt", sa.Text(), nullable=False),
        sa.Column("input_images", sa.JSON(), nullable=True),
        sa.Column("output_image_url", sa.String(length=1024), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "PENDING",
                "PROCESSING",
                "COMPLETED",
                "FAILED",
                name="phototaskstatus",
            ),
            nullable=False,
        ),
        sa.Column("provider_job_id", sa.String(length=128), nullable=True),
        sa.Column("provider_model", sa.String(length=128), nullable=False),
        sa.Column("credits_cost", sa.Integer(), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("sequence_order", sa.Integer(), nullable=False),
        sa.Column("finalize_claimed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        **TABLE_KWARGS,
    )
    op.create_index("ix_photo_tasks_session_id", "photo_tasks", ["session_id"])
    op.create_index("ix_photo_tasks_user_id", "photo_tasks", ["user_id"])
    op.create_index(
        "ix_photo_tasks_provider_job_id", "photo_tasks", ["provider_job_id"]
    )
    op.create_index(
        "ix_photo_tasks_session_sequence",
        "photo_tasks",
        ["session_id", "sequence_order"],
    )

    op.create_table(
        "user_credits",
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("balance", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
        **TABLE_KWARGS,
    )

    op.create_table(
        "credit_transactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column(
            "type",
            sa.Enum("GRANT", "CONSUME", name="credittransactiontype"),
            nullable=False,
        ),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
        **TABLE_KWARGS,
    )
    op.create_index(
        "ix_credit_transactions_user_id", "credit_transactions", ["user_id"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_credit_transactions_user_id", table_name="credit_transactions")
    op.drop_table("credit_transactions")
    op.drop_table("user_credits")
    op.drop_index("ix_photo_tasks_session_sequence", table_name="photo_tasks")
    op.drop_index("ix_photo_tasks_provider_job_id", table_name="photo_tasks")
    op.drop_index("ix_photo_tasks_user_id", table_name="photo_tasks")
    op.drop_index("ix_photo_tasks_session_id", table_name="photo_tasks")
    op.drop_table("photo_tasks")
    op.drop_index(
        "ix_photo_sessions_user_last_activity", table_name="photo_sessions"
    )
    op.drop_index("ix_photo_sessions_user_id", table_name="photo_sessions")
    op.drop_table("photo_sessions")
