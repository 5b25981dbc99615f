"""Initial migration

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_PENDING_ONLY = sa.text("status = 'pending'")


def upgrade() -> None:
    # 1. Users table (shared with the main backend, created here if missing)
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("full_name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_supervisor", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "supervisor_title", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True
        ),
        sa.Column("supervisor_bio", sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        if_not_exists=True,
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True, if_not_exists=True)
    op.create_index(
        "ix_users_is_supervisor", "users", ["is_supervisor"], unique=False, if_not_exists=True
    )

    # 2. Ideas table (one per owner)
    op.create_table(
        "ideas",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column(
            "status",
            sqlmodel.sql.sqltypes.AutoString(length=20),
            nullable=False,
            server_default="draft",
        ),
        sa.Column("supervisor_id", sa.Uuid(), nullable=True),
        sa.Column("title", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column("category", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column(
            "problem_statement", sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=False
        ),
        sa.Column("solution", sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=False),
        sa.Column("target_market", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column(
            "business_model",
            sqlmodel.sql.sqltypes.AutoString(length=50),
            nullable=False,
            server_default="Not Sure Yet",
        ),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_ideas_owner_id", "ideas", ["owner_id"], unique=True)
    op.create_index("ix_ideas_status", "ideas", ["status"], unique=False)
    op.create_index("ix_ideas_supervisor_id", "ideas", ["supervisor_id"], unique=False)
    op.create_index("ix_ideas_category", "ideas", ["category"], unique=False)
    op.create_index("ix_ideas_created_at", "ideas", ["created_at"], unique=False)

    # 3. Supervision requests (no FK on idea_id: closed requests outlive the idea)
    op.create_table(
        "supervision_requests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("idea_id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("supervisor_id", sa.Uuid(), nullable=False),
        sa.Column(
            "status",
            sqlmodel.sql.sqltypes.AutoString(length=20),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("message", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column("response_message", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("decided_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_supervision_requests_idea_id", "supervision_requests", ["idea_id"], unique=False
    )
    op.create_index(
        "ix_supervision_requests_owner_id", "supervision_requests", ["owner_id"], unique=False
    )
    op.create_index(
        "ix_supervision_requests_created_at", "supervision_requests", ["created_at"], unique=False
    )
    op.create_index(
        "ix_supervision_requests_supervisor_status",
        "supervision_requests",
        ["supervisor_id", "status"],
        unique=False,
    )
    # At most one pending request per owner
    op.create_index(
        "uq_supervision_requests_owner_pending",
        "supervision_requests",
        ["owner_id"],
        unique=True,
        postgresql_where=_PENDING_ONLY,
        sqlite_where=_PENDING_ONLY,
    )


def downgrade() -> None:
    op.drop_index("uq_supervision_requests_owner_pending", table_name="supervision_requests")
    op.drop_index("ix_supervision_requests_supervisor_status", table_name="supervision_requests")
    op.drop_index("ix_supervision_requests_created_at", table_name="supervision_requests")
    op.drop_index("ix_supervision_requests_owner_id", table_name="supervision_requests")
    op.drop_index("ix_supervision_requests_idea_id", table_name="supervision_requests")
    op.drop_table("supervision_requests")

    op.drop_index("ix_ideas_created_at", table_name="ideas")
    op.drop_index("ix_ideas_category", table_name="ideas")
    op.drop_index("ix_ideas_supervisor_id", table_name="ideas")
    op.drop_index("ix_ideas_status", table_name="ideas")
    op.drop_index("ix_ideas_owner_id", table_name="ideas")
    op.drop_table("ideas")
    # users belongs to the main backend and is left in place
