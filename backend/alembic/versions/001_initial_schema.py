"""Initial schema — users, follows, sleep_records.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "follows",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("following_user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "following_user_id", name="uq_follows_user_following"),
        sa.CheckConstraint("user_id <> following_user_id", name="ck_follows_no_self_follow"),
    )
    op.create_index("ix_follows_following_user_id", "follows", ["following_user_id"])

    op.create_table(
        "sleep_records",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("bedtime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("wake_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration_minutes", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_sleep_records_user_bedtime", "sleep_records", ["user_id", "bedtime"])
    op.create_index(
        "uq_sleep_records_one_active_per_user", "sleep_records", ["user_id"],
        unique=True,
        postgresql_where=sa.text("wake_time IS NULL"),
        sqlite_where=sa.text("wake_time IS NULL"),
    )


def downgrade() -> None:
    op.drop_index("uq_sleep_records_one_active_per_user", table_name="sleep_records")
    op.drop_index("ix_sleep_records_user_bedtime", table_name="sleep_records")
    op.drop_table("sleep_records")
    op.drop_index("ix_follows_following_user_id", table_name="follows")
    op.drop_table("follows")
    op.drop_table("users")
