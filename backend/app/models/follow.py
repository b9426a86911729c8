"""Follow ORM — directed edge follower (user_id) → followee (following_user_id).

Invariants:
    - At most one edge per ordered pair (unique constraint)
    - user_id != following_user_id (check constraint)
    - Edges cascade away with either endpoint

Design Decisions:
    - Index on following_user_id: followers list scans by followee
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Index,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Follow(Base):
    """Follow edge between two users."""
    __tablename__ = "follows"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "following_user_id", name="uq_follows_user_following",
        ),
        CheckConstraint(
            "user_id <> following_user_id", name="ck_follows_no_self_follow",
        ),
        Index("ix_follows_following_user_id", "following_user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    following_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
