"""User ORM — identity of a sleeper (id + display name).

Invariants:
    - name is 1-100 chars, non-nullable
    - Immutable for the feed's purposes; created outside this service

Design Decisions:
    - Integer primary key: X-USER-ID header carries the raw id
    - No relationship() collections: feed and follow queries are explicit batched
      selects, so nothing can lazy-load per row
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class User(Base):
    """A user who can log sleep and follow other users."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
