"""API Dependencies — header authentication and per-request service wiring.

Invariants:
    - X-USER-ID missing/blank → 400 MISSING_USER_ID; non-integer → 400 INVALID_USER_ID
    - get_current_user resolves the id to a row or raises 404 USER_NOT_FOUND
    - Services get the request's AsyncSession; cached repositories wrap the SQL ones
      only when a feed cache is configured

Design Decisions:
    - get_viewer_id is separate from get_current_user: the feed validates query
      parameters before resolving the viewer, so it takes the raw id only
"""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import UserId
from app.core.errors import AuthenticationError, ResourceNotFoundError
from app.infrastructure.cache import FeedCache, get_feed_cache
from app.infrastructure.database import get_db
from app.infrastructure.repositories import (
    SqlUserRepository, SqlFollowRepository, SqlSleepRecordRepository,
)
from app.models.user import User
from app.services.follow_service import FollowService
from app.services.sleep_feed_service import SleepFeedService
from app.services.sleep_session_service import SleepSessionService


def get_viewer_id(
    x_user_id: str | None = Header(None, alias="X-USER-ID"),
) -> UserId:
    """Parse the authenticated user id from the X-USER-ID header."""
    if x_user_id is None or not x_user_id.strip():
        raise AuthenticationError("X-USER-ID header is required")
    try:
        return UserId(int(x_user_id.strip()))
    except ValueError:
        raise AuthenticationError(
            "X-USER-ID header must be an integer user id", "INVALID_USER_ID",
        ) from None


async def get_current_user(
    viewer_id: UserId = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
) -> User:
    user = await db.get(User, viewer_id)
    if user is None:
        raise ResourceNotFoundError("User", viewer_id, "USER_NOT_FOUND")
    return user


def get_sleep_feed_service(
    db: AsyncSession = Depends(get_db),
    cache: FeedCache | None = Depends(get_feed_cache),
) -> SleepFeedService:
    follows = SqlFollowRepository(db)
    records = SqlSleepRecordRepository(db)
    if cache:
        return SleepFeedService(
            SqlUserRepository(db),
            cache.wrap_follows(follows),
            cache.wrap_records(records),
        )
    return SleepFeedService(SqlUserRepository(db), follows, records)


def get_sleep_session_service(
    db: AsyncSession = Depends(get_db),
    cache: FeedCache | None = Depends(get_feed_cache),
) -> SleepSessionService:
    return SleepSessionService(db, cache)


def get_follow_service(
    db: AsyncSession = Depends(get_db),
    cache: FeedCache | None = Depends(get_feed_cache),
) -> FollowService:
    return FollowService(db, cache)
