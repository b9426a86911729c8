"""Follow Service — follow / unfollow and the following / followers lists.

Invariants:
    - Target user must exist (404 USER_NOT_FOUND) before any edge check
    - Self-follow and duplicate edges rejected by core/follow_rules.py;
      a duplicate that races past the check is caught by the unique constraint
    - Lists are newest-first with the same limit/offset bounds as the feed
    - Follow and unfollow invalidate the follower's cached followee set
"""

import logging

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import UserId, FollowId
from app.core.errors import BusinessRuleError, ResourceNotFoundError
from app.core.feed_params import validate_limit, validate_offset
from app.core.follow_rules import validate_follow
from app.core.pagination import build_pagination
from app.infrastructure.cache import FeedCache
from app.models.follow import Follow
from app.models.user import User

logger = logging.getLogger(__name__)


class FollowService:
    """Follow-graph mutations and listings for the current user."""

    def __init__(self, db: AsyncSession, cache: FeedCache | None = None):
        self.db = db
        self.cache = cache

    async def follow(self, user: User, target_id: int) -> dict:
        target = await self._get_user_or_404(target_id)
        validate_follow(
            UserId(user.id), UserId(target.id),
            await self._find_edge(user.id, target.id) is not None,
        )

        edge = Follow(user_id=user.id, following_user_id=target.id)
        self.db.add(edge)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise BusinessRuleError(
                "Already following this user", "DUPLICATE_FOLLOW",
                {"following_user_id": target_id},
            )
        await self.db.refresh(edge)
        await self._invalidate(user.id)
        logger.info(
            f"User {user.id} followed user {target.id}",
            extra={"user_id": user.id},
        )
        return {
            "id": FollowId(edge.id),
            "following_user_id": target.id,
            "following_user_name": target.name,
            "created_at": edge.created_at,
        }

    async def unfollow(self, user: User, target_id: int) -> None:
        target = await self._get_user_or_404(target_id)
        edge = await self._find_edge(user.id, target.id)
        if edge is None:
            raise ResourceNotFoundError(
                "Follow relationship", target_id, "FOLLOW_RELATIONSHIP_NOT_FOUND",
            )
        await self.db.delete(edge)
        await self.db.commit()
        await self._invalidate(user.id)
        logger.info(
            f"User {user.id} unfollowed user {target.id}",
            extra={"user_id": user.id},
        )

    async def list_following(self, user: User, limit: int, offset: int) -> dict:
        """Users `user` follows, newest edge first."""
        return {
            "following": await self._page(
                Follow.user_id == user.id, Follow.following_user_id, limit, offset,
            ),
            "pagination": build_pagination(
                await self._count(Follow.user_id == user.id), limit, offset,
            ),
        }

    async def list_followers(self, user: User, limit: int, offset: int) -> dict:
        """Users following `user`, newest edge first."""
        return {
            "followers": await self._page(
                Follow.following_user_id == user.id, Follow.user_id, limit, offset,
            ),
            "pagination": build_pagination(
                await self._count(Follow.following_user_id == user.id), limit, offset,
            ),
        }

    async def _page(self, condition, other_side, limit: int, offset: int) -> list[dict]:
        validate_limit(limit)
        validate_offset(offset)
        result = await self.db.execute(
            select(User.id, User.name, Follow.created_at)
            .join(User, User.id == other_side)
            .where(condition)
            .order_by(Follow.created_at.desc(), Follow.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [
            {"id": uid, "name": name, "followed_at": followed_at}
            for uid, name, followed_at in result.all()
        ]

    async def _count(self, condition) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Follow).where(condition),
        )
        return result.scalar_one()

    async def _get_user_or_404(self, user_id: int) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("User", user_id, "USER_NOT_FOUND")
        return user

    async def _find_edge(self, follower_id: int, followee_id: int) -> Follow | None:
        result = await self.db.execute(
            select(Follow)
            .where(Follow.user_id == follower_id)
            .where(Follow.following_user_id == followee_id)
        )
        return result.scalar_one_or_none()

    async def _invalidate(self, user_id: int) -> None:
        if self.cache:
            await self.cache.invalidate_followees(UserId(user_id))
