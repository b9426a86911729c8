"""Sleep Feed Service — orchestrates store reads around the pure feed core.

Invariants:
    - Parameters validated before the viewer is resolved (first failure wins)
    - No record query is issued when the viewer follows no one
    - Paginator and aggregator consume the same filtered list
    - Store errors propagate unchanged; nothing is retried here

Design Decisions:
    - Repositories injected as Protocols: cached and uncached stores are interchangeable
    - `now` captured once per call and threaded through filter and envelope, so the
      date_range echo matches the window actually applied
    - Audit line on the "app.audit" logger; losing it never fails the request
"""

import logging
from datetime import datetime, timezone

from app.core.domain_types import UserId, SleepRecordView, as_utc
from app.core.errors import ResourceNotFoundError
from app.core.feed_params import FeedParams, validate_feed_params, validate_window_days
from app.core.repository_protocols import (
    UserRepository, FollowRepository, SleepRecordRepository,
)
from app.core.sleep_feed import (
    filter_feed_records, window_start, paginate, aggregate,
    build_feed_response, build_empty_feed_response,
)

audit_logger = logging.getLogger("app.audit")


class SleepFeedService:
    """Builds the social sleep feed for one viewer."""

    def __init__(
        self,
        users: UserRepository,
        follows: FollowRepository,
        records: SleepRecordRepository,
    ):
        self.users = users
        self.follows = follows
        self.records = records

    async def filter_feed(
        self, viewer_id: UserId, days: int, now: datetime | None = None,
    ) -> tuple[list[SleepRecordView], set[UserId]]:
        """Followees' complete records in the window. Returns (records, followee_ids)."""
        validate_window_days(days)
        now = as_utc(now) if now else datetime.now(timezone.utc)
        followee_ids = await self.follows.followees(viewer_id) - {viewer_id}
        if not followee_ids:
            return [], followee_ids
        candidates = await self.records.query_records(
            followee_ids, window_start(now, days),
        )
        return (
            filter_feed_records(candidates, viewer_id, followee_ids, days, now),
            followee_ids,
        )

    async def assemble_feed(
        self,
        viewer_id: UserId,
        days: int,
        sort_by: str,
        limit: int,
        offset: int,
        now: datetime | None = None,
    ) -> dict:
        """Validate → resolve viewer → filter → {paginate, aggregate} → envelope."""
        params = validate_feed_params(days, sort_by, limit, offset)
        if await self.users.get(viewer_id) is None:
            raise ResourceNotFoundError("User", viewer_id, "USER_NOT_FOUND")

        now = as_utc(now) if now else datetime.now(timezone.utc)
        records, followee_ids = await self.filter_feed(viewer_id, params.days, now)
        following_count = len(followee_ids)

        if not records:
            response = build_empty_feed_response(params, following_count, now)
        else:
            page, total = paginate(
                records, params.sort_by, params.limit, params.offset,
            )
            response = build_feed_response(
                params, page, total, aggregate(records), following_count, now,
            )

        self._audit(viewer_id, params, following_count, len(records))
        return response

    def _audit(
        self, viewer_id: UserId, params: FeedParams,
        following_count: int, total_records: int,
    ) -> None:
        audit_logger.info(
            "Sleep feed served",
            extra={
                "viewer_id": viewer_id,
                "following_count": following_count,
                "total_records": total_records,
                "sort_by": params.sort_by.value,
                "days_back": params.days,
            },
        )
