"""Following Feed Route — GET the social sleep feed of the authenticated user.

Invariants:
    - Query values arrive unvalidated beyond int coercion; range and enum checks
      happen in the service so errors name the field and its allowed values
    - Viewer id comes from X-USER-ID; existence is checked after parameters

Design Decisions:
    - Plain dict response (no response_model): nullable pagination offsets must
      serialize as null, and message appears only on empty feeds
"""

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_viewer_id, get_sleep_feed_service
from app.config import get_settings
from app.core.domain_types import SortKey, UserId
from app.services.sleep_feed_service import SleepFeedService

router = APIRouter(prefix="/api/v1/following", tags=["social-sleep"])


@router.get("/sleep_records")
async def get_following_sleep_records(
    days: int | None = Query(None, description="Days to look back (1-30, default 7)"),
    sort_by: str = Query(
        SortKey.DURATION.value,
        description="duration, bedtime, wake_time or created_at",
    ),
    limit: int | None = Query(None, description="Page size (1-100, default 20)"),
    offset: int = Query(0, description="Starting position (>= 0)"),
    viewer_id: UserId = Depends(get_viewer_id),
    service: SleepFeedService = Depends(get_sleep_feed_service),
):
    """Completed sleep records of followed users, sorted, paginated, with statistics."""
    settings = get_settings()
    return await service.assemble_feed(
        viewer_id,
        days if days is not None else settings.feed_default_days,
        sort_by,
        limit if limit is not None else settings.feed_default_limit,
        offset,
    )
