"""Follow Routes — follow, unfollow, and the following / followers lists.

Invariants:
    - All routes act on the X-USER-ID user
    - List bounds match the feed: limit 1-100 (default 20), offset >= 0
"""

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.dependencies import get_current_user, get_follow_service
from app.models.user import User
from app.schemas.follow import (
    FollowCreate, FollowResponse, FollowingListResponse, FollowersListResponse,
)
from app.services.follow_service import FollowService

router = APIRouter(prefix="/api/v1", tags=["follows"])


@router.post(
    "/follows", response_model=FollowResponse,
    status_code=status.HTTP_201_CREATED,
)
async def follow_user(
    body: FollowCreate,
    user: User = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
):
    """Follow another user."""
    return await service.follow(user, body.following_user_id)


@router.delete("/follows/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unfollow_user(
    user_id: int,
    user: User = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
):
    """Stop following a user."""
    await service.unfollow(user, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/follows", response_model=FollowingListResponse)
async def list_following(
    limit: int = Query(20),
    offset: int = Query(0),
    user: User = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
):
    """Users the current user follows."""
    return await service.list_following(user, limit, offset)


@router.get("/followers", response_model=FollowersListResponse)
async def list_followers(
    limit: int = Query(20),
    offset: int = Query(0),
    user: User = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
):
    """Users following the current user."""
    return await service.list_followers(user, limit, offset)
