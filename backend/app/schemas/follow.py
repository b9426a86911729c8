"""Follow Schemas — follow request, follow confirmation and list pages."""

from pydantic import BaseModel, Field

from app.schemas.common import UtcDatetime


class FollowCreate(BaseModel):
    """Follow another user by id."""
    following_user_id: int = Field(ge=1)


class FollowResponse(BaseModel):
    id: int
    following_user_id: int
    following_user_name: str
    created_at: UtcDatetime


class FollowedUser(BaseModel):
    """One entry of a following/followers list."""
    id: int
    name: str
    followed_at: UtcDatetime


class ListPagination(BaseModel):
    total_count: int
    limit: int
    offset: int
    has_more: bool


class FollowingListResponse(BaseModel):
    following: list[FollowedUser]
    pagination: ListPagination


class FollowersListResponse(BaseModel):
    followers: list[FollowedUser]
    pagination: ListPagination
