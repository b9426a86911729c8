"""Follow Rules — pure checks for follow-graph mutations.

Invariants:
    - follower_id != followee_id (no self-edges)
    - At most one edge per ordered pair; duplicates reported, not ignored
"""

from app.core.domain_types import UserId
from app.core.errors import BusinessRuleError


def validate_follow(
    follower_id: UserId, followee_id: UserId, already_following: bool,
) -> None:
    if follower_id == followee_id:
        raise BusinessRuleError(
            "Cannot follow yourself", "SELF_FOLLOW_NOT_ALLOWED",
        )
    if already_following:
        raise BusinessRuleError(
            "Already following this user", "DUPLICATE_FOLLOW",
            {"following_user_id": followee_id},
        )
