"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All store access goes through a few batched calls (followees, query_records),
      never one lookup per record
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE their results are never async themselves;
      the shell orchestrates the async calls around the pure logic
    - Cache decorators implement the same Protocols, so services never know
      whether a read hit the cache
"""

from datetime import datetime
from typing import Protocol

from app.core.domain_types import UserId, SleepRecordView


class UserLike(Protocol):
    """Structural contract for User rows handed to routes and services."""
    id: int
    name: str


class UserRepository(Protocol):
    """Contract for user lookups — implemented by shell."""
    async def get(self, user_id: UserId) -> UserLike | None: ...


class FollowRepository(Protocol):
    """Contract for follow-graph reads — implemented by shell."""
    async def followees(self, user_id: UserId) -> set[UserId]: ...


class SleepRecordRepository(Protocol):
    """Contract for sleep record reads — implemented by shell."""
    async def query_records(
        self, owner_ids: set[UserId], since: datetime,
    ) -> list[SleepRecordView]: ...


class CacheBackend(Protocol):
    """Contract for the optional key/value cache in front of the store."""
    async def get_many(self, keys: list[str]) -> list[object | None]: ...
    async def set_many(self, items: dict[str, object], ttl_seconds: int) -> None: ...
    async def delete(self, *keys: str) -> None: ...
