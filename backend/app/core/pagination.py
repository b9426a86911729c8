"""Pagination Metadata — offset/limit bookkeeping shared by every list endpoint.

Invariants:
    - has_more is true only when rows exist past offset + limit
    - next_offset is None when has_more is false
    - previous_offset is None on the first page, else clamped at 0
"""


def build_pagination(total: int, limit: int, offset: int) -> dict:
    """Minimal pagination block (follow lists)."""
    return {
        "total_count": total,
        "limit": limit,
        "offset": offset,
        "has_more": offset + limit < total,
    }


def build_feed_pagination(
    total: int, current_count: int, limit: int, offset: int,
) -> dict:
    """Pagination block with navigation offsets (sleep feed)."""
    info = build_pagination(total, limit, offset)
    return {
        "total_count": info["total_count"],
        "current_count": current_count,
        "limit": limit,
        "offset": offset,
        "has_more": info["has_more"],
        "next_offset": offset + limit if info["has_more"] else None,
        "previous_offset": max(offset - limit, 0) if offset > 0 else None,
    }
