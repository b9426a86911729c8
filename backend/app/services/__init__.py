"""Services Layer — IO orchestration around the pure core.

Invariants:
    - Services own the AsyncSession calls; rules live in core/
    - One service per concern: feed, sleep sessions, follows
"""
