"""Core Layer — pure sleep-feed and follow-graph logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - Functions are deterministic given their inputs ("now" is always passed in)

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
