"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, API responses)
    - Every datetime leaving the API is timezone-aware UTC

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
    - The feed envelope is built by core/sleep_feed.py as a plain dict; its shape is
      pinned by tests rather than a response_model
"""
