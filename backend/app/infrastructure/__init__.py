"""Infrastructure Layer — database, cache, repositories and cross-cutting concerns.

Invariants:
    - Infrastructure may import core/ types and protocols; core/ never imports back
    - Store errors are mapped to DatabaseError (503) at the session boundary

Design Decisions:
    - Repositories implement core/repository_protocols.py so the cache can wrap them
"""
