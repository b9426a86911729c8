"""Database Infrastructure — SQLAlchemy Base shared by models, migrations and tests.

Invariants:
    - One metadata object; tests create_all() from it, alembic autogenerates from it
"""
