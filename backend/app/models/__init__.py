"""ORM Models — SQLAlchemy declarative models for users, follows and sleep records.

Invariants:
    - All models inherit from Base (db/base.py)
    - The feed core never receives ORM rows; repositories map them to SleepRecordView

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all()
      or alembic autogenerate runs
"""

from app.models.user import User  # noqa: F401
from app.models.follow import Follow  # noqa: F401
from app.models.sleep_record import SleepRecord  # noqa: F401
