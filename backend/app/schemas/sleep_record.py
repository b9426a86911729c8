"""Sleep Record Schemas — clock-in / clock-out bodies and the record response.

Invariants:
    - Both request bodies are optional; an omitted time means "now"
    - duration_minutes is read-only (derived server-side)
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.core.domain_types import SleepStatus
from app.schemas.common import UtcDatetime


class ClockInRequest(BaseModel):
    """Start a sleep session. bedtime defaults to now."""
    bedtime: UtcDatetime | None = None


class ClockOutRequest(BaseModel):
    """Finish a sleep session. wake_time defaults to now."""
    wake_time: UtcDatetime | None = None


class SleepRecordResponse(BaseModel):
    """Public view of one sleep record."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    bedtime: UtcDatetime
    wake_time: UtcDatetime | None = None
    duration_minutes: int | None = None
    active: bool = Field(validation_alias=AliasChoices("is_active", "active"))
    status: SleepStatus
    created_at: UtcDatetime
    updated_at: UtcDatetime
