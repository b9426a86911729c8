"""Sleep Records Routes — clock-in and clock-out for the authenticated user.

Invariants:
    - Only the two lifecycle transitions are exposed; records are never edited
      or deleted through the API
    - Clock-out on another user's record is indistinguishable from a missing record (404)
"""

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_current_user, get_sleep_session_service
from app.models.user import User
from app.schemas.sleep_record import (
    ClockInRequest, ClockOutRequest, SleepRecordResponse,
)
from app.services.sleep_session_service import SleepSessionService

router = APIRouter(prefix="/api/v1/sleep_records", tags=["sleep-records"])


@router.post(
    "", response_model=SleepRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
async def clock_in(
    body: ClockInRequest | None = None,
    user: User = Depends(get_current_user),
    service: SleepSessionService = Depends(get_sleep_session_service),
):
    """Start a sleep session (clock in)."""
    record = await service.clock_in(user, body.bedtime if body else None)
    return SleepRecordResponse.model_validate(record)


@router.patch(
    "/{record_id}/clock_out", response_model=SleepRecordResponse,
)
async def clock_out(
    record_id: int,
    body: ClockOutRequest | None = None,
    user: User = Depends(get_current_user),
    service: SleepSessionService = Depends(get_sleep_session_service),
):
    """Finish an active sleep session (clock out)."""
    record = await service.clock_out(
        user, record_id, body.wake_time if body else None,
    )
    return SleepRecordResponse.model_validate(record)
