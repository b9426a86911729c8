"""Shared schema types."""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from app.core.domain_types import as_utc

# SQLite hands back naive datetimes; clients may send naive ones. Both mean UTC.
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
