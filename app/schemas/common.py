"""
Shared schema helpers
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.utils.datetime_utils import iso_8601_utc

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def serialize_dt(dt: Optional[datetime]) -> Optional[str]:
    """Serialize datetime as ISO-8601 UTC (Z) for API responses."""
    return iso_8601_utc(dt)


class MessageResponse(BaseModel):
    message: str
