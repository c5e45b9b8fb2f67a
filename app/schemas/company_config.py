"""
Company configuration schemas
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import HHMM_PATTERN


class CompanyConfigOut(BaseModel):
    id: int
    company_name: str
    max_break_minutes_per_day: int
    late_threshold_minutes: int
    overtime_rate_multiplier: float
    work_start_time: str
    work_end_time: str

    model_config = ConfigDict(from_attributes=True)


class CompanyConfigUpdate(BaseModel):
    """Partial update; omitted fields are unchanged"""
    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    max_break_minutes_per_day: Optional[int] = Field(None, ge=0)
    late_threshold_minutes: Optional[int] = Field(None, ge=0)
    overtime_rate_multiplier: Optional[float] = Field(None, ge=0)
    work_start_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    work_end_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
