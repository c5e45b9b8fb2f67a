"""
Company configuration service (singleton row per tenant partition)
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ValidationFailed
from app.models.company_config import CompanyConfig
from app.utils.datetime_utils import parse_hhmm

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "company_name",
    "max_break_minutes_per_day",
    "late_threshold_minutes",
    "overtime_rate_multiplier",
    "work_start_time",
    "work_end_time",
)


def find_config(db: Session) -> Optional[CompanyConfig]:
    """The tenant's config row, or None if it was never created."""
    return db.query(CompanyConfig).order_by(CompanyConfig.id.asc()).first()


def get_or_create_config(db: Session) -> CompanyConfig:
    """Return the config, creating it with defaults on first read."""
    config = find_config(db)
    if config is None:
        config = CompanyConfig()
        db.add(config)
        db.commit()
        db.refresh(config)
        logger.info("Created default company config")
    return config


def update_config(db: Session, **changes) -> CompanyConfig:
    """Partial update; None values are left unchanged."""
    config = find_config(db)
    if config is None:
        config = CompanyConfig()
        db.add(config)

    for field in _UPDATABLE_FIELDS:
        value = changes.get(field)
        if value is None:
            continue
        if field in ("work_start_time", "work_end_time"):
            try:
                parse_hhmm(value)
            except ValueError as e:
                raise ValidationFailed(str(e))
        setattr(config, field, value)

    db.commit()
    db.refresh(config)
    return config
