"""
Company configuration endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_tenant_db, require_roles
from app.models.user import Role, User
from app.schemas.company_config import CompanyConfigOut, CompanyConfigUpdate
from app.services.company_config_service import get_or_create_config, update_config

router = APIRouter()


@router.get("", response_model=CompanyConfigOut)
def get_config(
    db: Session = Depends(get_tenant_db),
    _: User = Depends(get_current_user),
):
    """The tenant's configuration, created with defaults on first read."""
    return get_or_create_config(db)


@router.put("", response_model=CompanyConfigOut)
def put_config(
    payload: CompanyConfigUpdate,
    db: Session = Depends(get_tenant_db),
    _: User = Depends(require_roles(Role.ADMIN)),
):
    return update_config(db, **payload.model_dump(exclude_unset=True))
