"""
Public tenant endpoints (no authentication, optional tenant binding)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import TenantContext, get_db, get_optional_tenant_context
from app.schemas.tenant import CurrentTenantOut, PublicTenantOut
from app.services.tenant_service import list_active_tenants

router = APIRouter()


@router.get("", response_model=List[PublicTenantOut])
def list_public_tenants(db: Session = Depends(get_db)):
    """Active tenants (id and name), ordered by name."""
    return list_active_tenants(db)


@router.get("/current", response_model=CurrentTenantOut)
def current_tenant(ctx: Optional[TenantContext] = Depends(get_optional_tenant_context)):
    """The tenant the request would bind to, or null when none resolves."""
    if ctx is None:
        return CurrentTenantOut(tenant=None)
    return CurrentTenantOut(tenant=PublicTenantOut(id=ctx.tenant_id, name=ctx.tenant_name))
