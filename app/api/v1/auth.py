"""
Authentication endpoints (no tenant binding; the tenant is discovered from the email)
"""
from typing import Union

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_partition_registry
from app.db.partitions import PartitionRegistry
from app.schemas.auth import (
    LoginRequest,
    SuperAdminOut,
    TenantLoginRequest,
    TenantRef,
    TenantSelection,
    TokenResponse,
)
from app.schemas.user import UserOut
from app.services import auth_service
from app.services.auth_service import AmbiguousTenant, Authenticated, LoginResult

router = APIRouter()


def login_response(result: LoginResult) -> Union[TokenResponse, TenantSelection]:
    """Turn a login result into a response body, raising failures as domain errors."""
    if isinstance(result, AmbiguousTenant):
        return TenantSelection(tenants=[
            TenantRef(id=c.tenant_id, name=c.tenant_name) for c in result.candidates
        ])
    if not isinstance(result, Authenticated):
        raise result.error

    response = TokenResponse(access_token=result.token, is_super_admin=result.is_super_admin)
    if result.super_admin is not None:
        response.super_admin = SuperAdminOut(
            id=result.super_admin.id,
            email=result.super_admin.email,
            name=result.super_admin.name,
        )
    if result.user is not None:
        response.user = UserOut.model_validate(result.user)
    if result.tenant is not None:
        response.tenant = TenantRef(id=result.tenant.tenant_id, name=result.tenant.tenant_name)
    return response


@router.post("/auto-login", response_model=Union[TokenResponse, TenantSelection])
def auto_login(
    login_data: LoginRequest,
    db: Session = Depends(get_db),
    registry: PartitionRegistry = Depends(get_partition_registry),
):
    """
    Log in with email and password only.

    Super admins are checked first. When the email exists in several tenants
    the response lists them (``require_tenant_selection``) and no password is
    checked; repeat the login through /auth/login-with-tenant.
    """
    result = auth_service.auto_login(db, registry, login_data.email, login_data.password)
    return login_response(result)


@router.post("/login-with-tenant", response_model=TokenResponse)
def login_with_tenant(
    login_data: TenantLoginRequest,
    db: Session = Depends(get_db),
    registry: PartitionRegistry = Depends(get_partition_registry),
):
    """Log in against an explicitly selected tenant."""
    result = auth_service.login_with_tenant(
        db, registry, login_data.tenant_id, login_data.email, login_data.password
    )
    return login_response(result)
