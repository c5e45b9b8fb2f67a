"""
User endpoints (tenant-scoped): tenant login, own profile and ADMIN user management
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import login_response
from app.core.deps import TenantContext, get_current_user, get_db, get_tenant_context, get_tenant_db, require_roles
from app.models.user import Role, User
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.common import MessageResponse
from app.schemas.user import ChangePasswordRequest, ProfileUpdate, UserCreate, UserOut, UserUpdate
from app.services import auth_service, user_service
from app.services.tenant_service import get_tenant

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
def tenant_login(
    login_data: LoginRequest,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
    tenant_db: Session = Depends(get_tenant_db),
):
    """Log in to the tenant named by the X-Tenant-ID header."""
    tenant = get_tenant(db, ctx.tenant_id)
    return login_response(auth_service.tenant_login(tenant_db, tenant, login_data.email, login_data.password))


@router.get("/profile", response_model=UserOut)
async def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=UserOut)
def update_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    return user_service.update_profile(db, current_user, **payload.model_dump())


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    user_service.change_password(db, current_user, payload.current_password, payload.new_password)
    return MessageResponse(message="Password changed successfully")


@router.get("", response_model=List[UserOut])
def list_users(
    db: Session = Depends(get_tenant_db),
    _: User = Depends(require_roles(Role.ADMIN)),
):
    return user_service.list_users(db)


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    db: Session = Depends(get_tenant_db),
    _: User = Depends(require_roles(Role.ADMIN)),
):
    return user_service.get_user(db, user_id)


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_tenant_db),
    _: User = Depends(require_roles(Role.ADMIN)),
):
    return user_service.create_user(db, **payload.model_dump())


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_tenant_db),
    _: User = Depends(require_roles(Role.ADMIN)),
):
    return user_service.update_user(db, user_id, **payload.model_dump(exclude_unset=True))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_tenant_db),
    current_user: User = Depends(require_roles(Role.ADMIN)),
):
    user_service.delete_user(db, user_id, current_user.id)
    return MessageResponse(message="User deleted successfully")
