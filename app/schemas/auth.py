"""
Authentication schemas
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.user import UserOut


class LoginRequest(BaseModel):
    """Login request schema"""
    email: str = Field(..., min_length=1, description="Email")
    password: str = Field(..., min_length=1, description="Password")


class TenantLoginRequest(LoginRequest):
    """Login against an explicitly chosen tenant"""
    tenant_id: int = Field(..., description="Tenant id")


class TenantRef(BaseModel):
    id: int
    name: str


class SuperAdminOut(BaseModel):
    id: int
    email: str
    name: str
    role: str = "SUPER_ADMIN"


class TokenResponse(BaseModel):
    """Token response schema"""
    access_token: str
    token_type: str = "bearer"
    is_super_admin: bool = False
    user: Optional[UserOut] = None
    super_admin: Optional[SuperAdminOut] = None
    tenant: Optional[TenantRef] = None


class TenantSelection(BaseModel):
    """Email known to several tenants; the caller must pick one"""
    require_tenant_selection: bool = True
    message: str = "Email is registered with several companies; select one"
    tenants: List[TenantRef]
