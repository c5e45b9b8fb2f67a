"""
Tenant and super admin schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.schemas.common import serialize_dt


class TenantCreate(BaseModel):
    """Provision a tenant together with its first ADMIN user"""
    name: str = Field(..., min_length=1, max_length=255)
    admin_email: str = Field(..., min_length=3, max_length=255)
    admin_password: str = Field(..., min_length=6, max_length=72)
    admin_name: str = Field(..., min_length=1, max_length=255)


class TenantOut(BaseModel):
    id: int
    name: str
    partition_name: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return serialize_dt(dt)


class PublicTenantOut(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class SuperAdminSetup(BaseModel):
    setup_key: str
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=72)
    name: str = Field(..., min_length=1, max_length=255)


class SuperAdminProfile(BaseModel):
    id: int
    email: str
    name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return serialize_dt(dt)


class CurrentTenantOut(BaseModel):
    tenant: Optional[PublicTenantOut] = None
