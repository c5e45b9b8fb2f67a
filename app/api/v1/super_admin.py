"""
Super admin endpoints: setup, login, profile and tenant management.
These never bind a tenant.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import login_response
from app.core.deps import get_current_super_admin, get_db, get_partition_registry
from app.core.security import hash_password
from app.db.partitions import PartitionRegistry
from app.models.tenant import SuperAdmin
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.tenant import SuperAdminProfile, SuperAdminSetup, TenantCreate, TenantOut
from app.services import auth_service, tenant_service

router = APIRouter()


@router.post("/setup", response_model=SuperAdminProfile, status_code=status.HTTP_201_CREATED)
def setup_super_admin(payload: SuperAdminSetup, db: Session = Depends(get_db)):
    """Create a super admin; requires the configured setup key."""
    return auth_service.create_super_admin(
        db, payload.setup_key, payload.email, payload.password, payload.name
    )


@router.post("/login", response_model=TokenResponse)
def super_admin_login(login_data: LoginRequest, db: Session = Depends(get_db)):
    return login_response(auth_service.super_admin_login(db, login_data.email, login_data.password))


@router.get("/profile", response_model=SuperAdminProfile)
def get_profile(super_admin: SuperAdmin = Depends(get_current_super_admin)):
    return super_admin


@router.get("/tenants", response_model=List[TenantOut])
def list_tenants(
    db: Session = Depends(get_db),
    _: SuperAdmin = Depends(get_current_super_admin),
):
    return tenant_service.list_tenants(db)


@router.get("/tenants/{tenant_id}", response_model=TenantOut)
def get_tenant(
    tenant_id: int,
    db: Session = Depends(get_db),
    _: SuperAdmin = Depends(get_current_super_admin),
):
    return tenant_service.get_tenant(db, tenant_id)


@router.post("/tenants", response_model=TenantOut, status_code=status.HTTP_201_CREATED)
def create_tenant(
    payload: TenantCreate,
    db: Session = Depends(get_db),
    registry: PartitionRegistry = Depends(get_partition_registry),
    _: SuperAdmin = Depends(get_current_super_admin),
):
    """
    Provision a tenant: directory row, isolated partition, ADMIN user and
    default company config. Nothing is left behind if a step fails.
    """
    return tenant_service.provision_tenant(
        db,
        registry,
        name=payload.name,
        admin_email=payload.admin_email,
        admin_password_hash=hash_password(payload.admin_password),
        admin_name=payload.admin_name,
    )


@router.delete("/tenants/{tenant_id}", response_model=TenantOut)
def delete_tenant(
    tenant_id: int,
    db: Session = Depends(get_db),
    registry: PartitionRegistry = Depends(get_partition_registry),
    _: SuperAdmin = Depends(get_current_super_admin),
):
    """Irreversibly drop the tenant and all of its data."""
    return tenant_service.deprovision_tenant(db, registry, tenant_id)


@router.patch("/tenants/{tenant_id}/deactivate", response_model=TenantOut)
def deactivate_tenant(
    tenant_id: int,
    db: Session = Depends(get_db),
    _: SuperAdmin = Depends(get_current_super_admin),
):
    return tenant_service.set_active(db, tenant_id, False)


@router.patch("/tenants/{tenant_id}/activate", response_model=TenantOut)
def activate_tenant(
    tenant_id: int,
    db: Session = Depends(get_db),
    _: SuperAdmin = Depends(get_current_super_admin),
):
    return tenant_service.set_active(db, tenant_id, True)
