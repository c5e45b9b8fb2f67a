"""
Tenant directory service: resolution, provisioning and lifecycle of tenants.

Provisioning runs as a compensating sequence (directory row -> partition ->
admin user -> default config). When a step after the directory row fails,
the partition is dropped and the directory row removed before the original
error propagates, so no half-provisioned tenant is left behind.
"""
import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateTenantName, TenantInactive, TenantNotFound
from app.db.partitions import PartitionRegistry, partition_name_for
from app.models.company_config import CompanyConfig
from app.models.tenant import Tenant
from app.models.user import Role, User

logger = logging.getLogger(__name__)


def get_tenant(db: Session, tenant_id: int) -> Tenant:
    tenant = db.get(Tenant, tenant_id)
    if tenant is None:
        raise TenantNotFound()
    return tenant


def resolve_tenant(db: Session, tenant_id: int) -> Tenant:
    """
    Resolve a tenant id to its directory row.

    Raises:
        TenantNotFound: no such tenant (or it was never assigned a partition)
        TenantInactive: tenant exists but is deactivated
    """
    tenant = db.get(Tenant, tenant_id)
    if tenant is None or tenant.partition_name is None:
        logger.info("Tenant resolution failed: id=%s not found", tenant_id)
        raise TenantNotFound()
    if not tenant.is_active:
        logger.info("Tenant resolution failed: id=%s inactive", tenant_id)
        raise TenantInactive()
    return tenant


def list_tenants(db: Session) -> List[Tenant]:
    return db.query(Tenant).order_by(Tenant.created_at.desc(), Tenant.id.desc()).all()


def list_active_tenants(db: Session) -> List[Tenant]:
    return (
        db.query(Tenant)
        .filter(Tenant.is_active.is_(True), Tenant.partition_name.isnot(None))
        .order_by(Tenant.name.asc())
        .all()
    )


def provision_tenant(
    db: Session,
    registry: PartitionRegistry,
    name: str,
    admin_email: str,
    admin_password_hash: str,
    admin_name: str,
) -> Tenant:
    """
    Create a tenant: directory row, isolated partition with the full entity
    schema, one ADMIN user and the default company config.

    Raises:
        DuplicateTenantName: a tenant with this name already exists
    """
    name = name.strip()
    existing = db.query(Tenant).filter(func.lower(Tenant.name) == name.lower()).first()
    if existing:
        raise DuplicateTenantName(f"Tenant name '{name}' already exists")

    tenant = Tenant(name=name, is_active=True)
    db.add(tenant)
    try:
        db.flush()
        tenant.partition_name = partition_name_for(tenant.id)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateTenantName(f"Tenant name '{name}' already exists")
    db.refresh(tenant)
    partition_name = tenant.partition_name

    try:
        partition = registry.provision(partition_name)
        tenant_db = partition.session()
        try:
            tenant_db.add(User(
                email=admin_email,
                password_hash=admin_password_hash,
                name=admin_name,
                role=Role.ADMIN,
                is_active=True,
            ))
            tenant_db.add(CompanyConfig(company_name=name))
            tenant_db.commit()
        finally:
            tenant_db.close()
    except Exception:
        logger.exception("Provisioning failed for tenant id=%s; compensating", tenant.id)
        _compensate(db, registry, tenant)
        raise

    logger.info("Tenant provisioned: id=%s name=%s partition=%s", tenant.id, tenant.name, partition_name)
    return tenant


def _compensate(db: Session, registry: PartitionRegistry, tenant: Tenant) -> None:
    """Undo a partially provisioned tenant."""
    try:
        registry.destroy(tenant.partition_name)
    except Exception:
        logger.exception("Could not drop partition %s during compensation", tenant.partition_name)
        registry.evict(tenant.partition_name)
    db.rollback()
    db.delete(tenant)
    db.commit()


def deprovision_tenant(db: Session, registry: PartitionRegistry, tenant_id: int) -> dict:
    """
    Irreversibly drop the tenant's partition (all its data), then remove the
    directory row. Returns a snapshot of the removed row.
    """
    tenant = get_tenant(db, tenant_id)
    snapshot = {
        "id": tenant.id,
        "name": tenant.name,
        "partition_name": tenant.partition_name,
        "is_active": tenant.is_active,
        "created_at": tenant.created_at,
    }
    if tenant.partition_name:
        registry.destroy(tenant.partition_name)
    db.delete(tenant)
    db.commit()
    logger.info("Tenant deprovisioned: id=%s name=%s", snapshot["id"], snapshot["name"])
    return snapshot


def set_active(db: Session, tenant_id: int, active: bool) -> Tenant:
    """Toggle the active flag only; partition data is untouched."""
    tenant = get_tenant(db, tenant_id)
    tenant.is_active = active
    db.commit()
    db.refresh(tenant)
    logger.info("Tenant %s: id=%s", "activated" if active else "deactivated", tenant.id)
    return tenant
