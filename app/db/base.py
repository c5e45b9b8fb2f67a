"""
Declarative bases.

DirectoryBase holds the shared tables (tenants, super admins). TenantBase holds
the per-tenant tables; its metadata is created once inside every partition.
"""
from sqlalchemy.orm import declarative_base

DirectoryBase = declarative_base()
TenantBase = declarative_base()
