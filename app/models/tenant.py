"""
Directory models: tenants and super admins (shared, not tenant-scoped)
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from app.db.base import DirectoryBase


class Tenant(DirectoryBase):
    __tablename__ = "tenants"
    # Ids (and so partition names) are never reused after a tenant is deleted
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    # tenant_<id>; assigned in the creating transaction and never changed
    partition_name = Column(String(63), unique=True, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)


class SuperAdmin(DirectoryBase):
    __tablename__ = "super_admins"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
