"""
Main API router
"""
from fastapi import APIRouter

from app.api.v1 import (
    health,
    version,
    auth,
    tenants,
    super_admin,
    users,
    attendance,
    breaks,
    payroll,
    tasks,
    company_config,
    face,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(tenants.router, prefix="/tenants", tags=["tenants"])
api_router.include_router(super_admin.router, prefix="/super-admin", tags=["super-admin"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["attendance"])
api_router.include_router(breaks.router, prefix="/breaks", tags=["breaks"])
api_router.include_router(payroll.router, prefix="/payroll", tags=["payroll"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(company_config.router, prefix="/config", tags=["company-config"])
api_router.include_router(face.router, prefix="/face", tags=["face"])
