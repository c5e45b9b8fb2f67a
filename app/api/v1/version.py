"""
Version and metadata endpoint
"""
from fastapi import APIRouter
from app.core.config import settings

router = APIRouter()


@router.get("/version")
async def get_version():
    """
    Get application version and metadata

    Returns:
        Version information including service name, version, environment and partition backend
    """
    return {
        "service": "absensi-backend",
        "version": settings.VERSION or "1.0.0",
        "env": settings.APP_ENV,
        "partition_backend": settings.resolved_partition_backend(),
    }
