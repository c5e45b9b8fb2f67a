"""
Database session management for the shared tenant directory
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.core.config import settings
from app.db.base import DirectoryBase
from app.db.partitions import PartitionRegistry, SchemaProvisioner, SqliteProvisioner


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, echo=False, **_engine_kwargs(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def build_partition_registry() -> PartitionRegistry:
    """Registry for the configured partition backend."""
    if settings.resolved_partition_backend() == "schema":
        return PartitionRegistry(SchemaProvisioner(engine))
    return PartitionRegistry(SqliteProvisioner(settings.PARTITION_SQLITE_DIR))


def init_directory() -> None:
    """Create the directory tables (tenants, super admins) if missing."""
    import app.models  # noqa: F401  (register models on the metadata)
    DirectoryBase.metadata.create_all(bind=engine)
