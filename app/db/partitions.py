"""
Tenant partitions.

Every tenant owns an isolated partition holding the same set of tables
(TenantBase.metadata). A PartitionRegistry hands out one cached Partition
handle per partition name; a PartitionProvisioner knows how to create, bind
and drop partitions for a given database backend.
"""
import logging
import os
import re
import threading
from typing import Dict

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.schema import CreateSchema, DropSchema

from app.db.base import TenantBase

logger = logging.getLogger(__name__)

PARTITION_NAME_RE = re.compile(r"^tenant_[0-9]+$")


def partition_name_for(tenant_id: int) -> str:
    return f"tenant_{tenant_id}"


def validate_partition_name(name: str) -> str:
    # Names end up in DDL and file paths
    if not PARTITION_NAME_RE.match(name or ""):
        raise ValueError(f"Invalid partition name: {name!r}")
    return name


class Partition:
    """Handle to one tenant's isolated data store."""

    def __init__(self, name: str, engine: Engine):
        self.name = name
        self.engine = engine
        self._sessionmaker = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def session(self) -> Session:
        return self._sessionmaker()

    def __repr__(self):
        return f"Partition({self.name!r})"


class PartitionProvisioner:
    """Backend-specific partition lifecycle."""

    def bind(self, name: str) -> Engine:
        raise NotImplementedError

    def create(self, name: str, engine: Engine) -> None:
        raise NotImplementedError

    def drop(self, name: str, engine: Engine) -> None:
        raise NotImplementedError

    def release(self, engine: Engine) -> None:
        """Close connections held by a partition engine."""
        engine.dispose()


class SchemaProvisioner(PartitionProvisioner):
    """
    PostgreSQL: one schema per tenant inside the directory database.

    Tenant tables carry no schema; each partition engine translates the
    default schema to the partition name, sharing the base connection pool.
    """

    def __init__(self, base_engine: Engine):
        self.base_engine = base_engine

    def bind(self, name: str) -> Engine:
        validate_partition_name(name)
        return self.base_engine.execution_options(schema_translate_map={None: name})

    def create(self, name: str, engine: Engine) -> None:
        validate_partition_name(name)
        with self.base_engine.begin() as conn:
            conn.execute(CreateSchema(name, if_not_exists=True))
            TenantBase.metadata.create_all(
                bind=conn.execution_options(schema_translate_map={None: name})
            )

    def drop(self, name: str, engine: Engine) -> None:
        validate_partition_name(name)
        with self.base_engine.begin() as conn:
            conn.execute(DropSchema(name, cascade=True, if_exists=True))

    def release(self, engine: Engine) -> None:
        # Partition engines share the directory pool
        pass


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class SqliteProvisioner(PartitionProvisioner):
    """
    SQLite: one database per tenant. ``directory`` is a folder for the
    database files, or ':memory:' for process-local in-memory partitions.
    """

    def __init__(self, directory: str):
        self.directory = directory

    @property
    def in_memory(self) -> bool:
        return self.directory == ":memory:"

    def path_for(self, name: str) -> str:
        return os.path.join(self.directory, f"{validate_partition_name(name)}.db")

    def bind(self, name: str) -> Engine:
        validate_partition_name(name)
        if self.in_memory:
            engine = create_engine(
                "sqlite://",
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            os.makedirs(self.directory, exist_ok=True)
            engine = create_engine(
                f"sqlite:///{self.path_for(name)}",
                connect_args={"check_same_thread": False},
            )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    def create(self, name: str, engine: Engine) -> None:
        TenantBase.metadata.create_all(bind=engine)

    def drop(self, name: str, engine: Engine) -> None:
        TenantBase.metadata.drop_all(bind=engine)
        self.release(engine)
        if not self.in_memory:
            path = self.path_for(name)
            if os.path.exists(path):
                os.remove(path)


class PartitionRegistry:
    """
    Process-wide cache of partition handles keyed by partition name.

    A handle is created lazily on first use; concurrent first requests for the
    same name are serialized by a per-name lock so only one handle is built.
    """

    def __init__(self, provisioner: PartitionProvisioner):
        self.provisioner = provisioner
        self._handles: Dict[str, Partition] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, name: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.Lock()
            return lock

    def get(self, name: str) -> Partition:
        """Return the cached handle for ``name``, creating it on first request."""
        handle = self._handles.get(name)
        if handle is not None:
            return handle
        with self._lock_for(name):
            handle = self._handles.get(name)
            if handle is None:
                handle = Partition(name, self.provisioner.bind(name))
                self._handles[name] = handle
                logger.info("Partition handle created: %s", name)
        return handle

    def provision(self, name: str) -> Partition:
        """Create the tenant tables inside a fresh partition and return its handle."""
        handle = self.get(name)
        self.provisioner.create(name, handle.engine)
        logger.info("Partition provisioned: %s", name)
        return handle

    def destroy(self, name: str) -> None:
        """Drop the partition and all of its data, then forget the handle."""
        handle = self.get(name)
        with self._lock_for(name):
            self.provisioner.drop(name, handle.engine)
            self._handles.pop(name, None)
        logger.info("Partition dropped: %s", name)

    def evict(self, name: str) -> None:
        with self._lock_for(name):
            handle = self._handles.pop(name, None)
        if handle is not None:
            self.provisioner.release(handle.engine)
            logger.info("Partition handle evicted: %s", name)

    def dispose_all(self) -> None:
        with self._guard:
            handles = list(self._handles.values())
            self._handles.clear()
        for handle in handles:
            self.provisioner.release(handle.engine)

    def __contains__(self, name: str) -> bool:
        return name in self._handles

    def __len__(self) -> int:
        return len(self._handles)
