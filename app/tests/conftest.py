"""
Pytest configuration and fixtures
"""
import os

# Must be set before the app (and its settings) is imported
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["PARTITION_SQLITE_DIR"] = ":memory:"
os.environ["APP_ENV"] = "local"
os.environ["TZ"] = "Asia/Jakarta"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.deps import get_db, get_partition_registry
from app.core.security import hash_password, issue_user_token
from app.db.base import DirectoryBase
from app.db.partitions import PartitionRegistry, SqliteProvisioner
from app.models.user import Role, User
from app.services import tenant_service, user_service

# Use in-memory SQLite for the tenant directory
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_PASSWORD = "admin123"
USER_PASSWORD = "user1234"


@pytest.fixture(scope="function")
def db():
    """Fresh directory database for each test"""
    DirectoryBase.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        DirectoryBase.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def registry():
    """Partition registry whose partitions are independent in-memory databases"""
    registry = PartitionRegistry(SqliteProvisioner(":memory:"))
    yield registry
    registry.dispose_all()


@pytest.fixture(scope="function")
def client(db, registry):
    """Test client fixture with directory and partition overrides"""
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_partition_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_tenant(db, registry):
    """Provision a tenant with an ADMIN user admin@<slug>.test"""
    def _make(name: str, admin_email: str = None):
        slug = name.lower().replace(" ", "-")
        return tenant_service.provision_tenant(
            db,
            registry,
            name=name,
            admin_email=admin_email or f"admin@{slug}.test",
            admin_password_hash=hash_password(ADMIN_PASSWORD),
            admin_name=f"{name} Admin",
        )
    return _make


@pytest.fixture
def tenant(make_tenant):
    return make_tenant("Acme")


@pytest.fixture
def tenant_db(tenant, registry):
    """Session on the default tenant's partition"""
    session = registry.get(tenant.partition_name).session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin_user(tenant_db):
    return tenant_db.query(User).filter(User.role == Role.ADMIN).first()


@pytest.fixture
def make_user(tenant_db):
    def _make(email: str, role: Role = Role.USER, **kwargs):
        kwargs.setdefault("name", email.split("@")[0].title())
        return user_service.create_user(tenant_db, email=email, password=USER_PASSWORD, role=role, **kwargs)
    return _make


@pytest.fixture
def employee(make_user):
    return make_user("budi@acme.test")


@pytest.fixture
def auth_headers():
    """Bearer token plus tenant header for a tenant user"""
    def _headers(tenant, user) -> dict:
        token = issue_user_token(user.id, user.email, user.role.value, tenant.id)
        return {
            "Authorization": f"Bearer {token}",
            "X-Tenant-ID": str(tenant.id),
        }
    return _headers


@pytest.fixture
def admin_headers(auth_headers, tenant, admin_user):
    return auth_headers(tenant, admin_user)


@pytest.fixture
def employee_headers(auth_headers, tenant, employee):
    return auth_headers(tenant, employee)
