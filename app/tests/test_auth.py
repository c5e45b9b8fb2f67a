"""
Tests for authentication across tenants
"""
import pytest
from fastapi import status

from app.core.config import settings
from app.core.security import decode_token, hash_password
from app.models.user import User
from app.services import auth_service, user_service
from app.services.auth_service import AmbiguousTenant, Authenticated, LoginFailed

ADMIN_PASSWORD = "admin123"
USER_PASSWORD = "user1234"


@pytest.fixture
def super_admin(db):
    return auth_service.create_super_admin(
        db, settings.SUPER_ADMIN_SETUP_KEY, "root@example.com", "rootpass", "Root"
    )


def _tenant_session(registry, tenant):
    return registry.get(tenant.partition_name).session()


def test_auto_login_single_tenant(client, tenant, employee):
    response = client.post(
        "/api/v1/auth/auto-login",
        json={"email": "budi@acme.test", "password": USER_PASSWORD},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["tenant"] == {"id": tenant.id, "name": "Acme"}
    assert data["user"]["email"] == "budi@acme.test"
    assert "password_hash" not in data["user"]

    claims = decode_token(data["access_token"])
    assert claims["sub"] == str(employee.id)
    assert claims["tenant_id"] == tenant.id
    assert claims["role"] == "USER"
    assert claims["is_super_admin"] is False


def test_auto_login_token_works_without_tenant_header(client, employee):
    login = client.post(
        "/api/v1/auth/auto-login",
        json={"email": "budi@acme.test", "password": USER_PASSWORD},
    )
    token = login.json()["access_token"]

    response = client.get("/api/v1/users/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["email"] == "budi@acme.test"


def test_auto_login_unknown_email(client, tenant):
    response = client.post(
        "/api/v1/auth/auto-login",
        json={"email": "ghost@nowhere.test", "password": "whatever"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["kind"] == "EMAIL_NOT_FOUND"


def test_auto_login_wrong_password(client, employee):
    response = client.post(
        "/api/v1/auth/auto-login",
        json={"email": "budi@acme.test", "password": "wrong-password"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["kind"] == "INVALID_CREDENTIALS"


def test_auto_login_inactive_account(client, tenant_db, employee):
    user_service.update_user(tenant_db, employee.id, is_active=False)

    response = client.post(
        "/api/v1/auth/auto-login",
        json={"email": "budi@acme.test", "password": USER_PASSWORD},
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["kind"] == "ACCOUNT_INACTIVE"


def test_auto_login_skips_inactive_tenants(client, db, make_tenant):
    from app.services.tenant_service import set_active

    tenant = make_tenant("Dormant")
    set_active(db, tenant.id, False)

    response = client.post(
        "/api/v1/auth/auto-login",
        json={"email": "admin@dormant.test", "password": ADMIN_PASSWORD},
    )

    assert response.json()["kind"] == "EMAIL_NOT_FOUND"


def test_same_email_in_two_tenants_requires_selection(client, db, registry, make_tenant, monkeypatch):
    acme = make_tenant("Acme", admin_email="shared@example.com")
    globex = make_tenant("Globex", admin_email="shared@example.com")

    checked = []
    monkeypatch.setattr(auth_service, "verify_password", lambda *args: checked.append(args) or True)

    result = auth_service.auto_login(db, registry, "shared@example.com", "anything")

    assert isinstance(result, AmbiguousTenant)
    assert {(c.tenant_id, c.tenant_name) for c in result.candidates} == {
        (acme.id, "Acme"),
        (globex.id, "Globex"),
    }
    assert checked == []

    response = client.post(
        "/api/v1/auth/auto-login",
        json={"email": "shared@example.com", "password": "anything"},
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["require_tenant_selection"] is True
    assert sorted(t["name"] for t in data["tenants"]) == ["Acme", "Globex"]
    assert "access_token" not in data
    assert checked == []


def test_login_with_tenant_checks_that_tenant_only(client, make_tenant, registry):
    make_tenant("Acme", admin_email="shared@example.com")
    globex = make_tenant("Globex", admin_email="shared@example.com")

    session = _tenant_session(registry, globex)
    try:
        admin = session.query(User).filter(User.email == "shared@example.com").one()
        admin.password_hash = hash_password("globex-only")
        session.commit()
    finally:
        session.close()

    ok = client.post(
        "/api/v1/auth/login-with-tenant",
        json={"email": "shared@example.com", "password": "globex-only", "tenant_id": globex.id},
    )
    assert ok.status_code == status.HTTP_200_OK
    assert decode_token(ok.json()["access_token"])["tenant_id"] == globex.id

    wrong = client.post(
        "/api/v1/auth/login-with-tenant",
        json={"email": "shared@example.com", "password": ADMIN_PASSWORD, "tenant_id": globex.id},
    )
    assert wrong.status_code == status.HTTP_401_UNAUTHORIZED
    assert wrong.json()["kind"] == "INVALID_CREDENTIALS"


def test_login_with_unknown_or_inactive_tenant(client, db, tenant):
    from app.services.tenant_service import set_active

    response = client.post(
        "/api/v1/auth/login-with-tenant",
        json={"email": "admin@acme.test", "password": ADMIN_PASSWORD, "tenant_id": 999},
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["kind"] == "TENANT_NOT_FOUND"

    set_active(db, tenant.id, False)
    response = client.post(
        "/api/v1/auth/login-with-tenant",
        json={"email": "admin@acme.test", "password": ADMIN_PASSWORD, "tenant_id": tenant.id},
    )
    assert response.json()["kind"] == "TENANT_NOT_FOUND"


def test_users_login_through_tenant_header(client, tenant, employee):
    response = client.post(
        "/api/v1/users/login",
        json={"email": "budi@acme.test", "password": USER_PASSWORD},
        headers={"X-Tenant-ID": str(tenant.id)},
    )

    assert response.status_code == status.HTTP_200_OK
    assert decode_token(response.json()["access_token"])["tenant_id"] == tenant.id


def test_super_admin_email_ends_search(client, db, registry, make_tenant, super_admin):
    make_tenant("Acme", admin_email="root@example.com")

    ok = auth_service.auto_login(db, registry, "root@example.com", "rootpass")
    assert isinstance(ok, Authenticated)
    assert ok.is_super_admin is True
    claims = decode_token(ok.token)
    assert claims["is_super_admin"] is True
    assert claims["tenant_id"] is None

    # The tenant admin's password does not help once the email is a super admin's
    failed = auth_service.auto_login(db, registry, "root@example.com", ADMIN_PASSWORD)
    assert isinstance(failed, LoginFailed)
    assert failed.error.kind == "INVALID_CREDENTIALS"


def test_super_admin_setup_requires_key(client):
    response = client.post(
        "/api/v1/super-admin/setup",
        json={"setup_key": "wrong", "email": "root@example.com", "password": "rootpass", "name": "Root"},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["kind"] == "INVALID_SETUP_KEY"


def test_super_admin_setup_rejects_duplicate_email(client, super_admin):
    response = client.post(
        "/api/v1/super-admin/setup",
        json={
            "setup_key": settings.SUPER_ADMIN_SETUP_KEY,
            "email": "root@example.com",
            "password": "rootpass",
            "name": "Root",
        },
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["kind"] == "DUPLICATE_EMAIL"
