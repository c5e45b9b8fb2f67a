"""
Tests for super admin tenant management
"""
import pytest
from fastapi import status

from app.core.config import settings


@pytest.fixture
def super_admin_headers(client):
    client.post(
        "/api/v1/super-admin/setup",
        json={
            "setup_key": settings.SUPER_ADMIN_SETUP_KEY,
            "email": "root@example.com",
            "password": "rootpass",
            "name": "Root",
        },
    )
    login = client.post(
        "/api/v1/super-admin/login", json={"email": "root@example.com", "password": "rootpass"}
    )
    assert login.json()["is_super_admin"] is True
    return {"Authorization": f"Bearer {login.json()['access_token']}"}


def test_profile(client, super_admin_headers):
    response = client.get("/api/v1/super-admin/profile", headers=super_admin_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["email"] == "root@example.com"
    assert "password_hash" not in response.json()


def test_tenant_user_cannot_manage_tenants(client, employee_headers):
    response = client.get("/api/v1/super-admin/tenants", headers=employee_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_tenant_lifecycle(client, super_admin_headers):
    created = client.post(
        "/api/v1/super-admin/tenants",
        json={
            "name": "Initech",
            "admin_email": "boss@initech.test",
            "admin_password": "initech1",
            "admin_name": "Bill",
        },
        headers=super_admin_headers,
    )
    assert created.status_code == status.HTTP_201_CREATED
    tenant = created.json()
    assert tenant["is_active"] is True

    duplicate = client.post(
        "/api/v1/super-admin/tenants",
        json={"name": "initech", "admin_email": "x@y.test", "admin_password": "secret1", "admin_name": "X"},
        headers=super_admin_headers,
    )
    assert duplicate.status_code == status.HTTP_409_CONFLICT
    assert duplicate.json()["kind"] == "DUPLICATE_TENANT_NAME"

    login = client.post(
        "/api/v1/auth/auto-login", json={"email": "boss@initech.test", "password": "initech1"}
    )
    assert login.json()["user"]["role"] == "ADMIN"
    admin_headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

    deactivated = client.patch(
        f"/api/v1/super-admin/tenants/{tenant['id']}/deactivate", headers=super_admin_headers
    )
    assert deactivated.json()["is_active"] is False
    assert client.get("/api/v1/users", headers=admin_headers).json()["kind"] == "TENANT_INACTIVE"

    client.patch(f"/api/v1/super-admin/tenants/{tenant['id']}/activate", headers=super_admin_headers)
    assert client.get("/api/v1/users", headers=admin_headers).status_code == status.HTTP_200_OK

    listed = client.get("/api/v1/super-admin/tenants", headers=super_admin_headers).json()
    assert [t["name"] for t in listed] == ["Initech"]

    deleted = client.delete(f"/api/v1/super-admin/tenants/{tenant['id']}", headers=super_admin_headers)
    assert deleted.json()["name"] == "Initech"

    gone = client.get(f"/api/v1/super-admin/tenants/{tenant['id']}", headers=super_admin_headers)
    assert gone.status_code == status.HTTP_404_NOT_FOUND
    assert gone.json()["kind"] == "TENANT_NOT_FOUND"
