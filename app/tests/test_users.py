"""
Tests for user management and profiles
"""
import pytest
from fastapi import status

from app.core.exceptions import DuplicateEmail, InvalidCredentials, ValidationFailed
from app.core.security import verify_password
from app.models.user import Role, SalaryType, User
from app.services import user_service


def test_create_user_hashes_password(tenant_db, employee):
    assert employee.password_hash != "user1234"
    assert verify_password("user1234", employee.password_hash)
    assert employee.role == Role.USER
    assert employee.salary_type == SalaryType.MONTHLY
    assert employee.start_work_time == "09:00"


def test_duplicate_email_in_same_tenant(tenant_db, employee):
    with pytest.raises(DuplicateEmail):
        user_service.create_user(tenant_db, email="budi@acme.test", password="secret1", name="Budi 2")


def test_same_email_allowed_in_other_tenant(registry, make_tenant, employee):
    globex = make_tenant("Globex")
    session = registry.get(globex.partition_name).session()
    try:
        user = user_service.create_user(session, email="budi@acme.test", password="secret1", name="Budi")
        assert user.id is not None
    finally:
        session.close()


def test_invalid_start_time_rejected(tenant_db):
    with pytest.raises(ValidationFailed):
        user_service.create_user(
            tenant_db, email="x@acme.test", password="secret1", name="X", start_work_time="25:00"
        )


def test_cannot_delete_self(tenant_db, admin_user):
    with pytest.raises(ValidationFailed):
        user_service.delete_user(tenant_db, admin_user.id, admin_user.id)


def test_change_password(tenant_db, employee):
    with pytest.raises(InvalidCredentials):
        user_service.change_password(tenant_db, employee, "wrong", "newpass1")

    user_service.change_password(tenant_db, employee, "user1234", "newpass1")
    assert verify_password("newpass1", tenant_db.get(User, employee.id).password_hash)


def test_user_crud_endpoints(client, admin_user, admin_headers):
    created = client.post(
        "/api/v1/users",
        json={
            "email": "sari@acme.test",
            "password": "secret1",
            "name": "Sari",
            "role": "LEADER",
            "salary_type": "DAILY",
            "salary": 250000,
        },
        headers=admin_headers,
    )
    assert created.status_code == status.HTTP_201_CREATED
    user = created.json()
    assert user["role"] == "LEADER"
    assert "password_hash" not in user
    assert "face_descriptor" not in user

    duplicate = client.post(
        "/api/v1/users",
        json={"email": "sari@acme.test", "password": "secret1", "name": "Sari"},
        headers=admin_headers,
    )
    assert duplicate.status_code == status.HTTP_409_CONFLICT
    assert duplicate.json()["kind"] == "DUPLICATE_EMAIL"

    listed = client.get("/api/v1/users", headers=admin_headers).json()
    assert {u["email"] for u in listed} == {"admin@acme.test", "sari@acme.test"}

    updated = client.put(
        f"/api/v1/users/{user['id']}", json={"salary": 300000, "is_active": False}, headers=admin_headers
    )
    assert updated.json()["salary"] == 300000
    assert updated.json()["is_active"] is False
    assert updated.json()["name"] == "Sari"

    self_delete = client.delete(f"/api/v1/users/{admin_user.id}", headers=admin_headers)
    assert self_delete.status_code == status.HTTP_400_BAD_REQUEST

    deleted = client.delete(f"/api/v1/users/{user['id']}", headers=admin_headers)
    assert deleted.status_code == status.HTTP_200_OK

    missing = client.get(f"/api/v1/users/{user['id']}", headers=admin_headers)
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json()["kind"] == "USER_NOT_FOUND"


def test_user_management_requires_admin(client, employee_headers):
    response = client.get("/api/v1/users", headers=employee_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["kind"] == "INSUFFICIENT_ROLE"


def test_profile_endpoints(client, employee_headers):
    updated = client.put(
        "/api/v1/users/profile",
        json={"name": "Budi Santoso", "start_work_time": "08:30"},
        headers=employee_headers,
    )
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json()["name"] == "Budi Santoso"
    assert updated.json()["start_work_time"] == "08:30"

    bad = client.put("/api/v1/users/profile", json={"start_work_time": "8.30"}, headers=employee_headers)
    assert bad.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_change_password_endpoint(client, tenant, employee_headers):
    wrong = client.put(
        "/api/v1/users/change-password",
        json={"current_password": "nope", "new_password": "newpass1"},
        headers=employee_headers,
    )
    assert wrong.status_code == status.HTTP_401_UNAUTHORIZED

    ok = client.put(
        "/api/v1/users/change-password",
        json={"current_password": "user1234", "new_password": "newpass1"},
        headers=employee_headers,
    )
    assert ok.status_code == status.HTTP_200_OK

    login = client.post(
        "/api/v1/users/login",
        json={"email": "budi@acme.test", "password": "newpass1"},
        headers={"X-Tenant-ID": str(tenant.id)},
    )
    assert login.status_code == status.HTTP_200_OK
