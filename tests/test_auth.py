"""Login, profile and token handling."""

from datetime import datetime, timedelta, timezone

import jwt


def login(client, email, password="password123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_login_returns_token_and_permissions(client, company):
    response = login(client, "jane.smith@company.com")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["token"]
    assert body["user"]["employeeId"] == "EMP002"
    assert body["user"]["roleName"] == "HR Manager"
    assert set(body["user"]["permissions"]) == {
        "manage_employees",
        "manage_leave",
        "view_all_reports",
    }


def test_login_records_last_login(client, company, db):
    login(client, "john.doe@company.com")

    db.expire_all()
    assert company["manager"].last_login is not None


def test_login_rejects_wrong_password(client, company):
    response = login(client, "john.doe@company.com", "not-the-password")

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


def test_login_rejects_unknown_email(client, company):
    response = login(client, "nobody@company.com")

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"


def test_login_rejects_inactive_account(client, company, db):
    company["employee"].status = "Inactive"
    db.commit()

    response = login(client, "alice.johnson@company.com")

    assert response.status_code == 401
    assert response.json()["error"] == "Account is not active"


def test_login_validates_body(client, company):
    response = client.post("/api/auth/login", json={"email": "not-an-email"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation error"
    assert body["details"]


def test_missing_token_is_rejected(client, company):
    response = client.get("/api/auth/profile")

    assert response.status_code == 401
    assert response.json()["error"] == "Access token required"


def test_garbage_token_is_rejected(client, company):
    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer nonsense"})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid token"


def test_expired_token_is_rejected(client, company, settings):
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    token = jwt.encode(
        {"sub": str(company["manager"].id), "iat": past, "exp": past + timedelta(hours=1)},
        settings.jwt_secret,
        algorithm="HS256",
    )

    response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"] == "Token expired"


def test_token_of_terminated_employee_is_rejected(client, company, db, auth_headers):
    headers = auth_headers("employee")
    company["employee"].status = "Terminated"
    db.commit()

    response = client.get("/api/auth/profile", headers=headers)

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token"


def test_profile_excludes_password_hash(client, auth_headers):
    response = client.get("/api/auth/profile", headers=auth_headers("employee"))

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "alice.johnson@company.com"
    assert body["managerName"] == "John Doe"
    assert "passwordHash" not in body
    assert "password_hash" not in body


def test_change_password(client, auth_headers, company):
    response = client.post(
        "/api/auth/change-password",
        headers=auth_headers("employee"),
        json={
            "currentPassword": "password123",
            "newPassword": "a-much-better-secret",
            "confirmPassword": "a-much-better-secret",
        },
    )

    assert response.status_code == 200
    assert login(client, "alice.johnson@company.com", "a-much-better-secret").status_code == 200
    assert login(client, "alice.johnson@company.com").status_code == 401


def test_change_password_requires_current_password(client, auth_headers):
    response = client.post(
        "/api/auth/change-password",
        headers=auth_headers("employee"),
        json={
            "currentPassword": "wrong",
            "newPassword": "a-much-better-secret",
            "confirmPassword": "a-much-better-secret",
        },
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Current password is incorrect"


def test_change_password_requires_matching_confirmation(client, auth_headers):
    response = client.post(
        "/api/auth/change-password",
        headers=auth_headers("employee"),
        json={
            "currentPassword": "password123",
            "newPassword": "a-much-better-secret",
            "confirmPassword": "something-else",
        },
    )

    assert response.status_code == 400


def test_refresh_issues_a_working_token(client, auth_headers):
    response = client.post("/api/auth/refresh", headers=auth_headers("manager"))

    assert response.status_code == 200
    token = response.json()["token"]
    profile = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert profile.json()["employeeId"] == "EMP001"


def test_logout_acknowledges(client, auth_headers):
    response = client.post("/api/auth/logout", headers=auth_headers("manager"))

    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}
