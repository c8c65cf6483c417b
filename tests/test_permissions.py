"""Role and permission checks."""

from types import SimpleNamespace

from app.auth.permissions import has_any_permission, is_hr, is_manager, is_manager_or_hr


def make_employee(role_name, permissions):
    role = SimpleNamespace(name=role_name) if role_name else None
    return SimpleNamespace(role=role, permission_names=list(permissions))


def test_wildcard_grants_every_permission():
    admin = make_employee("Admin", ["all"])

    assert has_any_permission(admin, ("manage_employees",))
    assert has_any_permission(admin, ("view_all_reports", "manage_team"))
    assert is_manager(admin)
    assert is_manager_or_hr(admin)


def test_any_listed_permission_is_enough():
    hr = make_employee("HR Manager", ["manage_employees", "view_all_reports"])

    assert has_any_permission(hr, ("manage_team", "view_all_reports"))
    assert not has_any_permission(hr, ("approve_leave",))


def test_manager_class_is_decided_by_role_name():
    assert is_manager(make_employee("Engineering Manager", []))
    assert not is_manager(make_employee("Senior Developer", ["view_profile"]))
    assert is_manager_or_hr(make_employee("HR Specialist", []))
    assert is_hr(make_employee("HR Manager", []))
    assert not is_manager_or_hr(make_employee(None, []))


def test_admin_wildcard_passes_permission_guard(client, auth_headers):
    response = client.get("/api/employees", headers=auth_headers("admin"))

    assert response.status_code == 200


def test_employee_without_permission_is_forbidden(client, auth_headers):
    response = client.get("/api/employees", headers=auth_headers("employee"))

    assert response.status_code == 403
    assert response.json() == {"error": "Access denied - insufficient permissions"}


def test_employee_without_role_is_forbidden(client, auth_headers, company, db):
    company["employee"].role = None
    db.commit()

    response = client.get("/api/employees", headers=auth_headers("employee"))

    assert response.status_code == 403
    assert response.json()["error"] == "Access denied - no role found"


def test_manager_required_rejects_other_roles(client, auth_headers):
    response = client.patch(
        "/api/leave/applications/1/status",
        headers=auth_headers("employee"),
        json={"status": "Approved"},
    )

    assert response.status_code == 403
    assert response.json()["error"] == "Manager access required"
