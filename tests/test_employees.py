"""Employee directory endpoints and their audit trail."""

from models import AuditLog, Employee, LeaveBalance


def new_employee(company, **overrides):
    payload = {
        "employeeId": "EMP100",
        "firstName": "Grace",
        "lastName": "Hopper",
        "email": "grace.hopper@company.com",
        "hireDate": "2024-03-01",
        "departmentId": company["engineering"].id,
        "roleId": company["employee"].role_id,
        "managerId": company["manager"].id,
        "salary": 75000,
        "emergencyContact": {"name": "Walter", "phone": "+1-555-0199"},
        "password": "s3cret-pass",
    }
    payload.update(overrides)
    return payload


def test_list_employees_paginates(client, auth_headers):
    response = client.get("/api/employees?page=1&limit=2", headers=auth_headers("hr"))

    assert response.status_code == 200
    body = response.json()
    assert len(body["employees"]) == 2
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 4, "pages": 2}


def test_list_employees_searches_and_sorts(client, auth_headers):
    response = client.get(
        "/api/employees?search=john&sortBy=lastName&sortOrder=DESC",
        headers=auth_headers("hr"),
    )

    names = [row["lastName"] for row in response.json()["employees"]]
    assert names == ["Johnson", "Doe"]


def test_list_employees_filters_by_department_name(client, auth_headers):
    response = client.get("/api/employees?department=Human Resources", headers=auth_headers("hr"))

    rows = response.json()["employees"]
    assert [row["employeeId"] for row in rows] == ["EMP002"]
    assert rows[0]["departmentName"] == "Human Resources"


def test_unknown_sort_key_falls_back_to_first_name(client, auth_headers):
    response = client.get("/api/employees?sortBy=passwordHash", headers=auth_headers("hr"))

    names = [row["firstName"] for row in response.json()["employees"]]
    assert names == sorted(names)


def test_get_employee_detail(client, auth_headers, company):
    response = client.get(f"/api/employees/{company['employee'].id}", headers=auth_headers("hr"))

    assert response.status_code == 200
    body = response.json()
    assert body["employeeId"] == "EMP003"
    assert body["managerName"] == "John Doe"
    assert body["roleName"] == "Employee"
    assert "log_hours" in body["permissions"]
    assert "passwordHash" not in body


def test_get_missing_employee(client, auth_headers):
    response = client.get("/api/employees/9999", headers=auth_headers("hr"))

    assert response.status_code == 404
    assert response.json() == {"error": "Employee not found"}


def test_create_employee_opens_balances_and_audits(client, auth_headers, company, db):
    response = client.post("/api/employees", headers=auth_headers("hr"), json=new_employee(company))

    assert response.status_code == 201
    employee_id = response.json()["employeeId"]

    employee = db.get(Employee, employee_id)
    assert employee.status == "Active"
    assert employee.password_hash != "s3cret-pass"

    balances = db.query(LeaveBalance).filter(LeaveBalance.employee_id == employee_id).all()
    # Unpaid leave has no yearly allowance and gets no balance
    assert sorted(b.leave_type_name for b in balances) == ["Annual Leave", "Sick Leave"]
    assert all(b.year == company["year"] and b.remaining_days == b.total_days for b in balances)

    audit = db.query(AuditLog).filter(AuditLog.record_id == employee_id).one()
    assert audit.action == "CREATE"
    assert audit.table_name == "employees"
    assert audit.user_id == company["hr"].id
    assert audit.new_values["email"] == "grace.hopper@company.com"
    assert "password_hash" not in audit.new_values


def test_create_employee_rejects_duplicates(client, auth_headers, company):
    payload = new_employee(company, email="john.doe@company.com")

    response = client.post("/api/employees", headers=auth_headers("hr"), json=payload)

    assert response.status_code == 409
    assert response.json()["error"] == "Employee ID or email already exists"


def test_create_employee_validates_payload(client, auth_headers, company):
    payload = new_employee(company, salary=-5, password="short")

    response = client.post("/api/employees", headers=auth_headers("hr"), json=payload)

    assert response.status_code == 400
    assert len(response.json()["details"]) == 2


def test_create_employee_requires_manage_employees(client, auth_headers, company):
    response = client.post(
        "/api/employees", headers=auth_headers("manager"), json=new_employee(company)
    )

    assert response.status_code == 403


def test_update_employee_audits_before_and_after(client, auth_headers, company, db):
    target = company["employee"].id

    response = client.put(
        f"/api/employees/{target}",
        headers=auth_headers("hr"),
        json={"phone": "+1-555-0042", "status": "On Leave"},
    )

    assert response.status_code == 200
    db.expire_all()
    assert db.get(Employee, target).phone == "+1-555-0042"
    audit = db.query(AuditLog).filter(AuditLog.action == "UPDATE").one()
    assert audit.old_values["status"] == "Active"
    assert audit.new_values["status"] == "On Leave"
    assert audit.new_values["phone"] == "+1-555-0042"


def test_update_employee_with_empty_body(client, auth_headers, company):
    response = client.put(
        f"/api/employees/{company['employee'].id}", headers=auth_headers("hr"), json={}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "No fields to update"


def test_update_rejects_null_for_required_fields(client, auth_headers, company, db):
    target = company["employee"].id

    response = client.put(
        f"/api/employees/{target}", headers=auth_headers("hr"), json={"firstName": None}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation error"
    assert body["details"][0].startswith("firstName")
    db.expire_all()
    assert db.get(Employee, target).first_name == "Alice"
    assert db.query(AuditLog).filter(AuditLog.action == "UPDATE").count() == 0


def test_delete_is_a_soft_delete(client, auth_headers, company, db):
    target = company["employee"].id

    response = client.delete(f"/api/employees/{target}", headers=auth_headers("hr"))

    assert response.status_code == 200
    db.expire_all()
    employee = db.get(Employee, target)
    assert employee is not None
    assert employee.status == "Terminated"
    audit = db.query(AuditLog).filter(AuditLog.action == "DELETE").one()
    assert audit.old_values["status"] == "Active"
    assert audit.new_values is None


def test_metadata_lists_need_only_authentication(client, auth_headers):
    departments = client.get("/api/employees/meta/departments", headers=auth_headers("employee"))
    roles = client.get("/api/employees/meta/roles", headers=auth_headers("employee"))

    assert [d["name"] for d in departments.json()] == ["Engineering", "Human Resources"]
    assert {r["name"] for r in roles.json()} == {"Admin", "Manager", "HR Manager", "Employee"}
