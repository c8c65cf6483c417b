"""Work log booking and the daily hours ceiling."""

from models import WorkLog


def log_hours(client, headers, hours, log_date="2024-12-16", **extra):
    payload = {"logDate": log_date, "hoursWorked": hours, **extra}
    return client.post("/api/performance/work-logs", headers=headers, json=payload)


def test_create_work_log(client, auth_headers, company, db):
    response = log_hours(
        client,
        auth_headers("employee"),
        7.5,
        projectId=company["project"].id,
        taskDescription="API integration",
    )

    assert response.status_code == 201
    work_log = db.get(WorkLog, response.json()["workLogId"])
    assert work_log.employee_id == company["employee"].id
    assert work_log.hours_worked == 7.5
    assert work_log.status == "Completed"


def test_daily_total_cannot_exceed_24_hours(client, auth_headers):
    headers = auth_headers("employee")
    assert log_hours(client, headers, 20).status_code == 201

    response = log_hours(client, headers, 5)

    assert response.status_code == 400
    assert response.json()["error"] == (
        "Total hours for the day cannot exceed 24. Current: 20, Adding: 5"
    )


def test_daily_total_is_per_employee_and_day(client, auth_headers):
    log_hours(client, auth_headers("employee"), 20)

    assert log_hours(client, auth_headers("employee"), 4).status_code == 201
    assert log_hours(client, auth_headers("employee"), 5, log_date="2024-12-17").status_code == 201
    assert log_hours(client, auth_headers("manager"), 5).status_code == 201


def test_single_entry_is_bounded_by_schema(client, auth_headers):
    response = log_hours(client, auth_headers("employee"), 25)

    assert response.status_code == 400
    assert response.json()["error"] == "Validation error"


def test_update_does_not_recheck_daily_total(client, auth_headers, db):
    headers = auth_headers("employee")
    first = log_hours(client, headers, 12).json()["workLogId"]
    log_hours(client, headers, 12)

    response = client.put(
        f"/api/performance/work-logs/{first}", headers=headers, json={"hoursWorked": 20}
    )

    assert response.status_code == 200
    db.expire_all()
    assert db.get(WorkLog, first).hours_worked == 20


def test_update_rejects_null_hours(client, auth_headers, db):
    headers = auth_headers("employee")
    work_log_id = log_hours(client, headers, 6).json()["workLogId"]

    response = client.put(
        f"/api/performance/work-logs/{work_log_id}", headers=headers, json={"hoursWorked": None}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Validation error"
    db.expire_all()
    assert db.get(WorkLog, work_log_id).hours_worked == 6


def test_only_owner_or_manager_may_change_a_log(client, auth_headers, db):
    work_log_id = log_hours(client, auth_headers("manager"), 8).json()["workLogId"]

    forbidden = client.put(
        f"/api/performance/work-logs/{work_log_id}",
        headers=auth_headers("employee"),
        json={"status": "Blocked"},
    )
    delete_forbidden = client.delete(
        f"/api/performance/work-logs/{work_log_id}", headers=auth_headers("employee")
    )

    assert forbidden.status_code == 403
    assert forbidden.json()["error"] == "Access denied - not authorized to update this work log"
    assert delete_forbidden.json()["error"] == (
        "Access denied - not authorized to delete this work log"
    )


def test_delete_work_log(client, auth_headers, db):
    headers = auth_headers("employee")
    work_log_id = log_hours(client, headers, 8).json()["workLogId"]

    response = client.delete(f"/api/performance/work-logs/{work_log_id}", headers=headers)

    assert response.status_code == 200
    db.expire_all()
    assert db.get(WorkLog, work_log_id) is None
    missing = client.delete(f"/api/performance/work-logs/{work_log_id}", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == "Work log not found"


def test_list_work_logs_scopes_and_sorts(client, auth_headers, company):
    employee = auth_headers("employee")
    log_hours(client, employee, 4, log_date="2024-12-15")
    log_hours(client, employee, 8, log_date="2024-12-16")
    log_hours(client, auth_headers("manager"), 6)

    own = client.get("/api/performance/work-logs?sortBy=hoursWorked&sortOrder=ASC", headers=employee)
    everyone = client.get("/api/performance/work-logs", headers=auth_headers("manager"))

    assert [row["hoursWorked"] for row in own.json()["workLogs"]] == [4, 8]
    assert {row["employeeCode"] for row in own.json()["workLogs"]} == {"EMP003"}
    assert everyone.json()["pagination"]["total"] == 3


def test_projects_list_active_projects(client, auth_headers):
    response = client.get("/api/performance/projects", headers=auth_headers("employee"))

    assert response.status_code == 200
    [project] = response.json()
    assert project["name"] == "React Migration"
    assert project["managerName"] == "John Doe"
    assert project["departmentName"] == "Engineering"
