"""Leave submission, approval and balance bookkeeping."""

from datetime import date

import pytest

from app.errors import ValidationError
from models import LeaveApplication, LeaveBalance, Notification
from services.leave_service import calculate_leave_days


def apply(client, headers, leave_type, start="2024-12-20", end="2024-12-24", **extra):
    payload = {"leaveTypeId": leave_type.id, "startDate": start, "endDate": end, **extra}
    return client.post("/api/leave/applications", headers=headers, json=payload)


def decide(client, headers, application_id, status="Approved", **extra):
    return client.patch(
        f"/api/leave/applications/{application_id}/status",
        headers=headers,
        json={"status": status, **extra},
    )


def annual_balance(db, company, who="employee"):
    db.expire_all()
    return (
        db.query(LeaveBalance)
        .filter(LeaveBalance.employee_id == company[who].id)
        .filter(LeaveBalance.leave_type_id == company["annual"].id)
        .one()
    )


def test_calculate_leave_days_counts_both_ends():
    assert calculate_leave_days(date(2024, 12, 20), date(2024, 12, 24)) == 5
    assert calculate_leave_days(date(2024, 12, 20), date(2024, 12, 20)) == 1
    assert calculate_leave_days(date(2024, 2, 28), date(2024, 3, 1)) == 3


def test_calculate_leave_days_rejects_reversed_range():
    with pytest.raises(ValidationError, match="End date cannot be before start date"):
        calculate_leave_days(date(2024, 12, 24), date(2024, 12, 20))


def test_submit_creates_pending_application(client, auth_headers, company, db):
    response = apply(client, auth_headers("employee"), company["annual"], reason="Family trip")

    assert response.status_code == 201
    body = response.json()
    assert body["totalDays"] == 5
    application = db.get(LeaveApplication, body["applicationId"])
    assert application.status == "Pending"
    assert application.reason == "Family trip"
    # Nothing is consumed before approval
    assert annual_balance(db, company).used_days == 0


def test_submit_notifies_manager_in_app_and_by_email(client, auth_headers, company, db, email_service):
    apply(client, auth_headers("employee"), company["annual"])

    notification = db.query(Notification).filter(Notification.recipient_id == company["manager"].id).one()
    assert notification.type == "leave_request"
    assert notification.priority == "high"
    assert notification.sender_id == company["employee"].id
    assert [mail["to"] for mail in email_service.sent] == ["john.doe@company.com"]


def test_submit_rejects_reversed_dates(client, auth_headers, company):
    response = apply(client, auth_headers("employee"), company["annual"], start="2024-12-24", end="2024-12-20")

    assert response.status_code == 400
    assert response.json()["error"] == "End date cannot be before start date"


def test_submit_rejects_more_days_than_remaining(client, auth_headers, company):
    response = apply(
        client, auth_headers("employee"), company["annual"], start="2024-12-01", end="2024-12-11"
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Insufficient leave balance. Available: 10 days, Requested: 11 days"
    assert body["details"] == {"available": 10, "requested": 11}


def test_submit_without_balance(client, auth_headers, company):
    response = apply(client, auth_headers("employee"), company["unpaid"])

    assert response.status_code == 400
    assert response.json()["error"] == "Leave type not found or no balance available"


def test_approval_consumes_balance(client, auth_headers, company, db, email_service):
    application_id = apply(client, auth_headers("employee"), company["annual"]).json()["applicationId"]

    response = decide(client, auth_headers("manager"), application_id)

    assert response.status_code == 200
    assert response.json()["message"] == "Leave application approved successfully"
    balance = annual_balance(db, company)
    assert balance.used_days == 5
    assert balance.remaining_days == balance.total_days - balance.used_days == 5

    application = db.get(LeaveApplication, application_id)
    assert application.status == "Approved"
    assert application.approved_by == company["manager"].id
    assert application.approved_date is not None

    decision = (
        db.query(Notification)
        .filter(Notification.recipient_id == company["employee"].id)
        .one()
    )
    assert decision.type == "leave_approved"
    assert email_service.sent[-1]["to"] == "alice.johnson@company.com"


def test_rejection_requires_reason_and_keeps_balance(client, auth_headers, company, db):
    application_id = apply(client, auth_headers("employee"), company["annual"]).json()["applicationId"]

    missing_reason = decide(client, auth_headers("manager"), application_id, status="Rejected")
    assert missing_reason.status_code == 400

    response = decide(
        client,
        auth_headers("manager"),
        application_id,
        status="Rejected",
        rejectionReason="Release week",
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Leave application rejected successfully"
    db.expire_all()
    application = db.get(LeaveApplication, application_id)
    assert application.status == "Rejected"
    assert application.rejection_reason == "Release week"
    assert annual_balance(db, company).used_days == 0


def test_processed_application_cannot_be_decided_again(client, auth_headers, company, db):
    application_id = apply(client, auth_headers("employee"), company["annual"]).json()["applicationId"]
    decide(client, auth_headers("manager"), application_id)

    response = decide(client, auth_headers("manager"), application_id)

    assert response.status_code == 409
    assert response.json()["error"] == "Leave application already processed"
    assert annual_balance(db, company).used_days == 5


def test_decide_missing_application(client, auth_headers, company):
    response = decide(client, auth_headers("manager"), 4242)

    assert response.status_code == 404
    assert response.json()["error"] == "Leave application not found"


def test_second_approval_cannot_overdraw_balance(client, auth_headers, company, db):
    headers = auth_headers("employee")
    first = apply(client, headers, company["annual"], start="2024-11-04", end="2024-11-09")
    second = apply(client, headers, company["annual"], start="2024-12-02", end="2024-12-07")
    assert first.status_code == second.status_code == 201

    approved = decide(client, auth_headers("manager"), first.json()["applicationId"])
    overdrawn = decide(client, auth_headers("manager"), second.json()["applicationId"])

    assert approved.status_code == 200
    assert overdrawn.status_code == 400
    assert overdrawn.json()["error"].startswith("Insufficient leave balance. Available: 4 days")
    db.expire_all()
    assert db.get(LeaveApplication, second.json()["applicationId"]).status == "Pending"
    assert annual_balance(db, company).used_days == 6


def test_employees_only_see_their_own_applications(client, auth_headers, company):
    apply(client, auth_headers("employee"), company["annual"])
    apply(client, auth_headers("hr"), company["annual"], start="2024-10-01", end="2024-10-02")

    own = client.get(
        f"/api/leave/applications?employeeId={company['hr'].id}",
        headers=auth_headers("employee"),
    ).json()
    everyone = client.get("/api/leave/applications", headers=auth_headers("manager")).json()

    assert [a["employeeCode"] for a in own["applications"]] == ["EMP003"]
    assert own["applications"][0]["leaveType"] == "Annual Leave"
    assert everyone["pagination"]["total"] == 2


def test_list_applications_filters_by_status_and_dates(client, auth_headers, company):
    headers = auth_headers("employee")
    apply(client, headers, company["annual"], start="2024-10-01", end="2024-10-02")
    apply(client, headers, company["annual"], start="2024-12-20", end="2024-12-24")

    response = client.get(
        "/api/leave/applications?status=Pending&startDate=2024-12-01",
        headers=auth_headers("manager"),
    )

    rows = response.json()["applications"]
    assert [row["startDate"] for row in rows] == ["2024-12-20"]


def test_balances_of_caller(client, auth_headers, company):
    response = client.get("/api/leave/balances", headers=auth_headers("employee"))

    assert response.status_code == 200
    rows = {row["leaveType"]: row for row in response.json()}
    assert rows["Annual Leave"]["remainingDays"] == 10
    assert rows["Sick Leave"]["maxDaysPerYear"] == 5
    assert all(row["year"] == company["year"] for row in rows.values())


def test_balances_of_other_employee_need_manager_or_hr(client, auth_headers, company):
    url = f"/api/leave/balances?employeeId={company['manager'].id}"

    assert client.get(url, headers=auth_headers("employee")).status_code == 403
    response = client.get(url, headers=auth_headers("hr"))
    assert response.status_code == 200
    assert {row["employeeId"] for row in response.json()} == {company["manager"].id}


def test_all_balances_grouped_by_employee(client, auth_headers, company):
    response = client.get("/api/leave/balances/all", headers=auth_headers("hr"))

    assert response.status_code == 200
    grouped = {entry["employeeCode"]: entry for entry in response.json()}
    assert set(grouped) == {"EMP000", "EMP001", "EMP002", "EMP003"}
    assert {line["leaveType"] for line in grouped["EMP003"]["balances"]} == {
        "Annual Leave",
        "Sick Leave",
    }


def test_leave_types_ordered_by_name(client, auth_headers):
    response = client.get("/api/leave/types", headers=auth_headers("employee"))

    assert [t["name"] for t in response.json()] == ["Annual Leave", "Sick Leave", "Unpaid Leave"]
