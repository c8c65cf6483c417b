"""Notification dispatch, inbox endpoints and scheduled jobs."""

from datetime import date, datetime, timedelta, timezone

from conftest import FakeEmailService
from models import Employee, LeaveApplication, Notification
from services.notification_service import NotificationService


def notify(db, recipient, **overrides):
    fields = {
        "recipient_id": recipient.id,
        "type": "system",
        "title": "Maintenance",
        "message": "Scheduled maintenance tonight",
    }
    fields.update(overrides)
    notification = Notification(**fields)
    db.add(notification)
    db.commit()
    return notification.id


def test_email_failure_does_not_undo_notification(db, company, settings):
    service = NotificationService(db, FakeEmailService(settings, fail=True))

    notification = service.create_notification(
        recipient_id=company["employee"].id,
        type="system",
        title="Heads up",
        message="Something happened",
        send_email=True,
    )

    db.expire_all()
    assert db.get(Notification, notification.id) is not None


def test_email_copy_is_sent_when_requested(db, company, settings):
    email = FakeEmailService(settings)
    service = NotificationService(db, email)

    service.create_notification(
        recipient_id=company["employee"].id,
        type="system",
        title="Heads up",
        message="Something happened",
        send_email=True,
    )

    [mail] = email.sent
    assert mail["to"] == "alice.johnson@company.com"
    assert mail["subject"] == "Heads up"


def test_leave_request_survives_email_outage(client, auth_headers, company, db, email_service):
    email_service.fail = True

    response = client.post(
        "/api/leave/applications",
        headers=auth_headers("employee"),
        json={
            "leaveTypeId": company["annual"].id,
            "startDate": "2024-12-20",
            "endDate": "2024-12-24",
        },
    )

    assert response.status_code == 201
    assert db.query(Notification).filter(Notification.type == "leave_request").count() == 1


def test_bulk_create(db, company, email_service):
    service = NotificationService(db, email_service)

    created = service.create_bulk_notifications(
        [
            {"recipient_id": company["employee"].id, "type": "system", "title": "A", "message": "a"},
            {"recipient_id": company["hr"].id, "type": "system", "title": "B", "message": "b"},
        ]
    )

    assert [n.title for n in created] == ["A", "B"]


def test_list_and_unread_count(client, auth_headers, company, db):
    notify(db, company["employee"], title="First")
    notify(db, company["employee"], title="Second", is_read=True)
    notify(db, company["manager"], title="Not mine")
    headers = auth_headers("employee")

    listing = client.get("/api/notifications", headers=headers).json()
    unread = client.get("/api/notifications?unreadOnly=true", headers=headers).json()
    count = client.get("/api/notifications/unread-count", headers=headers).json()

    assert {n["title"] for n in listing["notifications"]} == {"First", "Second"}
    assert listing["pagination"]["limit"] == 20
    assert [n["title"] for n in unread["notifications"]] == ["First"]
    assert count == {"count": 1}


def test_mark_read_and_mark_all_read(client, auth_headers, company, db):
    first = notify(db, company["employee"])
    notify(db, company["employee"])
    headers = auth_headers("employee")

    response = client.patch(f"/api/notifications/{first}/read", headers=headers)

    assert response.status_code == 200
    db.expire_all()
    read = db.get(Notification, first)
    assert read.is_read and read.read_at is not None

    client.patch("/api/notifications/mark-all-read", headers=headers)
    assert client.get("/api/notifications/unread-count", headers=headers).json() == {"count": 0}


def test_cannot_touch_other_peoples_notifications(client, auth_headers, company, db):
    theirs = notify(db, company["manager"])
    headers = auth_headers("employee")

    read = client.patch(f"/api/notifications/{theirs}/read", headers=headers)
    delete = client.delete(f"/api/notifications/{theirs}", headers=headers)

    assert read.status_code == delete.status_code == 404
    assert read.json() == {"error": "Notification not found"}


def test_create_notification_for_colleague(client, auth_headers, company, db):
    response = client.post(
        "/api/notifications",
        headers=auth_headers("manager"),
        json={
            "recipientId": company["employee"].id,
            "type": "announcement",
            "title": "Team lunch",
            "message": "Friday at noon",
            "priority": "low",
        },
    )

    assert response.status_code == 201
    notification = db.get(Notification, response.json()["notificationId"])
    assert notification.sender_id == company["manager"].id
    assert notification.priority == "low"


def test_create_notification_for_unknown_recipient(client, auth_headers):
    response = client.post(
        "/api/notifications",
        headers=auth_headers("manager"),
        json={"recipientId": 9999, "type": "announcement", "title": "Hi", "message": "Hello"},
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Recipient not found"


def test_stats(client, auth_headers, company, db):
    notify(db, company["employee"], priority="high")
    notify(db, company["employee"], priority="urgent", type="leave_approved")
    notify(db, company["employee"], priority="high", is_read=True)
    notify(db, company["employee"], priority="low")

    response = client.get("/api/notifications/stats", headers=auth_headers("employee"))

    body = response.json()
    assert body["stats"] == {
        "totalNotifications": 4,
        "unreadNotifications": 3,
        "highPriorityUnread": 2,
        "todayNotifications": 4,
        "weekNotifications": 4,
    }
    assert body["typeBreakdown"][0] == {"type": "system", "count": 3}


def test_bulk_actions(client, auth_headers, company, db):
    ids = [notify(db, company["employee"]) for _ in range(3)]
    headers = auth_headers("employee")

    def bulk(action, notification_ids):
        return client.post(
            "/api/notifications/bulk-action",
            headers=headers,
            json={"action": action, "notificationIds": notification_ids},
        )

    assert bulk("mark_read", ids).json() == {"message": "Notifications marked as read"}
    assert client.get("/api/notifications/unread-count", headers=headers).json()["count"] == 0

    assert bulk("mark_unread", ids[:1]).json() == {"message": "Notifications marked as unread"}
    assert client.get("/api/notifications/unread-count", headers=headers).json()["count"] == 1

    assert bulk("delete", ids[1:]).json() == {"message": "Notifications deleted"}
    db.expire_all()
    assert db.query(Notification).count() == 1


def test_bulk_action_rejections(client, auth_headers, company, db):
    mine = notify(db, company["employee"])
    theirs = notify(db, company["manager"])
    headers = auth_headers("employee")

    def bulk(action, notification_ids):
        return client.post(
            "/api/notifications/bulk-action",
            headers=headers,
            json={"action": action, "notificationIds": notification_ids},
        )

    empty = bulk("mark_read", [])
    foreign = bulk("delete", [mine, theirs])
    unknown = bulk("archive", [mine])

    assert (empty.status_code, empty.json()["error"]) == (400, "Invalid notification IDs")
    assert (foreign.status_code, foreign.json()["error"]) == (
        403,
        "Some notifications do not belong to you",
    )
    assert (unknown.status_code, unknown.json()["error"]) == (400, "Invalid action")
    db.expire_all()
    assert db.query(Notification).count() == 2


def test_birthday_and_anniversary_reminders(db, company, email_service):
    today = date(2024, 12, 16)
    alice = company["employee"]
    alice.date_of_birth = date(1990, 12, 16)
    alice.hire_date = date(2021, 12, 16)
    db.commit()
    service = NotificationService(db, email_service)

    assert service.send_birthday_reminders(today) == 1
    assert service.send_work_anniversary_reminders(today) == 1

    manager_titles = {
        n.title
        for n in db.query(Notification).filter(Notification.recipient_id == company["manager"].id)
    }
    assert manager_titles == {"Employee Birthday", "Employee Work Anniversary"}
    anniversary = (
        db.query(Notification)
        .filter(Notification.recipient_id == alice.id)
        .filter(Notification.type == "anniversary_reminder")
        .one()
    )
    assert anniversary.data == {"yearsOfService": 3}


def test_upcoming_leave_reminders(db, company, email_service):
    db.add(
        LeaveApplication(
            employee_id=company["employee"].id,
            leave_type_id=company["annual"].id,
            start_date=date(2024, 12, 17),
            end_date=date(2024, 12, 18),
            total_days=2,
            attachments=[],
            status="Approved",
            applied_date=date(2024, 12, 1),
        )
    )
    db.commit()
    service = NotificationService(db, email_service)

    assert service.send_upcoming_leave_reminders(date(2024, 12, 16)) == 1
    assert service.send_upcoming_leave_reminders(date(2024, 12, 10)) == 0
    assert email_service.sent[-1]["to"] == "alice.johnson@company.com"


def test_cleanup_removes_only_old_read_notifications(db, company, email_service):
    old = datetime.now(timezone.utc) - timedelta(days=45)
    notify(db, company["employee"], is_read=True, created_at=old)
    notify(db, company["employee"], is_read=False, created_at=old)
    notify(db, company["employee"], is_read=True)

    deleted = NotificationService(db, email_service).cleanup_old_notifications(days_old=30)

    assert deleted == 1
    db.expire_all()
    assert db.query(Notification).count() == 2
    assert db.query(Employee).count() == 4
