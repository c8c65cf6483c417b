"""Performance reviews and performance analytics."""

from app.clock import local_today
from models import Notification, PerformanceReview, WorkLog


def review_payload(company, **overrides):
    payload = {
        "employeeId": company["employee"].id,
        "reviewPeriod": "Q4 2024",
        "overallRating": 4.5,
        "goals": "Complete React migration",
        "metrics": [
            {"metricName": "Teamwork", "rating": 5, "weight": 0.4},
            {"metricName": "Delivery", "rating": 4, "comments": "Shipped on time"},
        ],
    }
    payload.update(overrides)
    return payload


def create_review(client, headers, company, **overrides):
    return client.post(
        "/api/performance/reviews", headers=headers, json=review_payload(company, **overrides)
    )


def test_manager_creates_review_and_employee_is_notified(
    client, auth_headers, company, db, email_service
):
    response = create_review(client, auth_headers("manager"), company)

    assert response.status_code == 201
    review = db.get(PerformanceReview, response.json()["reviewId"])
    assert review.reviewer_id == company["manager"].id
    assert review.status == "Draft"
    assert review.review_date is not None
    assert len(review.metrics) == 2

    notification = db.query(Notification).filter(Notification.type == "performance_review").one()
    assert notification.recipient_id == company["employee"].id
    assert email_service.sent[-1]["to"] == "alice.johnson@company.com"


def test_duplicate_review_period_is_a_conflict(client, auth_headers, company):
    create_review(client, auth_headers("manager"), company)

    response = create_review(client, auth_headers("manager"), company)

    assert response.status_code == 409
    assert response.json()["error"] == "Performance review already exists for this period"


def test_review_for_unknown_employee(client, auth_headers, company):
    response = create_review(client, auth_headers("manager"), company, employeeId=9999)

    assert response.status_code == 404


def test_only_managers_create_reviews(client, auth_headers, company):
    response = create_review(client, auth_headers("employee"), company)

    assert response.status_code == 403


def test_review_detail_lists_metrics_by_name(client, auth_headers, company):
    review_id = create_review(client, auth_headers("manager"), company).json()["reviewId"]

    response = client.get(f"/api/performance/reviews/{review_id}", headers=auth_headers("employee"))

    assert response.status_code == 200
    body = response.json()
    assert body["reviewerName"] == "John Doe"
    assert [metric["metricName"] for metric in body["metrics"]] == ["Delivery", "Teamwork"]


def test_employee_cannot_read_someone_elses_review(client, auth_headers, company):
    review_id = create_review(
        client, auth_headers("admin"), company, employeeId=company["hr"].id
    ).json()["reviewId"]

    response = client.get(f"/api/performance/reviews/{review_id}", headers=auth_headers("employee"))

    assert response.status_code == 403


def test_only_reviewer_or_hr_may_update(client, auth_headers, company, db):
    review_id = create_review(client, auth_headers("admin"), company).json()["reviewId"]
    url = f"/api/performance/reviews/{review_id}"

    forbidden = client.put(url, headers=auth_headers("manager"), json={"status": "Published"})
    allowed = client.put(url, headers=auth_headers("hr"), json={"status": "Published"})

    assert forbidden.status_code == 403
    assert forbidden.json()["error"] == "Access denied - not authorized to update this review"
    assert allowed.status_code == 200
    db.expire_all()
    assert db.get(PerformanceReview, review_id).status == "Published"


def test_update_rejects_null_status(client, auth_headers, company, db):
    review_id = create_review(client, auth_headers("manager"), company).json()["reviewId"]

    response = client.put(
        f"/api/performance/reviews/{review_id}",
        headers=auth_headers("manager"),
        json={"status": None},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Validation error"
    db.expire_all()
    assert db.get(PerformanceReview, review_id).status == "Draft"


def test_list_reviews_scoped_to_caller(client, auth_headers, company):
    create_review(client, auth_headers("manager"), company)
    create_review(client, auth_headers("admin"), company, employeeId=company["hr"].id)

    own = client.get("/api/performance/reviews", headers=auth_headers("employee")).json()
    filtered = client.get(
        "/api/performance/reviews?reviewPeriod=Q4", headers=auth_headers("manager")
    ).json()

    assert [row["employeeCode"] for row in own["reviews"]] == ["EMP003"]
    assert filtered["pagination"]["total"] == 2


def test_analytics_counts_published_reviews_only(client, auth_headers, company, db):
    today = local_today("UTC")
    db.add_all(
        [
            PerformanceReview(
                employee_id=company["employee"].id,
                reviewer_id=company["manager"].id,
                review_period="Published period",
                overall_rating=4.0,
                status="Published",
                review_date=today,
            ),
            PerformanceReview(
                employee_id=company["manager"].id,
                reviewer_id=company["admin"].id,
                review_period="Draft period",
                overall_rating=1.0,
                status="Draft",
                review_date=today,
            ),
            WorkLog(employee_id=company["employee"].id, log_date=today, hours_worked=8),
            WorkLog(employee_id=company["manager"].id, log_date=today, hours_worked=6),
        ]
    )
    db.commit()

    response = client.get(
        "/api/performance/analytics?period=current-year", headers=auth_headers("hr")
    )

    assert response.status_code == 200
    body = response.json()
    assert body["period"] == "current-year"
    assert body["departmentPerformance"] == [
        {
            "departmentName": "Engineering",
            "avgRating": 4.0,
            "reviewCount": 1,
            "employeeCount": 1,
        }
    ]
    assert [p["employeeCode"] for p in body["topPerformers"]] == ["EMP003"]
    [month] = body["workHours"]
    assert (month["year"], month["month"]) == (today.year, today.month)
    assert month["totalHours"] == 14
    assert month["activeEmployees"] == 2


def test_analytics_requires_reporting_permission(client, auth_headers):
    response = client.get("/api/performance/analytics", headers=auth_headers("employee"))

    assert response.status_code == 403
