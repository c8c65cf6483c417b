from datetime import date

from app.clock import local_now, months_ago, period_start


def test_months_ago_clamps_to_month_end():
    assert months_ago(date(2024, 5, 31), 3) == date(2024, 2, 29)
    assert months_ago(date(2024, 3, 15), 1) == date(2024, 2, 15)


def test_months_ago_crosses_year_boundary():
    assert months_ago(date(2024, 2, 10), 6) == date(2023, 8, 10)
    assert months_ago(date(2024, 1, 1), 12) == date(2023, 1, 1)


def test_period_start():
    today = date(2024, 12, 16)

    assert period_start("current-month", today) == date(2024, 11, 16)
    assert period_start("current-quarter", today) == date(2024, 9, 16)
    assert period_start("current-year", today) == date(2023, 12, 16)
    assert period_start("all-time", today) is None


def test_local_now_is_timezone_aware():
    now = local_now("Asia/Kolkata")

    assert now.tzinfo is not None
    assert now.utcoffset().total_seconds() == 5.5 * 3600
