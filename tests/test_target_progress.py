from datetime import date, datetime, timedelta, timezone

import pytest

from target_tracking.progress import (
    AT_RISK_TOLERANCE,
    calculate_target_progress,
    classify_projection,
    linear_projection,
    sum_period_emissions,
    to_naive_utc,
)

START = datetime(2025, 1, 1)
END = datetime(2026, 1, 1)
MIDPOINT = START + (END - START) / 2


def test_midpoint_on_track_with_quarterly_milestones():
    progress = calculate_target_progress(10000, 4000, START, END, MIDPOINT, "Annual")

    assert progress.status == "on-track"
    assert progress.projection == 8000.0
    assert progress.percentage == 40.0
    assert progress.remaining == 6000.0

    assert [m.label for m in progress.milestones] == ["Q1", "Q2", "Q3", "Q4"]
    assert [m.expected_value for m in progress.milestones] == [2500.0, 5000.0, 7500.0, 10000.0]

    q1, q2, q3, q4 = progress.milestones
    assert q1.achieved and not q1.on_track
    assert q2.achieved and q2.on_track
    assert q2.date == MIDPOINT
    assert not q3.achieved and q3.on_track
    assert not q4.achieved and q4.on_track
    assert q4.date == END


@pytest.mark.parametrize(
    "current, expected_status",
    [(5500, "at-risk"), (6000, "off-track"), (3000, "on-track")],
)
def test_status_follows_linear_projection(current, expected_status):
    progress = calculate_target_progress(10000, current, START, END, MIDPOINT)
    assert progress.status == expected_status


def test_completed_once_window_has_ended():
    progress = calculate_target_progress(10000, 12500, START, END, END)

    assert progress.status == "completed"
    assert progress.projection is None
    assert progress.percentage == 125.0
    assert progress.remaining == -2500.0
    assert all(m.achieved for m in progress.milestones)


def test_monthly_targets_have_no_milestones():
    progress = calculate_target_progress(
        900, 63.25, datetime(2025, 7, 1), datetime(2025, 8, 1), datetime(2025, 7, 2), "Monthly"
    )

    assert progress.milestones == []
    assert progress.percentage == 7.03


def test_zero_target_reports_zero_percentage():
    progress = calculate_target_progress(0, 10, START, END, MIDPOINT)

    assert progress.percentage == 0.0
    assert progress.remaining == -10.0
    assert progress.status == "off-track"


def test_plain_dates_are_read_as_midnight():
    progress = calculate_target_progress(
        10000, 4000, date(2025, 1, 1), date(2026, 1, 1), date(2025, 7, 2)
    )
    assert progress.status == "on-track"
    assert progress.milestones[0].date == datetime(2025, 4, 2, 6)


@pytest.mark.parametrize(
    "now",
    [
        datetime(2025, 7, 2, 12, tzinfo=timezone.utc),
        datetime(2025, 7, 2, 14, tzinfo=timezone(timedelta(hours=2))),
    ],
)
def test_timezone_aware_now_is_compared_in_utc(now):
    progress = calculate_target_progress(10000, 4000, date(2025, 1, 1), date(2026, 1, 1), now)

    assert progress.status == "on-track"
    assert progress.projection == 8000.0
    assert progress.milestones[1].achieved


def test_aware_window_with_naive_now():
    start = datetime(2025, 1, 1, 1, tzinfo=timezone(timedelta(hours=1)))
    end = datetime(2026, 1, 1, tzinfo=timezone.utc)
    progress = calculate_target_progress(10000, 4000, start, end, MIDPOINT)
    assert progress.projection == 8000.0


def test_to_naive_utc():
    assert to_naive_utc(date(2025, 3, 1)) == datetime(2025, 3, 1)
    assert to_naive_utc(datetime(2025, 3, 1, 9)) == datetime(2025, 3, 1, 9)
    aware = datetime(2025, 3, 1, 9, tzinfo=timezone(timedelta(hours=-5)))
    assert to_naive_utc(aware) == datetime(2025, 3, 1, 14)


def test_projection_clamps_elapsed_and_total_days():
    assert linear_projection(0, START, END, START) == 0.0
    # elapsed clamped to 0.01 day
    assert linear_projection(1, START, START + timedelta(days=10), START) == pytest.approx(1000.0)
    # total clamped to one day
    assert linear_projection(5, START, START, START + timedelta(hours=12)) == pytest.approx(10.0)


def test_classify_projection_thresholds():
    assert classify_projection(100, 100) == "on-track"
    assert classify_projection(100 * AT_RISK_TOLERANCE, 100) == "at-risk"
    assert classify_projection(116, 100) == "off-track"


def test_sum_period_emissions_rounds_once():
    assert sum_period_emissions([0.1, 0.2, 0.004]) == 0.3
    assert sum_period_emissions([]) == 0.0
