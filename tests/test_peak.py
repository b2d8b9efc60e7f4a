"""Peak-hour predicate for nurse escalation."""

from datetime import datetime

import pytest

from carelink.features.pharmacy.peak import is_peak_hour, is_peak_time

# 2024-03-04 is a Monday, 2024-03-09 a Saturday
MONDAY = datetime(2024, 3, 4)
SATURDAY = datetime(2024, 3, 9)


@pytest.mark.parametrize(
    "hour, expected",
    [(7, False), (8, True), (11, True), (12, False), (13, False), (14, True), (17, True), (18, False)],
)
def test_weekday_windows(hour, expected):
    assert is_peak_time(MONDAY.replace(hour=hour, minute=30)) is expected


@pytest.mark.parametrize(
    "hour, expected",
    [(9, False), (10, True), (15, True), (16, False)],
)
def test_weekend_window(hour, expected):
    assert is_peak_time(SATURDAY.replace(hour=hour)) is expected


def test_workload_above_threshold_is_peak_outside_windows():
    quiet = MONDAY.replace(hour=20)
    assert is_peak_hour(quiet, workload=10, threshold=10) is False
    assert is_peak_hour(quiet, workload=11, threshold=10) is True


def test_window_is_peak_with_no_workload():
    assert is_peak_hour(SATURDAY.replace(hour=12), workload=0, threshold=10) is True
