# Pharmacy - Peak hours

from datetime import datetime

WEEKDAY_PEAK_WINDOWS = ((8, 12), (14, 18))
WEEKEND_PEAK_WINDOWS = ((10, 16),)


def is_peak_time(now: datetime) -> bool:
    """Weekdays 08-12 and 14-18, weekends 10-16."""
    windows = WEEKDAY_PEAK_WINDOWS if now.weekday() < 5 else WEEKEND_PEAK_WINDOWS
    return any(start <= now.hour < end for start, end in windows)


def is_peak_hour(now: datetime, workload: int, threshold: int) -> bool:
    """
    Whether the pharmacy should be offered nurse assistance.

    Peak when inside a busy window or when outstanding work (pending
    notifications plus assigned deliveries) exceeds the threshold.
    """
    return is_peak_time(now) or workload > threshold
