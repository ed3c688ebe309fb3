"""
Utility functions for the EDINET downloader.
"""

import re
import time
from datetime import date, datetime, timedelta
from threading import Lock
from typing import Iterator, Optional, Tuple, Union


# Document descriptions carry the fiscal period as "YYYY/MM/DD－YYYY/MM/DD"
# with a full-width dash
_PERIOD_PATTERN = re.compile(r"(\d{4}/\d{2}/\d{2})－(\d{4}/\d{2}/\d{2})")


def parse_period_from_description(description: Optional[str]) -> Tuple[str, str]:
    """
    Extract fiscal period bounds from an EDINET document description.

    Args:
        description: e.g. "有価証券報告書－第25期(2023/04/01－2024/03/31)"

    Returns:
        Tuple of (period_start, period_end) as YYYY-MM-DD, empty strings when absent
    """
    if not description:
        return "", ""

    match = _PERIOD_PATTERN.search(description)
    if not match:
        return "", ""

    return match.group(1).replace("/", "-"), match.group(2).replace("/", "-")


def parse_date(value: Union[str, date, datetime]) -> date:
    """
    Parse a YYYY-MM-DD string into a date.

    Raises:
        ValueError: If the value is not a valid date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Invalid date format (expected YYYY-MM-DD): {value}")


def iter_dates(start_date: date, end_date: date) -> Iterator[date]:
    """Yield every calendar day from ``start_date`` to ``end_date`` inclusive."""
    if start_date > end_date:
        raise ValueError("Start date must be before end date")

    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def get_user_agent() -> str:
    """
    Get User-Agent header for EDINET requests.

    Returns:
        User-Agent string
    """
    return "EdinetStatementExtractor/1.0"


class RateLimiter:
    """
    Simple rate limiter for API requests.
    """

    def __init__(self, max_requests: int = 3, time_window: float = 1.0):
        self.max_requests = max_requests
        self.time_window = time_window
        self.requests: list[float] = []
        self._lock = Lock()

    def wait_if_needed(self) -> None:
        """
        Wait if rate limit would be exceeded.
        """
        with self._lock:
            now = time.time()

            self.requests = [
                req_time
                for req_time in self.requests
                if now - req_time < self.time_window
            ]

            if len(self.requests) >= self.max_requests:
                sleep_time = self.time_window - (now - self.requests[0]) + 0.1
                if sleep_time > 0:
                    time.sleep(sleep_time)
                    now = time.time()
                    self.requests = [
                        req_time
                        for req_time in self.requests
                        if now - req_time < self.time_window
                    ]

            self.requests.append(now)
