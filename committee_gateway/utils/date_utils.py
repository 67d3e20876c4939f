"""Date manipulation utilities"""

from datetime import date, datetime, timezone
from typing import List, Tuple


def utc_now() -> datetime:
    """Timezone-aware current time used for audit stamps"""
    return datetime.now(timezone.utc)


def last_n_months(today: date, months: int) -> List[Tuple[int, int]]:
    """(year, month) pairs for the last `months` calendar months, oldest first, current month last"""
    result = []
    year, month = today.year, today.month
    for _ in range(months):
        result.append((year, month))
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    return list(reversed(result))
