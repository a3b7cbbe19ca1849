"""Date manipulation utilities"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware current UTC timestamp"""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Current UTC calendar day, used as the step-count day boundary"""
    return utc_now().date()
