"""Date manipulation utilities"""

from datetime import date, datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from prestamos_gateway.config import settings

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current instant as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def reference_zone(name: Optional[str] = None) -> ZoneInfo:
    """Timezone loan dates are anchored to (settings.reference_timezone by default)"""
    return ZoneInfo(name or settings.reference_timezone)


def today_in(tz: ZoneInfo, clock: Optional[Clock] = None) -> date:
    """Calendar date of "now" in the given timezone"""
    now = (clock or system_clock)()
    if now.tzinfo is None:
        # Naive clocks are taken as already being in the reference timezone
        return now.date()
    return now.astimezone(tz).date()


def parse_iso_date(value: str) -> date:
    """Parse a YYYY-MM-DD calendar date"""
    return date.fromisoformat(value.strip())
