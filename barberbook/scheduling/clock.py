"""Injectable "now" so scheduling rules never read process time directly"""
from datetime import datetime, timedelta, timezone

from barberbook.scheduling.timezones import to_utc


class SystemClock:
    """Wall clock of the running process, in UTC"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock pinned to one instant (tests, replays)"""

    def __init__(self, instant: datetime):
        self.instant = to_utc(instant)

    def now(self) -> datetime:
        return self.instant

    def advance(self, **kwargs) -> None:
        self.instant = self.instant + timedelta(**kwargs)


system_clock = SystemClock()
