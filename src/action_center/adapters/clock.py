"""Clock adapters - wall clock and a pinned clock."""

from datetime import date, datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from action_center.core.errors import ValidationError


class SystemClock:
    """
    Wall clock.

    Implements Clock protocol. Uses the configured timezone when given,
    otherwise the machine's local time. Timestamps are naive local times so
    their date part is the local calendar day.
    """

    def __init__(self, timezone: str = ""):
        self.timezone = None
        if timezone:
            try:
                self.timezone = ZoneInfo(timezone)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValidationError(f"Unknown timezone: {timezone}") from None

    def now(self) -> datetime:
        if self.timezone is None:
            return datetime.now()
        return datetime.now(self.timezone).replace(tzinfo=None)

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """
    Clock pinned to a given day, for deterministic triage.

    Implements Clock protocol. now() returns the pinned moment, or noon on
    the pinned day.
    """

    def __init__(self, today: date, now: datetime | None = None):
        self._today = today
        self._now = now or datetime.combine(today, time(12, 0))

    def today(self) -> date:
        return self._today

    def now(self) -> datetime:
        return self._now

    def set(self, moment: datetime) -> None:
        """Move the clock to a new moment."""
        self._now = moment
        self._today = moment.date()
