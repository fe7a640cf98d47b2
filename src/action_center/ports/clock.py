"""Clock interface."""

from datetime import date, datetime
from typing import Protocol


class Clock(Protocol):
    """Supplies the current local day and time. All triage is relative to it."""

    def today(self) -> date:
        """Current local calendar date."""
        ...

    def now(self) -> datetime:
        """Current local time, used to stamp writes."""
        ...
