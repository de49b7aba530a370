"""Calendar week bucket model."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class WeekBucket:
    """Monday-to-Sunday calendar week, indexed from the loan's sign week."""

    monday: date
    sunday: date  # inclusive
    index: int = 0

    @property
    def is_grace(self) -> bool:
        """Week 0 never requires a payment."""
        return self.index == 0

    def contains(self, day: date) -> bool:
        """Check whether a UTC calendar date falls inside the week."""
        return self.monday <= day <= self.sunday
