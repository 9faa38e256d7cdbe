from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import re

from boxdly.errors import InvalidMonthError

_MONTH_RE = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{1,2})$")


@dataclass(frozen=True, order=True)
class YearMonth:
    """A calendar month, the unit results are filtered and ranked by."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise InvalidMonthError(f"Month must be between 1 and 12, got {self.month}")
        if not 1 <= self.year <= 9999:
            raise InvalidMonthError(f"Year out of range: {self.year}")

    @classmethod
    def current(cls, today: date | None = None) -> YearMonth:
        today = today or date.today()
        return cls(today.year, today.month)

    @classmethod
    def parse(cls, text: str) -> YearMonth:
        if not isinstance(text, str):
            raise InvalidMonthError(f"Expected a month as YYYY-MM, got {text!r}")
        match = _MONTH_RE.match(text.strip())
        if not match:
            raise InvalidMonthError(f"Expected a month as YYYY-MM, got {text!r}")
        return cls(int(match.group("year")), int(match.group("month")))

    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def contains(self, day: date | None) -> bool:
        if day is None:
            return False
        return day.year == self.year and day.month == self.month

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
