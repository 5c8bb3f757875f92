"""Filter configuration driven by the dashboard toolbar."""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable


@dataclass(frozen=True)
class DateRange:
    """Inclusive date bounds; either side may be open.

    Attributes:
        start: First date included (None for no lower bound).
        end: Last date included (None for no upper bound).
    """

    start: date | None = None
    end: date | None = None

    @property
    def is_open(self) -> bool:
        """True when neither bound is set."""
        return self.start is None and self.end is None

    def __str__(self) -> str:
        start = self.start.isoformat() if self.start else "..."
        end = self.end.isoformat() if self.end else "..."
        return f"{start} → {end}"


@dataclass(frozen=True)
class FilterConfig:
    """Current filter selection. Hashable so it can key memoized views.

    Attributes:
        year: The single calendar year being shown.
        units: Selected unit labels.
        known_units: Every configured unit label. When ``units`` has the same
            cardinality the unit filter is a no-op; an empty ``units``
            selects nothing.
        date_range: Optional inclusive date bounds.
        category_search: Case-insensitive substring applied to rows after
            aggregation.
    """

    year: int
    units: frozenset[str]
    known_units: frozenset[str]
    date_range: DateRange = field(default_factory=DateRange)
    category_search: str = ""

    @classmethod
    def all_units(
        cls,
        year: int,
        known_units: Iterable[str],
        date_range: DateRange | None = None,
        category_search: str = "",
    ) -> "FilterConfig":
        """Build a filter with every known unit selected."""
        units = frozenset(known_units)
        return cls(
            year=year,
            units=units,
            known_units=units,
            date_range=date_range or DateRange(),
            category_search=category_search,
        )

    @property
    def restricts_units(self) -> bool:
        """Whether the unit selection narrows the posting list."""
        return len(self.units) < len(self.known_units)

    def with_units(self, units: Iterable[str]) -> "FilterConfig":
        """Copy with a different unit selection."""
        return FilterConfig(
            year=self.year,
            units=frozenset(units),
            known_units=self.known_units,
            date_range=self.date_range,
            category_search=self.category_search,
        )
