"""Report data models produced by the dashboard pipeline."""

from dataclasses import dataclass, field
from decimal import Decimal

from financial_dashboard.models.filters import FilterConfig
from financial_dashboard.models.posting import Posting
from financial_dashboard.utils.date_utils import MONTHS_PER_YEAR

# Label shown for metrics that cannot be computed
NOT_AVAILABLE = "N/A"


def _empty_months() -> tuple[Decimal, ...]:
    return tuple(Decimal("0") for _ in range(MONTHS_PER_YEAR))


@dataclass(frozen=True)
class CategoryAggregate:
    """One row of the pivot table.

    Attributes:
        name: Category label, unique within one aggregation result.
        monthly_totals: Twelve sums, index 0 = January.
        total: Sum of monthly_totals.
        postings: Source postings, kept for drill-down.
    """

    name: str
    monthly_totals: tuple[Decimal, ...] = field(default_factory=_empty_months)
    total: Decimal = Decimal("0")
    postings: tuple[Posting, ...] = ()

    def __post_init__(self) -> None:
        if len(self.monthly_totals) != MONTHS_PER_YEAR:
            raise ValueError(
                f"Category '{self.name}' needs {MONTHS_PER_YEAR} monthly totals, "
                f"got {len(self.monthly_totals)}"
            )

    @property
    def is_expense(self) -> bool:
        """True when the category nets to an outflow."""
        return self.total < 0

    def sorted_postings(self) -> list[Posting]:
        """Postings in drill-down order: newest first, then by id."""
        by_id = sorted(self.postings, key=lambda p: p.id)
        return sorted(by_id, key=lambda p: p.date, reverse=True)

    def __repr__(self) -> str:
        return (
            f"CategoryAggregate(name={self.name!r}, total={self.total}, "
            f"postings={len(self.postings)})"
        )


@dataclass(frozen=True)
class PivotTable:
    """Category x month matrix with column and grand totals.

    Attributes:
        year: Year the table covers.
        rows: Ordered category rows (after the category search).
        monthly_totals: Column sums over ``rows``.
        grand_total: Sum of all row totals.
    """

    year: int
    rows: tuple[CategoryAggregate, ...] = ()
    monthly_totals: tuple[Decimal, ...] = field(default_factory=_empty_months)
    grand_total: Decimal = Decimal("0")

    @property
    def is_empty(self) -> bool:
        """True when no category row is shown."""
        return not self.rows

    @property
    def category_names(self) -> list[str]:
        """Row labels in display order."""
        return [row.name for row in self.rows]


@dataclass(frozen=True)
class TrendResult:
    """Month-over-month variation of the net result.

    Attributes:
        percentage: Variation in percent, rounded to one decimal, or None
            when no comparison is possible.
        last_month: Latest active month index.
        previous_month: Latest active month before ``last_month``.
    """

    percentage: Decimal | None = None
    last_month: int | None = None
    previous_month: int | None = None

    @property
    def is_comparable(self) -> bool:
        """Whether a percentage could be computed."""
        return self.percentage is not None


@dataclass(frozen=True)
class DashboardMetrics:
    """Summary indicators shown on the KPI cards.

    Attributes:
        has_data: False when no posting matched the filters; every other
            field then holds its no-data sentinel.
        accumulated_result: Sum of all category totals.
        trend: Variation between the last two active months.
        average_monthly_expense: Sum of negative postings per active month.
        top_expense_category: Largest net expense category, or "N/A".
        active_months: Sorted distinct month indices with postings.
        period_label: "Jan–Nov" style label, or "N/A".
    """

    has_data: bool
    accumulated_result: Decimal | None = None
    trend: TrendResult = field(default_factory=TrendResult)
    average_monthly_expense: Decimal | None = None
    top_expense_category: str = NOT_AVAILABLE
    active_months: tuple[int, ...] = ()
    period_label: str = NOT_AVAILABLE

    @classmethod
    def no_data(cls) -> "DashboardMetrics":
        """Sentinel for an empty filtered period."""
        return cls(has_data=False)

    @property
    def is_loss(self) -> bool:
        """True when the accumulated result is negative."""
        return self.accumulated_result is not None and self.accumulated_result < 0


@dataclass(frozen=True)
class DashboardView:
    """Everything the presentation layer needs for one filter selection.

    Attributes:
        filters: The filter selection this view was computed for.
        pivot: Search-filtered pivot table.
        ordered_rows: All ordered rows before the category search.
        metrics: Summary indicators (computed from the unsearched rows).
        filtered_postings: Postings that passed the filter stage.
    """

    filters: FilterConfig
    pivot: PivotTable
    ordered_rows: tuple[CategoryAggregate, ...]
    metrics: DashboardMetrics
    filtered_postings: tuple[Posting, ...]

    def details(self, category: str) -> list[Posting]:
        """Drill-down postings for a category, newest first.

        Args:
            category: Exact category name.

        Returns:
            The category's postings, or an empty list if it is not shown.
        """
        for row in self.ordered_rows:
            if row.name == category:
                return row.sorted_postings()
        return []
