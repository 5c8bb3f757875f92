"""Aggregation of postings into per-category monthly rows."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Sequence

from financial_dashboard.models.posting import Posting
from financial_dashboard.models.report import CategoryAggregate, PivotTable
from financial_dashboard.utils.date_utils import MONTHS_PER_YEAR
from financial_dashboard.utils.decimal_utils import ZERO, sum_amounts
from financial_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class _CategoryAccumulator:
    """Running sums for one category while postings are grouped."""

    name: str
    months: list[Decimal] = field(default_factory=lambda: [ZERO] * MONTHS_PER_YEAR)
    total: Decimal = ZERO
    postings: list[Posting] = field(default_factory=list)

    def add(self, posting: Posting) -> None:
        self.months[posting.month] += posting.amount
        self.total += posting.amount
        self.postings.append(posting)

    def freeze(self) -> CategoryAggregate:
        # Canonical posting order keeps the result independent of input order
        canonical = sorted(self.postings, key=lambda p: (p.date, p.id))
        return CategoryAggregate(
            name=self.name,
            monthly_totals=tuple(self.months),
            total=self.total,
            postings=tuple(canonical),
        )


def aggregate_postings(postings: Iterable[Posting], year: int) -> dict[str, CategoryAggregate]:
    """Group postings by category into twelve monthly sums.

    Postings outside ``year`` are skipped even though the filter stage
    already removes them, so the function is safe to call on its own.
    Decimal addition is exact, which makes every result identical for any
    permutation of the input.

    Args:
        postings: Filtered postings.
        year: Year being aggregated.

    Returns:
        Mapping of category name to its aggregate. The mapping's iteration
        order carries no meaning; use the ordering policy for display.
    """
    accumulators: dict[str, _CategoryAccumulator] = {}
    skipped = 0

    for posting in postings:
        if posting.year != year:
            skipped += 1
            continue

        accumulator = accumulators.get(posting.category)
        if accumulator is None:
            accumulator = _CategoryAccumulator(name=posting.category)
            accumulators[posting.category] = accumulator
        accumulator.add(posting)

    if skipped:
        logger.debug(f"Skipped {skipped} postings outside {year}")

    return {name: acc.freeze() for name, acc in accumulators.items()}


def build_pivot(rows: Sequence[CategoryAggregate], year: int) -> PivotTable:
    """Add column totals and the grand total to ordered rows.

    Args:
        rows: Ordered (and possibly search-filtered) category rows.
        year: Year the rows cover.

    Returns:
        PivotTable over exactly these rows.
    """
    monthly_totals = tuple(
        sum_amounts(row.monthly_totals[month] for row in rows)
        for month in range(MONTHS_PER_YEAR)
    )
    return PivotTable(
        year=year,
        rows=tuple(rows),
        monthly_totals=monthly_totals,
        grand_total=sum_amounts(row.total for row in rows),
    )
