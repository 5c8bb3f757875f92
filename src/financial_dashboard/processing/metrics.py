"""Summary indicators derived from the ordered rows and filtered postings."""

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable, Sequence

from financial_dashboard.config import DEFAULT_ADJUSTMENT_CATEGORY
from financial_dashboard.models.posting import Posting
from financial_dashboard.models.report import (
    NOT_AVAILABLE,
    CategoryAggregate,
    DashboardMetrics,
    TrendResult,
)
from financial_dashboard.utils.date_utils import DEFAULT_MONTH_LABELS
from financial_dashboard.utils.decimal_utils import ONE_DECIMAL, ZERO, sum_amounts
from financial_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)

HUNDRED = Decimal("100")

# Digits available to the trend ratio before rounding to one decimal
TREND_PRECISION = 60


def active_months(postings: Iterable[Posting]) -> list[int]:
    """Sorted distinct month indices (0-11) that have at least one posting."""
    return sorted({p.month for p in postings})


def accumulated_result(rows: Iterable[CategoryAggregate]) -> Decimal:
    """Net result: sum of every category total."""
    return sum_amounts(row.total for row in rows)


def month_total(rows: Iterable[CategoryAggregate], month: int) -> Decimal:
    """Net result of one month across all categories."""
    return sum_amounts(row.monthly_totals[month] for row in rows)


def month_over_month_trend(
    rows: Sequence[CategoryAggregate],
    months: Sequence[int],
) -> TrendResult:
    """Variation of the last active month against the previous active month.

    The previous month is the latest active month before the last one, not
    the calendar month before it. No comparison is made when there is no
    such month or when its total is zero.

    Args:
        rows: Ordered category rows.
        months: Active month indices.

    Returns:
        TrendResult; ``percentage`` is None when not comparable.
    """
    if not months:
        return TrendResult()

    last_month = max(months)
    earlier = [m for m in months if m < last_month]
    if not earlier:
        return TrendResult(last_month=last_month)

    previous_month = max(earlier)
    total_last = month_total(rows, last_month)
    total_previous = month_total(rows, previous_month)

    if total_previous == 0:
        return TrendResult(last_month=last_month, previous_month=previous_month)

    with localcontext() as ctx:
        ctx.prec = TREND_PRECISION
        ratio = (total_last - total_previous) / abs(total_previous) * HUNDRED
        percentage = ratio.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)

    return TrendResult(
        percentage=percentage,
        last_month=last_month,
        previous_month=previous_month,
    )


def average_monthly_expense(postings: Iterable[Posting], months: Sequence[int]) -> Decimal:
    """Sum of negative postings divided by the number of active months.

    Args:
        postings: Filtered postings.
        months: Active month indices.

    Returns:
        A non-positive Decimal; zero when there are no active months.
    """
    if not months:
        return ZERO
    total_expenses = sum_amounts(p.amount for p in postings if p.amount < 0)
    return total_expenses / len(months)


def top_expense_category(
    rows: Sequence[CategoryAggregate],
    adjustment_category: str = DEFAULT_ADJUSTMENT_CATEGORY,
) -> str:
    """Category with the largest net expense.

    Only categories with a negative total count, and the adjustment category
    never does. On equal totals the category that comes first in ``rows``
    (the display order) wins.

    Args:
        rows: Ordered category rows.
        adjustment_category: Name excluded from consideration.

    Returns:
        Category name, or "N/A" when no category qualifies.
    """
    top: CategoryAggregate | None = None
    for row in rows:
        if row.total >= 0 or row.name == adjustment_category:
            continue
        if top is None or abs(row.total) > abs(top.total):
            top = row
    return top.name if top is not None else NOT_AVAILABLE


def period_label(
    months: Sequence[int],
    month_labels: Sequence[str] = DEFAULT_MONTH_LABELS,
    separator: str = "–",
) -> str:
    """Label spanning the first to the last active month, e.g. "Jan–Nov".

    Args:
        months: Active month indices.
        month_labels: Twelve month abbreviations.
        separator: Text between the two labels (an en-dash by default).

    Returns:
        The period label, or "N/A" when there are no active months.
    """
    if not months:
        return NOT_AVAILABLE
    return f"{month_labels[min(months)]}{separator}{month_labels[max(months)]}"


def compute_metrics(
    rows: Sequence[CategoryAggregate],
    postings: Sequence[Posting],
    adjustment_category: str = DEFAULT_ADJUSTMENT_CATEGORY,
    month_labels: Sequence[str] = DEFAULT_MONTH_LABELS,
    period_separator: str = "–",
) -> DashboardMetrics:
    """Compute every summary indicator for the filtered period.

    Args:
        rows: Ordered category rows (before the category search).
        postings: Postings that passed the filter stage.
        adjustment_category: Category excluded from the top expense.
        month_labels: Month abbreviations for the period label.
        period_separator: Separator for the period label.

    Returns:
        DashboardMetrics, or the no-data sentinel when no posting is active.
    """
    months = active_months(postings)
    if not months:
        logger.debug("No active months, returning no-data metrics")
        return DashboardMetrics.no_data()

    return DashboardMetrics(
        has_data=True,
        accumulated_result=accumulated_result(rows),
        trend=month_over_month_trend(rows, months),
        average_monthly_expense=average_monthly_expense(postings, months),
        top_expense_category=top_expense_category(rows, adjustment_category),
        active_months=tuple(months),
        period_label=period_label(months, month_labels, period_separator),
    )
