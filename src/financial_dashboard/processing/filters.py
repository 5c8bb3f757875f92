"""Posting filters (year, unit, date range) and the row search filter."""

from typing import Iterable, Sequence

from financial_dashboard.models.filters import FilterConfig
from financial_dashboard.models.posting import Posting
from financial_dashboard.models.report import CategoryAggregate
from financial_dashboard.utils.date_utils import is_date_in_range
from financial_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


def filter_by_year(postings: Iterable[Posting], year: int) -> list[Posting]:
    """Keep postings dated in ``year``, preserving order."""
    return [p for p in postings if p.year == year]


def filter_postings(postings: Sequence[Posting], filters: FilterConfig) -> list[Posting]:
    """Apply the year, unit, and date-range filters.

    The year is applied first; unit and date-range predicates then run over
    the year-scoped list. The filter is stable and idempotent.

    Args:
        postings: Full posting list.
        filters: Current filter selection.

    Returns:
        Postings that satisfy every predicate, in input order.
    """
    year_scoped = filter_by_year(postings, filters.year)

    restrict_units = filters.restricts_units
    start = filters.date_range.start
    end = filters.date_range.end

    result = []
    for posting in year_scoped:
        if restrict_units and posting.unit not in filters.units:
            continue
        if not is_date_in_range(posting.date, start, end):
            continue
        result.append(posting)

    logger.debug(
        f"Filtered {len(postings)} postings to {len(result)} "
        f"(year={filters.year}, {len(year_scoped)} in year)"
    )
    return result


def filter_rows(rows: Iterable[CategoryAggregate], search: str) -> list[CategoryAggregate]:
    """Keep rows whose category name contains ``search`` (case-insensitive).

    Args:
        rows: Ordered category rows.
        search: Free text typed in the category search box.

    Returns:
        Matching rows in their original order; all rows for a blank search.
    """
    needle = search.strip().casefold()
    if not needle:
        return list(rows)
    return [row for row in rows if needle in row.name.casefold()]
