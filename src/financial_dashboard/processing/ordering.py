"""Display ordering of category rows."""

import unicodedata
from dataclasses import dataclass
from typing import Iterable

from financial_dashboard.config import (
    DEFAULT_ADJUSTMENT_CATEGORY,
    DEFAULT_PRIMARY_REVENUE_CATEGORY,
    DEFAULT_REVENUE_PREFIX,
    DashboardSettings,
)
from financial_dashboard.models.report import CategoryAggregate

RANK_ADJUSTMENT = 1
RANK_PRIMARY_REVENUE = 2
RANK_REVENUE = 3
RANK_OTHER = 4


def collation_key(name: str) -> tuple:
    """Sort key approximating a locale collator for Latin-script names.

    Comparison levels, like a Unicode collator:
    1. base letters, ignoring accents and case ("Impostos" ~ "impostos")
    2. accents ("Emprestimos" before "Empréstimos")
    3. case, lowercase first
    The raw name is the final level so that the order is total.

    Args:
        name: Category name.

    Returns:
        Tuple usable as a sort key.
    """
    decomposed = unicodedata.normalize("NFD", name)
    base = "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()
    accents = decomposed.casefold()
    case = tuple(c.isupper() for c in decomposed if not unicodedata.combining(c))
    return (base, accents, case, name)


@dataclass(frozen=True)
class OrderingPolicy:
    """Ranks categories for the pivot table.

    Ranks, lowest first:
    1. the adjustment category (exact name)
    2. the primary revenue category (exact name)
    3. any other category starting with the revenue prefix
    4. everything else
    Equal ranks are ordered with ``collation_key``.
    """

    adjustment_category: str = DEFAULT_ADJUSTMENT_CATEGORY
    primary_revenue_category: str = DEFAULT_PRIMARY_REVENUE_CATEGORY
    revenue_prefix: str = DEFAULT_REVENUE_PREFIX

    @classmethod
    def from_settings(cls, settings: DashboardSettings) -> "OrderingPolicy":
        """Build the policy from dashboard settings."""
        return cls(
            adjustment_category=settings.adjustment_category,
            primary_revenue_category=settings.primary_revenue_category,
            revenue_prefix=settings.revenue_prefix,
        )

    def rank(self, name: str) -> int:
        """Precedence rank of a category name (1 sorts first)."""
        if name == self.adjustment_category:
            return RANK_ADJUSTMENT
        if name == self.primary_revenue_category:
            return RANK_PRIMARY_REVENUE
        if self.revenue_prefix and name.startswith(self.revenue_prefix):
            return RANK_REVENUE
        return RANK_OTHER

    def sort_key(self, name: str) -> tuple:
        """Full sort key: rank, then collation."""
        return (self.rank(name), collation_key(name))

    def order(self, aggregates: Iterable[CategoryAggregate]) -> list[CategoryAggregate]:
        """Return aggregates in display order."""
        return sorted(aggregates, key=lambda agg: self.sort_key(agg.name))


def order_categories(
    aggregates: dict[str, CategoryAggregate] | Iterable[CategoryAggregate],
    policy: OrderingPolicy | None = None,
) -> list[CategoryAggregate]:
    """Order aggregation output for display.

    Args:
        aggregates: Output of ``aggregate_postings`` or any aggregates.
        policy: Ordering policy (default names when None).

    Returns:
        Aggregates in display order, independent of the input order.
    """
    if policy is None:
        policy = OrderingPolicy()
    values = aggregates.values() if isinstance(aggregates, dict) else aggregates
    return policy.order(values)
