"""Data models for postings, filters, and dashboard reports."""

from financial_dashboard.models.filters import DateRange, FilterConfig
from financial_dashboard.models.posting import Posting, PostingValidationError, parse_postings
from financial_dashboard.models.report import (
    NOT_AVAILABLE,
    CategoryAggregate,
    DashboardMetrics,
    DashboardView,
    PivotTable,
    TrendResult,
)

__all__ = [
    "Posting",
    "PostingValidationError",
    "parse_postings",
    "DateRange",
    "FilterConfig",
    "CategoryAggregate",
    "PivotTable",
    "TrendResult",
    "DashboardMetrics",
    "DashboardView",
    "NOT_AVAILABLE",
]
