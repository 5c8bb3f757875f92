"""Processing modules: filtering, aggregation, ordering, metrics, pipeline."""

from financial_dashboard.processing.aggregator import aggregate_postings, build_pivot
from financial_dashboard.processing.filters import filter_by_year, filter_postings, filter_rows
from financial_dashboard.processing.metrics import compute_metrics
from financial_dashboard.processing.ordering import OrderingPolicy, order_categories
from financial_dashboard.processing.pipeline import (
    DashboardSession,
    DataState,
    DataUnavailableError,
    build_dashboard,
)

__all__ = [
    "filter_by_year",
    "filter_postings",
    "filter_rows",
    "aggregate_postings",
    "build_pivot",
    "OrderingPolicy",
    "order_categories",
    "compute_metrics",
    "build_dashboard",
    "DashboardSession",
    "DataState",
    "DataUnavailableError",
]
