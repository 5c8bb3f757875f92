"""Dashboard pipeline and the session that owns the loaded postings."""

from enum import Enum
from typing import Sequence

from financial_dashboard.config import Config
from financial_dashboard.models.filters import FilterConfig
from financial_dashboard.models.posting import Posting
from financial_dashboard.models.report import DashboardView
from financial_dashboard.processing.aggregator import aggregate_postings, build_pivot
from financial_dashboard.processing.filters import filter_postings, filter_rows
from financial_dashboard.processing.metrics import compute_metrics
from financial_dashboard.processing.ordering import OrderingPolicy
from financial_dashboard.providers.base import PostingProvider, ProviderError
from financial_dashboard.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)


def build_dashboard(
    postings: Sequence[Posting],
    filters: FilterConfig,
    config: Config | None = None,
) -> DashboardView:
    """Run the full pipeline for one filter selection.

    Steps:
    1. filter postings by year, units and date range
    2. aggregate per category and month
    3. order the rows for display
    4. apply the category search to the ordered rows (pivot only)
    5. compute the metrics from the unsearched rows and filtered postings

    Args:
        postings: Every loaded posting.
        filters: Current filter selection.
        config: Configuration (defaults when None).

    Returns:
        DashboardView for the selection.
    """
    if config is None:
        config = Config()

    filtered = filter_postings(postings, filters)
    aggregates = aggregate_postings(filtered, filters.year)
    ordered = OrderingPolicy.from_settings(config.dashboard).order(aggregates.values())
    shown = filter_rows(ordered, filters.category_search)

    metrics = compute_metrics(
        ordered,
        filtered,
        adjustment_category=config.dashboard.adjustment_category,
        month_labels=config.display.month_labels,
        period_separator=config.display.period_separator,
    )

    logger.debug(
        f"Built view for {filters.year}: {len(filtered)} postings, "
        f"{len(ordered)} categories, {len(shown)} shown"
    )
    return DashboardView(
        filters=filters,
        pivot=build_pivot(shown, filters.year),
        ordered_rows=tuple(ordered),
        metrics=metrics,
        filtered_postings=tuple(filtered),
    )


class DataState(Enum):
    """Load state of a dashboard session."""

    EMPTY = "empty"
    READY = "ready"
    FAILED = "failed"


class DataUnavailableError(Exception):
    """Raised when a view is requested while no postings are loaded."""

    pass


class DashboardSession:
    """Holds the postings of one year and memoizes views per filter.

    A provider failure is a state of its own: the session drops its postings
    and cached views and reports the cause, so a failed load never looks
    like a year without postings.
    """

    def __init__(self, provider: PostingProvider, config: Config | None = None):
        """Initialize the session.

        Args:
            provider: Source of postings.
            config: Configuration (defaults when None).
        """
        self.provider = provider
        self.config = config or Config()
        self.state = DataState.EMPTY
        self.error: str | None = None
        self.year: int | None = None
        self._postings: list[Posting] = []
        self._views: dict[FilterConfig, DashboardView] = {}

    @property
    def postings(self) -> list[Posting]:
        """Loaded postings (empty unless READY)."""
        return list(self._postings)

    @property
    def is_ready(self) -> bool:
        """Whether views can be built."""
        return self.state is DataState.READY

    def load(self, year: int) -> DataState:
        """Fetch the postings of ``year`` from the provider.

        Args:
            year: Year to load.

        Returns:
            The new state (READY or FAILED).
        """
        self._views.clear()
        self.year = year

        try:
            with LogContext(logger, "posting load", provider=self.provider.name, year=year):
                postings = self.provider.fetch(year)
        except ProviderError as e:
            self._postings = []
            self.state = DataState.FAILED
            self.error = str(e)
            return self.state

        self._postings = list(postings)
        self.state = DataState.READY
        self.error = None
        logger.info(f"Loaded {len(self._postings)} postings for {year}")
        return self.state

    def default_filters(self, year: int | None = None) -> FilterConfig:
        """Filter selection with every configured unit and no bounds."""
        if year is None:
            year = self.year
        if year is None:
            raise DataUnavailableError("No year loaded")
        return FilterConfig.all_units(year, self.config.dashboard.units)

    def view(self, filters: FilterConfig | None = None) -> DashboardView:
        """Dashboard view for a filter selection.

        Args:
            filters: Filter selection (all units of the loaded year when None).

        Returns:
            The memoized or freshly built view.

        Raises:
            DataUnavailableError: If the session is not READY.
        """
        if self.state is DataState.FAILED:
            raise DataUnavailableError(self.error or "Posting provider failed")
        if self.state is not DataState.READY:
            raise DataUnavailableError("No postings loaded")

        if filters is None:
            filters = self.default_filters()

        cached = self._views.get(filters)
        if cached is not None:
            return cached

        view = build_dashboard(self._postings, filters, self.config)
        self._views[filters] = view
        return view
