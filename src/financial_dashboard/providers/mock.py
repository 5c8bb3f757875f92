"""Deterministic generated dataset for demos and offline use."""

import random
from datetime import date
from decimal import Decimal

from financial_dashboard.config import DashboardSettings
from financial_dashboard.models.posting import Posting
from financial_dashboard.providers.base import PostingProvider
from financial_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)

YEARS_GENERATED = 3
REVENUE_POSTINGS_PER_YEAR = 20
EXPENSE_POSTINGS_PER_CATEGORY = 10
ADJUSTMENT_POSTINGS_PER_YEAR = 3

# Expense categories that appear less often in the generated data
SPARSE_EXPENSE_CATEGORIES = {"Empréstimos", "Estorno de Serviço"}
SPARSE_EXPENSE_POSTINGS = 4

CUSTOMERS = "ABCDE"
SUPPLIERS = "FGHIJ"


class MockPostingProvider(PostingProvider):
    """Generates a small company's postings for the reference year and the
    two years before it.

    The same seed always produces the same dataset. Dates fall between
    January and November so December shows as an empty column.
    """

    def __init__(
        self,
        settings: DashboardSettings | None = None,
        seed: int | None = 42,
        reference_year: int | None = None,
    ):
        """Initialize the generator.

        Args:
            settings: Dashboard settings (units and category names).
            seed: Random seed; None for a different dataset on every run.
            reference_year: Latest generated year (default: current year).
        """
        self.settings = settings or DashboardSettings()
        self.seed = seed
        self.reference_year = reference_year or date.today().year
        self._postings: list[Posting] | None = None

    @property
    def years(self) -> list[int]:
        """Years covered by the dataset, newest first."""
        return [self.reference_year - offset for offset in range(YEARS_GENERATED)]

    def fetch(self, year: int) -> list[Posting]:
        """Return the generated postings of ``year``."""
        if self._postings is None:
            self._postings = self._generate()
        postings = [p for p in self._postings if p.year == year]
        logger.info(f"Generated dataset has {len(postings)} postings for {year}")
        return postings

    def _generate(self) -> list[Posting]:
        rng = random.Random(self.seed)
        units = self.settings.units
        postings: list[Posting] = []
        counter = 1

        def add(
            year: int, category: str, description: str, origin: str, unit: str, amount: int
        ) -> None:
            nonlocal counter
            postings.append(
                Posting(
                    id=f"lanc-{counter}",
                    category=category,
                    date=self._random_date(rng, year),
                    description=description,
                    origin=origin,
                    unit=unit,
                    amount=Decimal(amount),
                )
            )
            counter += 1

        for year in self.years:
            for _ in range(REVENUE_POSTINGS_PER_YEAR):
                add(
                    year,
                    self.settings.primary_revenue_category,
                    f"Venda de produtos e serviços #{rng.randrange(1000)}",
                    f"Cliente {rng.choice(CUSTOMERS)}",
                    rng.choice(units),
                    rng.randrange(25000) + 5000,
                )

            for category in self.settings.expense_categories:
                count = (
                    SPARSE_EXPENSE_POSTINGS
                    if category in SPARSE_EXPENSE_CATEGORIES
                    else EXPENSE_POSTINGS_PER_CATEGORY
                )
                for _ in range(count):
                    add(
                        year,
                        category,
                        f"Pagamento ref. {category}",
                        f"Fornecedor {rng.choice(SUPPLIERS)}",
                        rng.choice(units),
                        -(rng.randrange(9000) + 1000),
                    )

            for _ in range(ADJUSTMENT_POSTINGS_PER_YEAR):
                add(
                    year,
                    self.settings.adjustment_category,
                    "Ajuste de resultado do sistema",
                    "Sistema Interno",
                    units[0],
                    -(rng.randrange(300) + 50),
                )

        logger.debug(f"Generated {len(postings)} postings for years {self.years}")
        return postings

    @staticmethod
    def _random_date(rng: random.Random, year: int) -> date:
        # January to November, days 1-28 so every month is valid
        return date(year, rng.randint(1, 11), rng.randint(1, 28))
