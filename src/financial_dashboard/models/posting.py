"""Posting data model and batch validation."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping

from financial_dashboard.utils.date_utils import date_to_iso, month_index, parse_date
from financial_dashboard.utils.decimal_utils import to_decimal
from financial_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("id", "category", "date", "description", "origin", "unit", "amount")

# Fields that must hold non-blank text
_TEXT_FIELDS = ("id", "category", "unit")


class PostingValidationError(ValueError):
    """Raised when one or more provider records cannot become postings.

    Attributes:
        problems: One message per problem, prefixed with the record index
            when raised for a batch.
    """

    def __init__(self, message: str, problems: list[str] | None = None):
        self.problems = problems if problems is not None else [message]
        super().__init__(message)


@dataclass(frozen=True)
class Posting:
    """One financial transaction.

    Attributes:
        id: Opaque unique identifier assigned by the provider.
        category: Free-text category label, drives grouping.
        date: Calendar date; drives year filtering and month bucketing.
        description: Display-only description.
        origin: Display-only origin (customer, supplier, system).
        unit: Organizational branch the posting belongs to.
        amount: Signed amount (negative = expense, positive = revenue).
    """

    id: str
    category: str
    date: date
    description: str
    origin: str
    unit: str
    amount: Decimal

    @property
    def year(self) -> int:
        """Calendar year of the posting."""
        return self.date.year

    @property
    def month(self) -> int:
        """Zero-based month slot (0 = January)."""
        return month_index(self.date)

    @property
    def is_expense(self) -> bool:
        """True for outflows (negative amounts)."""
        return self.amount < 0

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "Posting":
        """Create a Posting from a provider record.

        Args:
            data: Mapping with id, category, date, description, origin,
                unit and amount.

        Returns:
            A new Posting instance.

        Raises:
            PostingValidationError: If a field is missing or invalid.
        """
        if not isinstance(data, Mapping):
            raise PostingValidationError(
                f"Posting record must be an object, got {type(data).__name__}"
            )

        missing = [name for name in REQUIRED_FIELDS if data.get(name) is None]
        if missing:
            raise PostingValidationError(f"Missing required field(s): {', '.join(missing)}")

        for name in _TEXT_FIELDS:
            if not str(data[name]).strip():
                raise PostingValidationError(f"Field '{name}' must not be blank")

        try:
            posting_date = parse_date(data["date"])
        except ValueError as e:
            raise PostingValidationError(f"Invalid date: {e}") from e

        try:
            amount = to_decimal(data["amount"])
        except ValueError as e:
            raise PostingValidationError(f"Invalid amount: {e}") from e

        return cls(
            id=str(data["id"]).strip(),
            category=str(data["category"]).strip(),
            date=posting_date,
            description=str(data["description"]),
            origin=str(data["origin"]),
            unit=str(data["unit"]).strip(),
            amount=amount,
        )

    def to_dict(self) -> dict[str, str]:
        """Serialize to a JSON-ready record (inverse of from_dict)."""
        return {
            "id": self.id,
            "category": self.category,
            "date": date_to_iso(self.date),
            "description": self.description,
            "origin": self.origin,
            "unit": self.unit,
            "amount": str(self.amount),
        }

    def __repr__(self) -> str:
        return (
            f"Posting(id={self.id!r}, date={self.date}, category={self.category!r}, "
            f"unit={self.unit!r}, amount={self.amount})"
        )


def parse_postings(
    records: Iterable[Mapping[str, object]],
    known_units: Iterable[str] | None = None,
) -> list[Posting]:
    """Parse a provider batch into postings.

    The batch is all-or-nothing: a single malformed record (or a repeated id)
    rejects the whole batch, so totals are never computed from a silently
    shortened list. Every problem found is reported, not only the first.

    Args:
        records: Raw records from a provider.
        known_units: Configured unit labels. Postings with other units are
            kept but logged, since they only show up when all units are
            selected.

    Returns:
        Postings in input order.

    Raises:
        PostingValidationError: If any record is malformed.
    """
    postings: list[Posting] = []
    problems: list[str] = []
    seen_ids: set[str] = set()

    for index, record in enumerate(records):
        try:
            posting = Posting.from_dict(record)
        except PostingValidationError as e:
            problems.append(f"record {index}: {e}")
            continue

        if posting.id in seen_ids:
            problems.append(f"record {index}: duplicate id '{posting.id}'")
            continue
        seen_ids.add(posting.id)
        postings.append(posting)

    if problems:
        for problem in problems:
            logger.warning(f"Malformed posting {problem}")
        raise PostingValidationError(
            f"Rejected batch: {len(problems)} malformed record(s); first: {problems[0]}",
            problems=problems,
        )

    if known_units is not None:
        allowed = set(known_units)
        unknown = sorted({p.unit for p in postings if p.unit not in allowed})
        if unknown:
            logger.warning(f"Postings reference unconfigured unit(s): {', '.join(unknown)}")

    logger.info(f"Parsed {len(postings)} postings")
    return postings
