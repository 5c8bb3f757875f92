"""Posting provider reading a JSON export from disk."""

import json
from pathlib import Path
from typing import Iterable

from financial_dashboard.models.posting import Posting, PostingValidationError, parse_postings
from financial_dashboard.providers.base import PostingProvider, ProviderError
from financial_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


class JSONFilePostingProvider(PostingProvider):
    """Reads postings from a JSON array of records.

    The file uses the same record layout as ``Posting.to_dict()``, so a
    ``postings.json`` written by another run can be loaded back.
    """

    def __init__(self, path: Path | str, known_units: Iterable[str] | None = None):
        """Initialize the provider.

        Args:
            path: JSON file to read.
            known_units: Configured units, used to warn about unknown ones.
        """
        self.path = Path(path)
        self.known_units = list(known_units) if known_units is not None else None
        self._postings: list[Posting] | None = None

    def fetch(self, year: int) -> list[Posting]:
        """Return the postings of ``year`` found in the file.

        The file is read once; later calls reuse the parsed list.

        Raises:
            ProviderError: If the file is missing, not JSON, or holds
                malformed records.
        """
        if self._postings is None:
            self._postings = self._load()
        postings = [p for p in self._postings if p.year == year]
        logger.info(f"{self.path.name}: {len(postings)} postings for {year}")
        return postings

    def _load(self) -> list[Posting]:
        if not self.path.exists():
            raise ProviderError(f"Postings file not found: {self.path}", provider=self.name)

        try:
            with open(self.path, encoding="utf-8") as f:
                records = json.load(f)
        except json.JSONDecodeError as e:
            raise ProviderError(
                f"Invalid JSON in {self.path}: {e}", provider=self.name
            ) from e
        except UnicodeDecodeError as e:
            raise ProviderError(
                f"Cannot decode {self.path} as UTF-8: {e}", provider=self.name
            ) from e
        except OSError as e:
            raise ProviderError(f"Cannot read {self.path}: {e}", provider=self.name) from e

        if isinstance(records, dict) and "postings" in records:
            records = records["postings"]
        if not isinstance(records, list):
            raise ProviderError(
                f"{self.path} must contain a JSON array of postings", provider=self.name
            )

        try:
            return parse_postings(records, known_units=self.known_units)
        except PostingValidationError as e:
            raise ProviderError(f"Invalid postings in {self.path}: {e}", provider=self.name) from e
