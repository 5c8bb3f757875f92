"""Abstract base class for posting providers."""

from abc import ABC, abstractmethod

from financial_dashboard.models.posting import Posting


class ProviderError(Exception):
    """Raised when a provider cannot deliver postings.

    The message is meant for the user: it says what failed and, where
    possible, what to check.
    """

    def __init__(self, message: str, provider: str | None = None):
        """Initialize ProviderError.

        Args:
            message: Human-readable cause.
            provider: Name of the provider that failed.
        """
        self.provider = provider
        super().__init__(message)


class MissingCredentialsError(ProviderError):
    """Raised when a provider needs an API key that is not configured."""

    pass


class PostingProvider(ABC):
    """Source of the posting list for a year.

    Subclasses must implement fetch(). Providers either return the complete
    list or raise ProviderError; they never return a partial list.
    """

    @property
    def name(self) -> str:
        """Return provider name for logging and messages."""
        return self.__class__.__name__

    @abstractmethod
    def fetch(self, year: int) -> list[Posting]:
        """Return every posting available for ``year``.

        Providers may return postings of other years as well; the dashboard
        filters by year itself.

        Args:
            year: Calendar year requested.

        Returns:
            List of postings (possibly empty).

        Raises:
            ProviderError: If the postings cannot be obtained.
        """
        pass
