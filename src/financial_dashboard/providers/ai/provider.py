"""Posting provider backed by a generative language model."""

from financial_dashboard.config import AIConfig, DashboardSettings
from financial_dashboard.models.posting import Posting, PostingValidationError, parse_postings
from financial_dashboard.providers.ai.client import AIClient, AIClientError, APIKeyNotFoundError
from financial_dashboard.providers.ai.prompts import (
    GENERATION_SYSTEM_PROMPT,
    build_generation_prompt,
)
from financial_dashboard.providers.base import (
    MissingCredentialsError,
    PostingProvider,
    ProviderError,
)
from financial_dashboard.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)

FAILURE_HINT = "Check the API key and the network connection."


class AIPostingProvider(PostingProvider):
    """Asks a language model for a year of postings.

    Every failure (missing key, API error, unparseable or malformed output)
    becomes a ProviderError so the dashboard can show a failed state instead
    of partial data.
    """

    def __init__(
        self,
        settings: DashboardSettings | None = None,
        ai_config: AIConfig | None = None,
        client: AIClient | None = None,
    ):
        """Initialize the provider.

        Args:
            settings: Units and category names for the prompt.
            ai_config: Client settings (ignored when ``client`` is given).
            client: Pre-built client, mainly for tests.
        """
        self.settings = settings or DashboardSettings()
        self.ai_config = ai_config or AIConfig()
        self.client = client or AIClient(config=self.ai_config)

    @property
    def is_available(self) -> bool:
        """Whether an API key is configured."""
        return self.client.is_available

    def fetch(self, year: int) -> list[Posting]:
        """Generate postings for ``year``.

        Raises:
            MissingCredentialsError: If the API key is not set.
            ProviderError: For any other failure.
        """
        prompt = build_generation_prompt(
            year,
            self.settings,
            min_postings=self.ai_config.min_postings,
            max_postings=self.ai_config.max_postings,
        )

        with LogContext(logger, "AI posting generation", year=year, model=self.ai_config.model):
            try:
                response = self.client.send_message(GENERATION_SYSTEM_PROMPT, prompt)
            except APIKeyNotFoundError as e:
                raise MissingCredentialsError(
                    f"Failed to generate financial data: {e}", provider=self.name
                ) from e
            except AIClientError as e:
                raise ProviderError(
                    f"Failed to generate financial data: {e}. {FAILURE_HINT}",
                    provider=self.name,
                ) from e

            try:
                records = self.client.parse_json_response(response.text)
            except ValueError as e:
                raise ProviderError(
                    f"Failed to generate financial data: model returned invalid JSON ({e})",
                    provider=self.name,
                ) from e

            if isinstance(records, dict):
                records = records.get("postings", [records])
            if not isinstance(records, list):
                raise ProviderError(
                    "Failed to generate financial data: expected a JSON array of postings",
                    provider=self.name,
                )

            try:
                postings = parse_postings(records, known_units=self.settings.units)
            except PostingValidationError as e:
                raise ProviderError(
                    f"Failed to generate financial data: {e}", provider=self.name
                ) from e

        logger.info(f"Model generated {len(postings)} postings for {year}")
        logger.info(self.client.get_usage_summary())
        return postings
