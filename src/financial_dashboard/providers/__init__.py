"""Posting providers: generated, generative-model, and JSON file sources."""

from financial_dashboard.config import Config
from financial_dashboard.providers.ai import AIPostingProvider
from financial_dashboard.providers.base import (
    MissingCredentialsError,
    PostingProvider,
    ProviderError,
)
from financial_dashboard.providers.file import JSONFilePostingProvider
from financial_dashboard.providers.mock import MockPostingProvider
from financial_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


def create_provider(
    config: Config,
    source: str | None = None,
    input_file: str | None = None,
    seed: int | None = None,
) -> PostingProvider:
    """Create the provider for the configured (or overridden) source.

    Args:
        config: Loaded configuration.
        source: Overrides ``data_source.source`` when given.
        input_file: Overrides ``data_source.input_file`` when given.
        seed: Overrides ``data_source.seed`` when given.

    Returns:
        A posting provider.

    Raises:
        ProviderError: If the source is unknown or the file source has no file.
    """
    source = source or config.data_source.source

    if source == "mock":
        provider_seed = seed if seed is not None else config.data_source.seed
        provider: PostingProvider = MockPostingProvider(
            settings=config.dashboard, seed=provider_seed
        )
    elif source == "ai":
        provider = AIPostingProvider(settings=config.dashboard, ai_config=config.ai)
    elif source == "file":
        path = input_file or config.data_source.input_file
        if not path:
            raise ProviderError("The 'file' source needs an input file (--input)", provider="file")
        provider = JSONFilePostingProvider(path, known_units=config.dashboard.units)
    else:
        raise ProviderError(f"Unknown data source: {source}")

    logger.debug(f"Using provider {provider.name} for source '{source}'")
    return provider


__all__ = [
    "PostingProvider",
    "ProviderError",
    "MissingCredentialsError",
    "MockPostingProvider",
    "AIPostingProvider",
    "JSONFilePostingProvider",
    "create_provider",
]
