"""Generative posting provider.

Example usage:
    from financial_dashboard.providers.ai import AIPostingProvider

    provider = AIPostingProvider(settings, ai_config)
    if provider.is_available:
        postings = provider.fetch(2024)
"""

from financial_dashboard.providers.ai.client import (
    AIClient,
    AIClientError,
    AIResponse,
    APIKeyNotFoundError,
    TruncatedResponseError,
)
from financial_dashboard.providers.ai.provider import AIPostingProvider

__all__ = [
    "AIPostingProvider",
    "AIClient",
    "AIResponse",
    "AIClientError",
    "APIKeyNotFoundError",
    "TruncatedResponseError",
]
