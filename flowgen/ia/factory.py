# flowgen/ia/factory.py
"""
Factory Pattern: builds the configured model provider.
"""
from typing import List, Optional

from ..config import settings
from .providers import GeminiProvider, IAProviderStrategy, MockIAProvider, OpenAIProvider


class IAProviderFactory:
    """Creates provider instances from explicit arguments or from settings."""

    @staticmethod
    def create_provider(
        provider_type: Optional[str] = None,
        api_key: Optional[str] = None,
        **kwargs
    ) -> IAProviderStrategy:
        """
        Creates a provider by name.

        Args:
            provider_type: "mock", "openai" or "gemini". Defaults to IA_PROVIDER.
            api_key: key for the remote providers. Defaults to the matching
                *_API_KEY setting.
            **kwargs: `model` and `timeout` overrides.

        Raises:
            ValueError: unknown provider name or missing API key.
        """
        provider_type = (provider_type or settings.ia_provider).lower()
        timeout = kwargs.get("timeout", settings.ia_timeout_seconds)

        if provider_type == "mock":
            return MockIAProvider()

        elif provider_type == "openai":
            model = kwargs.get("model") or settings.openai_model
            return OpenAIProvider(api_key=api_key or settings.openai_api_key, model=model, timeout=timeout)

        elif provider_type == "gemini":
            model = kwargs.get("model") or settings.gemini_model
            return GeminiProvider(api_key=api_key or settings.gemini_api_key, model=model, timeout=timeout)

        else:
            raise ValueError(
                f"Unknown provider type: {provider_type}. "
                f"Valid types: {', '.join(IAProviderFactory.get_available_providers())}"
            )

    @staticmethod
    def create_from_config() -> IAProviderStrategy:
        return IAProviderFactory.create_provider()

    @staticmethod
    def get_available_providers() -> List[str]:
        return ["mock", "openai", "gemini"]
