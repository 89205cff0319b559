"""
LLM Provider Factory
"""

import os
from enum import Enum
from .base import LLMProvider
from .litellm_provider import LiteLLMProvider
from .openrouter_provider import OpenRouterProvider


DEFAULT_MODEL = "openrouter/openai/gpt-3.5-turbo"


class LLMProviderType(Enum):
    """Available LLM provider types"""
    LITELLM = "litellm"
    OPENROUTER = "openrouter"


class LLMProviderFactory:
    """Factory for creating the classifier backend"""

    PROVIDERS = {
        LLMProviderType.LITELLM: LiteLLMProvider,
        LLMProviderType.OPENROUTER: OpenRouterProvider,
    }

    @classmethod
    def create_provider(
        cls,
        provider_type: LLMProviderType,
        api_key: str,
        model: str,
        **kwargs
    ) -> LLMProvider:
        """Create an LLM provider instance"""
        if provider_type not in cls.PROVIDERS:
            raise ValueError(f"Unknown provider type: {provider_type}")

        provider_class = cls.PROVIDERS[provider_type]
        return provider_class(api_key=api_key, model=model, **kwargs)

    @classmethod
    def from_env(
        cls,
        provider_env_var: str = "LLM_PROVIDER",
        api_key_env_var: str = "OPENROUTER_API_KEY",
        model_env_var: str = "LITELLM_MODEL",
        default_provider: LLMProviderType = LLMProviderType.LITELLM
    ) -> LLMProvider:
        """Create provider from environment variables"""
        provider_str = os.getenv(provider_env_var, default_provider.value).lower()

        try:
            provider_type = LLMProviderType(provider_str)
        except ValueError:
            raise ValueError(f"Invalid provider type in {provider_env_var}: {provider_str}")

        api_key = os.getenv(api_key_env_var)
        if not api_key:
            raise ValueError(f"Environment variable {api_key_env_var} is required")

        model = os.getenv(model_env_var, DEFAULT_MODEL)

        extra_config = {}

        if timeout := os.getenv("LLM_TIMEOUT"):
            extra_config["timeout"] = float(timeout)
        if base_url := os.getenv("LLM_BASE_URL"):
            extra_config["base_url"] = base_url

        # OpenRouter specific config
        if provider_type == LLMProviderType.OPENROUTER:
            if referer := os.getenv("OPENROUTER_REFERER"):
                extra_config["referer"] = referer
            if title := os.getenv("OPENROUTER_TITLE"):
                extra_config["title"] = title

        return cls.create_provider(provider_type, api_key, model, **extra_config)

