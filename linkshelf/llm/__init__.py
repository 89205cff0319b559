"""
LLM providers used as the classifier backend
"""

from .base import LLMProvider, LLMResponse
from .factory import LLMProviderFactory, LLMProviderType
from .litellm_provider import LiteLLMProvider
from .openrouter_provider import OpenRouterProvider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LLMProviderFactory",
    "LLMProviderType",
    "LiteLLMProvider",
    "OpenRouterProvider"
]
