"""
LiteLLM provider implementation
"""

from typing import Any, Dict, Optional
import litellm
from .base import LLMProvider, LLMResponse


class LiteLLMProvider(LLMProvider):
    """LiteLLM-based LLM provider"""

    def __init__(self, api_key: str, model: str, **kwargs):
        """Initialize LiteLLM provider with API key and model configuration."""
        super().__init__(api_key, model, **kwargs)
        self.api_base = self.config.get("base_url")

    def validate_config(self) -> bool:
        """Validate LiteLLM configuration including API key and model."""
        if not self.api_key:
            raise ValueError("API key is required for LiteLLM provider")

        if not self.model:
            raise ValueError("Model is required for LiteLLM provider")

        return True

    async def generate(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        """Generate a chat completion through LiteLLM."""
        self.validate_config()

        call_kwargs: Dict[str, Any] = {
            "temperature": 0.1,
            "max_tokens": 30,
            **kwargs
        }
        if self.api_base:
            call_kwargs["api_base"] = self.api_base

        try:
            response = await litellm.acompletion(
                model=self.model,
                messages=self.build_messages(prompt, system_prompt),
                api_key=self.api_key,
                timeout=self.timeout,
                **call_kwargs
            )

            choice = response.choices[0]
            usage = None
            if hasattr(response, 'usage') and response.usage:
                usage = {
                    "prompt_tokens": getattr(response.usage, 'prompt_tokens', 0),
                    "completion_tokens": getattr(response.usage, 'completion_tokens', 0),
                    "total_tokens": getattr(response.usage, 'total_tokens', 0)
                }

            return LLMResponse(
                content=choice.message.content or "",
                model=self.model,
                usage=usage,
                finish_reason=getattr(choice, 'finish_reason', None)
            )

        except Exception as e:
            raise RuntimeError(f"LiteLLM generation failed: {e}") from e
