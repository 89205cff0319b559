"""
OpenRouter direct provider implementation
"""

from typing import Optional

import aiohttp
from .base import LLMProvider, LLMResponse


class OpenRouterProvider(LLMProvider):
    """OpenRouter direct API provider"""

    BASE_URL = "https://openrouter.ai/api/v1"
    ROUTING_PREFIX = "openrouter/"

    def __init__(self, api_key: str, model: str, **kwargs):
        """Initialize OpenRouter provider with API key and model configuration."""
        # The direct API takes "vendor/model"; drop the LiteLLM routing prefix
        if model and model.startswith(self.ROUTING_PREFIX):
            model = model[len(self.ROUTING_PREFIX):]
        super().__init__(api_key, model, **kwargs)
        self.base_url = kwargs.get("base_url", self.BASE_URL).rstrip("/")
        self.session = None

    def validate_config(self) -> bool:
        """Validate OpenRouter configuration including API key and model."""
        if not self.api_key:
            raise ValueError("API key is required for OpenRouter provider")

        if not self.model:
            raise ValueError("Model is required for OpenRouter provider")

        return True

    async def __aenter__(self):
        """Setup async HTTP session for API requests."""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Cleanup HTTP session resources."""
        if self.session:
            await self.session.close()
            self.session = None

    async def generate(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        """Generate a chat completion through the OpenRouter API.

        Uses the session opened by ``async with`` when there is one, otherwise a
        session scoped to this call, so concurrent callers never share one.
        """
        self.validate_config()

        if self.session:
            return await self._post(self.session, prompt, system_prompt, **kwargs)

        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        ) as session:
            return await self._post(session, prompt, system_prompt, **kwargs)

    async def _post(self, session: aiohttp.ClientSession, prompt: str,
                    system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        call_kwargs = {
            "temperature": 0.1,
            "max_tokens": 30,
            **kwargs
        }

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.config.get("referer", "https://github.com/linkshelf"),
            "X-Title": self.config.get("title", "linkshelf")
        }

        payload = {
            "model": self.model,
            "messages": self.build_messages(prompt, system_prompt),
            **call_kwargs
        }

        try:
            async with session.post(
                f"{self.base_url}/chat/completions",
                headers=headers,
                json=payload
            ) as response:
                response.raise_for_status()
                data = await response.json()

                choice = data["choices"][0]
                usage = data.get("usage")

                return LLMResponse(
                    content=choice["message"]["content"] or "",
                    model=data.get("model", self.model),
                    usage=usage,
                    finish_reason=choice.get("finish_reason")
                )

        except aiohttp.ClientError as e:
            raise RuntimeError(f"OpenRouter API request failed: {e}") from e
        except (KeyError, IndexError, TypeError) as e:
            raise RuntimeError(f"Malformed OpenRouter response: {e}") from e
