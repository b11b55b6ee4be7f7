"""Anthropic messages-API provider."""

from sommelier_service.exceptions import ProviderCallFailed
from sommelier_service.infrastructure.llm.base import GenerationProvider
from sommelier_service.models import ChatTurn


class AnthropicProvider(GenerationProvider):
    name = "anthropic"
    display_name = "Anthropic"

    def __init__(
        self,
        base_url: str = "https://api.anthropic.com/v1",
        api_version: str = "2023-06-01",
        **kwargs,
    ):
        super().__init__(base_url, **kwargs)
        self.api_version = api_version

    async def call_generation(
        self,
        api_key: str,
        instruction: str,
        history: list[ChatTurn],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        # The system instruction is a top-level field; only user/assistant roles are accepted.
        payload = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "system": instruction,
            "messages": [
                {
                    "role": "assistant" if turn.role == "assistant" else "user",
                    "content": turn.content,
                }
                for turn in history
            ],
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": api_key,
            "anthropic-version": self.api_version,
        }
        data = await self._post(f"{self.base_url}/messages", headers, payload)

        try:
            text = data["content"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderCallFailed(self.name, "unexpected response shape") from e
        if not isinstance(text, str):
            raise ProviderCallFailed(self.name, "response has no text content")
        return text
