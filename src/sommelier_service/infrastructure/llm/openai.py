"""OpenAI chat-completions provider."""

from sommelier_service.exceptions import ProviderCallFailed
from sommelier_service.infrastructure.llm.base import GenerationProvider
from sommelier_service.models import ChatTurn


class OpenAIProvider(GenerationProvider):
    name = "openai"
    display_name = "OpenAI"

    def __init__(self, base_url: str = "https://api.openai.com/v1", **kwargs):
        super().__init__(base_url, **kwargs)

    async def call_generation(
        self,
        api_key: str,
        instruction: str,
        history: list[ChatTurn],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": instruction},
                *(turn.to_dict() for turn in history),
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        data = await self._post(f"{self.base_url}/chat/completions", headers, payload)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderCallFailed(self.name, "unexpected response shape") from e
        if not isinstance(content, str):
            raise ProviderCallFailed(self.name, "response has no text content")
        return content
