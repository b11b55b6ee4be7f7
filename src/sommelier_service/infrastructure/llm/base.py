"""Provider capability interface."""

from abc import ABC, abstractmethod
from typing import Any

import httpx
import orjson

from sommelier_service.exceptions import ProviderCallFailed
from sommelier_service.models import ChatTurn


class GenerationProvider(ABC):
    """One remote text-generation backend.

    Implementations perform exactly one outbound call per ``call_generation``
    and either return the generated text or raise ``ProviderCallFailed``.
    """

    name: str = ""
    display_name: str = ""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    @abstractmethod
    async def call_generation(
        self,
        api_key: str,
        instruction: str,
        history: list[ChatTurn],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Send one generation request and return the text payload."""

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            timeout=self.timeout_seconds,
            connect=min(self.timeout_seconds, 10.0),
        )

    async def _post(self, url: str, headers: dict[str, str], payload: dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self._timeout(), transport=self.transport) as client:
                response = await client.post(url, headers=headers, content=orjson.dumps(payload))
        except httpx.HTTPError as e:
            raise ProviderCallFailed(self.name, f"request failed: {e!r}") from e

        if response.status_code >= 400:
            raise ProviderCallFailed(
                self.name,
                self._error_message(response),
                status_code=response.status_code,
            )

        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise ProviderCallFailed(self.name, "response body is not JSON") from e

    def _error_message(self, response: httpx.Response) -> str:
        """Prefer the provider's ``error.message``; otherwise a status summary."""
        try:
            body = orjson.loads(response.content)
            message = body["error"]["message"]
            if isinstance(message, str) and message:
                return message
        except (orjson.JSONDecodeError, KeyError, TypeError):
            pass
        return f"{self.display_name} error: {response.status_code}"
