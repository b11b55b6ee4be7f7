"""Remote text-generation providers behind a uniform call interface."""

import httpx

from sommelier_service.config import Settings
from sommelier_service.infrastructure.llm.anthropic import AnthropicProvider
from sommelier_service.infrastructure.llm.base import GenerationProvider
from sommelier_service.infrastructure.llm.openai import OpenAIProvider


def build_default_providers(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[GenerationProvider]:
    """Instantiate every known provider from settings (order is decided by the gateway)."""
    timeout = settings.generation_timeout_seconds
    return [
        AnthropicProvider(
            base_url=settings.anthropic_base_url,
            api_version=settings.anthropic_api_version,
            timeout_seconds=timeout,
            transport=transport,
        ),
        OpenAIProvider(
            base_url=settings.openai_base_url,
            timeout_seconds=timeout,
            transport=transport,
        ),
    ]


__all__ = [
    "AnthropicProvider",
    "GenerationProvider",
    "OpenAIProvider",
    "build_default_providers",
]
