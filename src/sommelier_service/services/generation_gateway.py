"""Multi-provider generation gateway with ordered failover.

Providers are tried one after another, never concurrently: the configured
primary always goes first. The first success wins; if every provider
fails the result carries the last provider's error. No retries and no
backoff within a single provider.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from sommelier_service.config import Settings
from sommelier_service.exceptions import (
    AllProvidersFailed,
    ContractViolation,
    NoCredentialsConfigured,
    ProviderCallFailed,
    UnknownTierError,
)
from sommelier_service.infrastructure.credentials import CredentialStore, SettingsCredentialStore
from sommelier_service.infrastructure.llm import GenerationProvider
from sommelier_service.models import ChatTurn, GatewayResult, ModelTier

logger = structlog.get_logger()


@dataclass(frozen=True)
class ProviderSettings:
    name: str
    models: dict[ModelTier, str]

    def model_for(self, tier: ModelTier) -> str:
        return self.models[tier]


@dataclass
class GatewayConfig:
    """Provider registry plus credential resolution.

    Runtime keys set through ``set_api_key`` take precedence over the
    credential store, so a key can be rotated without a restart.
    """

    providers: dict[str, ProviderSettings]
    credentials: CredentialStore
    preferred_provider: str = "anthropic"
    history_window: int = 10
    _runtime_keys: dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        credentials: CredentialStore | None = None,
    ) -> "GatewayConfig":
        providers = {
            name: ProviderSettings(
                name=name,
                models={ModelTier(tier): model for tier, model in models.items()},
            )
            for name, models in settings.provider_models.items()
        }
        return cls(
            providers=providers,
            credentials=credentials or SettingsCredentialStore(settings),
            preferred_provider=settings.preferred_provider,
            history_window=settings.history_window_turns,
        )

    def set_api_key(self, provider: str, key: str) -> None:
        if provider not in self.providers:
            raise ContractViolation(f"Unknown provider: {provider!r}")
        self._runtime_keys[provider] = key
        logger.info("API key updated", provider=provider, configured=bool(key))

    def api_key(self, provider: str) -> str | None:
        return self._runtime_keys.get(provider) or self.credentials.get_credential(provider)

    def has_api_key(self, provider: str | None = None) -> bool:
        if provider is not None:
            return bool(self.api_key(provider))
        return any(self.api_key(name) for name in self.providers)

    def ordered_providers(self) -> list[str]:
        """Providers holding a key: the preferred one first, then registry order."""
        available = [name for name in self.providers if self.api_key(name)]
        if self.preferred_provider in available:
            available.remove(self.preferred_provider)
            available.insert(0, self.preferred_provider)
        return available


def resolve_tier(tier: ModelTier | str) -> ModelTier:
    try:
        return ModelTier(tier)
    except ValueError:
        raise UnknownTierError(f"Unknown model tier: {tier!r}") from None


class GenerationGateway:
    """Sends one generation request across the ordered provider list."""

    def __init__(self, config: GatewayConfig, providers: Sequence[GenerationProvider]):
        self.config = config
        self.providers = {p.name: p for p in providers}

    async def generate(
        self,
        instruction: str,
        history: Sequence[ChatTurn],
        tier: ModelTier | str = ModelTier.STANDARD,
        max_tokens: int = 600,
        temperature: float = 0.7,
        message: str | None = None,
    ) -> GatewayResult:
        """
        Generate text with the first provider that succeeds.

        Only the last ``history_window`` turns of ``history`` are sent.
        ``message``, when given, is appended after the window as the new
        user turn.

        Failures are returned inside ``GatewayResult.error``, never raised.
        Only an unknown tier raises (``UnknownTierError``).
        """
        tier = resolve_tier(tier)
        ordered = [name for name in self.config.ordered_providers() if name in self.providers]
        if not ordered:
            logger.info("No generation credentials configured", tier=tier.value)
            return GatewayResult(error=NoCredentialsConfigured())

        window = list(history)[-self.config.history_window :]
        if message is not None:
            window.append(ChatTurn(role="user", content=message))
        attempts: list[str] = []
        last_error: ProviderCallFailed | None = None

        for name in ordered:
            provider = self.providers[name]
            model = self.config.providers[name].model_for(tier)
            attempts.append(name)
            try:
                content = await provider.call_generation(
                    api_key=self.config.api_key(name) or "",
                    instruction=instruction,
                    history=window,
                    model=model,
                    max_tokens=max_tokens,
                    temperature=temperature,
                )
            except ProviderCallFailed as e:
                logger.warning(
                    "Generation provider failed, trying next",
                    provider=name,
                    model=model,
                    tier=tier.value,
                    status_code=e.status_code,
                    error=e.detail,
                )
                last_error = e
                continue

            logger.info(
                "Generation succeeded",
                provider=name,
                model=model,
                tier=tier.value,
                history_turns=len(window),
                output_chars=len(content),
            )
            return GatewayResult(content=content, provider=name, model=model, attempts=attempts)

        message = last_error.detail if last_error else "All providers failed"
        return GatewayResult(error=AllProvidersFailed(message, attempts=attempts), attempts=attempts)
