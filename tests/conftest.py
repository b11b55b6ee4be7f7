"""Pytest configuration and fixtures."""

from typing import Any

import pytest
from fastapi.testclient import TestClient

from sommelier_service.api.deps import get_gateway_config, get_orchestrator
from sommelier_service.config import Settings, get_settings
from sommelier_service.exceptions import ProviderCallFailed
from sommelier_service.infrastructure.catalog import Catalog, load_catalog
from sommelier_service.infrastructure.credentials import InMemoryCredentialStore
from sommelier_service.main import create_app
from sommelier_service.models import ChatTurn, UserPreferenceProfile
from sommelier_service.services.generation_gateway import GatewayConfig, GenerationGateway
from sommelier_service.services.orchestrator import RecommendationOrchestrator
from sommelier_service.services.user_preference import create_default_profile


class FakeProvider:
    """Records calls and either returns canned text or raises."""

    def __init__(self, name: str, reply: str | None = None, call_log: list[str] | None = None):
        self.name = name
        self.reply = reply
        self.calls: list[dict[str, Any]] = []
        self.call_log = call_log if call_log is not None else []

    async def call_generation(
        self,
        api_key: str,
        instruction: str,
        history: list[ChatTurn],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        self.calls.append(
            {
                "api_key": api_key,
                "instruction": instruction,
                "history": list(history),
                "model": model,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        self.call_log.append(self.name)
        if self.reply is None:
            raise ProviderCallFailed(self.name, f"{self.name} is down", status_code=503)
        return self.reply


@pytest.fixture
def test_settings() -> Settings:
    """Get test settings with overrides."""
    return Settings(
        _env_file=None,
        app_env="test",
        debug=True,
        openai_api_key="",
        anthropic_api_key="",
    )


@pytest.fixture
def catalog() -> Catalog:
    return load_catalog()


@pytest.fixture
def default_profile() -> UserPreferenceProfile:
    return create_default_profile("test-user-123")


@pytest.fixture
def no_credentials_config(test_settings: Settings) -> GatewayConfig:
    return GatewayConfig.from_settings(test_settings, InMemoryCredentialStore())


@pytest.fixture
def keyed_config(test_settings: Settings) -> GatewayConfig:
    """Both providers configured; anthropic is the preferred primary."""
    store = InMemoryCredentialStore({"anthropic": "sk-ant-test", "openai": "sk-openai-test"})
    return GatewayConfig.from_settings(test_settings, store)


@pytest.fixture
def offline_orchestrator(
    no_credentials_config: GatewayConfig, catalog: Catalog
) -> RecommendationOrchestrator:
    return RecommendationOrchestrator(GenerationGateway(no_credentials_config, []), catalog)


@pytest.fixture
def failing_orchestrator(keyed_config: GatewayConfig, catalog: Catalog) -> RecommendationOrchestrator:
    """Credentials present, every provider call fails."""
    providers = [FakeProvider("anthropic"), FakeProvider("openai")]
    return RecommendationOrchestrator(GenerationGateway(keyed_config, providers), catalog)


@pytest.fixture
def app(
    test_settings: Settings,
    no_credentials_config: GatewayConfig,
    offline_orchestrator: RecommendationOrchestrator,
) -> Any:
    """Create test application wired to the offline orchestrator."""
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_gateway_config] = lambda: no_credentials_config
    app.dependency_overrides[get_orchestrator] = lambda: offline_orchestrator
    return app


@pytest.fixture
def client(app: Any) -> TestClient:
    """Create synchronous test client."""
    return TestClient(app)


@pytest.fixture
def make_provider() -> type[FakeProvider]:
    """Factory for recording fake providers."""
    return FakeProvider
