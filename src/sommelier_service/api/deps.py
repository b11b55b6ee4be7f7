"""FastAPI dependency providers."""

from functools import lru_cache

from sommelier_service.config import get_settings
from sommelier_service.infrastructure.catalog import Catalog, load_catalog
from sommelier_service.infrastructure.llm import build_default_providers
from sommelier_service.services.generation_gateway import GatewayConfig, GenerationGateway
from sommelier_service.services.orchestrator import RecommendationOrchestrator


def get_catalog() -> Catalog:
    return load_catalog()


@lru_cache
def get_gateway_config() -> GatewayConfig:
    """Process-wide gateway config; keys can be rotated through ``set_api_key``."""
    return GatewayConfig.from_settings(get_settings())


@lru_cache
def get_orchestrator() -> RecommendationOrchestrator:
    settings = get_settings()
    gateway = GenerationGateway(get_gateway_config(), build_default_providers(settings))
    return RecommendationOrchestrator(
        gateway,
        get_catalog(),
        recommendation_limit=settings.default_recommendation_limit,
    )
