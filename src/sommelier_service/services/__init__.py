"""Business logic services."""

from sommelier_service.services.generation_gateway import GatewayConfig, GenerationGateway
from sommelier_service.services.intent_classifier import IntentClassifier
from sommelier_service.services.orchestrator import RecommendationOrchestrator
from sommelier_service.services.response_composer import ResponseComposer
from sommelier_service.services.scoring import ScoringEngine

__all__ = [
    "GatewayConfig",
    "GenerationGateway",
    "IntentClassifier",
    "RecommendationOrchestrator",
    "ResponseComposer",
    "ScoringEngine",
]
