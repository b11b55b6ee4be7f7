"""Conversational chat endpoint."""

from fastapi import APIRouter, Depends
from pydantic import Field

from sommelier_service.api.deps import get_orchestrator
from sommelier_service.models import ChatTurn
from sommelier_service.schemas import CamelModel, ChatContext, ChatMessage, ChatReply
from sommelier_service.services.orchestrator import RecommendationOrchestrator

router = APIRouter()


class ChatRequest(CamelModel):
    """A user message plus prior conversation turns."""

    message: str = Field(..., min_length=1)
    history: list[ChatMessage] = Field(default_factory=list)
    context: ChatContext | None = None


@router.post("", response_model=ChatReply, response_model_by_alias=True)
async def chat(
    request: ChatRequest,
    orchestrator: RecommendationOrchestrator = Depends(get_orchestrator),
) -> ChatReply:
    """
    Chat with the sommelier.

    The reply is generated remotely when a provider is available; otherwise
    it comes from the local classifier and scoring pipeline. The status code
    is 200 either way, and ``source`` tells which path answered.
    """
    history = [ChatTurn(role=m.role, content=m.content) for m in request.history]
    return await orchestrator.chat(request.message, history=history, context=request.context)
