"""Strain analysis and activity pairing endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from sommelier_service.api.deps import get_orchestrator
from sommelier_service.schemas import ActivityPairing, CamelModel, StrainAnalysis
from sommelier_service.services.orchestrator import RecommendationOrchestrator

router = APIRouter()


class AnalysisRequest(CamelModel):
    strain_name: str = Field(..., min_length=1)
    category: str = Field(..., description="indica, sativa or hybrid")
    thc: float | None = Field(default=None, ge=0)
    cbd: float | None = Field(default=None, ge=0)
    terpenes: list[str] = Field(default_factory=list)


@router.post("/strain", response_model=StrainAnalysis, response_model_by_alias=True)
async def analyze_strain(
    request: AnalysisRequest,
    orchestrator: RecommendationOrchestrator = Depends(get_orchestrator),
) -> StrainAnalysis:
    """
    Describe a strain's effects, uses and similar strains.

    An unknown category is rejected with 422.
    """
    return await orchestrator.analyze(
        request.strain_name,
        request.category,
        thc=request.thc,
        cbd=request.cbd,
        terpenes=request.terpenes or None,
    )


@router.get("/pairing", response_model=ActivityPairing, response_model_by_alias=True)
async def activity_pairing(
    activity: Annotated[str, Query(min_length=1, description="Activity to pair strains with")],
    orchestrator: RecommendationOrchestrator = Depends(get_orchestrator),
) -> ActivityPairing:
    """Suggest strains that suit an activity."""
    return await orchestrator.get_activity_pairing(activity)
