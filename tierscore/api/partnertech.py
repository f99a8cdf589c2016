"""
Partner scoring endpoints

POST /api/partnertech/events - score one behavior event
POST /api/partnertech/queries - score one AI query (returns complexity/quality too)
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from tierscore.api.deps import get_scoring_service
from tierscore.features.partnertech.service import PartnerScoringService

router = APIRouter(prefix="/api/partnertech", tags=["partnertech"])


@router.post("/events")
async def track_event(
    payload: Dict[str, Any] = Body(...),
    service: PartnerScoringService = Depends(get_scoring_service),
) -> dict:
    return service.process_behavior_event(payload)


@router.post("/queries")
async def track_query(
    payload: Dict[str, Any] = Body(...),
    service: PartnerScoringService = Depends(get_scoring_service),
) -> dict:
    return service.process_query_event(payload)
