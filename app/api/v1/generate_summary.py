import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from app.core.dependencies import get_ai_service, get_bearer_token, get_identity_service, unauthorized
from app.schemas.summary import SummaryRequest, SummaryResult
from app.services.ai_service import AIService, AIServiceError
from app.services.identity_service import IdentityProviderError, IdentityService

router = APIRouter(tags=["ai"])

logger = logging.getLogger(__name__)


@router.post("/generate-summary", response_model=SummaryResult)
async def generate_summary(
        request: Optional[SummaryRequest] = Body(default=None),
        token: str = Depends(get_bearer_token),
        identity: IdentityService = Depends(get_identity_service),
        ai: AIService = Depends(get_ai_service),
):
    """Compare this week with the previous one through the text-generation API."""
    try:
        subject = await identity.resolve_subject(token)
    except IdentityProviderError:
        raise HTTPException(status_code=502, detail="Identity provider unavailable")
    if subject is None:
        raise unauthorized("Unauthorized")

    if not ai.is_configured:
        logger.error("GEMINI_API_KEY not found in environment")
        raise HTTPException(status_code=500, detail="Server configuration error: Gemini API key missing")

    if request is None or request.current_week_entries is None or not request.week_start:
        raise HTTPException(status_code=400, detail="Missing required fields")

    try:
        return await ai.generate_weekly_summary(
            request.current_week_entries,
            request.last_week_entries,
            request.week_start,
        )
    except AIServiceError as e:
        logger.error(f"Error generating summary: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to generate summary: {str(e)}")
