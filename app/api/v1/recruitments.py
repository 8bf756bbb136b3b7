import logging

from fastapi import APIRouter

from app.schemas.feeds import RecruitmentsResponse
from app.services import ai_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/recruitments", tags=["recruitments"])


@router.get("", response_model=RecruitmentsResponse)
async def get_recruitments():
    """Recruitment notifications API (Google Search grounded)"""
    feed = await ai_service.fetch_recruitments()
    logger.info(f"Recruitments served: items={len(feed.items)}")
    return feed
