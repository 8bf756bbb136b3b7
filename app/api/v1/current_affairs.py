import logging

from fastapi import APIRouter

from app.schemas.feeds import CurrentAffairsResponse
from app.services import ai_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/current-affairs", tags=["current-affairs"])


@router.get("", response_model=CurrentAffairsResponse)
async def get_current_affairs():
    """Current affairs feed API (Google Search grounded)"""
    feed = await ai_service.fetch_current_affairs()
    logger.info(f"Current affairs served: items={len(feed.items)}")
    return feed
