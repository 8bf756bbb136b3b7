from fastapi import APIRouter

from app.schemas.feeds import NotificationItem
from app.services import ai_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationItem])
async def get_notifications():
    """Notification API (empty when alerts cannot be generated)"""
    return await ai_service.fetch_notifications()
