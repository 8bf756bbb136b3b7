import logging

from fastapi import APIRouter

from app.schemas.chat import ChatRequest, ChatResponse
from app.services import ai_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/tutor", tags=["tutor"])


@router.post("/messages", response_model=ChatResponse)
async def send_tutor_message(request: ChatRequest):
    """Study tutor chat API"""
    response = await ai_service.ask_tutor(request)
    logger.info(f"Tutor replied: history_turns={len(request.history)}, reply_length={len(response.reply)}")
    return response
