import logging

from app.core.config import settings
from app.schemas.question import PYQListResponse
from app.services import ai_service
from app.services.question_source import StaticQuestionTable

logger = logging.getLogger(__name__)


async def fetch_pyqs(
    table: StaticQuestionTable,
    exam: str,
    subject: str,
    year: str | None = None,
) -> PYQListResponse:
    """Previous year questions: static bank first, Gemini when the bank is too thin"""
    local_items = table.lookup(exam, subject, year)

    # enough local questions: fast path, no tokens spent
    if len(local_items) >= settings.local_match_threshold:
        return PYQListResponse(items=local_items, total=len(local_items), local_count=len(local_items))

    try:
        ai_items = await ai_service.fetch_pyq_questions(exam, subject, year)
    except Exception as e:
        # the bank stays usable without Gemini
        logger.warning(
            f"PYQ generation failed, serving static bank only: exam={exam}, subject={subject}, "
            f"error_type={type(e).__name__}"
        )
        ai_items = []

    items = local_items + ai_items
    return PYQListResponse(items=items, total=len(items), local_count=len(local_items))
