from fastapi import APIRouter, Depends, Query

from app.schemas.question import PYQListResponse
from app.services import pyq_service
from app.services.question_source import StaticQuestionTable, get_static_table

router = APIRouter(prefix="/pyqs", tags=["pyqs"])


@router.get("", response_model=PYQListResponse)
async def get_pyqs(
    exam: str = Query("OPSC OAS", min_length=1, description="Exam name"),
    subject: str = Query("General Studies", min_length=1, description="Subject"),
    year: str | None = Query(None, description="Exam year (all years when omitted)"),
    table: StaticQuestionTable = Depends(get_static_table),
):
    """Previous year questions API"""
    return await pyq_service.fetch_pyqs(table, exam, subject, year or None)
