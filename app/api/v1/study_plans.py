import logging

from fastapi import APIRouter

from app.schemas.study_plan import StudyPlan, StudyPlanRequest
from app.services import ai_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/study-plans", tags=["study-plans"])


@router.post("", response_model=StudyPlan)
async def create_study_plan(request: StudyPlanRequest):
    """Study plan generation API"""
    plan = await ai_service.generate_study_plan(request)
    logger.info(f"Study plan generated: exam={request.exam}, level={request.level}, days={len(plan.schedule)}")
    return plan
