from typing import Literal

from pydantic import BaseModel, Field


class StudyPlanRequest(BaseModel):
    """Study plan generation request"""
    exam: str = Field(..., min_length=1, description="Target exam")
    level: Literal["Beginner", "Intermediate", "Advanced"] = Field("Beginner", description="Preparation level")
    hours_per_day: int = Field(4, alias="hours", ge=1, le=16, description="Study hours per day")

    model_config = {"populate_by_name": True}


class StudyPlanDay(BaseModel):
    """One day of a study plan"""
    day: str
    focus: str
    topics: list[str] = Field(default_factory=list)
    activities: list[str] = Field(default_factory=list)


class StudyPlan(BaseModel):
    """Study plan response (also the structured output schema)"""
    exam: str
    duration: str
    schedule: list[StudyPlanDay] = Field(..., min_length=1)
