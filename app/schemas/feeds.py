from typing import Literal

from pydantic import BaseModel, Field


class GroundingSource(BaseModel):
    """Web page the search-grounded answer was built from"""
    uri: str
    title: str


class NewsItem(BaseModel):
    """Current affairs headline"""
    id: str
    title: str = Field(..., min_length=1)
    summary: str
    category: str = "General"
    date: str = "Recent"


class RecruitmentItem(BaseModel):
    """Recruitment notification"""
    id: str
    title: str = Field(..., min_length=1, description="Job role")
    organization: str = Field(..., min_length=1)
    deadline: str = "See details"
    eligibility: str = "N/A"
    link: str = "#"


class CurrentAffairsResponse(BaseModel):
    """Current affairs feed response"""
    items: list[NewsItem]
    sources: list[GroundingSource] = Field(default_factory=list)


class RecruitmentsResponse(BaseModel):
    """Recruitment feed response"""
    items: list[RecruitmentItem]
    sources: list[GroundingSource] = Field(default_factory=list)


class NotificationItem(BaseModel):
    """Alert for the notification bell (also the structured output schema)"""
    id: str
    type: Literal["JOB", "NEWS", "ALERT"]
    message: str
    timestamp: str
    link: str | None = None
