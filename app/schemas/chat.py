from typing import Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """One turn of the tutor conversation"""
    role: Literal["user", "model"]
    text: str = Field(..., min_length=1)


class ChatRequest(BaseModel):
    """Tutor request; the client keeps the conversation and sends it back"""
    message: str = Field(..., min_length=1, description="New question for the tutor")
    history: list[ChatMessage] = Field(default_factory=list, description="Earlier turns, oldest first")


class ChatResponse(BaseModel):
    """Tutor reply"""
    reply: str
