from pydantic import BaseModel, Field


class AIQuestionRecord(BaseModel):
    """AI generated question schema (structured output)"""
    question: str = Field(..., description="Question text")
    options: list[str] = Field(..., min_length=2, description="Options (4 expected)")
    correctAnswer: str = Field(..., description="The correct option text exactly as it appears in options")
    explanation: str = Field(..., description="Explanation")
    subject: str | None = Field(None, description="The subject category (e.g., History, Reasoning) of this question")


class AIPYQRecord(BaseModel):
    """AI retrieved previous year question schema (structured output)"""
    id: str | None = Field(None, description="Identifier")
    exam: str | None = Field(None, description="Exam name")
    year: str | None = Field(None, description="Exam year")
    question: str = Field(..., description="Question text")
    options: list[str] = Field(..., min_length=2, description="Options (4 expected)")
    answer: str = Field(..., description="The correct option text exactly as it appears in options")
    explanation: str = Field(..., description="Explanation")
