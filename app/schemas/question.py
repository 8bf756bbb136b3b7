from pydantic import BaseModel, Field, field_validator, model_validator


class Question(BaseModel):
    """Multiple-choice question (immutable for the lifetime of a session)"""
    id: str = Field(..., description="Stable question identifier")
    question: str = Field(..., min_length=1, description="Question text")
    options: tuple[str, ...] = Field(..., min_length=1, description="Options in display order")
    correct_answer: str = Field(..., alias="correctAnswer", description="Exact text of the correct option")
    explanation: str = Field("", description="Explanation")
    subject: str | None = Field(None, description="Subject tag")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        options = tuple(opt.strip() for opt in v)
        if any(not opt for opt in options):
            raise ValueError("options must not contain empty entries")
        return options

    @field_validator("correct_answer")
    @classmethod
    def strip_correct_answer(cls, v: str) -> str:
        return v.strip()

    @model_validator(mode="after")
    def validate_correct_answer(self) -> "Question":
        """correctAnswer must be one of the options"""
        if self.correct_answer not in self.options:
            raise ValueError("correctAnswer must equal one of the options")
        return self


class PYQItem(BaseModel):
    """Previous year question from the static question bank"""
    id: str
    exam: str = ""
    year: str = ""
    question: str
    options: list[str]
    answer: str = Field(..., description="Exact text of the correct option")
    explanation: str = ""

    def to_question(self) -> Question:
        """Convert to a session question"""
        return Question(
            id=self.id,
            question=self.question,
            options=tuple(self.options),
            correct_answer=self.answer,
            explanation=self.explanation,
        )


class PYQListResponse(BaseModel):
    """Previous year question list response"""
    items: list[PYQItem]
    total: int
    local_count: int = Field(..., description="Number of items served from the static bank")
