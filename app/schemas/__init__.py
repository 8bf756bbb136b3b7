from app.schemas.ai import (
    AIPYQRecord,
    AIQuestionRecord,
)
from app.schemas.chat import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
)
from app.schemas.feeds import (
    CurrentAffairsResponse,
    GroundingSource,
    NewsItem,
    NotificationItem,
    RecruitmentItem,
    RecruitmentsResponse,
)
from app.schemas.question import (
    PYQItem,
    PYQListResponse,
    Question,
)
from app.schemas.study_plan import (
    StudyPlan,
    StudyPlanDay,
    StudyPlanRequest,
)
from app.schemas.test_session import (
    AnswerRequest,
    NavigateRequest,
    QuestionReview,
    QuestionView,
    Result,
    SelectKindRequest,
    SessionPhase,
    TestConfiguration,
    TestKind,
    TestSessionResponse,
)

__all__ = [
    "AIQuestionRecord",
    "AIPYQRecord",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "GroundingSource",
    "NewsItem",
    "RecruitmentItem",
    "CurrentAffairsResponse",
    "RecruitmentsResponse",
    "NotificationItem",
    "Question",
    "PYQItem",
    "PYQListResponse",
    "StudyPlan",
    "StudyPlanDay",
    "StudyPlanRequest",
    "TestKind",
    "SessionPhase",
    "TestConfiguration",
    "QuestionReview",
    "Result",
    "SelectKindRequest",
    "AnswerRequest",
    "NavigateRequest",
    "QuestionView",
    "TestSessionResponse",
]
