from app.services.ai_service import (
    ask_tutor,
    decode_questions,
    fetch_current_affairs,
    fetch_notifications,
    fetch_pyq_questions,
    fetch_recruitments,
    generate_questions,
    generate_study_plan,
)
from app.services.scoring import build_result, score_answers
from app.services.question_source import (
    QuestionSource,
    StaticQuestionTable,
    get_question_source,
    get_static_table,
)
from app.services.test_session import TestSession
from app.services.timer import SessionTimer
from app.services.session_registry import SessionRegistry, get_session_registry
from app.services.pyq_service import fetch_pyqs

__all__ = [
    "ask_tutor",
    "decode_questions",
    "fetch_current_affairs",
    "fetch_notifications",
    "fetch_recruitments",
    "fetch_pyq_questions",
    "generate_questions",
    "generate_study_plan",
    "build_result",
    "score_answers",
    "QuestionSource",
    "StaticQuestionTable",
    "get_question_source",
    "get_static_table",
    "TestSession",
    "SessionTimer",
    "SessionRegistry",
    "get_session_registry",
    "fetch_pyqs",
]
