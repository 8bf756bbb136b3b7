"""Shared test fixtures"""
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app.data.odisha_pyq import ODISHA_PYQ_DATABASE
from app.main import app
from app.schemas.question import Question
from app.services.question_source import QuestionSource, StaticQuestionTable, get_question_source
from app.services.session_registry import SessionRegistry, get_session_registry


def _make_questions(count: int, subject: str | None = "Polity") -> list[Question]:
    return [
        Question(
            id=f"q-{i}",
            question=f"Question {i}?",
            options=(f"Option {i}A", f"Option {i}B", f"Option {i}C", f"Option {i}D"),
            correct_answer=f"Option {i}A",
            explanation=f"Explanation {i}",
            subject=subject,
        )
        for i in range(count)
    ]


@pytest.fixture
def question_factory():
    """Builds questions whose correct answer is always option A"""
    return _make_questions


@pytest.fixture
def static_table():
    """Static bank with the bundled Odisha PYQ data"""
    return StaticQuestionTable.from_records(ODISHA_PYQ_DATABASE)


@pytest.fixture
def empty_table():
    """Static bank without items (every lookup falls back to generation)"""
    return StaticQuestionTable([])


@pytest.fixture
def fake_generator():
    """Mocked remote question generator returning 10 questions"""
    return AsyncMock(return_value=_make_questions(10))


@pytest.fixture
def question_source(empty_table, fake_generator):
    """Question source backed by the mocked generator"""
    return QuestionSource(empty_table, generator=fake_generator, min_local_matches=3, timeout_seconds=5)


@pytest.fixture
def registry():
    """Session registry whose timers do not fire during a test"""
    return SessionRegistry(ttl_seconds=3600, timer_interval=3600)


@pytest.fixture
def client(registry, question_source):
    """API test client with an isolated registry and mocked question source"""
    app.dependency_overrides[get_session_registry] = lambda: registry
    app.dependency_overrides[get_question_source] = lambda: question_source
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
