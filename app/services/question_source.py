"""Question source: static question bank first, remote generation as fallback."""
import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Sequence

from app.core.config import settings
from app.data.odisha_pyq import ODISHA_PYQ_DATABASE
from app.exceptions import GeminiAPIKeyError, GeminiServiceUnavailableError, SourceUnavailableError
from app.schemas.question import PYQItem, Question
from app.schemas.test_session import TestConfiguration
from app.services import ai_service

logger = logging.getLogger(__name__)

# subject that matches every question in the static bank
GENERAL_STUDIES = "General Studies"

QuestionGenerator = Callable[[TestConfiguration], Awaitable[list[Question]]]


class StaticQuestionTable:
    """Read-only lookup over the static previous-year-question bank"""

    def __init__(self, items: Iterable[PYQItem]):
        self._items: tuple[PYQItem, ...] = tuple(items)

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "StaticQuestionTable":
        return cls(PYQItem.model_validate(record) for record in records)

    def __len__(self) -> int:
        return len(self._items)

    def lookup(self, exam: str, subject: str | None = None, year: str | None = None) -> list[PYQItem]:
        """Loose match: first word of the exam, exact year, subject within the question text"""
        words = exam.split()
        if not words:
            return []
        exam_key = words[0].lower()
        subject_key = subject.lower() if subject and subject != GENERAL_STUDIES else None

        matches = []
        for item in self._items:
            if exam_key not in item.exam.lower():
                continue
            if year and item.year != year:
                continue
            if subject_key and subject_key not in item.question.lower():
                continue
            matches.append(item)
        return matches


_default_table: StaticQuestionTable | None = None


def get_static_table() -> StaticQuestionTable:
    """Static question bank singleton"""
    global _default_table
    if _default_table is None:
        _default_table = StaticQuestionTable.from_records(ODISHA_PYQ_DATABASE)
        logger.info(f"Static question bank loaded: {len(_default_table)} items")
    return _default_table


class QuestionSource:
    """Resolves the questions for a test configuration.

    When the static bank holds at least ``min_local_matches`` items for the
    exam and subject they are returned as-is. Otherwise exactly one remote
    generation request is made and its questions follow the local matches.
    """

    def __init__(
        self,
        table: StaticQuestionTable,
        generator: QuestionGenerator | None = None,
        min_local_matches: int | None = None,
        timeout_seconds: float | None = None,
    ):
        self.table = table
        self.generator = generator or ai_service.generate_questions
        self.min_local_matches = settings.local_match_threshold if min_local_matches is None else min_local_matches
        self.timeout_seconds = settings.gemini_timeout_seconds if timeout_seconds is None else timeout_seconds

    async def resolve(self, config: TestConfiguration) -> Sequence[Question]:
        local = [item.to_question() for item in self.table.lookup(config.exam, config.subject)]
        if len(local) >= self.min_local_matches:
            logger.info(f"Serving {len(local)} questions from the static bank: exam={config.exam}")
            return local

        try:
            generated = await asyncio.wait_for(self.generator(config), timeout=self.timeout_seconds)
        except SourceUnavailableError:
            raise
        except asyncio.TimeoutError as e:
            logger.error(f"Question generation timed out after {self.timeout_seconds}s: exam={config.exam}")
            raise SourceUnavailableError("Question generation timed out. Please try again.") from e
        except (GeminiServiceUnavailableError, GeminiAPIKeyError) as e:
            raise SourceUnavailableError(e.message) from e
        except Exception as e:
            logger.error(
                f"Question generation failed: error_type={type(e).__name__}, "
                f"error_message={str(e)[:200]}"
            )
            raise SourceUnavailableError() from e

        return local + list(generated)


def get_question_source() -> QuestionSource:
    """Question source over the static bank and Gemini"""
    return QuestionSource(get_static_table())
