"""
Scoring and review building for completed test sessions.

Pure functions: no session mutation, no I/O.
"""
from typing import Collection, Mapping, Sequence

from app.schemas.question import Question
from app.schemas.test_session import QuestionReview, Result


def build_reviews(
    questions: Sequence[Question],
    answers: Mapping[int, str],
    marked_for_review: Collection[int] = (),
) -> tuple[QuestionReview, ...]:
    """Per-question correctness breakdown; unanswered questions are skipped and never correct"""
    reviews = []
    for index, question in enumerate(questions):
        selected = answers.get(index)
        reviews.append(
            QuestionReview(
                index=index,
                question=question.question,
                selected=selected,
                correct_answer=question.correct_answer,
                explanation=question.explanation,
                is_correct=selected is not None and selected == question.correct_answer,
                is_marked_for_review=index in marked_for_review,
                subject=question.subject,
            )
        )
    return tuple(reviews)


def score_answers(
    questions: Sequence[Question],
    answers: Mapping[int, str],
    elapsed_seconds: int,
    marked_for_review: Collection[int] = (),
) -> Result:
    """
    Score a question list against an answer map.

    Calling it again with the same frozen state yields an equal Result.
    """
    reviews = build_reviews(questions, answers, marked_for_review)
    return Result(
        correct_count=sum(1 for r in reviews if r.is_correct),
        total=len(questions),
        elapsed_seconds=elapsed_seconds,
        reviews=reviews,
    )


def build_result(session) -> Result:
    """Scored result of a session's current state"""
    return score_answers(
        session.questions,
        session.answers,
        session.elapsed_seconds,
        session.marked_for_review,
    )
