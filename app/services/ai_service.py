import asyncio
import logging
import random
import re
import uuid
from datetime import date
from typing import Any, Callable

from google import genai
from google.genai import types
from google.genai.errors import ClientError, ServerError
from pydantic import TypeAdapter, ValidationError

from app.core.config import settings
from app.exceptions import (
    BaseAppError,
    GeminiAPIKeyError,
    GeminiServiceUnavailableError,
    QuestionDecodeError,
    SourceUnavailableError,
)
from app.schemas.ai import AIPYQRecord, AIQuestionRecord
from app.schemas.chat import ChatMessage, ChatRequest, ChatResponse
from app.schemas.feeds import (
    CurrentAffairsResponse,
    GroundingSource,
    NewsItem,
    NotificationItem,
    RecruitmentItem,
    RecruitmentsResponse,
)
from app.schemas.question import PYQItem, Question
from app.schemas.study_plan import StudyPlan, StudyPlanRequest
from app.schemas.test_session import TestConfiguration, TestKind

logger = logging.getLogger(__name__)

_gemini_client: genai.Client | None = None
# Limit concurrent Gemini requests (overload protection)
_gemini_semaphore: asyncio.Semaphore | None = None

_question_records = TypeAdapter(list[AIQuestionRecord])
_pyq_records = TypeAdapter(list[AIPYQRecord])
_notification_records = TypeAdapter(list[NotificationItem])

TUTOR_INSTRUCTION = (
    "You are an expert exam preparation tutor specializing in Odisha Government Exams (OPSC, OSSSC), "
    "OSSC, UPSC, and Banking (IBPS). Help the student with concepts, formulas, and general knowledge."
)


def get_gemini_client() -> genai.Client:
    """Gemini client singleton"""
    global _gemini_client
    if _gemini_client is None:
        if not settings.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is not configured")
        _gemini_client = genai.Client(api_key=settings.gemini_api_key)
    return _gemini_client


def get_gemini_semaphore() -> asyncio.Semaphore:
    """Semaphore singleton limiting concurrent Gemini requests"""
    global _gemini_semaphore
    if _gemini_semaphore is None:
        _gemini_semaphore = asyncio.Semaphore(settings.gemini_max_concurrent)
        logger.info(f"Gemini concurrency limit: at most {settings.gemini_max_concurrent} requests")
    return _gemini_semaphore


def strip_code_fence(text: str) -> str:
    """Remove a markdown code block around a JSON payload"""
    result = text.strip()
    if result.startswith("```json"):
        result = result[7:]
    if result.startswith("```"):
        result = result[3:]
    if result.endswith("```"):
        result = result[:-3]
    return result.strip()


async def _call_gemini(call: Callable[[genai.Client], Any]) -> Any:
    """Run a synchronous SDK call against the shared client.

    Overload errors (503) are retried with exponential backoff and jitter;
    every other error propagates immediately.
    """
    client = get_gemini_client()
    semaphore = get_gemini_semaphore()

    max_retries = max(1, settings.gemini_max_retries)
    base_delay = 2.0
    max_delay = 16.0

    async with semaphore:
        for attempt in range(max_retries):
            try:
                # the SDK call is synchronous, run it in the default executor
                loop = asyncio.get_running_loop()
                response = await loop.run_in_executor(None, lambda: call(client))

                if attempt > 0:
                    logger.info(f"Gemini call succeeded (attempt {attempt + 1}/{max_retries})")
                return response

            except ClientError as e:
                error_message = str(e).lower()
                if "403" in str(e) or "permission_denied" in error_message or "leaked" in error_message:
                    logger.error(f"Gemini API key problem: status_code=403, error_type={type(e).__name__}")
                    raise GeminiAPIKeyError()
                logger.error(
                    f"Gemini ClientError: status_code={getattr(e, 'code', 'unknown')}, "
                    f"error_type={type(e).__name__}"
                )
                raise
            except ServerError as e:
                error_message = str(e)
                if "503" in error_message or "UNAVAILABLE" in error_message or "overloaded" in error_message.lower():
                    if attempt < max_retries - 1:
                        # 2s, 4s, 8s, 16s with +-20% jitter
                        delay = min(base_delay * (2 ** attempt), max_delay)
                        jitter = delay * 0.2 * (random.random() * 2 - 1)
                        delay_with_jitter = max(0.5, delay + jitter)
                        logger.warning(
                            f"Gemini 503 (attempt {attempt + 1}/{max_retries}), "
                            f"retrying in {delay_with_jitter:.1f}s: {error_message[:100]}"
                        )
                        await asyncio.sleep(delay_with_jitter)
                        continue
                    logger.error(f"Gemini 503: giving up after {max_retries} attempts: {error_message}")
                    raise GeminiServiceUnavailableError()
                logger.error(f"Gemini ServerError (not 503): {error_message}")
                raise
    raise GeminiServiceUnavailableError()


async def _generate_json(prompt: str, response_schema, temperature: float = 0.7) -> str:
    """Call Gemini with a JSON response schema and return the raw text"""
    response = await _call_gemini(
        lambda client: client.models.generate_content(
            model=settings.gemini_model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=temperature,
                response_mime_type="application/json",
                response_schema=response_schema,
            ),
        )
    )
    return strip_code_fence(response.text or "")


async def _generate_grounded(prompt: str, temperature: float = 0.3) -> tuple[str, list[GroundingSource]]:
    """Call Gemini with Google Search grounding; returns the text and its web sources"""
    response = await _call_gemini(
        lambda client: client.models.generate_content(
            model=settings.gemini_model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=temperature,
                tools=[types.Tool(google_search=types.GoogleSearch())],
            ),
        )
    )
    return response.text or "", extract_sources(response)


def describe_exam_pattern(exam: str) -> str:
    """Syllabus pattern used for full-length mock tests"""
    if exam in ("OPSC Civil Services", "UPSC"):
        return (
            "Strictly follow the General Studies Paper 1 pattern:\n"
            "- History (Ancient/Medieval/Modern India + Odisha History for OPSC)\n"
            "- Geography (Physical/Economic + Odisha Geography for OPSC)\n"
            "- Indian Polity & Governance\n"
            "- Economic & Social Development\n"
            "- General Science & Environment"
        )
    if exam in ("Banking (IBPS PO)", "Banking (SBI PO)"):
        return (
            "Strictly follow the IBPS/SBI Prelims pattern:\n"
            "- Quantitative Aptitude (Data Interpretation, Arithmetic, Series)\n"
            "- Reasoning Ability (Puzzles, Syllogism, Blood Relations)\n"
            "- English Language (Error Spotting, Fillers, Para Jumbles)"
        )
    if exam in ("OSSC CGL", "OSSC Combined", "Odisha Police"):
        return (
            "Strictly follow the OSSC/State Exam pattern:\n"
            "- General Knowledge (Current Affairs, Odisha GK)\n"
            "- Reasoning & Mental Ability\n"
            "- Mathematics / Numerical Ability\n"
            "- Computer Awareness"
        )
    return f"Cover all major syllabus topics for {exam}."


def build_quiz_prompt(config: TestConfiguration) -> str:
    """Prompt for a test of the configured kind"""
    if config.kind is TestKind.FULL_MOCK:
        context = (
            f'Create a "Full Length Mock Test Series" subset of {config.question_count} questions '
            f'for the "{config.exam}" exam.\n\n'
            f"{describe_exam_pattern(config.exam)}\n\n"
            "Ensure the difficulty matches the real exam level."
        )
    elif config.kind is TestKind.SUBJECT_FOCUSED:
        context = (
            f'Create {config.question_count} questions specifically for the subject "{config.subject}" '
            f'relevant to "{config.exam}".\n'
            "Ensure questions vary in difficulty (Easy, Medium, Hard)."
        )
    else:
        context = (
            f'Create {config.question_count} questions deeply focused on the chapter/topic "{config.topic}" '
            f'within the subject "{config.subject}" for "{config.exam}".'
        )

    return f"""{context}

Requirements:
- Multiple choice questions with exactly 4 options
- correctAnswer must be the correct option text exactly as it appears in options
- A concise explanation for every question

OUTPUT FORMAT:
Return a strict JSON array of objects."""


def decode_questions(payload: str) -> list[Question]:
    """Strictly decode a generation response into questions.

    The whole response is rejected when any record is malformed.
    """
    if not payload.strip():
        return []
    try:
        records = _question_records.validate_json(payload)
    except ValidationError as e:
        raise QuestionDecodeError(f"{e.error_count()} schema error(s)") from e

    questions = []
    for position, record in enumerate(records):
        try:
            questions.append(
                Question(
                    id=f"ai-{uuid.uuid4().hex[:12]}",
                    question=record.question,
                    options=tuple(record.options),
                    correct_answer=record.correctAnswer,
                    explanation=record.explanation,
                    subject=record.subject,
                )
            )
        except ValidationError as e:
            raise QuestionDecodeError(f"record {position}: {e.errors()[0]['msg']}") from e
    return questions


async def generate_questions(config: TestConfiguration) -> list[Question]:
    """Generate test questions with Gemini"""
    prompt = build_quiz_prompt(config)
    payload = await _generate_json(prompt, list[AIQuestionRecord])
    questions = decode_questions(payload)
    logger.info(
        f"Questions generated: exam={config.exam}, kind={config.kind.name}, "
        f"requested={config.question_count}, received={len(questions)}"
    )
    return questions


def decode_pyq_items(payload: str, exam: str, year: str | None) -> list[PYQItem]:
    """Decode a PYQ response, dropping records whose answer is not an option"""
    if not payload.strip():
        return []
    try:
        records = _pyq_records.validate_json(payload)
    except ValidationError as e:
        raise QuestionDecodeError(f"{e.error_count()} schema error(s)") from e

    items = []
    for record in records:
        if record.answer.strip() not in [opt.strip() for opt in record.options]:
            logger.warning(f"Dropping PYQ record with unknown answer: {record.question[:50]}...")
            continue
        items.append(
            PYQItem(
                id=f"ai-{uuid.uuid4().hex[:12]}",
                exam=record.exam or exam,
                year=record.year or year or "",
                question=record.question,
                options=[opt.strip() for opt in record.options],
                answer=record.answer.strip(),
                explanation=record.explanation,
            )
        )
    return items


async def fetch_pyq_questions(exam: str, subject: str, year: str | None = None) -> list[PYQItem]:
    """Retrieve memory-based previous year questions with Gemini"""
    prompt = f"""Retrieve 5 memory-based Previous Year Questions (PYQ) for the "{exam}" exam specifically for the subject "{subject}" from the year {year or "recent years (2020-2023)"}.

CONTEXT: These must be specifically relevant to Odisha Government Exams or the selected Central Exam.
If exact word-for-word PYQs are not available in your training data, generate high-fidelity practice questions that mimic the exact pattern, difficulty, and topics of that year's paper.

IMPORTANT: Format them as Multiple Choice Questions with 4 plausible options."""

    payload = await _generate_json(prompt, list[AIPYQRecord])
    return decode_pyq_items(payload, exam, year)


async def generate_study_plan(request: StudyPlanRequest) -> StudyPlan:
    """Generate a personalized 5-day study plan with Gemini"""
    prompt = f"""Create a 5-day personalized study plan for a student preparing for "{request.exam}" (specifically focusing on Odisha exams if applicable).
The student is at a "{request.level}" level and has {request.hours_per_day} hours per day.

REQUIREMENTS:
1. Include a mix of static GK, Current Affairs, and Aptitude.
2. EXPLICITLY schedule 'MCQ Practice' sessions every day.
3. For OSSC/UPSC/IBPS exams, include specific pattern practice (e.g., Reasoning Puzzles for IBPS, Answer Writing for UPSC)."""

    try:
        payload = await _generate_json(prompt, StudyPlan)
    except BaseAppError:
        raise
    except Exception as e:
        logger.error(f"Study plan generation failed: error_type={type(e).__name__}, error_message={str(e)[:200]}")
        raise SourceUnavailableError("Failed to generate the study plan. Please try again.") from e

    if not payload:
        raise SourceUnavailableError("The study plan response was empty")
    try:
        return StudyPlan.model_validate_json(payload)
    except ValidationError as e:
        raise SourceUnavailableError("The generated study plan could not be decoded") from e


def extract_sources(response) -> list[GroundingSource]:
    """Web sources from the grounding metadata of the first candidate, without duplicates"""
    candidates = response.candidates or []
    if not candidates or candidates[0].grounding_metadata is None:
        return []

    sources = []
    seen = set()
    for chunk in candidates[0].grounding_metadata.grounding_chunks or []:
        web = chunk.web
        if web is None or not web.uri or web.uri in seen:
            continue
        seen.add(web.uri)
        sources.append(GroundingSource(uri=web.uri, title=web.title or web.uri))
    return sources


def _field(block: str, name: str, multiline: bool = False) -> str | None:
    pattern = rf"{name}:\s*(.*)"
    match = re.search(pattern, block, re.DOTALL) if multiline else re.search(pattern, block)
    return match.group(1).strip() if match else None


def parse_news_items(text: str) -> list[NewsItem]:
    """Decode '|||'-separated TITLE/DATE/CATEGORY/SUMMARY blocks; blocks without a title are dropped"""
    items = []
    blocks = [block.strip() for block in text.split("|||") if block.strip()]
    for index, block in enumerate(blocks):
        title = _field(block, "TITLE")
        if not title:
            continue
        items.append(
            NewsItem(
                id=f"news-{index}",
                title=title,
                date=_field(block, "DATE") or "Recent",
                category=_field(block, "CATEGORY") or "General",
                summary=_field(block, "SUMMARY", multiline=True) or block,
            )
        )
    return items


def parse_recruitment_items(text: str) -> list[RecruitmentItem]:
    """Decode '###'-separated ROLE/ORG/DEADLINE/ELIGIBILITY/LINK blocks; role and org are required"""
    items = []
    blocks = [block.strip() for block in text.split("###") if block.strip()]
    for index, block in enumerate(blocks):
        role = _field(block, "ROLE")
        organization = _field(block, "ORG")
        if not role or not organization:
            continue
        items.append(
            RecruitmentItem(
                id=f"job-{index}",
                title=role,
                organization=organization,
                deadline=_field(block, "DEADLINE") or "See details",
                eligibility=_field(block, "ELIGIBILITY") or "N/A",
                link=_field(block, "LINK") or "#",
            )
        )
    return items


async def fetch_current_affairs() -> CurrentAffairsResponse:
    """Latest exam-relevant current affairs via Google Search grounding"""
    today = date.today().strftime("%a %b %d %Y")
    prompt = f"""Find the top 6 most important current affairs news headlines and summaries relevant for competitive exams (UPSC, OPSC, OSSSC, Banking) for the last 3 days (up to {today}).

CRITICAL SOURCES: Prioritize specific updates from 'Odisha TV', 'Sambad English', 'Prameya News', 'The Samaja', and official 'Odisha Government Press Releases'.

CRITICAL CONTENT: Ensure at least 2 of the items are specifically related to Odisha state (new government schemes, cabinet decisions, OPSC/OSSSC notifications, state awards, appointments).

Format the output strictly as a list of items separated by "|||".
Each item must follow this format:
TITLE: <title>
DATE: <date>
CATEGORY: <category>
SUMMARY: <summary>

Do not add any markdown formatting like bold or code blocks around the list. Just raw text."""

    try:
        text, sources = await _generate_grounded(prompt)
    except BaseAppError:
        raise
    except Exception as e:
        logger.error(f"Current affairs fetch failed: error_type={type(e).__name__}, error_message={str(e)[:200]}")
        raise SourceUnavailableError("Failed to fetch current affairs. Please try again.") from e

    items = parse_news_items(text)
    logger.info(f"Current affairs fetched: items={len(items)}, sources={len(sources)}")
    return CurrentAffairsResponse(items=items, sources=sources)


async def fetch_recruitments() -> RecruitmentsResponse:
    """Recruitment notifications of the last two weeks via Google Search grounding"""
    today = date.today().strftime("%a %b %d %Y")
    prompt = f"""Search for the latest active government and private job recruitment notifications released in the last 14 days (up to {today}).

OFFICIAL SOURCES MANDATORY - Check these domains specifically:
1. ossc.gov.in (Odisha Staff Selection Commission) - LOOK HERE FIRST
2. upsc.gov.in (Union Public Service Commission)
3. ibps.in (Institute of Banking Personnel Selection)
4. opsc.gov.in & osssc.gov.in (Odisha Public/Sub-ordinate Commissions)

PRIORITY: List any active notification from OSSC, UPSC, or IBPS found in the last 2 weeks.

Format each job strictly as follows, separated by "###":
ROLE: <Job Role/Title>
ORG: <Organization Name>
DEADLINE: <Application Deadline>
ELIGIBILITY: <Short Eligibility Criteria>
LINK: <Official Link or "Search online">"""

    try:
        text, sources = await _generate_grounded(prompt)
    except BaseAppError:
        raise
    except Exception as e:
        logger.error(f"Recruitment fetch failed: error_type={type(e).__name__}, error_message={str(e)[:200]}")
        raise SourceUnavailableError("Failed to fetch recruitments. Please try again.") from e

    items = parse_recruitment_items(text)
    logger.info(f"Recruitments fetched: items={len(items)}, sources={len(sources)}")
    return RecruitmentsResponse(items=items, sources=sources)


async def fetch_notifications() -> list[NotificationItem]:
    """Three alerts for an aspirant; an empty list when Gemini is unavailable"""
    prompt = """Identify 3 critical alerts for an Odisha government exam aspirant right now.
Include 1 upcoming deadline (check OSSC/UPSC dates if known), 1 important news event, and 1 general tip.
Strict JSON output."""

    try:
        payload = await _generate_json(prompt, list[NotificationItem])
        return _notification_records.validate_json(payload) if payload else []
    except Exception as e:
        # notifications degrade to an empty list
        logger.warning(f"Notification fetch failed: error_type={type(e).__name__}, error_message={str(e)[:200]}")
        return []


def _to_content(message: ChatMessage) -> types.Content:
    return types.Content(role=message.role, parts=[types.Part(text=message.text)])


async def ask_tutor(request: ChatRequest) -> ChatResponse:
    """Send one message to the study tutor, replaying the earlier conversation"""
    history = [_to_content(message) for message in request.history]

    def send(client: genai.Client):
        chat = client.chats.create(
            model=settings.gemini_model,
            config=types.GenerateContentConfig(system_instruction=TUTOR_INSTRUCTION),
            history=history,
        )
        return chat.send_message(request.message)

    try:
        response = await _call_gemini(send)
    except BaseAppError:
        raise
    except Exception as e:
        logger.error(f"Tutor reply failed: error_type={type(e).__name__}, error_message={str(e)[:200]}")
        raise SourceUnavailableError("The study tutor is unavailable. Please try again.") from e

    if not response.text:
        raise SourceUnavailableError("The study tutor returned an empty reply")
    return ChatResponse(reply=response.text)
