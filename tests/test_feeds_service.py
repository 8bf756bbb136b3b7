"""Current affairs, recruitment, notification and tutor service tests"""
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.exceptions import GeminiServiceUnavailableError, SourceUnavailableError
from app.schemas.chat import ChatMessage, ChatRequest
from app.schemas.feeds import GroundingSource
from app.services import ai_service

NEWS_TEXT = """TITLE: Odisha cabinet approves Subhadra scheme extension
DATE: 12 Oct 2026
CATEGORY: Odisha
SUMMARY: The state cabinet extended the scheme.
Beneficiaries get a second instalment.
|||
TITLE: RBI keeps repo rate unchanged
DATE: 10 Oct 2026
CATEGORY: Economy
SUMMARY: The rate stays at 5.5%.
|||
no recognizable fields here
|||
TITLE: OSSC announces CGL schedule
"""

JOBS_TEXT = """ROLE: Combined Graduate Level Posts
ORG: Odisha Staff Selection Commission
DEADLINE: 30 Oct 2026
ELIGIBILITY: Graduate, 21-38 years
LINK: https://ossc.gov.in
###
ROLE: Probationary Officer
ORG: IBPS
###
ROLE: Orphan role without organization
"""


def grounded_response(text: str, uris: list[str | None]):
    chunks = [SimpleNamespace(web=SimpleNamespace(uri=uri, title=f"Title {i}") if uri else None) for i, uri in enumerate(uris)]
    metadata = SimpleNamespace(grounding_chunks=chunks)
    return SimpleNamespace(text=text, candidates=[SimpleNamespace(grounding_metadata=metadata)])


def test_parse_news_items():
    """Blocks become news items; blocks without a title are dropped"""
    items = ai_service.parse_news_items(NEWS_TEXT)

    assert [item.title for item in items] == [
        "Odisha cabinet approves Subhadra scheme extension",
        "RBI keeps repo rate unchanged",
        "OSSC announces CGL schedule",
    ]
    assert items[0].id == "news-0"
    assert items[0].category == "Odisha"
    assert items[0].summary == "The state cabinet extended the scheme.\nBeneficiaries get a second instalment."
    assert items[1].date == "10 Oct 2026"
    # missing fields fall back to defaults
    assert items[2].id == "news-3"
    assert items[2].date == "Recent"
    assert items[2].category == "General"


def test_parse_news_items_empty():
    """No text, no items"""
    assert ai_service.parse_news_items("") == []


def test_parse_recruitment_items():
    """Role and organization are required; other fields have defaults"""
    items = ai_service.parse_recruitment_items(JOBS_TEXT)

    assert len(items) == 2
    assert items[0].organization == "Odisha Staff Selection Commission"
    assert items[0].link == "https://ossc.gov.in"
    assert items[0].eligibility == "Graduate, 21-38 years"
    assert items[1].id == "job-1"
    assert items[1].deadline == "See details"
    assert items[1].eligibility == "N/A"
    assert items[1].link == "#"


def test_extract_sources():
    """Web chunks become sources without duplicates"""
    response = grounded_response("", ["https://odishatv.in/a", None, "https://odishatv.in/a", "https://sambad.in/b"])

    sources = ai_service.extract_sources(response)

    assert [s.uri for s in sources] == ["https://odishatv.in/a", "https://sambad.in/b"]
    assert sources[0].title == "Title 0"


def test_extract_sources_without_metadata():
    """Responses without grounding metadata have no sources"""
    assert ai_service.extract_sources(SimpleNamespace(candidates=None)) == []
    assert ai_service.extract_sources(SimpleNamespace(candidates=[SimpleNamespace(grounding_metadata=None)])) == []


@pytest.mark.asyncio
async def test_generate_grounded_uses_google_search():
    """Grounded calls enable the Google Search tool"""
    mock_client = MagicMock()
    mock_client.models.generate_content.return_value = grounded_response(NEWS_TEXT, ["https://odishatv.in/a"])

    with patch.object(ai_service, "get_gemini_client", return_value=mock_client):
        text, sources = await ai_service._generate_grounded("prompt")

    assert text == NEWS_TEXT
    assert sources == [GroundingSource(uri="https://odishatv.in/a", title="Title 0")]
    config = mock_client.models.generate_content.call_args.kwargs["config"]
    assert config.tools[0].google_search is not None
    assert config.response_schema is None


@pytest.mark.asyncio
async def test_fetch_current_affairs():
    """The feed carries parsed items and their sources"""
    sources = [GroundingSource(uri="https://odishatv.in/a", title="Odisha TV")]

    with patch.object(ai_service, "_generate_grounded", AsyncMock(return_value=(NEWS_TEXT, sources))) as mock_call:
        feed = await ai_service.fetch_current_affairs()

    assert len(feed.items) == 3
    assert feed.sources == sources
    assert "Odisha TV" in mock_call.await_args.args[0]


@pytest.mark.asyncio
async def test_fetch_current_affairs_failure():
    """Unexpected failures become SourceUnavailableError"""
    with patch.object(ai_service, "_generate_grounded", AsyncMock(side_effect=ValueError("GEMINI_API_KEY is not configured"))):
        with pytest.raises(SourceUnavailableError):
            await ai_service.fetch_current_affairs()


@pytest.mark.asyncio
async def test_fetch_recruitments():
    """The recruitment feed carries parsed jobs"""
    with patch.object(ai_service, "_generate_grounded", AsyncMock(return_value=(JOBS_TEXT, []))) as mock_call:
        feed = await ai_service.fetch_recruitments()

    assert [item.title for item in feed.items] == ["Combined Graduate Level Posts", "Probationary Officer"]
    assert feed.sources == []
    assert "ossc.gov.in" in mock_call.await_args.args[0]


@pytest.mark.asyncio
async def test_fetch_recruitments_keeps_overload_error():
    """Gemini overload keeps its own error"""
    with patch.object(ai_service, "_generate_grounded", AsyncMock(side_effect=GeminiServiceUnavailableError())):
        with pytest.raises(GeminiServiceUnavailableError):
            await ai_service.fetch_recruitments()


@pytest.mark.asyncio
async def test_fetch_notifications():
    """Notifications are decoded from the structured output"""
    payload = json.dumps([
        {"id": "n1", "type": "JOB", "message": "OSSC CGL form closes Friday", "timestamp": "2h ago"},
        {"id": "n2", "type": "ALERT", "message": "Revise Odisha history", "timestamp": "now", "link": "/study-plan"},
    ])

    with patch.object(ai_service, "_generate_json", AsyncMock(return_value=payload)):
        items = await ai_service.fetch_notifications()

    assert [item.type for item in items] == ["JOB", "ALERT"]
    assert items[1].link == "/study-plan"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "mock_call",
    [
        AsyncMock(side_effect=GeminiServiceUnavailableError()),
        AsyncMock(return_value='[{"id": "n1", "type": "UNKNOWN", "message": "x", "timestamp": "now"}]'),
        AsyncMock(return_value=""),
    ],
)
async def test_fetch_notifications_degrades_to_empty(mock_call):
    """Failures and invalid payloads give no notifications"""
    with patch.object(ai_service, "_generate_json", mock_call):
        assert await ai_service.fetch_notifications() == []


@pytest.mark.asyncio
async def test_ask_tutor_replays_history():
    """The chat is created with the tutor instruction and earlier turns"""
    mock_chat = MagicMock()
    mock_chat.send_message.return_value = SimpleNamespace(text="Chilika is the largest brackish water lagoon in India.")
    mock_client = MagicMock()
    mock_client.chats.create.return_value = mock_chat
    request = ChatRequest(
        message="Which is the largest lagoon?",
        history=[
            ChatMessage(role="user", text="Tell me about Odisha geography"),
            ChatMessage(role="model", text="Odisha has a long coastline."),
        ],
    )

    with patch.object(ai_service, "get_gemini_client", return_value=mock_client):
        response = await ai_service.ask_tutor(request)

    assert response.reply.startswith("Chilika")
    mock_chat.send_message.assert_called_once_with("Which is the largest lagoon?")
    kwargs = mock_client.chats.create.call_args.kwargs
    assert kwargs["config"].system_instruction == ai_service.TUTOR_INSTRUCTION
    assert [content.role for content in kwargs["history"]] == ["user", "model"]
    assert kwargs["history"][1].parts[0].text == "Odisha has a long coastline."


@pytest.mark.asyncio
async def test_ask_tutor_empty_reply():
    """An empty reply is a source failure"""
    mock_client = MagicMock()
    mock_client.chats.create.return_value.send_message.return_value = SimpleNamespace(text=None)

    with patch.object(ai_service, "get_gemini_client", return_value=mock_client):
        with pytest.raises(SourceUnavailableError):
            await ai_service.ask_tutor(ChatRequest(message="Hello"))


@pytest.mark.asyncio
async def test_ask_tutor_without_api_key():
    """A missing API key surfaces as SourceUnavailableError"""
    with patch.object(ai_service, "get_gemini_client", side_effect=ValueError("GEMINI_API_KEY is not configured")):
        with pytest.raises(SourceUnavailableError):
            await ai_service.ask_tutor(ChatRequest(message="Hello"))
