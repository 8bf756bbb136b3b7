"""Current affairs, recruitment and notification API tests"""
from unittest.mock import AsyncMock, patch

from fastapi import status

from app.exceptions import GeminiServiceUnavailableError, SourceUnavailableError
from app.schemas.feeds import (
    CurrentAffairsResponse,
    GroundingSource,
    NewsItem,
    NotificationItem,
    RecruitmentItem,
    RecruitmentsResponse,
)
from app.services import ai_service


def test_get_current_affairs(client):
    """The feed is returned with its sources"""
    feed = CurrentAffairsResponse(
        items=[NewsItem(id="news-0", title="Odisha cabinet decisions", summary="Five proposals approved", category="Odisha")],
        sources=[GroundingSource(uri="https://odishatv.in/a", title="Odisha TV")],
    )

    with patch.object(ai_service, "fetch_current_affairs", AsyncMock(return_value=feed)):
        response = client.get("/api/v1/current-affairs")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["items"][0]["title"] == "Odisha cabinet decisions"
    assert data["items"][0]["date"] == "Recent"
    assert data["sources"] == [{"uri": "https://odishatv.in/a", "title": "Odisha TV"}]


def test_get_current_affairs_unavailable(client):
    """Feed failures are 503"""
    with patch.object(ai_service, "fetch_current_affairs", AsyncMock(side_effect=SourceUnavailableError())):
        response = client.get("/api/v1/current-affairs")

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


def test_get_recruitments(client):
    """Recruitment notifications are returned"""
    feed = RecruitmentsResponse(
        items=[RecruitmentItem(id="job-0", title="Combined Graduate Level Posts", organization="OSSC")],
    )

    with patch.object(ai_service, "fetch_recruitments", AsyncMock(return_value=feed)):
        response = client.get("/api/v1/recruitments")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["items"][0]["organization"] == "OSSC"
    assert data["items"][0]["link"] == "#"
    assert data["sources"] == []


def test_get_recruitments_overloaded(client):
    """Gemini overload is 503"""
    with patch.object(ai_service, "fetch_recruitments", AsyncMock(side_effect=GeminiServiceUnavailableError())):
        response = client.get("/api/v1/recruitments")

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


def test_get_notifications(client):
    """Alerts are returned as a list"""
    items = [NotificationItem(id="n1", type="JOB", message="OSSC CGL form closes Friday", timestamp="2h ago")]

    with patch.object(ai_service, "fetch_notifications", AsyncMock(return_value=items)):
        response = client.get("/api/v1/notifications")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data) == 1
    assert data[0]["type"] == "JOB"
    assert data[0]["link"] is None


def test_get_notifications_empty(client):
    """No alerts is still a success"""
    with patch.object(ai_service, "fetch_notifications", AsyncMock(return_value=[])):
        response = client.get("/api/v1/notifications")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []
