"""
Pytest configuration and shared fixtures.
"""

import json
import sys
from pathlib import Path

import httpx
import pytest
import structlog

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.notion_client import NotionClient  # noqa: E402

DATABASE_ID = "0123456789abcdef0123456789abcdef"


class FakeNotionAPI:
    """
    In-memory Notion database behind an httpx.MockTransport.

    Records every request; `fail_pages_for` holds event ids whose page
    creation is answered with a 400.
    """

    def __init__(self, properties: dict | None = None):
        self.properties = properties if properties is not None else {}
        self.requests: list[httpx.Request] = []
        self.schema_updates: list[dict] = []
        self.pages: list[dict] = []
        self.fail_pages_for: set[str] = set()
        self.fail_get_database = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == f"/v1/databases/{DATABASE_ID}" and request.method == "GET":
            if self.fail_get_database:
                return httpx.Response(
                    404, json={"object": "error", "code": "object_not_found", "message": "gone"}
                )
            return httpx.Response(200, json={"object": "database", "properties": self.properties})

        if path == f"/v1/databases/{DATABASE_ID}" and request.method == "PATCH":
            patch = json.loads(request.content)["properties"]
            self.schema_updates.append(patch)
            return httpx.Response(200, json={"object": "database", "properties": patch})

        if path == "/v1/pages" and request.method == "POST":
            body = json.loads(request.content)
            event_id = body["properties"]["Id"]["rich_text"][0]["text"]["content"]
            if event_id in self.fail_pages_for:
                return httpx.Response(
                    400, json={"object": "error", "code": "validation_error", "message": "bad"}
                )
            self.pages.append(body)
            return httpx.Response(200, json={"object": "page", "id": f"page-{len(self.pages)}"})

        return httpx.Response(404, json={"code": "not_found", "message": path})

    def client(self) -> NotionClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return NotionClient("secret-token", http_client=http_client)


class FakeCalendarSource:
    """Calendar source returning canned events per calendar id."""

    def __init__(self, events_by_calendar: dict[str, list], failing: set[str] | None = None):
        self.events_by_calendar = events_by_calendar
        self.failing = failing or set()
        self.calls: list[tuple] = []

    async def list(self, calendar_id, time_min, time_max):
        self.calls.append((calendar_id, time_min, time_max))
        if calendar_id in self.failing:
            raise RuntimeError(f"calendar {calendar_id} unavailable")
        return list(self.events_by_calendar.get(calendar_id, []))


def make_event(**overrides) -> dict:
    event = {
        "id": "evt-1",
        "title": "Design review",
        "start": "2025-11-07T09:00:00+01:00",
        "end": "2025-11-07T10:00:00+01:00",
        "description": None,
        "location": None,
        "meeting_link": None,
        "attendees": [],
        "attachments": [],
        "attendees_omitted": False,
    }
    event.update(overrides)
    return event


@pytest.fixture
def logger():
    return structlog.get_logger("test")


@pytest.fixture
def sample_event():
    """Event with every optional field populated."""
    return make_event(
        description="Walk through the new layout.",
        location="Room 4",
        meeting_link="https://meet.google.com/abc-defg-hij",
        attendees=[
            {"email": "a@x.com", "display_name": "A", "organizer": True},
            {"email": "b@x.com", "display_name": "", "organizer": False},
        ],
        attachments=[{"title": "Agenda", "url": "https://drive.google.com/file/d/1"}],
    )


@pytest.fixture
def sample_events():
    """List of sample events for testing."""
    return [
        make_event(id="evt-1", title="Standup"),
        make_event(id="evt-2", title="Lunch", start="2025-11-07T12:00:00Z", end="2025-11-07T13:00:00Z"),
        make_event(id="evt-3", title="Retro", description="Sprint 12"),
    ]


@pytest.fixture
def complete_schema():
    """Database properties that already contain every required column."""
    return {
        "Title": {"id": "title", "type": "title", "title": {}},
        "Id": {"id": "a", "type": "rich_text", "rich_text": {}},
        "Start": {"id": "b", "type": "date", "date": {}},
        "End": {"id": "c", "type": "date", "date": {}},
    }


@pytest.fixture
def fake_notion():
    return FakeNotionAPI()
