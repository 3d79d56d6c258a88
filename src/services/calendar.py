"""
Event fetching for the current day from Google Calendar or MS Graph.
"""

import asyncio
import re
from datetime import date, datetime, time
from typing import Any, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.errors import CalendarFetchError, ConfigurationError
from models.events import Attachment, Attendee, Event

GOOGLE_PAGE_SIZE = 250
GRAPH_PAGE_SIZE = 100


def day_window(time_zone: str, day: date | None = None) -> tuple[datetime, datetime]:
    """
    Start and end of a day (today by default) in the given time zone.

    The end is the last representable instant of the day (23:59:59.999999).
    """
    try:
        zone = ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown time zone '{time_zone}'") from exc

    day = day or datetime.now(zone).date()
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day, time.max, tzinfo=zone)
    return start, end


class CalendarSource(Protocol):
    """Anything that can list one calendar's events inside a time window."""

    async def list(self, calendar_id: str, time_min: datetime, time_max: datetime) -> list[Event]:
        ...


# =============================================================================
# GOOGLE CALENDAR
# =============================================================================


def parse_google_event(item: dict[str, Any]) -> Event:
    """Parse a Google Calendar API event resource into our format."""
    attendees: list[Attendee] = [
        {
            "email": a.get("email", ""),
            "display_name": a.get("displayName", ""),
            "organizer": bool(a.get("organizer", False)),
        }
        for a in item.get("attendees", [])
    ]
    attachments: list[Attachment] = [
        {"title": a.get("title", ""), "url": a.get("fileUrl", "")}
        for a in item.get("attachments", [])
    ]

    # All-day events only carry start.date; they have no instant to store
    start = (item.get("start") or {}).get("dateTime", "")
    end = (item.get("end") or {}).get("dateTime", "")

    return {
        "id": item.get("id", ""),
        "title": item.get("summary", ""),
        "start": start,
        "end": end,
        "description": item.get("description") or None,
        "location": item.get("location") or None,
        "meeting_link": item.get("hangoutLink") or None,
        "attendees": attendees,
        "attachments": attachments,
        "attendees_omitted": bool(item.get("attendeesOmitted", False)),
    }


class GoogleCalendarSource:
    """Reads events through a googleapiclient calendar v3 service."""

    def __init__(self, service):
        self._service = service

    def _list_sync(self, calendar_id: str, time_min: str, time_max: str) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        page_token = None
        while True:
            response = (
                self._service.events()
                .list(
                    calendarId=calendar_id,
                    timeMin=time_min,
                    timeMax=time_max,
                    singleEvents=True,
                    orderBy="startTime",
                    maxResults=GOOGLE_PAGE_SIZE,
                    pageToken=page_token,
                )
                .execute()
            )
            items.extend(response.get("items", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                return items

    async def list(self, calendar_id: str, time_min: datetime, time_max: datetime) -> list[Event]:
        items = await asyncio.to_thread(
            self._list_sync, calendar_id, time_min.isoformat(), time_max.isoformat()
        )
        return [parse_google_event(item) for item in items]


# =============================================================================
# MS GRAPH
# =============================================================================


def graph_datetime(value) -> str:
    """
    Convert a Graph DateTimeTimeZone into an RFC 3339 string.

    Graph returns local wall time plus a zone name ("UTC" by default) and up
    to 7 fractional digits. Returns "" when the value can't be interpreted.
    """
    if value is None or not value.date_time:
        return ""
    raw = re.sub(r"(\.\d{6})\d+", r"\1", value.date_time.replace("Z", ""))
    try:
        zone = ZoneInfo(value.time_zone or "UTC")
        return datetime.fromisoformat(raw).replace(tzinfo=zone).isoformat()
    except (ZoneInfoNotFoundError, ValueError):
        return ""


def parse_graph_event(event) -> Event:
    """Parse MS Graph event into our format."""
    organizer_email = ""
    if event.organizer and event.organizer.email_address:
        organizer_email = (event.organizer.email_address.address or "").lower()

    attendees: list[Attendee] = []
    for attendee in event.attendees or []:
        address = attendee.email_address
        if address is None or not address.address:
            continue
        attendees.append(
            {
                "email": address.address,
                "display_name": address.name or "",
                "organizer": address.address.lower() == organizer_email,
            }
        )

    description = None
    if event.body and event.body.content:
        description = event.body.content.strip()
        # Handle both plain text and HTML
        if "<" in description:
            description = re.sub(r"<[^>]+>", "\n", description)
            description = re.sub(r"\n\s*\n+", "\n", description).strip()

    meeting_link = None
    if event.online_meeting and event.online_meeting.join_url:
        meeting_link = event.online_meeting.join_url

    location = None
    if event.location and event.location.display_name:
        location = event.location.display_name

    return {
        "id": event.id or "",
        "title": event.subject or "",
        "start": graph_datetime(event.start),
        "end": graph_datetime(event.end),
        "description": description or None,
        "location": location,
        "meeting_link": meeting_link,
        "attendees": attendees,
        # Graph doesn't expose download URLs for attachments or attendee truncation
        "attachments": [],
        "attendees_omitted": False,
    }


class GraphCalendarSource:
    """Reads one mailbox's calendars through the MS Graph calendar view."""

    def __init__(self, user_id: str, graph=None):
        self._user_id = user_id
        self._graph = graph

    def _client(self):
        if self._graph is None:
            from core.graph_client import get_graph_client

            self._graph = get_graph_client()
        return self._graph

    async def list(self, calendar_id: str, time_min: datetime, time_max: datetime) -> list[Event]:
        from msgraph.generated.users.item.calendar_view.calendar_view_request_builder import (
            CalendarViewRequestBuilder,
        )

        graph = self._client()
        query_params = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetQueryParameters(
            start_date_time=time_min.isoformat(),
            end_date_time=time_max.isoformat(),
            orderby=["start/dateTime"],
            top=GRAPH_PAGE_SIZE,
        )
        config = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetRequestConfiguration(
            query_parameters=query_params
        )

        user = graph.users.by_user_id(self._user_id)
        if calendar_id == "primary":
            view = user.calendar_view
        else:
            view = user.calendars.by_calendar_id(calendar_id).calendar_view

        response = await view.get(request_configuration=config)
        raw_events = list(response.value or []) if response else []
        # Follow pagination
        while response and response.odata_next_link:
            response = await view.with_url(response.odata_next_link).get()
            raw_events.extend(response.value or [])

        return [parse_graph_event(event) for event in raw_events]


# =============================================================================
# FETCHING
# =============================================================================


async def list_events(
    source: CalendarSource,
    calendar_ids: list[str],
    time_zone: str,
    logger,
    day: date | None = None,
) -> list[Event]:
    """
    Fetch a day's events (today by default) from every configured calendar,
    concatenated in configured order.

    Raises:
        CalendarFetchError: any single calendar failed; nothing is returned
    """
    time_min, time_max = day_window(time_zone, day)
    logger.info(
        "listing_events",
        calendars=len(calendar_ids),
        time_min=time_min.isoformat(),
        time_max=time_max.isoformat(),
    )

    events: list[Event] = []
    for calendar_id in calendar_ids:
        try:
            found = await source.list(calendar_id, time_min, time_max)
        except Exception as exc:
            raise CalendarFetchError(f"list events from calendar {calendar_id}: {exc}") from exc
        logger.info("calendar_listed", calendar_id=calendar_id, events=len(found))
        events.extend(found)

    return events

