"""
Data models for calendar events.

Using TypedDict for type hints on event dictionaries. Both calendar sources
map their API objects into these shapes.
"""

from typing import TypedDict


class Attendee(TypedDict):
    """Event attendee. display_name may be empty."""
    email: str
    display_name: str
    organizer: bool


class Attachment(TypedDict):
    """File attached to an event."""
    title: str
    url: str


class Event(TypedDict):
    """Parsed calendar event."""
    id: str
    title: str
    start: str  # RFC 3339 with offset, "" when the source has no timed start
    end: str
    description: str | None
    location: str | None
    meeting_link: str | None
    attendees: list[Attendee]
    attachments: list[Attachment]
    attendees_omitted: bool
