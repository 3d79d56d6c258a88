"""
Page body construction for synced events.

Sections are emitted in a fixed order (description, attendees, meeting link,
location, attachments), each starting with a heading. Sections for empty
fields are left out.
"""

from models.blocks import Block, bulleted_item, external_file, heading, paragraph
from models.events import Attendee, Event

ATTENDEES_OMITTED_TEXT = "Attendees omitted..."
MEETING_HEADING_TEXT = "Join Meeting"


def format_attendee(attendee: Attendee) -> str:
    """'Organizer: Name (email)', 'Name (email)' or the bare email."""
    prefix = "Organizer: " if attendee.get("organizer") else ""
    if attendee.get("display_name"):
        return f"{prefix}{attendee['display_name']} ({attendee['email']})"
    return f"{prefix}{attendee['email']}"


def description_blocks(description: str) -> list[Block]:
    return [heading("Description"), paragraph(description)]


def attendee_blocks(attendees: list[Attendee], omitted: bool) -> list[Block]:
    blocks: list[Block] = [heading("Attendees")]
    if omitted:
        blocks.append(paragraph(ATTENDEES_OMITTED_TEXT))
    blocks.extend(bulleted_item(format_attendee(a)) for a in attendees)
    return blocks


def meeting_blocks(url: str) -> list[Block]:
    return [heading(MEETING_HEADING_TEXT, url=url)]


def location_blocks(location: str) -> list[Block]:
    return [heading("Location"), paragraph(location)]


def attachment_blocks(attachments) -> list[Block]:
    blocks: list[Block] = [heading("Attachments")]
    blocks.extend(external_file(a["url"], a["title"]) for a in attachments)
    return blocks


def build_blocks(event: Event) -> list[Block]:
    """Map an event to its ordered list of content blocks."""
    blocks: list[Block] = []

    if event.get("description"):
        blocks.extend(description_blocks(event["description"]))
    if event.get("attendees"):
        blocks.extend(attendee_blocks(event["attendees"], event.get("attendees_omitted", False)))
    if event.get("meeting_link"):
        blocks.extend(meeting_blocks(event["meeting_link"]))
    if event.get("location"):
        blocks.extend(location_blocks(event["location"]))
    if event.get("attachments"):
        blocks.extend(attachment_blocks(event["attachments"]))

    return blocks
