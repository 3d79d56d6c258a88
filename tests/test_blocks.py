"""Tests for page body construction."""

from services.blocks import ATTENDEES_OMITTED_TEXT, build_blocks, format_attendee

from conftest import make_event


def block_text(block):
    """Concatenated plain text of a block (caption for file blocks)."""
    content = block[block["type"]]
    runs = content["caption"] if block["type"] == "file" else content["rich_text"]
    return "".join(run["text"]["content"] for run in runs)


def kinds_and_text(blocks):
    return [(b["type"], block_text(b)) for b in blocks]


def test_no_optional_fields_gives_no_blocks():
    assert build_blocks(make_event()) == []


def test_description_only():
    blocks = build_blocks(make_event(description="D"))

    assert kinds_and_text(blocks) == [("heading_2", "Description"), ("paragraph", "D")]


def test_description_is_not_interpreted():
    text = "**not bold**\n- not a list"
    blocks = build_blocks(make_event(description=text))

    assert block_text(blocks[1]) == text


def test_attendees_formatting():
    event = make_event(
        attendees=[
            {"email": "a@x.com", "display_name": "A", "organizer": True},
            {"email": "b@x.com", "display_name": "", "organizer": False},
        ]
    )

    assert kinds_and_text(build_blocks(event)) == [
        ("heading_2", "Attendees"),
        ("bulleted_list_item", "Organizer: A (a@x.com)"),
        ("bulleted_list_item", "b@x.com"),
    ]


def test_attendees_omitted_note_comes_before_attendees():
    event = make_event(
        attendees=[{"email": "b@x.com", "display_name": "", "organizer": False}],
        attendees_omitted=True,
    )

    assert kinds_and_text(build_blocks(event)) == [
        ("heading_2", "Attendees"),
        ("paragraph", ATTENDEES_OMITTED_TEXT),
        ("bulleted_list_item", "b@x.com"),
    ]


def test_organizer_without_display_name():
    attendee = {"email": "o@x.com", "display_name": "", "organizer": True}

    assert format_attendee(attendee) == "Organizer: o@x.com"


def test_meeting_link_is_a_linked_heading_only():
    url = "https://meet.google.com/abc-defg-hij"
    blocks = build_blocks(make_event(meeting_link=url))

    assert len(blocks) == 1
    assert blocks[0]["type"] == "heading_2"
    assert blocks[0]["heading_2"]["rich_text"][0]["text"]["link"] == {"url": url}


def test_headings_without_meeting_link_carry_no_link():
    blocks = build_blocks(make_event(description="D", location="L"))

    for block in blocks:
        if block["type"] == "heading_2":
            assert "link" not in block["heading_2"]["rich_text"][0]["text"]


def test_location():
    blocks = build_blocks(make_event(location="Room 4"))

    assert kinds_and_text(blocks) == [("heading_2", "Location"), ("paragraph", "Room 4")]


def test_attachments_are_external_files():
    event = make_event(
        attachments=[
            {"title": "Agenda", "url": "https://example.com/agenda.pdf"},
            {"title": "Notes", "url": "https://example.com/notes.pdf"},
        ]
    )
    blocks = build_blocks(event)

    assert kinds_and_text(blocks) == [
        ("heading_2", "Attachments"),
        ("file", "Agenda"),
        ("file", "Notes"),
    ]
    assert blocks[1]["file"]["type"] == "external"
    assert blocks[1]["file"]["external"] == {"url": "https://example.com/agenda.pdf"}


def test_section_order_with_all_fields(sample_event):
    headings = [block_text(b) for b in build_blocks(sample_event) if b["type"] == "heading_2"]

    assert headings == ["Description", "Attendees", "Join Meeting", "Location", "Attachments"]


def test_section_order_with_subset():
    event = make_event(
        location="Room 4",
        description="D",
        attachments=[{"title": "Agenda", "url": "https://example.com/a"}],
    )
    headings = [block_text(b) for b in build_blocks(event) if b["type"] == "heading_2"]

    assert headings == ["Description", "Location", "Attachments"]


def test_empty_strings_count_as_absent():
    event = make_event(description="", location="", meeting_link="")

    assert build_blocks(event) == []
