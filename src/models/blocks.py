"""
Content block shapes, matching the Notion block JSON.

Every block carries a "type" key that names the key holding its content,
so the union below is discriminated by that field.
"""

from typing import Literal, NotRequired, TypedDict


class Link(TypedDict):
    url: str


class Text(TypedDict):
    content: str
    link: NotRequired[Link]


class RichText(TypedDict):
    type: Literal["text"]
    text: Text


class RichTextContent(TypedDict):
    rich_text: list[RichText]


class HeadingBlock(TypedDict):
    object: Literal["block"]
    type: Literal["heading_2"]
    heading_2: RichTextContent


class ParagraphBlock(TypedDict):
    object: Literal["block"]
    type: Literal["paragraph"]
    paragraph: RichTextContent


class BulletedListItemBlock(TypedDict):
    object: Literal["block"]
    type: Literal["bulleted_list_item"]
    bulleted_list_item: RichTextContent


class ExternalFile(TypedDict):
    url: str


class FileContent(TypedDict):
    type: Literal["external"]
    external: ExternalFile
    caption: list[RichText]


class FileBlock(TypedDict):
    object: Literal["block"]
    type: Literal["file"]
    file: FileContent


Block = HeadingBlock | ParagraphBlock | BulletedListItemBlock | FileBlock


def rich_text(content: str, url: str | None = None) -> RichText:
    text: Text = {"content": content}
    if url:
        text["link"] = {"url": url}
    return {"type": "text", "text": text}


def heading(content: str, url: str | None = None) -> HeadingBlock:
    return {
        "object": "block",
        "type": "heading_2",
        "heading_2": {"rich_text": [rich_text(content, url)]},
    }


def paragraph(content: str) -> ParagraphBlock:
    return {
        "object": "block",
        "type": "paragraph",
        "paragraph": {"rich_text": [rich_text(content)]},
    }


def bulleted_item(content: str) -> BulletedListItemBlock:
    return {
        "object": "block",
        "type": "bulleted_list_item",
        "bulleted_list_item": {"rich_text": [rich_text(content)]},
    }


def external_file(url: str, caption: str) -> FileBlock:
    return {
        "object": "block",
        "type": "file",
        "file": {
            "type": "external",
            "external": {"url": url},
            "caption": [rich_text(caption)],
        },
    }

