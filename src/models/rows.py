"""Row records written to the Notion database."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

ID_COLUMN = "Id"
START_COLUMN = "Start"
END_COLUMN = "End"


@dataclass(frozen=True)
class RowProperties:
    """
    Typed values for the four columns written per event.

    title_column is whatever column the schema check reported as the title
    column. It is used verbatim, even when empty.
    """

    title_column: str
    title: str
    event_id: str
    start: datetime
    end: datetime

    def __post_init__(self):
        for name in ("start", "end"):
            value = getattr(self, name)
            if value.tzinfo is None:
                raise ValueError(f"{name} must be timezone-aware, got {value.isoformat()}")

    def to_notion(self) -> dict[str, Any]:
        """Serialize into the Notion page `properties` payload."""
        return {
            self.title_column: {
                "title": [{"type": "text", "text": {"content": self.title}}],
            },
            ID_COLUMN: {
                "rich_text": [{"type": "text", "text": {"content": self.event_id}}],
            },
            START_COLUMN: {"date": {"start": self.start.isoformat()}},
            END_COLUMN: {"date": {"start": self.end.isoformat()}},
        }


@dataclass
class PutResult:
    """Outcome of writing one event."""

    event_id: str
    title: str
    ok: bool
    error: str | None = None
