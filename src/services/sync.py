"""
One sync run: schema check, event fetch, row writes.
"""

from dataclasses import dataclass
from datetime import date

from core.errors import EventWriteError
from core.notion_client import NotionClient
from models.rows import PutResult
from services.blocks import build_blocks
from services.calendar import CalendarSource, list_events
from services.schema import ensure_schema
from services.writer import build_row, put_events


@dataclass
class SyncApp:
    """Wires the Notion client, a calendar source and the logger for a run."""

    notion: NotionClient
    database_id: str
    source: CalendarSource
    calendar_ids: list[str]
    time_zone: str
    logger: object

    async def run(self, day: date | None = None) -> list[PutResult]:
        """
        Ensure schema, fetch the day's events, write them all.

        Schema and fetch failures propagate and end the run. Per-event write
        failures only show up in the returned results and the log.
        """
        self.logger.info("running", database_id=self.database_id, time_zone=self.time_zone)
        title_column = await ensure_schema(self.notion, self.database_id, self.logger)
        events = await list_events(
            self.source, self.calendar_ids, self.time_zone, self.logger, day
        )
        results = await put_events(
            self.notion, self.database_id, title_column, events, self.logger
        )
        self.logger.info("stopped")
        return results

    async def dry_run(self, day: date | None = None) -> list[PutResult]:
        """Fetch and build rows without touching the database."""
        self.logger.info("dry_run", database_id=self.database_id, time_zone=self.time_zone)
        events = await list_events(
            self.source, self.calendar_ids, self.time_zone, self.logger, day
        )
        results = []
        for event in events:
            try:
                row = build_row("", event)
            except EventWriteError as exc:
                self.logger.warning("put_event_failed", event_id=event["id"], error=str(exc))
                results.append(
                    PutResult(event_id=event["id"], title=event["title"], ok=False, error=str(exc))
                )
                continue
            self.logger.info(
                "would_put_event",
                event_id=row.event_id,
                title=row.title,
                start=row.start.isoformat(),
                end=row.end.isoformat(),
                blocks=len(build_blocks(event)),
            )
            results.append(PutResult(event_id=event["id"], title=event["title"], ok=True))
        return results
