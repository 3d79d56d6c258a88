"""
Concurrent row inserts for fetched events.

Every event gets its own task; all tasks run at once and are awaited
together. A failing event is captured as a PutResult and logged as a
warning, the rest of the batch carries on.
"""

import asyncio
from datetime import datetime

from core.errors import EventWriteError, NotionAPIError
from core.notion_client import NotionClient
from models.events import Event
from models.rows import PutResult, RowProperties
from services.blocks import build_blocks


def parse_timestamp(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp. The offset is mandatory.

    Raises:
        ValueError: empty, malformed or missing an offset
    """
    if not value:
        raise ValueError("timestamp is empty")
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp has no offset: '{value}'")
    return parsed


def build_row(title_column: str, event: Event) -> RowProperties:
    """
    Raises:
        EventWriteError: start or end can't be parsed
    """
    try:
        start = parse_timestamp(event["start"])
    except ValueError as exc:
        raise EventWriteError(event["id"], f"convert start time to RFC3339: {exc}") from exc
    try:
        end = parse_timestamp(event["end"])
    except ValueError as exc:
        raise EventWriteError(event["id"], f"convert end time to RFC3339: {exc}") from exc

    return RowProperties(
        title_column=title_column,
        title=event["title"],
        event_id=event["id"],
        start=start,
        end=end,
    )


async def put_event(
    client: NotionClient, database_id: str, title_column: str, event: Event, logger
) -> None:
    """
    Insert one event as a database row with its content blocks.

    Raises:
        EventWriteError: timestamps invalid or the insert was rejected
    """
    logger.info("put_event", event_id=event["id"], title=event["title"])
    row = build_row(title_column, event)
    try:
        await client.create_page(database_id, row.to_notion(), build_blocks(event))
    except NotionAPIError as exc:
        raise EventWriteError(event["id"], f"create page: {exc}") from exc


async def _put_event_result(
    client: NotionClient, database_id: str, title_column: str, event: Event, logger
) -> PutResult:
    try:
        await put_event(client, database_id, title_column, event, logger)
    except EventWriteError as exc:
        return PutResult(event_id=event["id"], title=event["title"], ok=False, error=str(exc))
    except Exception as exc:
        # Anything else still only fails this event
        error = str(EventWriteError(event["id"], f"{type(exc).__name__}: {exc}"))
        return PutResult(event_id=event["id"], title=event["title"], ok=False, error=error)
    return PutResult(event_id=event["id"], title=event["title"], ok=True)


async def put_events(
    client: NotionClient, database_id: str, title_column: str, events: list[Event], logger
) -> list[PutResult]:
    """
    Write all events concurrently and wait for every one of them.

    Results are in the same order as `events`.
    """
    logger.info("putting_events", events=len(events))
    results = await asyncio.gather(
        *(_put_event_result(client, database_id, title_column, event, logger) for event in events)
    )

    for result in results:
        if not result.ok:
            logger.warning("put_event_failed", event_id=result.event_id, error=result.error)

    failed = sum(1 for r in results if not r.ok)
    logger.info("events_put", written=len(results) - failed, failed=failed)
    return list(results)
