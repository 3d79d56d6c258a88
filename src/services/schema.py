"""
Destination database schema check.

The database either already has every required column, in which case it is
left alone, or it is reset to the sync's column set: Time/Id/Start/End are
(re)configured and every other non-title column is deleted.
"""

from typing import Any

from core.errors import NotionAPIError, SchemaError
from core.notion_client import NotionClient
from models.rows import END_COLUMN, ID_COLUMN, START_COLUMN

TITLE_COLUMN = "Title"
TIME_COLUMN = "Time"
REQUIRED_COLUMNS = (TITLE_COLUMN, ID_COLUMN, START_COLUMN, END_COLUMN)

TIME_FORMULA = (
    'concat(formatDate(prop("Start"),"HH:mm")," - ",formatDate(prop("End"),"HH:mm"))'
)


def required_column_configs() -> dict[str, dict[str, Any]]:
    """Column configs applied when the database is reset."""
    return {
        TIME_COLUMN: {"formula": {"expression": TIME_FORMULA}},
        ID_COLUMN: {"rich_text": {}},
        START_COLUMN: {"date": {}},
        END_COLUMN: {"date": {}},
    }


def plan_schema_update(
    properties: dict[str, dict[str, Any]],
) -> tuple[str, dict[str, dict[str, Any] | None]]:
    """
    Work out the schema patch for a database's current properties.

    Returns (title_column, patch). An empty patch means nothing changes; the
    title column is then reported as "" because it was never looked up.
    """
    missing = [name for name in REQUIRED_COLUMNS if name not in properties]
    if not missing:
        return "", {}

    patch: dict[str, dict[str, Any] | None] = dict(required_column_configs())
    title_column = ""
    for name, config in properties.items():
        if name in patch:
            continue
        if config.get("type") == "title":
            title_column = name
            continue
        patch[name] = None
    return title_column, patch


async def ensure_schema(client: NotionClient, database_id: str, logger) -> str:
    """
    Make sure the database can take event rows.

    Returns the title column name, or "" when the schema was already complete.

    Raises:
        SchemaError: the database could not be read or updated
    """
    logger.info("ensuring_database", database_id=database_id)
    try:
        database = await client.get_database(database_id)
    except NotionAPIError as exc:
        raise SchemaError(f"fetching database {database_id}: {exc}") from exc

    title_column, patch = plan_schema_update(database.get("properties") or {})
    if not patch:
        logger.info("database_schema_complete", database_id=database_id)
        return ""

    deleted = sorted(name for name, config in patch.items() if config is None)
    logger.info(
        "updating_database_schema",
        database_id=database_id,
        title_column=title_column,
        configured=sorted(name for name, config in patch.items() if config is not None),
        deleted=deleted,
    )
    try:
        await client.update_database(database_id, patch)
    except NotionAPIError as exc:
        raise SchemaError(f"updating database {database_id}: {exc}") from exc
    return title_column
