#!/usr/bin/env python3
"""
Mirror today's calendar events into a Notion database.

Ensures the database has the expected columns, fetches the day's events from
every configured calendar, then creates one page per event.

Usage:
    uv run python src/scripts/sync_today.py
    uv run python src/scripts/sync_today.py --date 2025-11-07 --dry-run
"""

import argparse
import asyncio
import sys
from datetime import date, datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core import config
from core.errors import ConfigurationError, SyncError
from core.logging_config import get_logger, setup_logging, shutdown_logging
from core.notion_client import NotionClient, database_id_from_link
from core.secrets import SecretStore


def parse_date(value: str | None) -> date | None:
    """Parse --date (YYYY-MM-DD). None means today."""
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD") from exc


async def build_source(provider: str, secrets: SecretStore, logger):
    """Create the calendar source for the configured provider."""
    from services.calendar import GoogleCalendarSource, GraphCalendarSource

    if provider == "google":
        from core.google_client import build_calendar_service

        service = await asyncio.to_thread(
            build_calendar_service,
            secrets,
            config.GOOGLE_CALENDAR_OAUTH2_SECRET,
            config.GOOGLE_CALENDAR_TOKEN_SECRET,
            logger,
        )
        return GoogleCalendarSource(service)
    if provider == "graph":
        logger.info("init_graph_client")
        return GraphCalendarSource(config.GRAPH_USER_ID)
    raise ConfigurationError(f"Unknown calendar provider '{provider}'")


async def main(day: date | None = None, dry_run: bool = False) -> bool:
    """Main entry point. Returns True when the run completed."""
    logger = get_logger("sync")
    logger.info(
        "initializing",
        provider=config.CALENDAR_PROVIDER,
        calendars=config.CALENDAR_IDS,
        time_zone=config.CALENDAR_TIME_ZONE,
        dry_run=dry_run,
    )

    missing = config.validate_settings(config.CALENDAR_PROVIDER)
    if missing:
        logger.error("missing_settings", settings=missing)
        return False

    from services.sync import SyncApp

    secrets = None
    notion = None
    try:
        database_id = database_id_from_link(config.NOTION_DB_LINK)
        secrets = SecretStore(logger)
        logger.info("init_notion_client")
        token = await asyncio.to_thread(secrets.access_text, config.NOTION_API_SECRET)
        notion = NotionClient(token)
        source = await build_source(config.CALENDAR_PROVIDER, secrets, logger)

        app = SyncApp(
            notion=notion,
            database_id=database_id,
            source=source,
            calendar_ids=config.CALENDAR_IDS,
            time_zone=config.CALENDAR_TIME_ZONE,
            logger=logger,
        )
        if dry_run:
            await app.dry_run(day)
        else:
            await app.run(day)
    except SyncError:
        logger.exception("failed_to_run")
        return False
    finally:
        if notion is not None:
            await notion.aclose()
        if config.CALENDAR_PROVIDER == "graph":
            from core.graph_client import close_graph_client

            close_graph_client()
        if secrets is not None:
            secrets.close()

    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Sync a day of calendar events into Notion")
    parser.add_argument(
        "--date",
        type=parse_date,
        help="Day to sync (YYYY-MM-DD) in the configured time zone. Defaults to today.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch events and build rows without changing the database.",
    )
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Minimum log level")
    args = parser.parse_args()

    setup_logging(level=args.log_level)
    try:
        asyncio.run(main(args.date, args.dry_run))
    finally:
        get_logger("sync").info("closing_logger_goodbye")
        shutdown_logging()
