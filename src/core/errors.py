"""
Exception types raised by the sync run.

Errors derived from SyncError other than EventWriteError abort the run.
EventWriteError is scoped to a single event and never aborts the batch.
"""


class SyncError(Exception):
    """Base class for all sync errors."""


class ConfigurationError(SyncError):
    """Missing or invalid settings."""


class CredentialError(SyncError):
    """Secret retrieval or OAuth token acquisition failed."""


class SchemaError(SyncError):
    """Fetching or updating the destination schema failed."""


class CalendarFetchError(SyncError):
    """Listing events from a calendar source failed."""


class EventWriteError(SyncError):
    """A single event could not be written."""

    def __init__(self, event_id: str, message: str):
        super().__init__(f"event {event_id}: {message}")
        self.event_id = event_id


class NotionAPIError(Exception):
    """Non-success response (or transport failure) from the Notion API."""

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code

    def __str__(self) -> str:
        if self.status_code is None:
            return super().__str__()
        return f"{self.status_code} {self.code or 'error'}: {super().__str__()}"
