"""
Configuration constants and environment setup.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# LOGGING
# =============================================================================

LOG_SERVICE_NAME = os.environ.get("LOG_SERVICE_NAME", "calendar-to-notion")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_DEVELOPMENT = os.environ.get("LOG_DEVELOPMENT", "false").lower() == "true"

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

CALENDAR_PROVIDER = os.environ.get("CALENDAR_PROVIDER", "google").lower()  # "google" or "graph"
CALENDAR_TIME_ZONE = os.environ.get("CALENDAR_TIME_ZONE", "UTC")
CALENDAR_IDS = [
    cal.strip() for cal in os.environ.get("CALENDAR_IDS", "primary").split(",") if cal.strip()
]

CALENDAR_PROVIDERS = {"google", "graph"}

# =============================================================================
# GOOGLE CALENDAR CREDENTIALS (Secret Manager resource names)
# =============================================================================

# e.g. projects/my-project/secrets/calendar-oauth2/versions/latest
GOOGLE_CALENDAR_OAUTH2_SECRET = os.environ.get("GOOGLE_CALENDAR_OAUTH2_SECRET", "")
GOOGLE_CALENDAR_TOKEN_SECRET = os.environ.get("GOOGLE_CALENDAR_TOKEN_SECRET", "")
GOOGLE_CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]

# =============================================================================
# MS GRAPH CREDENTIALS (from environment)
# =============================================================================

GRAPH_TENANT_ID = os.environ.get("MICROSOFT_GRAPH_TENANT_ID", "")
GRAPH_APP_ID = os.environ.get("MICROSOFT_GRAPH_APP_ID", "")
GRAPH_CLIENT_SECRET = os.environ.get("MICROSOFT_GRAPH_CLIENT_SECRET", "")
GRAPH_USER_ID = os.environ.get("MICROSOFT_GRAPH_USER_ID", "")

# =============================================================================
# NOTION CONFIGURATION
# =============================================================================

NOTION_API_SECRET = os.environ.get("NOTION_API_SECRET", "")
NOTION_DB_LINK = os.environ.get("NOTION_DB_LINK", "")
NOTION_API_BASE_URL = "https://api.notion.com/v1"
NOTION_API_VERSION = "2022-06-28"
NOTION_TIMEOUT_SECONDS = float(os.environ.get("NOTION_TIMEOUT_SECONDS", "30"))


def validate_settings(provider: str = CALENDAR_PROVIDER) -> list[str]:
    """
    Return the names of required settings that are missing.

    Which settings are required depends on the calendar provider.
    """
    required = {
        "NOTION_API_SECRET": NOTION_API_SECRET,
        "NOTION_DB_LINK": NOTION_DB_LINK,
    }
    if provider == "google":
        required["GOOGLE_CALENDAR_OAUTH2_SECRET"] = GOOGLE_CALENDAR_OAUTH2_SECRET
        required["GOOGLE_CALENDAR_TOKEN_SECRET"] = GOOGLE_CALENDAR_TOKEN_SECRET
    elif provider == "graph":
        required["MICROSOFT_GRAPH_TENANT_ID"] = GRAPH_TENANT_ID
        required["MICROSOFT_GRAPH_APP_ID"] = GRAPH_APP_ID
        required["MICROSOFT_GRAPH_CLIENT_SECRET"] = GRAPH_CLIENT_SECRET
        required["MICROSOFT_GRAPH_USER_ID"] = GRAPH_USER_ID
    else:
        return [f"CALENDAR_PROVIDER (unknown provider '{provider}')"]

    missing = [name for name, value in required.items() if not value]
    if not CALENDAR_IDS:
        missing.append("CALENDAR_IDS")
    return missing
