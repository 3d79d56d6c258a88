"""
Google Calendar service setup.

The OAuth client config and the user's token both live in Secret Manager.
On the first run there is no token yet: the installed-app flow runs once and
the resulting token is saved back for later runs.
"""

import json

from google.api_core.exceptions import GoogleAPICallError, NotFound
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleClientError

from core.config import GOOGLE_CALENDAR_SCOPES
from core.errors import CredentialError
from core.secrets import SecretStore

AUTH_PROMPT = "Go to the following link in your browser to authorize calendar access:\n{url}\n"


def obtain_token(client_config: dict, logger) -> Credentials:
    """Run the installed-app OAuth flow and return fresh user credentials."""
    flow = InstalledAppFlow.from_client_config(client_config, GOOGLE_CALENDAR_SCOPES)
    logger.info("oauth_flow_started")
    return flow.run_local_server(
        port=0, open_browser=False, authorization_prompt_message=AUTH_PROMPT
    )


def load_credentials(
    secrets: SecretStore, oauth2_secret: str, token_secret: str, logger
) -> Credentials:
    """
    Load calendar credentials, bootstrapping and saving a token if none exists.

    Raises:
        CredentialError: any secret, token or OAuth failure
    """
    try:
        client_config = json.loads(secrets.access(oauth2_secret))
    except (GoogleAPICallError, GoogleAuthError, ValueError) as exc:
        raise CredentialError(f"fetch oauth2 credentials: {exc}") from exc

    try:
        token_info = json.loads(secrets.access(token_secret))
    except NotFound:
        logger.info("calendar_token_missing", secret=token_secret)
        try:
            creds = obtain_token(client_config, logger)
        except (GoogleAuthError, ValueError, OSError) as exc:
            raise CredentialError(f"get oauth2 token: {exc}") from exc
        try:
            secrets.save(token_secret, creds.to_json().encode("utf-8"))
        except GoogleAPICallError as exc:
            raise CredentialError(f"save oauth2 token: {exc}") from exc
        return creds
    except (GoogleAPICallError, ValueError) as exc:
        raise CredentialError(f"fetch access token: {exc}") from exc

    try:
        creds = Credentials.from_authorized_user_info(token_info, GOOGLE_CALENDAR_SCOPES)
        if not creds.valid and creds.refresh_token:
            creds.refresh(Request())
    except (GoogleAuthError, ValueError) as exc:
        raise CredentialError(f"convert secret to token: {exc}") from exc
    return creds


def build_calendar_service(
    secrets: SecretStore, oauth2_secret: str, token_secret: str, logger
):
    """Create a calendar v3 service authorized with the stored user token."""
    logger.info("init_google_calendar_client")
    creds = load_credentials(secrets, oauth2_secret, token_secret, logger)
    try:
        return build("calendar", "v3", credentials=creds, cache_discovery=False)
    except (GoogleClientError, GoogleAuthError) as exc:
        raise CredentialError(f"create calendar service: {exc}") from exc
