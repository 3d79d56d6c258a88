"""
GCP Secret Manager access for API credentials and the calendar OAuth token.
"""

import re

from google.api_core.exceptions import AlreadyExists, GoogleAPICallError
from google.auth.exceptions import GoogleAuthError
from google.cloud import secretmanager

from core.errors import ConfigurationError, CredentialError

_SECRET_NAME = re.compile(
    r"^projects/(?P<project>[^/]+)/secrets/(?P<secret>[^/]+)/versions/(?P<version>[^/]+)$"
)


def parse_secret_name(name: str) -> tuple[str, str, str]:
    """
    Split 'projects/{project}/secrets/{secret}/versions/{version}'.

    Returns:
        Tuple of (project, secret_id, version)
    """
    match = _SECRET_NAME.match(name.strip())
    if not match:
        raise ConfigurationError(
            f"Secret name '{name}' is not of the form "
            "projects/{project}/secrets/{secret}/versions/{version}"
        )
    return match.group("project"), match.group("secret"), match.group("version")


class SecretStore:
    """Reads and writes secret payloads by full version resource name."""

    def __init__(self, logger, client: secretmanager.SecretManagerServiceClient | None = None):
        self._logger = logger
        if client is None:
            try:
                client = secretmanager.SecretManagerServiceClient()
            except GoogleAuthError as exc:
                raise CredentialError(f"create secret manager client: {exc}") from exc
        self._client = client

    def access(self, name: str) -> bytes:
        """
        Fetch a secret version's payload.

        Raises:
            google.api_core.exceptions.NotFound: the secret or version doesn't exist
        """
        parse_secret_name(name)
        response = self._client.access_secret_version(request={"name": name})
        self._logger.debug("secret_loaded", secret=name)
        return response.payload.data

    def access_text(self, name: str) -> str:
        """Fetch a secret as UTF-8 text, wrapping any failure in CredentialError."""
        try:
            return self.access(name).decode("utf-8").strip()
        except (GoogleAPICallError, GoogleAuthError) as exc:
            raise CredentialError(f"fetch secret {name}: {exc}") from exc

    def save(self, name: str, payload: bytes) -> str:
        """
        Store payload as a new version of the secret named by `name`.

        The secret is created (automatic replication) when it doesn't exist yet.
        Returns the new version's resource name.
        """
        project, secret_id, _ = parse_secret_name(name)
        self._logger.info("saving_secret", secret=name)
        parent = f"projects/{project}/secrets/{secret_id}"
        try:
            self._client.create_secret(
                request={
                    "parent": f"projects/{project}",
                    "secret_id": secret_id,
                    "secret": {"replication": {"automatic": {}}},
                }
            )
        except AlreadyExists:
            self._logger.debug("secret_exists", secret=parent)

        version = self._client.add_secret_version(
            request={"parent": parent, "payload": {"data": payload}}
        )
        return version.name

    def close(self) -> None:
        self._logger.info("closing_secret_manager_client")
        self._client.transport.close()
