"""
Minimal async Notion REST client on top of httpx.

Only the three calls the sync needs: read a database, patch its properties
and create a page inside it.
"""

import re
from typing import Any

import httpx

from core.config import NOTION_API_BASE_URL, NOTION_API_VERSION, NOTION_TIMEOUT_SECONDS
from core.errors import ConfigurationError, NotionAPIError

NOTION_LINK_PREFIX = "https://www.notion.so/"

_ID_PATTERN = re.compile(r"([0-9a-f]{32}|[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})$")


def database_id_from_link(link: str) -> str:
    """
    Extract the database id from a Notion link.

    Accepts 'https://www.notion.so/<workspace>/<Title->id?v=<view>' style links
    as well as a bare id.
    """
    value = link.strip()
    if value.startswith(NOTION_LINK_PREFIX):
        value = value[len(NOTION_LINK_PREFIX):].split("?")[0].rstrip("/")
        value = value.rsplit("/", 1)[-1]

    match = _ID_PATTERN.search(value.lower())
    if not match:
        raise ConfigurationError(f"Not a Notion database link or id: '{link}'")
    return match.group(1)


def _error_from_response(response: httpx.Response) -> NotionAPIError:
    code = None
    message = response.text.strip() or "Request failed without an error payload"
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        code = payload.get("code")
        if isinstance(payload.get("message"), str):
            message = payload["message"]

    return NotionAPIError(" ".join(message.split())[:300], status_code=response.status_code, code=code)


class NotionClient:
    """Bearer-token Notion client. Owns its httpx client unless one is passed in."""

    def __init__(self, token: str, http_client: httpx.AsyncClient | None = None):
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=NOTION_TIMEOUT_SECONDS)
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Notion-Version": NOTION_API_VERSION,
            "Content-Type": "application/json",
        }

    async def _request(
        self, method: str, path: str, json_body: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        url = f"{NOTION_API_BASE_URL}{path}"
        try:
            response = await self._http_client.request(
                method, url, json=json_body, headers=self._headers
            )
        except httpx.HTTPError as exc:
            raise NotionAPIError(f"Notion request {method} {path} failed: {exc}") from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise _error_from_response(response)

        try:
            payload = response.json()
        except ValueError as exc:
            raise NotionAPIError(
                "Notion API returned invalid JSON", status_code=response.status_code
            ) from exc
        if not isinstance(payload, dict):
            raise NotionAPIError(
                "Notion API returned an unexpected payload shape", status_code=response.status_code
            )
        return payload

    async def get_database(self, database_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/databases/{database_id}")

    async def update_database(
        self, database_id: str, properties: dict[str, dict[str, Any] | None]
    ) -> dict[str, Any]:
        """Patch database columns. A None value deletes that column."""
        return await self._request(
            "PATCH", f"/databases/{database_id}", {"properties": properties}
        )

    async def create_page(
        self,
        database_id: str,
        properties: dict[str, Any],
        children: list[dict[str, Any]],
    ) -> dict[str, Any]:
        body = {
            "parent": {"type": "database_id", "database_id": database_id},
            "properties": properties,
        }
        if children:
            body["children"] = children
        return await self._request("POST", "/pages", body)

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()
