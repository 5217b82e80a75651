from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

import httpx
from dotenv import load_dotenv

from ..core.errors import ConfigurationError, MondayGraphQLError, MondayTransportError
from .queries import (
    GROUP_ITEMS_QUERY,
    ITEMS_BY_COLUMN_VALUE_QUERY,
    ITEMS_BY_IDS_QUERY,
    LINKED_ITEMS_QUERY,
)

logger = logging.getLogger(__name__)


DEFAULT_API_URL = "https://api.monday.com/v2"
DEFAULT_API_VERSION = "2024-10"


@dataclass
class MondayClientConfig:
    api_token: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    api_version: str = DEFAULT_API_VERSION
    timeout: float = 30.0
    default_limit: int = 50
    max_limit: int = 500

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> "MondayClientConfig":
        return cls(
            api_token=environ.get("MONDAY_API_TOKEN") or None,
            api_url=environ.get("MONDAY_API_URL", DEFAULT_API_URL),
            api_version=environ.get("MONDAY_API_VERSION", DEFAULT_API_VERSION),
            timeout=float(environ.get("MONDAY_API_TIMEOUT", "30.0")),
            default_limit=int(environ.get("MONDAY_DEFAULT_LIMIT", "50")),
            max_limit=int(environ.get("MONDAY_MAX_LIMIT", "500")),
        )

    def clamp_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            limit = self.default_limit
        return max(1, min(limit, self.max_limit))


def load_config(env_file: Optional[Path] = None) -> MondayClientConfig:
    """Read client settings from the environment, loading a .env file first if present."""
    env_path = env_file or Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    return MondayClientConfig.from_environ(os.environ)


class MondayClient:
    """
    Thin async GraphQL client for the Monday API.

    Provides ``fetch_items_by_ids`` for the normalizer's linked item lookup
    plus the item queries the HTTP service exposes. No retries or paging.
    """

    def __init__(
        self,
        config: MondayClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self._http = httpx.AsyncClient(
            timeout=config.timeout,
            transport=transport,
        )

    def _headers(self) -> dict[str, str]:
        if not self.config.api_token:
            raise ConfigurationError("MONDAY_API_TOKEN is not configured")
        return {
            "Authorization": self.config.api_token,
            "API-Version": self.config.api_version,
            "Content-Type": "application/json",
        }

    async def execute(
        self, query: str, variables: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """Run a query and return the whole response body."""
        headers = self._headers()
        try:
            response = await self._http.post(
                self.config.api_url,
                json={"query": query, "variables": variables or {}},
                headers=headers,
            )
        except httpx.TimeoutException:
            raise MondayTransportError("Monday API request timed out")
        except httpx.RequestError as e:
            raise MondayTransportError(f"Monday API unavailable: {e}")

        if response.status_code >= 400:
            logger.warning("Monday API answered %s", response.status_code)
            raise MondayTransportError(
                f"Monday API request failed: {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            body = response.json()
        except ValueError:
            raise MondayTransportError("Monday API returned a non-JSON body")

        if not isinstance(body, dict):
            raise MondayTransportError("Monday API returned an unexpected body")
        if body.get("errors"):
            errors = body["errors"]
            first = errors[0] if isinstance(errors, list) and errors else {}
            message = first.get("message") if isinstance(first, dict) else None
            raise MondayGraphQLError(message or "GraphQL query failed", errors=errors)
        if body.get("error_code"):
            raise MondayGraphQLError(
                body.get("error_message") or str(body["error_code"]),
                errors=[{"error_code": body["error_code"]}],
            )
        return body

    async def _data(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        body = await self.execute(query, variables)
        return body.get("data") or {}

    async def fetch_items_by_ids(self, ids: Sequence[str]) -> list[dict[str, Any]]:
        """Linked items in the minimal shape used for aggregation."""
        if not ids:
            return []
        data = await self._data(LINKED_ITEMS_QUERY, {"ids": list(ids)})
        return data.get("items") or []

    async def get_items(self, item_ids: Sequence[str]) -> list[dict[str, Any]]:
        data = await self._data(ITEMS_BY_IDS_QUERY, {"itemIds": list(item_ids)})
        return data.get("items") or []

    async def list_group_items(
        self, board_id: str, group_id: str, limit: Optional[int] = None
    ) -> list[dict[str, Any]]:
        """First page of a group's items."""
        data = await self._data(
            GROUP_ITEMS_QUERY,
            {
                "boardId": board_id,
                "groupId": group_id,
                "limit": self.config.clamp_limit(limit),
            },
        )
        boards = data.get("boards") or []
        if not boards:
            return []
        groups = boards[0].get("groups") or []
        if not groups:
            return []
        page = groups[0].get("items_page") or {}
        return page.get("items") or []

    async def list_items_by_column_value(
        self,
        board_id: str,
        column_id: str,
        column_value: str,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """First page of a board's items whose column matches a value."""
        data = await self._data(
            ITEMS_BY_COLUMN_VALUE_QUERY,
            {
                "boardId": board_id,
                "columnId": column_id,
                "columnValue": column_value,
                "limit": self.config.clamp_limit(limit),
            },
        )
        page = data.get("items_page_by_column_values") or {}
        return page.get("items") or []

    async def aclose(self) -> None:
        await self._http.aclose()
