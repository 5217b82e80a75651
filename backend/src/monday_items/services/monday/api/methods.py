"""
Monday Items Service - Endpoint Handlers

Fetches items through the Monday GraphQL client and returns them normalized:
mapped column values, mappable values, rollups over subitems and
connect-boards columns aggregated from one batched linked item lookup.
"""

from __future__ import annotations

import json
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, Union

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from starlette import status
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ..core import (
    LinkedItemIndex,
    MondayAPIError,
    NormalizedItem,
    ValidationError,
    aggregate_batch,
    normalize_batch,
)
from ..core.errors import ERROR_INTERNAL, ERROR_PARSE
from ..core.normalizer import aggregate_with_index
from .client import MondayClient

logger = logging.getLogger(__name__)


# ============================================================================
# REQUEST MODELS
# ============================================================================


class GetItemsRequest(BaseModel):
    item_ids: Union[list[Union[str, int]], str]

    def ids(self) -> list[str]:
        raw = self.item_ids
        if isinstance(raw, str):
            raw = raw.split(",")
        return [str(i).strip() for i in raw if str(i).strip()]


class ListItemsRequest(BaseModel):
    limit: Optional[int] = Field(default=None, ge=1)


class ColumnValueItemsRequest(ListItemsRequest):
    column_id: str
    column_value: str


class NormalizeItemsRequest(BaseModel):
    items: list[dict[str, Any]]
    resolve_linked: bool = True


class ExecuteQueryRequest(BaseModel):
    query: str
    variables: Optional[dict[str, Any]] = None
    raw: bool = False


# ============================================================================
# REQUEST UTILITIES
# ============================================================================


def get_client(request: Request) -> MondayClient:
    return request.app.state.monday_client


async def parse_body(request: Request, model: type[BaseModel]) -> Any:
    """
    Parse and validate a JSON request body.

    An empty body validates as ``{}``.
    """
    raw = await request.body()
    payload = json.loads(raw) if raw else {}
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or None
        raise ValidationError(first.get("msg", "Invalid request body"), field=field)


def items_response(items: list[NormalizedItem]) -> JSONResponse:
    return JSONResponse({"items": [item.model_dump(mode="json") for item in items]})


async def normalize_and_aggregate(
    client: MondayClient, raw_items: list[dict[str, Any]]
) -> list[NormalizedItem]:
    batch = normalize_batch(raw_items)
    return await aggregate_batch(batch, client.fetch_items_by_ids)


# ============================================================================
# ERROR HANDLING WRAPPER
# ============================================================================


def api_handler(
    handler: Callable[[Request], Awaitable[JSONResponse]]
) -> Callable[[Request], Awaitable[JSONResponse]]:
    """
    Decorator that wraps API handlers with error conversion:
    - MondayAPIError -> its own status and error body
    - malformed JSON -> 400 parseError
    - anything else -> logged, sanitized 500
    """

    @wraps(handler)
    async def wrapper(request: Request) -> JSONResponse:
        try:
            return await handler(request)
        except MondayAPIError as e:
            return e.to_response()
        except json.JSONDecodeError:
            return JSONResponse(
                {
                    "error": {
                        "code": ERROR_PARSE,
                        "status": 400,
                        "message": "Invalid JSON in request body",
                    }
                },
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        except Exception as e:
            logger.exception("Unhandled exception in monday API: %s", e)
            return JSONResponse(
                {
                    "error": {
                        "code": ERROR_INTERNAL,
                        "status": 500,
                        "message": "Internal server error",
                    }
                },
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

    return wrapper


# ============================================================================
# ENDPOINTS
# ============================================================================


async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


@api_handler
async def items_get(request: Request) -> JSONResponse:
    """
    POST /items/get

    Body: {"item_ids": ["1", "2"]} or {"item_ids": "1,2"}
    """
    body: GetItemsRequest = await parse_body(request, GetItemsRequest)
    item_ids = body.ids()
    if not item_ids:
        raise ValidationError("item_ids must not be empty", field="item_ids")

    client = get_client(request)
    raw_items = await client.get_items(item_ids)
    return items_response(await normalize_and_aggregate(client, raw_items))


@api_handler
async def group_items_list(request: Request) -> JSONResponse:
    """
    POST /boards/{board_id}/groups/{group_id}/items

    Body: {"limit": 50} (optional)
    """
    body: ListItemsRequest = await parse_body(request, ListItemsRequest)
    client = get_client(request)
    raw_items = await client.list_group_items(
        request.path_params["board_id"],
        request.path_params["group_id"],
        limit=body.limit,
    )
    return items_response(await normalize_and_aggregate(client, raw_items))


@api_handler
async def items_by_column_value(request: Request) -> JSONResponse:
    """
    POST /boards/{board_id}/items/by-column-value

    Body: {"column_id": "status", "column_value": "Done", "limit": 50}
    """
    body: ColumnValueItemsRequest = await parse_body(request, ColumnValueItemsRequest)
    client = get_client(request)
    raw_items = await client.list_items_by_column_value(
        request.path_params["board_id"],
        body.column_id,
        body.column_value,
        limit=body.limit,
    )
    return items_response(await normalize_and_aggregate(client, raw_items))


@api_handler
async def items_normalize(request: Request) -> JSONResponse:
    """
    POST /items/normalize

    Normalizes raw items supplied by the caller. With "resolve_linked": false
    the connect-boards pass runs against an empty index and no query is made.
    """
    body: NormalizeItemsRequest = await parse_body(request, NormalizeItemsRequest)
    batch = normalize_batch(body.items)
    if body.resolve_linked:
        items = await aggregate_batch(batch, get_client(request).fetch_items_by_ids)
    else:
        items = aggregate_with_index(batch, LinkedItemIndex())
    return items_response(items)


@api_handler
async def graphql_execute(request: Request) -> JSONResponse:
    """
    POST /graphql

    Body: {"query": "...", "variables": {...}, "raw": false}
    Returns the response's "data", or the whole body when "raw" is true.
    """
    body: ExecuteQueryRequest = await parse_body(request, ExecuteQueryRequest)
    if not body.query.strip():
        raise ValidationError("query must not be empty", field="query")
    result = await get_client(request).execute(body.query, body.variables)
    if body.raw:
        return JSONResponse(result)
    return JSONResponse(result.get("data") or {})


# ============================================================================
# ROUTES
# ============================================================================

item_routes = [
    Route("/items/get", items_get, methods=["POST"]),
    Route("/items/normalize", items_normalize, methods=["POST"]),
    Route(
        "/boards/{board_id}/groups/{group_id}/items",
        group_items_list,
        methods=["POST"],
    ),
    Route(
        "/boards/{board_id}/items/by-column-value",
        items_by_column_value,
        methods=["POST"],
    ),
]

other_routes = [
    Route("/health", health, methods=["GET"]),
    Route("/graphql", graphql_execute, methods=["POST"]),
]

routes = item_routes + other_routes
