"""
Item normalization pipeline.

Phase 1 (``normalize`` / ``normalize_batch``) is synchronous and does no I/O:
each raw item gets mapped column values, a mapped parent, mapped subitems and
its rollup columns aggregated from those subitems.

Phase 2 (``aggregate_batch``) collects every linked item id in the batch,
resolves them with one fetch, then aggregates connect-boards columns.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from .aggregation import aggregate_linked, aggregate_rollups
from .column_values import build_mappables, map_column_values
from .linked_items import FetchItemsByIds, collect_linked_ids, resolve_linked_items
from .models import (
    LinkedItemIndex,
    NormalizedBatch,
    NormalizedItem,
    ParentItem,
    RawItem,
    SubItem,
)
from .utils import optional_str

logger = logging.getLogger(__name__)


def _as_dict(value: Any) -> Optional[dict[str, Any]]:
    return value if isinstance(value, dict) else None


def _item_fields(raw: RawItem) -> dict[str, Any]:
    return {
        "id": optional_str(raw.get("id")),
        "name": optional_str(raw.get("name")),
        "created_at": optional_str(raw.get("created_at")),
        "updated_at": optional_str(raw.get("updated_at")),
        "state": optional_str(raw.get("state")),
        "board": _as_dict(raw.get("board")),
        "creator_id": optional_str(raw.get("creator_id")),
        "group": _as_dict(raw.get("group")),
    }


def normalize_parent(raw: RawItem) -> ParentItem:
    return ParentItem(
        **_item_fields(raw),
        column_values=map_column_values(raw.get("column_values")),
    )


def normalize_subitem(raw: RawItem) -> SubItem:
    column_values = raw.get("column_values")
    return SubItem(
        **_item_fields(raw),
        column_values=map_column_values(column_values),
        mappable_column_values=build_mappables(column_values),
    )


def normalize(raw: RawItem) -> NormalizedItem:
    """
    Normalize one raw item and apply its rollup columns.

    Connect-boards columns are left as returned; they need the batch-wide
    linked item index (see ``aggregate_batch``).
    """
    column_values = raw.get("column_values")
    parent = _as_dict(raw.get("parent_item"))
    subitems = [
        normalize_subitem(si) for si in (raw.get("subitems") or []) if isinstance(si, dict)
    ]
    assets = [a for a in (raw.get("assets") or []) if isinstance(a, dict)]

    item = NormalizedItem(
        **_item_fields(raw),
        email=optional_str(raw.get("email")),
        column_values=map_column_values(column_values),
        mappable_column_values=build_mappables(column_values),
        assets=assets,
        parent_item=normalize_parent(parent) if parent is not None else None,
        subitems=subitems,
    )
    return aggregate_rollups(item)


def normalize_batch(raw_items: Iterable[RawItem]) -> NormalizedBatch:
    items = tuple(normalize(raw) for raw in raw_items if isinstance(raw, dict))
    logger.debug("Normalized batch of %d items", len(items))
    return NormalizedBatch(items=items)


def aggregate_with_index(batch: NormalizedBatch, index: LinkedItemIndex) -> list[NormalizedItem]:
    return [aggregate_linked(item, index) for item in batch]


async def aggregate_batch(
    batch: NormalizedBatch,
    fetch_items_by_ids: FetchItemsByIds,
) -> list[NormalizedItem]:
    """
    Resolve linked items for the whole batch and aggregate connect-boards columns.

    Performs at most one ``fetch_items_by_ids`` call; none when the batch
    references no linked items. Fetch errors propagate to the caller.
    """
    if not isinstance(batch, NormalizedBatch):
        raise TypeError("aggregate_batch expects the NormalizedBatch from normalize_batch")
    ids = collect_linked_ids(batch)
    index = await resolve_linked_items(ids, fetch_items_by_ids)
    return aggregate_with_index(batch, index)


async def normalize_items(
    raw_items: Iterable[RawItem],
    fetch_items_by_ids: FetchItemsByIds,
) -> list[NormalizedItem]:
    """Both phases over one batch of raw items."""
    return await aggregate_batch(normalize_batch(raw_items), fetch_items_by_ids)
