"""
Linked item collection and resolution.

Connect-boards columns expose the items they point at either as
``linked_item_ids`` or only inside their serialized ``value``
(``linkedPulseIds``). Both are collected across a whole batch so the
foreign items can be fetched with a single query.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Iterable, Sequence

from .models import ColumnValue, LinkedItemIndex, NormalizedItem, RawItem
from .utils import linked_pulse_ids

logger = logging.getLogger(__name__)


# fetch_items_by_ids(ids) -> [{"id", "name", "board": {"id"}, "column_values": [...]}]
FetchItemsByIds = Callable[[list[str]], Awaitable[list[RawItem]]]


def column_linked_ids(column: ColumnValue) -> list[str]:
    """Ids a single column references, first-class field first."""
    ids = [str(i) for i in (column.linked_item_ids or [])]
    ids.extend(linked_pulse_ids(column.value))
    return ids


def collect_linked_ids(items: Iterable[NormalizedItem]) -> list[str]:
    """
    Every foreign item id referenced by the batch's own column values.

    De-duplicated, in first-seen order.
    """
    seen: dict[str, None] = {}
    for item in items:
        for column in item.column_values:
            for item_id in column_linked_ids(column):
                seen.setdefault(item_id, None)
    return list(seen)


async def resolve_linked_items(
    ids: Sequence[str],
    fetch_items_by_ids: FetchItemsByIds,
) -> LinkedItemIndex:
    """
    Fetch all linked items in one call and index them by id.

    An empty id set returns an empty index without calling the fetcher.
    Fetch errors propagate unchanged.
    """
    if not ids:
        return LinkedItemIndex()

    unique_ids = list(dict.fromkeys(str(i) for i in ids))
    logger.info("Resolving %d linked items", len(unique_ids))
    linked_items = await fetch_items_by_ids(unique_ids)

    index: dict[str, RawItem] = {}
    for linked in linked_items or []:
        if not isinstance(linked, dict) or linked.get("id") is None:
            continue
        index[str(linked["id"])] = linked
    if len(index) < len(unique_ids):
        logger.debug(
            "Linked item fetch returned %d of %d requested ids",
            len(index),
            len(unique_ids),
        )
    return LinkedItemIndex(index)
