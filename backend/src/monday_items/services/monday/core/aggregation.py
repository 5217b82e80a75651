"""
Relation aggregation.

Recomputes the display ``text`` and numeric ``value`` of relation columns:

- rollup columns (``relation_column.subelementos``) aggregate a target
  column across the item's own subitems; runs per item during normalization
- connect-boards columns aggregate a target column across linked items on
  another board; runs per item once the batch's ``LinkedItemIndex`` exists

Both paths join the non-empty target texts with ", " and, when at least one
of them is numeric, store the JSON-encoded decimal sum as the new ``value``.
They differ when nothing contributes: a rollup column's text becomes
``None`` while a connect-boards column keeps its previous text.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional

from .linked_items import column_linked_ids
from .models import ColumnValue, LinkedItemIndex, NormalizedItem, RawItem
from .relations import (
    RelationKind,
    RelationMetadata,
    parse_relation_metadata,
    parse_settings,
)
from .utils import (
    UNPARSABLE,
    format_decimal,
    is_blank,
    optional_str,
    to_decimal,
    try_parse_json,
)

logger = logging.getLogger(__name__)


AGGREGATE_SEPARATOR = ", "


@dataclass
class Aggregate:
    texts: list[str]
    total: Optional[Decimal] = None

    @property
    def text(self) -> Optional[str]:
        if not self.texts:
            return None
        return AGGREGATE_SEPARATOR.join(self.texts)

    @property
    def encoded_total(self) -> Optional[str]:
        """The sum as Monday stores numbers: a JSON-encoded string ('"20"')."""
        if self.total is None:
            return None
        return json.dumps(format_decimal(self.total))


def target_text(text: Any, value: Any) -> Optional[str]:
    """
    Display string of a candidate's target column.

    Prefers ``text``; otherwise decodes ``value`` and takes a plain string,
    then an object's ``email``, then its ``text``. A ``value`` that is not
    JSON is used as-is.
    """
    resolved = optional_str(text)
    if resolved:
        return resolved
    if not isinstance(value, str):
        return resolved
    parsed = try_parse_json(value)
    if parsed is UNPARSABLE:
        return value
    if isinstance(parsed, str):
        return parsed
    if isinstance(parsed, dict):
        if isinstance(parsed.get("email"), str):
            return parsed["email"]
        if isinstance(parsed.get("text"), str):
            return parsed["text"]
    return resolved


def combine(texts: Iterable[Optional[str]]) -> Aggregate:
    """Join non-empty texts in order and sum the numeric ones."""
    aggregate = Aggregate(texts=[])
    for text in texts:
        if not text:
            continue
        aggregate.texts.append(text)
        number = to_decimal(text)
        if number is not None:
            aggregate.total = number if aggregate.total is None else aggregate.total + number
    return aggregate


def _sync_mappable(item: NormalizedItem, column: ColumnValue) -> None:
    entry = item.mappable_column_values.get(str(column.id))
    if isinstance(entry, dict):
        entry["text"] = column.text


def _apply(column: ColumnValue, aggregate: Aggregate, empty_text: Optional[str]) -> None:
    column.text = aggregate.text if aggregate.texts else empty_text
    if aggregate.total is not None:
        column.value = aggregate.encoded_total


# ============================================================================
# ROLLUP (SUBITEMS)
# ============================================================================


def aggregate_rollup_column(
    item: NormalizedItem,
    column: ColumnValue,
    metadata: RelationMetadata,
) -> None:
    texts = []
    for subitem in item.subitems:
        target = subitem.column(metadata.target_column_id)
        if target is None:
            logger.debug(
                "Subitem %s has no column %s", subitem.id, metadata.target_column_id
            )
            continue
        texts.append(target_text(target.text, target.value))

    _apply(column, combine(texts), empty_text=None)
    _sync_mappable(item, column)


def aggregate_rollups(item: NormalizedItem) -> NormalizedItem:
    """Apply every rollup column of ``item`` from its nested subitems, in place."""
    for column in item.column_values:
        metadata = parse_relation_metadata(column.additional_info)
        if metadata is None or metadata.kind is not RelationKind.ROLLUP:
            continue
        aggregate_rollup_column(item, column, metadata)
    return item


# ============================================================================
# CONNECT BOARDS (LINKED ITEMS)
# ============================================================================


def _linked_target_column(linked: RawItem, column_id: str) -> Optional[dict[str, Any]]:
    for cv in linked.get("column_values") or []:
        if isinstance(cv, dict) and cv.get("id") == column_id:
            return cv
    return None


def candidate_ids(
    item: NormalizedItem,
    metadata: RelationMetadata,
    index: LinkedItemIndex,
) -> list[str]:
    """
    Linked item ids a connect-boards column aggregates over.

    When ``relation_column`` flags sibling columns, the ids those columns
    reference; otherwise (or if they reference nothing) the whole index.
    """
    specific: dict[str, None] = {}
    for flagged_id in metadata.flagged_column_ids:
        sibling = next((c for c in item.column_values if c.id == flagged_id), None)
        if sibling is None:
            continue
        for linked_id in column_linked_ids(sibling):
            specific.setdefault(linked_id, None)
    if specific:
        return list(specific)
    return list(index)


def backfill_display_text(
    item: NormalizedItem,
    column: ColumnValue,
    index: LinkedItemIndex,
) -> None:
    """
    Fill an empty ``text`` on a linking column.

    Uses the column's ``display_value`` when present, else the names of the
    linked items. A non-blank ``display_value`` also becomes the mappable
    entry's ``text``.
    """
    linked_ids = [str(i) for i in (column.linked_item_ids or [])]
    display = column.display_value
    if not column.text and linked_ids:
        if not is_blank(display):
            column.text = display
        else:
            names = [
                str(index[i].get("name") or "") for i in linked_ids if i in index
            ]
            names = [n for n in names if n]
            if names:
                column.text = AGGREGATE_SEPARATOR.join(names)

    entry = item.mappable_column_values.get(str(column.id))
    if isinstance(entry, dict) and not is_blank(display):
        entry["text"] = display


def aggregate_linked_column(
    item: NormalizedItem,
    column: ColumnValue,
    metadata: RelationMetadata,
    index: LinkedItemIndex,
) -> None:
    texts = []
    for linked_id in candidate_ids(item, metadata, index):
        linked = index.get(linked_id)
        if linked is None:
            continue
        board = linked.get("board") or {}
        if str(board.get("id")) != metadata.target_board_id:
            logger.debug(
                "Skipping linked item %s from board %s", linked_id, board.get("id")
            )
            continue
        target = _linked_target_column(linked, metadata.target_column_id)
        if target is None:
            continue
        texts.append(target_text(target.get("text"), target.get("value")))

    _apply(column, combine(texts), empty_text=column.text)
    _sync_mappable(item, column)


def aggregate_linked(item: NormalizedItem, index: LinkedItemIndex) -> NormalizedItem:
    """Apply display back-fill and connect-boards aggregation to ``item``, in place."""
    for column in item.column_values:
        if parse_settings(column.additional_info) is None:
            continue
        backfill_display_text(item, column, index)

        metadata = parse_relation_metadata(column.additional_info)
        if metadata is None or metadata.kind is not RelationKind.CROSS_BOARD:
            continue
        aggregate_linked_column(item, column, metadata, index)
    return item
