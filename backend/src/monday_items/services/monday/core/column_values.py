"""
Column value mapping.

Turns raw ``column_values`` entries from the items query into
``ColumnValue`` models and derives the per-column mappable view.
Neither function raises on malformed payloads; a bad ``value`` degrades to
its display text.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from .models import ColumnValue, MappableValue, RawColumnValue
from .utils import UNPARSABLE, optional_str, try_parse_json

logger = logging.getLogger(__name__)


def _linked_ids(raw: RawColumnValue) -> Optional[list[str]]:
    ids = raw.get("linked_item_ids")
    if ids is None:
        return None
    if not isinstance(ids, list):
        return None
    return [str(i) for i in ids]


def map_column_value(raw: RawColumnValue) -> ColumnValue:
    """Map one raw column entry to its normalized shape."""
    column = raw.get("column")
    if not isinstance(column, dict):
        column = {}
    return ColumnValue(
        id=optional_str(raw.get("id")),
        value=raw.get("value"),
        text=optional_str(raw.get("text")),
        display_value=optional_str(raw.get("display_value")),
        title=optional_str(column.get("title")),
        additional_info=optional_str(column.get("settings_str")),
        linked_item_ids=_linked_ids(raw),
    )


def map_column_values(raws: Optional[Iterable[Any]]) -> list[ColumnValue]:
    return [map_column_value(raw) for raw in (raws or []) if isinstance(raw, dict)]


def build_mappable(raw: RawColumnValue) -> MappableValue:
    """
    Derive the mappable view of one column.

    Rules, in order:
    - ``value`` that parses to an object: the object with ``text``,
      ``display_value`` and ``linked_item_ids`` overlaid when present
    - ``value`` that parses to a scalar: ``text ?? display_value``, or the
      scalar itself when both are null
    - ``value`` that does not parse: ``text ?? display_value ?? value``
    - no string ``value``: ``text ?? display_value ?? None``
    - falsy ``value`` with ``linked_item_ids``: always
      ``{"linked_item_ids": [...], "text": text ?? display_value}``
    """
    value = raw.get("value")
    text = optional_str(raw.get("text"))
    display_value = optional_str(raw.get("display_value"))
    linked_ids = _linked_ids(raw)
    fallback = text if text is not None else display_value

    mapped: MappableValue = fallback
    if isinstance(value, str):
        parsed = try_parse_json(value)
        if parsed is UNPARSABLE:
            logger.debug("Column %s value is not JSON, using text", raw.get("id"))
            mapped = fallback if fallback is not None else value
        elif isinstance(parsed, dict):
            if text is not None:
                parsed["text"] = text
            if display_value is not None:
                parsed["display_value"] = display_value
            if linked_ids is not None:
                parsed["linked_item_ids"] = linked_ids
            mapped = parsed
        elif isinstance(parsed, list):
            mapped = parsed
        else:
            mapped = fallback if fallback is not None else parsed

    if not value and linked_ids is not None:
        mapped = {"linked_item_ids": linked_ids, "text": fallback}
    return mapped


def build_mappables(raws: Optional[Iterable[Any]]) -> dict[str, MappableValue]:
    """Mappable view keyed by column id; one entry per raw column."""
    out: dict[str, MappableValue] = {}
    for raw in raws or []:
        if not isinstance(raw, dict):
            continue
        out[str(raw.get("id"))] = build_mappable(raw)
    return out
