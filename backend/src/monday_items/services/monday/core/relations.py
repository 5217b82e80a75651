"""
Relation metadata parsing.

A column's ``settings_str`` is itself JSON. Relation columns carry two keys:

    {
        "relation_column": {"subelementos": true} | {"<column_id>": true, ...},
        "displayed_linked_columns": {"<board_id>": ["<column_id>", ...]}
    }

A truthy ``subelementos`` marks a rollup over the item's own subitems; any
other non-empty map marks a connect-boards relation resolved through linked
items. Only the first board and the first column of
``displayed_linked_columns`` are used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .utils import parse_json_object

logger = logging.getLogger(__name__)


SUBITEMS_RELATION_KEY = "subelementos"


class RelationKind(str, Enum):
    ROLLUP = "rollup"
    CROSS_BOARD = "cross_board"


@dataclass(frozen=True)
class RelationMetadata:
    kind: RelationKind
    relation: dict[str, Any]
    displayed_linked_columns: dict[str, list[str]]
    target_board_id: str
    target_column_id: str
    flagged_column_ids: tuple[str, ...] = field(default=())


def parse_settings(settings_str: Optional[str]) -> Optional[dict[str, Any]]:
    """Decode a settings blob; ``None`` when missing or not a JSON object."""
    if not settings_str:
        return None
    settings = parse_json_object(settings_str)
    if settings is None:
        logger.debug("Ignoring unparsable column settings: %.80s", settings_str)
    return settings


def _relation_kind(relation: dict[str, Any]) -> Optional[RelationKind]:
    if not relation:
        return None
    if relation.get(SUBITEMS_RELATION_KEY):
        return RelationKind.ROLLUP
    return RelationKind.CROSS_BOARD


def parse_relation_metadata(settings_str: Optional[str]) -> Optional[RelationMetadata]:
    """
    Classify a column from its settings blob.

    Returns ``None`` (column is inert) when the blob is missing, unparsable,
    lacks ``displayed_linked_columns`` or a usable target, or has an empty
    ``relation_column`` map.
    """
    settings = parse_settings(settings_str)
    if settings is None:
        return None

    displayed = settings.get("displayed_linked_columns")
    if not isinstance(displayed, dict) or not displayed:
        return None

    relation = settings.get("relation_column")
    if not isinstance(relation, dict):
        return None
    kind = _relation_kind(relation)
    if kind is None:
        return None

    target_board_id = next(iter(displayed))
    target_columns = displayed[target_board_id]
    if not isinstance(target_columns, list) or not target_columns:
        return None

    return RelationMetadata(
        kind=kind,
        relation=relation,
        displayed_linked_columns=displayed,
        target_board_id=str(target_board_id),
        target_column_id=str(target_columns[0]),
        flagged_column_ids=tuple(k for k, v in relation.items() if v is True),
    )
