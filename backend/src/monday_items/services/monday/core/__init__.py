# Column value normalization and relation aggregation for Monday items
from .models import (
    ColumnValue,
    ItemFields,
    LinkedItemIndex,
    MappableValue,
    NormalizedBatch,
    NormalizedItem,
    ParentItem,
    RawColumnValue,
    RawItem,
    SubItem,
)
from .column_values import (
    build_mappable,
    build_mappables,
    map_column_value,
    map_column_values,
)
from .relations import (
    RelationKind,
    RelationMetadata,
    parse_relation_metadata,
    parse_settings,
)
from .linked_items import (
    FetchItemsByIds,
    collect_linked_ids,
    resolve_linked_items,
)
from .aggregation import (
    aggregate_linked,
    aggregate_rollups,
)
from .normalizer import (
    aggregate_batch,
    normalize,
    normalize_batch,
    normalize_items,
)
from .errors import (
    MondayAPIError,
    MondayTransportError,
    MondayGraphQLError,
    ValidationError,
    ConfigurationError,
)

__all__ = [
    # Models
    "ColumnValue",
    "ItemFields",
    "LinkedItemIndex",
    "MappableValue",
    "NormalizedBatch",
    "NormalizedItem",
    "ParentItem",
    "RawColumnValue",
    "RawItem",
    "SubItem",
    # Column values
    "build_mappable",
    "build_mappables",
    "map_column_value",
    "map_column_values",
    # Relations
    "RelationKind",
    "RelationMetadata",
    "parse_relation_metadata",
    "parse_settings",
    # Linked items
    "FetchItemsByIds",
    "collect_linked_ids",
    "resolve_linked_items",
    # Aggregation
    "aggregate_linked",
    "aggregate_rollups",
    # Pipeline
    "aggregate_batch",
    "normalize",
    "normalize_batch",
    "normalize_items",
    # Errors
    "MondayAPIError",
    "MondayTransportError",
    "MondayGraphQLError",
    "ValidationError",
    "ConfigurationError",
]
