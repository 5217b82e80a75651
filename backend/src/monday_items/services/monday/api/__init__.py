# API endpoint handlers and GraphQL client for the Monday items service
from .client import MondayClient, MondayClientConfig, load_config
from .methods import (
    # Routes
    routes,
    item_routes,
    other_routes,
    # Handler wrapper
    api_handler,
    # Handlers
    health,
    items_get,
    items_normalize,
    group_items_list,
    items_by_column_value,
    graphql_execute,
)

__all__ = [
    "MondayClient",
    "MondayClientConfig",
    "load_config",
    "routes",
    "item_routes",
    "other_routes",
    "api_handler",
    "health",
    "items_get",
    "items_normalize",
    "group_items_list",
    "items_by_column_value",
    "graphql_execute",
]
