# GraphQL documents sent to the Monday API
# Field selections match what the normalizer reads

COLUMN_VALUE_FIELDS = """
    id
    text
    value
    column { title settings_str }
    ... on BoardRelationValue {
        linked_item_ids
        display_value
    }
"""

SUBITEM_FIELDS = f"""
    id
    name
    created_at
    updated_at
    state
    board {{ id }}
    creator_id
    group {{ id }}
    column_values {{ {COLUMN_VALUE_FIELDS} }}
"""

ITEM_FIELDS = f"""
    id
    name
    email
    created_at
    updated_at
    state
    board {{ id }}
    creator_id
    group {{ id title deleted archived }}
    column_values {{ {COLUMN_VALUE_FIELDS} }}
    assets {{ id name url }}
    subitems {{ {SUBITEM_FIELDS} }}
"""

# items(ids) also selects the parent, one level deep
ITEMS_BY_IDS_QUERY = f"""
query ($itemIds: [ID!]) {{
    items (ids: $itemIds) {{
        {ITEM_FIELDS}
        parent_item {{
            id
            name
            created_at
            updated_at
            state
            board {{ id }}
            creator_id
            group {{ id }}
            column_values {{ {COLUMN_VALUE_FIELDS} }}
        }}
    }}
}}
"""

GROUP_ITEMS_QUERY = f"""
query ($boardId: [ID!], $groupId: [String], $limit: Int) {{
    boards (ids: $boardId) {{
        groups (ids: $groupId) {{
            id
            items_page (limit: $limit) {{
                cursor
                items {{ {ITEM_FIELDS} }}
            }}
        }}
    }}
}}
"""

ITEMS_BY_COLUMN_VALUE_QUERY = f"""
query ($boardId: ID!, $columnId: String!, $columnValue: String!, $limit: Int) {{
    items_page_by_column_values (
        limit: $limit
        board_id: $boardId
        columns: [{{column_id: $columnId, column_values: [$columnValue]}}]
    ) {{
        cursor
        items {{ {ITEM_FIELDS} }}
    }}
}}
"""

# Minimal shape the connect-boards aggregation reads
LINKED_ITEMS_QUERY = """
query ($ids: [ID!]) {
    items (ids: $ids) {
        id
        name
        board { id }
        column_values { id text value }
    }
}
"""
