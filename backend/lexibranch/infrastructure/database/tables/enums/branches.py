from lexibranch.infrastructure.database.tables.enums.base import BaseTableActionEnum


class BranchesTableAction(BaseTableActionEnum):
    CREATE = "create"
    DELETE = "delete"
    GET = "get"
    GET_BY_SLUG = "get_by_slug"
    GET_WITH_KEY_COUNT = "get_with_key_count"
    LIST_BY_SPACE = "list_by_space"
    COPY_KEYS = "copy_keys"
