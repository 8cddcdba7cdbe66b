from lexibranch.infrastructure.database.tables.enums.base import BaseTableActionEnum


class SpacesTableAction(BaseTableActionEnum):
    CREATE = "create"
    GET = "get"
    GET_BY_SLUG = "get_by_slug"
