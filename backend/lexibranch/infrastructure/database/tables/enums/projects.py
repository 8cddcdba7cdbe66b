from lexibranch.infrastructure.database.tables.enums.base import BaseTableActionEnum


class ProjectsTableAction(BaseTableActionEnum):
    CREATE = "create"
    GET = "get"
    ADD_MEMBER = "add_member"
    IS_MEMBER = "is_member"
