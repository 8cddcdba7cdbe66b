from lexibranch.infrastructure.database.tables.enums.base import BaseTableActionEnum


class EnvironmentsTableAction(BaseTableActionEnum):
    CREATE = "create"
    HAS_FOR_BRANCH = "has_for_branch"
