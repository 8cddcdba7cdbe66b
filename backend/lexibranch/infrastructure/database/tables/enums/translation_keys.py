from lexibranch.infrastructure.database.tables.enums.base import BaseTableActionEnum


class TranslationKeysTableAction(BaseTableActionEnum):
    CREATE = "create"
    CREATE_MANY = "create_many"
    GET = "get"
    GET_BY_NAME = "get_by_name"
    LIST_WITH_TRANSLATIONS = "list_with_translations"
