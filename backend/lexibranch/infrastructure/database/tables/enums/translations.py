from lexibranch.infrastructure.database.tables.enums.base import BaseTableActionEnum


class TranslationsTableAction(BaseTableActionEnum):
    UPSERT = "upsert"
    CREATE_MANY = "create_many"
    LIST_BY_KEY = "list_by_key"
    SET_STATUS = "set_status"
