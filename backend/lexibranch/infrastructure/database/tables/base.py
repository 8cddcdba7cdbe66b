import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from lexibranch.infrastructure.database.tables.enums.base import BaseTableActionEnum

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseTable:
    __tablename__: str = ""

    def __init__(self, session: Session):
        self.session = session

    def _log(self, action: BaseTableActionEnum, **fields: Any) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        details = " ".join(f"{name}={value!r}" for name, value in fields.items())
        logger.debug("table=%s action=%s %s", self.__tablename__, action.value, details)
