import logging
from typing import Iterable

from sqlalchemy import and_, insert, select, update

from lexibranch.infrastructure.database.models.translation import (
    TranslationModel,
    TranslationStatus,
)
from lexibranch.infrastructure.database.schema import translations_table
from lexibranch.infrastructure.database.tables.base import BaseTable, new_id, utcnow
from lexibranch.infrastructure.database.tables.enums.translations import (
    TranslationsTableAction,
)

logger = logging.getLogger(__name__)

_COLUMNS = (
    translations_table.c.id,
    translations_table.c.key_id,
    translations_table.c.language,
    translations_table.c.value,
    translations_table.c.status,
)


class TranslationsTable(BaseTable):
    __tablename__ = "translations"

    def list_by_key(self, key_id: str) -> list[TranslationModel]:
        rows = self.session.execute(
            select(*_COLUMNS)
            .where(translations_table.c.key_id == key_id)
            .order_by(translations_table.c.language)
        ).mappings().all()
        self._log(TranslationsTableAction.LIST_BY_KEY, key_id=key_id, count=len(rows))
        return [TranslationModel(**row) for row in rows]

    def create_many(self, rows: Iterable[dict]) -> int:
        """
        Bulk insert translation rows. Each row needs ``key_id``, ``language``
        and ``value``; ``status`` defaults to pending. Ids are always new.
        """
        now = utcnow()
        payload = [
            {
                "id": new_id(),
                "key_id": row["key_id"],
                "language": row["language"],
                "value": row["value"],
                "status": TranslationStatus(row.get("status") or TranslationStatus.PENDING).value,
                "created_at": now,
                "updated_at": now,
            }
            for row in rows
        ]
        if payload:
            self.session.execute(insert(translations_table), payload)
        self._log(TranslationsTableAction.CREATE_MANY, count=len(payload))
        return len(payload)

    def upsert(self, *, key_id: str, language: str, value: str) -> TranslationModel:
        existing = self.session.execute(
            select(*_COLUMNS).where(
                and_(
                    translations_table.c.key_id == key_id,
                    translations_table.c.language == language,
                )
            )
        ).mappings().one_or_none()
        now = utcnow()
        if existing is None:
            translation_id = new_id()
            self.session.execute(
                insert(translations_table).values(
                    id=translation_id,
                    key_id=key_id,
                    language=language,
                    value=value,
                    status=TranslationStatus.PENDING.value,
                    created_at=now,
                    updated_at=now,
                )
            )
            translation = TranslationModel(
                id=translation_id,
                key_id=key_id,
                language=language,
                value=value,
                status=TranslationStatus.PENDING,
            )
        elif existing["value"] != value:
            # A changed value needs to be reviewed again.
            self.session.execute(
                update(translations_table)
                .where(translations_table.c.id == existing["id"])
                .values(value=value, status=TranslationStatus.PENDING.value, updated_at=now)
            )
            translation = TranslationModel(
                **{**existing, "value": value, "status": TranslationStatus.PENDING}
            )
        else:
            translation = TranslationModel(**existing)
        self._log(
            TranslationsTableAction.UPSERT,
            key_id=key_id,
            language=language,
            created=existing is None,
        )
        return translation

    def set_status(
        self, *, key_id: str, language: str, status: TranslationStatus
    ) -> TranslationModel | None:
        self.session.execute(
            update(translations_table)
            .where(
                and_(
                    translations_table.c.key_id == key_id,
                    translations_table.c.language == language,
                )
            )
            .values(status=status.value, updated_at=utcnow())
        )
        row = self.session.execute(
            select(*_COLUMNS).where(
                and_(
                    translations_table.c.key_id == key_id,
                    translations_table.c.language == language,
                )
            )
        ).mappings().one_or_none()
        self._log(
            TranslationsTableAction.SET_STATUS,
            key_id=key_id,
            language=language,
            status=status.value,
            exists=row is not None,
        )
        return TranslationModel(**row) if row else None
