import logging
from typing import Iterable

from sqlalchemy import and_, insert, select

from lexibranch.infrastructure.database.models.translation import TranslationModel
from lexibranch.infrastructure.database.models.translation_key import (
    TranslationKeyModel,
    TranslationKeyWithTranslationsModel,
)
from lexibranch.infrastructure.database.schema import (
    translation_keys_table,
    translations_table,
)
from lexibranch.infrastructure.database.tables.base import BaseTable, new_id, utcnow
from lexibranch.infrastructure.database.tables.enums.translation_keys import (
    TranslationKeysTableAction,
)

logger = logging.getLogger(__name__)

_COLUMNS = (
    translation_keys_table.c.id,
    translation_keys_table.c.branch_id,
    translation_keys_table.c.name,
    translation_keys_table.c.namespace,
    translation_keys_table.c.description,
)


class TranslationKeysTable(BaseTable):
    __tablename__ = "translation_keys"

    def get(self, key_id: str) -> TranslationKeyModel | None:
        row = self.session.execute(
            select(*_COLUMNS).where(translation_keys_table.c.id == key_id)
        ).mappings().one_or_none()
        self._log(TranslationKeysTableAction.GET, key_id=key_id, exists=row is not None)
        return TranslationKeyModel(**row) if row else None

    def get_by_name(self, branch_id: str, name: str) -> TranslationKeyModel | None:
        row = self.session.execute(
            select(*_COLUMNS).where(
                and_(
                    translation_keys_table.c.branch_id == branch_id,
                    translation_keys_table.c.name == name,
                )
            )
        ).mappings().one_or_none()
        self._log(
            TranslationKeysTableAction.GET_BY_NAME,
            branch_id=branch_id,
            name=name,
            exists=row is not None,
        )
        return TranslationKeyModel(**row) if row else None

    def create(
        self,
        *,
        branch_id: str,
        name: str,
        namespace: str | None = None,
        description: str | None = None,
    ) -> TranslationKeyModel:
        now = utcnow()
        key = TranslationKeyModel(
            id=new_id(),
            branch_id=branch_id,
            name=name,
            namespace=namespace,
            description=description,
        )
        self.session.execute(
            insert(translation_keys_table).values(
                **key.model_dump(), created_at=now, updated_at=now
            )
        )
        self._log(TranslationKeysTableAction.CREATE, branch_id=branch_id, name=name)
        return key

    def create_many(
        self, branch_id: str, keys: Iterable[TranslationKeyModel]
    ) -> list[TranslationKeyModel]:
        """Clone keys under ``branch_id`` with freshly generated ids."""
        now = utcnow()
        created = [
            TranslationKeyModel(
                id=new_id(),
                branch_id=branch_id,
                name=key.name,
                namespace=key.namespace,
                description=key.description,
            )
            for key in keys
        ]
        if created:
            self.session.execute(
                insert(translation_keys_table),
                [{**key.model_dump(), "created_at": now, "updated_at": now} for key in created],
            )
        self._log(
            TranslationKeysTableAction.CREATE_MANY, branch_id=branch_id, count=len(created)
        )
        return created

    def list_with_translations(
        self, branch_id: str
    ) -> list[TranslationKeyWithTranslationsModel]:
        key_rows = self.session.execute(
            select(*_COLUMNS)
            .where(translation_keys_table.c.branch_id == branch_id)
            .order_by(translation_keys_table.c.name)
        ).mappings().all()
        translation_rows = self.session.execute(
            select(
                translations_table.c.id,
                translations_table.c.key_id,
                translations_table.c.language,
                translations_table.c.value,
                translations_table.c.status,
            )
            .select_from(
                translations_table.join(
                    translation_keys_table,
                    translations_table.c.key_id == translation_keys_table.c.id,
                )
            )
            .where(translation_keys_table.c.branch_id == branch_id)
            .order_by(translations_table.c.language)
        ).mappings().all()

        by_key: dict[str, list[TranslationModel]] = {}
        for row in translation_rows:
            by_key.setdefault(row["key_id"], []).append(TranslationModel(**row))

        keys = [
            TranslationKeyWithTranslationsModel(
                **row, translations=tuple(by_key.get(row["id"], ()))
            )
            for row in key_rows
        ]
        self._log(
            TranslationKeysTableAction.LIST_WITH_TRANSLATIONS,
            branch_id=branch_id,
            keys=len(keys),
            translations=len(translation_rows),
        )
        return keys
