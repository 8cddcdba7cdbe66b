import logging

from sqlalchemy import and_, delete, func, insert, select

from lexibranch.infrastructure.database.models.branch import (
    BranchModel,
    BranchWithKeyCountModel,
)
from lexibranch.infrastructure.database.schema import (
    branches_table,
    translation_keys_table,
)
from lexibranch.infrastructure.database.tables.base import BaseTable, new_id, utcnow
from lexibranch.infrastructure.database.tables.enums.branches import BranchesTableAction
from lexibranch.infrastructure.database.tables.translation_keys import (
    TranslationKeysTable,
)
from lexibranch.infrastructure.database.tables.translations import TranslationsTable

logger = logging.getLogger(__name__)

_COLUMNS = (
    branches_table.c.id,
    branches_table.c.space_id,
    branches_table.c.name,
    branches_table.c.slug,
    branches_table.c.is_default,
    branches_table.c.source_branch_id,
    branches_table.c.created_at,
    branches_table.c.updated_at,
)


class BranchesTable(BaseTable):
    __tablename__ = "branches"

    def get(self, branch_id: str) -> BranchModel | None:
        row = self.session.execute(
            select(*_COLUMNS).where(branches_table.c.id == branch_id)
        ).mappings().one_or_none()
        self._log(BranchesTableAction.GET, branch_id=branch_id, exists=row is not None)
        return BranchModel(**row) if row else None

    def get_by_slug(self, space_id: str, slug: str) -> BranchModel | None:
        row = self.session.execute(
            select(*_COLUMNS).where(
                and_(branches_table.c.space_id == space_id, branches_table.c.slug == slug)
            )
        ).mappings().one_or_none()
        self._log(
            BranchesTableAction.GET_BY_SLUG,
            space_id=space_id,
            slug=slug,
            exists=row is not None,
        )
        return BranchModel(**row) if row else None

    def _with_key_counts(self):
        key_count = (
            select(func.count(translation_keys_table.c.id))
            .where(translation_keys_table.c.branch_id == branches_table.c.id)
            .correlate(branches_table)
            .scalar_subquery()
        )
        return select(*_COLUMNS, key_count.label("key_count"))

    def get_with_key_count(self, branch_id: str) -> BranchWithKeyCountModel | None:
        row = self.session.execute(
            self._with_key_counts().where(branches_table.c.id == branch_id)
        ).mappings().one_or_none()
        self._log(
            BranchesTableAction.GET_WITH_KEY_COUNT,
            branch_id=branch_id,
            exists=row is not None,
        )
        return BranchWithKeyCountModel(**row) if row else None

    def list_by_space(self, space_id: str) -> list[BranchWithKeyCountModel]:
        rows = self.session.execute(
            self._with_key_counts()
            .where(branches_table.c.space_id == space_id)
            .order_by(branches_table.c.is_default.desc(), branches_table.c.name)
        ).mappings().all()
        self._log(BranchesTableAction.LIST_BY_SPACE, space_id=space_id, count=len(rows))
        return [BranchWithKeyCountModel(**row) for row in rows]

    def create(
        self,
        *,
        space_id: str,
        name: str,
        slug: str,
        source_branch_id: str | None,
        is_default: bool = False,
    ) -> BranchModel:
        now = utcnow()
        branch = BranchModel(
            id=new_id(),
            space_id=space_id,
            name=name,
            slug=slug,
            is_default=is_default,
            source_branch_id=source_branch_id,
            created_at=now,
            updated_at=now,
        )
        self.session.execute(insert(branches_table).values(**branch.model_dump()))
        self._log(
            BranchesTableAction.CREATE,
            space_id=space_id,
            slug=slug,
            source_branch_id=source_branch_id,
        )
        return branch

    def delete(self, branch_id: str) -> None:
        self.session.execute(delete(branches_table).where(branches_table.c.id == branch_id))
        self._log(BranchesTableAction.DELETE, branch_id=branch_id)

    def copy_keys_and_translations(self, source_branch_id: str, target_branch_id: str) -> int:
        """
        Clone every key of the source branch, with its translations, into the
        target branch. Runs on the caller's session, so it is atomic with
        whatever else the caller does in that unit of work.
        """
        keys_table = TranslationKeysTable(self.session)
        source_keys = keys_table.list_with_translations(source_branch_id)
        created = keys_table.create_many(target_branch_id, source_keys)
        TranslationsTable(self.session).create_many(
            {
                "key_id": new_key.id,
                "language": translation.language,
                "value": translation.value,
                "status": translation.status,
            }
            for source_key, new_key in zip(source_keys, created)
            for translation in source_key.translations
        )
        self._log(
            BranchesTableAction.COPY_KEYS,
            source_branch_id=source_branch_id,
            target_branch_id=target_branch_id,
            count=len(source_keys),
        )
        return len(source_keys)
