import logging

from sqlalchemy import insert, select

from lexibranch.infrastructure.database.models.environment import EnvironmentModel
from lexibranch.infrastructure.database.schema import environments_table
from lexibranch.infrastructure.database.tables.base import BaseTable, new_id, utcnow
from lexibranch.infrastructure.database.tables.enums.environments import (
    EnvironmentsTableAction,
)

logger = logging.getLogger(__name__)


class EnvironmentsTable(BaseTable):
    __tablename__ = "environments"

    def create(
        self, *, project_id: str, name: str, slug: str, branch_id: str
    ) -> EnvironmentModel:
        now = utcnow()
        environment = EnvironmentModel(
            id=new_id(), project_id=project_id, name=name, slug=slug, branch_id=branch_id
        )
        self.session.execute(
            insert(environments_table).values(
                **environment.model_dump(), created_at=now, updated_at=now
            )
        )
        self._log(EnvironmentsTableAction.CREATE, project_id=project_id, slug=slug)
        return environment

    def has_for_branch(self, branch_id: str) -> bool:
        environment_id = self.session.execute(
            select(environments_table.c.id)
            .where(environments_table.c.branch_id == branch_id)
            .limit(1)
        ).scalar_one_or_none()
        self._log(
            EnvironmentsTableAction.HAS_FOR_BRANCH,
            branch_id=branch_id,
            exists=environment_id is not None,
        )
        return environment_id is not None
