import logging

from sqlalchemy import and_, insert, select

from lexibranch.infrastructure.database.models.space import SpaceModel
from lexibranch.infrastructure.database.schema import spaces_table
from lexibranch.infrastructure.database.tables.base import BaseTable, new_id, utcnow
from lexibranch.infrastructure.database.tables.enums.spaces import SpacesTableAction

logger = logging.getLogger(__name__)

_COLUMNS = (
    spaces_table.c.id,
    spaces_table.c.project_id,
    spaces_table.c.name,
    spaces_table.c.slug,
    spaces_table.c.description,
    spaces_table.c.created_at,
    spaces_table.c.updated_at,
)


class SpacesTable(BaseTable):
    __tablename__ = "spaces"

    def get(self, space_id: str) -> SpaceModel | None:
        row = self.session.execute(
            select(*_COLUMNS).where(spaces_table.c.id == space_id)
        ).mappings().one_or_none()
        self._log(SpacesTableAction.GET, space_id=space_id, exists=row is not None)
        return SpaceModel(**row) if row else None

    def get_by_slug(self, project_id: str, slug: str) -> SpaceModel | None:
        row = self.session.execute(
            select(*_COLUMNS).where(
                and_(spaces_table.c.project_id == project_id, spaces_table.c.slug == slug)
            )
        ).mappings().one_or_none()
        self._log(
            SpacesTableAction.GET_BY_SLUG,
            project_id=project_id,
            slug=slug,
            exists=row is not None,
        )
        return SpaceModel(**row) if row else None

    def create(
        self,
        *,
        project_id: str,
        name: str,
        slug: str,
        description: str | None = None,
    ) -> SpaceModel:
        now = utcnow()
        space = SpaceModel(
            id=new_id(),
            project_id=project_id,
            name=name,
            slug=slug,
            description=description,
            created_at=now,
            updated_at=now,
        )
        self.session.execute(insert(spaces_table).values(**space.model_dump()))
        self._log(SpacesTableAction.CREATE, project_id=project_id, slug=slug)
        return space
