import logging

from sqlalchemy import and_, insert, select

from lexibranch.infrastructure.database.models.project import ProjectModel
from lexibranch.infrastructure.database.schema import (
    project_members_table,
    projects_table,
)
from lexibranch.infrastructure.database.tables.base import BaseTable, new_id, utcnow
from lexibranch.infrastructure.database.tables.enums.projects import ProjectsTableAction

logger = logging.getLogger(__name__)


class ProjectsTable(BaseTable):
    __tablename__ = "projects"

    def get(self, project_id: str) -> ProjectModel | None:
        row = self.session.execute(
            select(
                projects_table.c.id,
                projects_table.c.name,
                projects_table.c.slug,
                projects_table.c.default_language,
            ).where(projects_table.c.id == project_id)
        ).mappings().one_or_none()
        self._log(ProjectsTableAction.GET, project_id=project_id, exists=row is not None)
        return ProjectModel(**row) if row else None

    def create(self, *, name: str, slug: str, default_language: str = "en") -> ProjectModel:
        now = utcnow()
        project = ProjectModel(
            id=new_id(), name=name, slug=slug, default_language=default_language
        )
        self.session.execute(
            insert(projects_table).values(
                **project.model_dump(), created_at=now, updated_at=now
            )
        )
        self._log(ProjectsTableAction.CREATE, slug=slug)
        return project

    def add_member(self, *, project_id: str, user_id: str, role: str = "developer") -> None:
        self.session.execute(
            insert(project_members_table).values(
                id=new_id(),
                project_id=project_id,
                user_id=user_id,
                role=role,
                created_at=utcnow(),
            )
        )
        self._log(ProjectsTableAction.ADD_MEMBER, project_id=project_id, user_id=user_id)

    def is_member(self, project_id: str, user_id: str) -> bool:
        member_id = self.session.execute(
            select(project_members_table.c.id).where(
                and_(
                    project_members_table.c.project_id == project_id,
                    project_members_table.c.user_id == user_id,
                )
            )
        ).scalar_one_or_none()
        self._log(
            ProjectsTableAction.IS_MEMBER,
            project_id=project_id,
            user_id=user_id,
            member=member_id is not None,
        )
        return member_id is not None
