from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from lexibranch.config import settings
from lexibranch.database import get_session
from lexibranch.errors import FieldValidationError, NotFoundError
from lexibranch.infrastructure.database.db import DB
from lexibranch.infrastructure.database.models.branch import BranchModel
from lexibranch.infrastructure.database.models.space import SpaceModel
from lexibranch.services.access import AccessChecker, ProjectMembershipAccess
from lexibranch.services.slug import slugify

logger = logging.getLogger(__name__)

SPACE_NAME_EXISTS = "SPACE_NAME_EXISTS"


def _space_name_taken() -> FieldValidationError:
    return FieldValidationError(
        field="name",
        code=SPACE_NAME_EXISTS,
        message="Space with this name already exists in the project",
    )


def _is_slug_violation(exc: IntegrityError) -> bool:
    return "slug" in str(exc.orig).lower()


@dataclass(frozen=True, slots=True)
class SpaceCreationResult:
    space: SpaceModel
    default_branch: BranchModel


class SpaceService:
    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        access: Optional[AccessChecker] = None,
        default_branch_name: str | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._access = access or ProjectMembershipAccess()
        self._default_branch_name = default_branch_name or settings.default_branch_name

    def create_space(
        self,
        *,
        project_id: str,
        name: str,
        actor_id: str,
        description: str | None = None,
    ) -> SpaceCreationResult:
        """Create a space together with its empty default branch."""
        clean_name = (name or "").strip()
        slug = slugify(clean_name)
        if not slug:
            raise FieldValidationError(
                field="name",
                code="SPACE_NAME_INVALID",
                message="Space name must contain at least one letter or digit",
            )
        with get_session(self._session_factory) as session:
            db = DB(session)
            if db.projects.get(project_id) is None:
                raise NotFoundError("Project")
            self._access.verify_project_access(db, actor_id=actor_id, project_id=project_id)
            if db.spaces.get_by_slug(project_id, slug) is not None:
                raise _space_name_taken()
            try:
                space = db.spaces.create(
                    project_id=project_id,
                    name=clean_name,
                    slug=slug,
                    description=description,
                )
            except IntegrityError as exc:
                if not _is_slug_violation(exc):
                    raise
                raise _space_name_taken() from exc
            default_branch = db.branches.create(
                space_id=space.id,
                name=self._default_branch_name,
                slug=slugify(self._default_branch_name),
                source_branch_id=None,
                is_default=True,
            )
        logger.info("Space created space_id=%s project_id=%s", space.id, project_id)
        return SpaceCreationResult(space=space, default_branch=default_branch)
