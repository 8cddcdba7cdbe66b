from __future__ import annotations

import logging
from typing import Protocol

from lexibranch.errors import ForbiddenError, NotFoundError
from lexibranch.infrastructure.database.db import DB

logger = logging.getLogger(__name__)


class AccessChecker(Protocol):
    def verify_project_access(self, db: DB, *, actor_id: str, project_id: str) -> None:
        """Raise ForbiddenError unless the actor may work on the project."""


class ProjectMembershipAccess:
    """Grants access to members listed in ``project_members``."""

    def verify_project_access(self, db: DB, *, actor_id: str, project_id: str) -> None:
        if not actor_id or not db.projects.is_member(project_id, actor_id):
            logger.info("Access denied actor_id=%s project_id=%s", actor_id, project_id)
            raise ForbiddenError()


def project_id_for_branch(db: DB, branch_id: str, *, resource: str = "Branch") -> str:
    branch = db.branches.get(branch_id)
    if branch is None:
        raise NotFoundError(resource)
    space = db.spaces.get(branch.space_id)
    if space is None:
        raise NotFoundError("Space")
    return space.project_id
