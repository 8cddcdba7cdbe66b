from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from lexibranch.database import get_session
from lexibranch.errors import FieldValidationError, NotFoundError, ValidationError
from lexibranch.infrastructure.database.db import DB
from lexibranch.infrastructure.database.models.branch import (
    BranchModel,
    BranchWithKeyCountModel,
)
from lexibranch.services.access import AccessChecker, ProjectMembershipAccess
from lexibranch.services.events import BranchCreated, BranchDeleted, Effect
from lexibranch.services.slug import slugify

logger = logging.getLogger(__name__)

BRANCH_NAME_EXISTS = "BRANCH_NAME_EXISTS"
BRANCH_NAME_INVALID = "BRANCH_NAME_INVALID"


def _branch_name_taken() -> FieldValidationError:
    return FieldValidationError(
        field="name",
        code=BRANCH_NAME_EXISTS,
        message="Branch with this name already exists in the space",
    )


def _is_slug_violation(exc: IntegrityError) -> bool:
    # Postgres names the constraint, SQLite lists the columns; both mention slug.
    return "slug" in str(exc.orig).lower()


@dataclass(frozen=True, slots=True)
class BranchCreationResult:
    branch: BranchWithKeyCountModel
    effects: tuple[Effect, ...]


@dataclass(frozen=True, slots=True)
class BranchDeletionResult:
    branch: BranchModel
    effects: tuple[Effect, ...]


class BranchCreationService:
    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        access: Optional[AccessChecker] = None,
    ) -> None:
        self._session_factory = session_factory
        self._access = access or ProjectMembershipAccess()

    def create(
        self,
        *,
        name: str,
        space_id: str,
        from_branch_id: str,
        actor_id: str,
    ) -> BranchCreationResult:
        """
        Create a branch as a full copy of ``from_branch_id``.

        Every precondition is checked before the first write. The branch row,
        its keys and their translations are written in one unit of work, so a
        failure anywhere leaves no partial branch behind.
        """
        with get_session(self._session_factory) as session:
            db = DB(session)
            space = db.spaces.get(space_id)
            if space is None:
                raise NotFoundError("Space")
            self._access.verify_project_access(
                db, actor_id=actor_id, project_id=space.project_id
            )

            source = db.branches.get(from_branch_id)
            if source is None:
                raise NotFoundError("Source branch")
            if source.space_id != space_id:
                raise ValidationError("Source branch must belong to the same space")

            clean_name = (name or "").strip()
            slug = slugify(clean_name)
            if not slug:
                raise FieldValidationError(
                    field="name",
                    code=BRANCH_NAME_INVALID,
                    message="Branch name must contain at least one letter or digit",
                )
            if db.branches.get_by_slug(space_id, slug) is not None:
                raise _branch_name_taken()

            try:
                branch = db.branches.create(
                    space_id=space_id,
                    name=clean_name,
                    slug=slug,
                    source_branch_id=source.id,
                )
            except IntegrityError as exc:
                if not _is_slug_violation(exc):
                    raise
                logger.info(
                    "Concurrent branch creation lost slug race space_id=%s slug=%s",
                    space_id,
                    slug,
                )
                raise _branch_name_taken() from exc

            key_count = db.branches.copy_keys_and_translations(source.id, branch.id)

        created = BranchWithKeyCountModel(**branch.model_dump(), key_count=key_count)
        logger.info(
            "Branch created branch_id=%s slug=%s space_id=%s source_branch_id=%s keys=%s",
            created.id,
            created.slug,
            space_id,
            source.id,
            key_count,
        )
        return BranchCreationResult(
            branch=created,
            effects=(
                BranchCreated(
                    branch=created,
                    source_branch_id=source.id,
                    source_branch_name=source.name,
                    actor_id=actor_id,
                ),
            ),
        )

    def delete(self, branch_id: str, *, actor_id: str | None = None) -> BranchDeletionResult:
        with get_session(self._session_factory) as session:
            db = DB(session)
            branch = db.branches.get(branch_id)
            if branch is None:
                raise NotFoundError("Branch")
            if actor_id is not None:
                self._verify_space_access(db, branch.space_id, actor_id)
            if branch.is_default:
                raise ValidationError("Cannot delete the default branch")
            if db.environments.has_for_branch(branch_id):
                raise ValidationError(
                    "Cannot delete branch: it is used by one or more environments"
                )
            # Keys and translations go with the branch through ON DELETE CASCADE.
            db.branches.delete(branch_id)

        logger.info("Branch deleted branch_id=%s space_id=%s", branch.id, branch.space_id)
        return BranchDeletionResult(
            branch=branch,
            effects=(
                BranchDeleted(
                    branch_id=branch.id,
                    branch_name=branch.name,
                    space_id=branch.space_id,
                    actor_id=actor_id,
                ),
            ),
        )

    def get(self, branch_id: str, *, actor_id: str | None = None) -> BranchWithKeyCountModel:
        with get_session(self._session_factory) as session:
            db = DB(session)
            branch = db.branches.get_with_key_count(branch_id)
            if branch is None:
                raise NotFoundError("Branch")
            if actor_id is not None:
                self._verify_space_access(db, branch.space_id, actor_id)
            return branch

    def list_for_space(
        self, space_id: str, *, actor_id: str | None = None
    ) -> list[BranchWithKeyCountModel]:
        with get_session(self._session_factory) as session:
            db = DB(session)
            if actor_id is not None:
                self._verify_space_access(db, space_id, actor_id)
            elif db.spaces.get(space_id) is None:
                raise NotFoundError("Space")
            return db.branches.list_by_space(space_id)

    def _verify_space_access(self, db: DB, space_id: str, actor_id: str) -> None:
        space = db.spaces.get(space_id)
        if space is None:
            raise NotFoundError("Space")
        self._access.verify_project_access(db, actor_id=actor_id, project_id=space.project_id)
