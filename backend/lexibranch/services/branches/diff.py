"""
Branch diff.

Branches are full copies of each other, so two branches are compared key by
key, matching keys by name (row ids never coincide across branches). From the
point of view of merging ``source`` into ``target``:

* added     - key exists only in source
* modified  - key exists in both with different translations
* conflicts - like modified, but source was branched directly from target,
              so both sides diverged from one common state
* deleted   - key exists only in target

Keys with equal translations are not reported at all.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional

from sqlalchemy.orm import sessionmaker

from lexibranch.database import get_session
from lexibranch.errors import NotFoundError, ValidationError
from lexibranch.infrastructure.database.db import DB
from lexibranch.infrastructure.database.models.branch import BranchModel
from lexibranch.infrastructure.database.models.translation_key import (
    TranslationKeyWithTranslationsModel,
)
from lexibranch.services.access import (
    AccessChecker,
    ProjectMembershipAccess,
    project_id_for_branch,
)

logger = logging.getLogger(__name__)

TranslationMap = dict[str, str]


class Lineage(str, Enum):
    DIRECT_CHILD = "direct_child"
    UNRELATED = "unrelated"

    @classmethod
    def between(cls, source: BranchModel, target: BranchModel) -> "Lineage":
        # Only one hop of ancestry is recorded; grandchildren count as unrelated.
        if source.source_branch_id is not None and source.source_branch_id == target.id:
            return cls.DIRECT_CHILD
        return cls.UNRELATED


@dataclass(frozen=True, slots=True)
class BranchRef:
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class DiffEntry:
    key: str
    translations: TranslationMap


@dataclass(frozen=True, slots=True)
class ModifiedEntry:
    key: str
    source: TranslationMap
    target: TranslationMap


@dataclass(frozen=True, slots=True)
class ConflictEntry:
    key: str
    source: TranslationMap
    target: TranslationMap


@dataclass(frozen=True, slots=True)
class DiffSets:
    added: tuple[DiffEntry, ...] = ()
    modified: tuple[ModifiedEntry, ...] = ()
    deleted: tuple[DiffEntry, ...] = ()
    conflicts: tuple[ConflictEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class BranchDiffResult:
    source: BranchRef
    target: BranchRef
    lineage: Lineage
    added: tuple[DiffEntry, ...]
    modified: tuple[ModifiedEntry, ...]
    deleted: tuple[DiffEntry, ...]
    conflicts: tuple[ConflictEntry, ...]

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.modified or self.conflicts)


def to_translation_map(key: TranslationKeyWithTranslationsModel) -> TranslationMap:
    return {translation.language: translation.value for translation in key.translations}


def build_key_index(
    keys: Iterable[TranslationKeyWithTranslationsModel],
) -> dict[str, TranslationMap]:
    return {key.name: to_translation_map(key) for key in keys}


def classify(
    source: Mapping[str, TranslationMap],
    target: Mapping[str, TranslationMap],
    lineage: Lineage,
) -> DiffSets:
    added: list[DiffEntry] = []
    modified: list[ModifiedEntry] = []
    deleted: list[DiffEntry] = []
    conflicts: list[ConflictEntry] = []

    for name, source_map in source.items():
        target_map = target.get(name)
        if target_map is None:
            added.append(DiffEntry(key=name, translations=dict(source_map)))
            continue
        # dict equality: same languages and same value per language
        if source_map == target_map:
            continue
        if lineage is Lineage.DIRECT_CHILD:
            conflicts.append(
                ConflictEntry(key=name, source=dict(source_map), target=dict(target_map))
            )
        else:
            modified.append(
                ModifiedEntry(key=name, source=dict(source_map), target=dict(target_map))
            )

    for name, target_map in target.items():
        if name not in source:
            deleted.append(DiffEntry(key=name, translations=dict(target_map)))

    return DiffSets(
        added=tuple(added),
        modified=tuple(modified),
        deleted=tuple(deleted),
        conflicts=tuple(conflicts),
    )


class DiffCalculator:
    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        access: Optional[AccessChecker] = None,
    ) -> None:
        self._session_factory = session_factory
        self._access = access or ProjectMembershipAccess()

    def compute_diff(
        self,
        source_branch_id: str,
        target_branch_id: str,
        *,
        actor_id: str | None = None,
    ) -> BranchDiffResult:
        with get_session(self._session_factory) as session:
            db = DB(session)
            if actor_id is not None:
                project_id = project_id_for_branch(db, source_branch_id, resource="Source branch")
                self._access.verify_project_access(db, actor_id=actor_id, project_id=project_id)
            return self.compute_diff_in(db, source_branch_id, target_branch_id)

    def compute_diff_in(
        self, db: DB, source_branch_id: str, target_branch_id: str
    ) -> BranchDiffResult:
        """Same as ``compute_diff`` but reads through an open unit of work."""
        source_branch = db.branches.get(source_branch_id)
        if source_branch is None:
            raise NotFoundError("Source branch")
        target_branch = db.branches.get(target_branch_id)
        if target_branch is None:
            raise NotFoundError("Target branch")
        if source_branch.space_id != target_branch.space_id:
            raise ValidationError("Branches must be in the same space")

        lineage = Lineage.between(source_branch, target_branch)
        sets = classify(
            build_key_index(db.translation_keys.list_with_translations(source_branch.id)),
            build_key_index(db.translation_keys.list_with_translations(target_branch.id)),
            lineage,
        )
        logger.debug(
            "Diff source=%s target=%s lineage=%s added=%s modified=%s deleted=%s conflicts=%s",
            source_branch.id,
            target_branch.id,
            lineage.value,
            len(sets.added),
            len(sets.modified),
            len(sets.deleted),
            len(sets.conflicts),
        )
        return BranchDiffResult(
            source=BranchRef(id=source_branch.id, name=source_branch.name),
            target=BranchRef(id=target_branch.id, name=target_branch.name),
            lineage=lineage,
            added=sets.added,
            modified=sets.modified,
            deleted=sets.deleted,
            conflicts=sets.conflicts,
        )
