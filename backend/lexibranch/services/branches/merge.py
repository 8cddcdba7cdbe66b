from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from sqlalchemy.orm import sessionmaker

from lexibranch.database import get_session
from lexibranch.infrastructure.database.db import DB
from lexibranch.services.access import (
    AccessChecker,
    ProjectMembershipAccess,
    project_id_for_branch,
)
from lexibranch.services.branches.diff import (
    BranchDiffResult,
    ConflictEntry,
    DiffCalculator,
)
from lexibranch.services.branches.resolutions import (
    ConflictResolution,
    Explicit,
    ResolutionChoice,
    UseSource,
    UseTarget,
)
from lexibranch.services.events import BranchesMerged, Effect

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MergeResult:
    success: bool
    merged: int
    conflicts: tuple[ConflictEntry, ...] = ()
    effects: tuple[Effect, ...] = ()


class MergeExecutor:
    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        diff_calculator: Optional[DiffCalculator] = None,
        access: Optional[AccessChecker] = None,
    ) -> None:
        self._session_factory = session_factory
        self._access = access or ProjectMembershipAccess()
        self._diff = diff_calculator or DiffCalculator(session_factory, self._access)

    def preview_merge(
        self,
        source_branch_id: str,
        target_branch_id: str,
        *,
        actor_id: str | None = None,
    ) -> BranchDiffResult:
        """The diff a merge would apply; nothing is written."""
        return self._diff.compute_diff(source_branch_id, target_branch_id, actor_id=actor_id)

    def merge(
        self,
        source_branch_id: str,
        target_branch_id: str,
        resolutions: Iterable[ConflictResolution] = (),
        *,
        actor_id: str | None = None,
    ) -> MergeResult:
        """
        Apply ``source`` onto ``target``.

        While any conflict lacks a resolution nothing is written and the
        unresolved conflicts are returned with ``success=False``; call again
        with resolutions to finish. Keys that exist only in the target are
        never removed.
        """
        with get_session(self._session_factory) as session:
            db = DB(session)
            if actor_id is not None:
                project_id = project_id_for_branch(db, source_branch_id, resource="Source branch")
                self._access.verify_project_access(db, actor_id=actor_id, project_id=project_id)

            diff = self._diff.compute_diff_in(db, source_branch_id, target_branch_id)
            choices = {resolution.key: resolution.choice for resolution in resolutions}
            unresolved = tuple(entry for entry in diff.conflicts if entry.key not in choices)
            if unresolved:
                logger.info(
                    "Merge aborted source=%s target=%s unresolved_conflicts=%s",
                    diff.source.id,
                    diff.target.id,
                    len(unresolved),
                )
                return MergeResult(success=False, merged=0, conflicts=unresolved)

            merged = self._apply(db, diff, choices)

        logger.info(
            "Merge applied source=%s target=%s merged=%s conflicts_resolved=%s",
            diff.source.id,
            diff.target.id,
            merged,
            len(diff.conflicts),
        )
        return MergeResult(
            success=True,
            merged=merged,
            effects=(
                BranchesMerged(
                    source_branch_id=diff.source.id,
                    source_branch_name=diff.source.name,
                    target_branch_id=diff.target.id,
                    target_branch_name=diff.target.name,
                    merged=merged,
                    conflicts_resolved=len(diff.conflicts),
                    actor_id=actor_id,
                ),
            ),
        )

    def _apply(
        self,
        db: DB,
        diff: BranchDiffResult,
        choices: Mapping[str, ResolutionChoice],
    ) -> int:
        target_id = diff.target.id
        merged = 0

        for entry in diff.added:
            key = db.translation_keys.create(branch_id=target_id, name=entry.key)
            db.translations.create_many(
                {"key_id": key.id, "language": language, "value": value}
                for language, value in entry.translations.items()
            )
            merged += 1

        for entry in diff.modified:
            if self._write_onto_target(db, target_id, entry.key, entry.source):
                merged += 1

        for entry in diff.conflicts:
            choice = choices[entry.key]
            if isinstance(choice, UseTarget):
                continue
            if isinstance(choice, UseSource):
                values = entry.source
            elif isinstance(choice, Explicit):
                values = choice.translations
            else:
                raise TypeError(f"Unsupported resolution for {entry.key!r}: {choice!r}")
            if self._write_onto_target(db, target_id, entry.key, values):
                merged += 1

        # diff.deleted is left alone: a key missing from source is not removed from target.
        return merged

    def _write_onto_target(
        self, db: DB, target_id: str, key_name: str, values: Mapping[str, str]
    ) -> bool:
        key = db.translation_keys.get_by_name(target_id, key_name)
        if key is None:
            # Removed from target after the diff was computed.
            logger.warning(
                "Merge skipped key missing from target target=%s key=%s", target_id, key_name
            )
            return False
        for language, value in values.items():
            db.translations.upsert(key_id=key.id, language=language, value=value)
        return True
