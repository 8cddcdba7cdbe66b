from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Protocol, Union

from lexibranch.infrastructure.database.models.branch import BranchWithKeyCountModel

logger = logging.getLogger(__name__)
activity_logger = logging.getLogger("lexibranch.activity")


@dataclass(frozen=True, slots=True)
class BranchCreated:
    branch: BranchWithKeyCountModel
    source_branch_id: str
    source_branch_name: str
    actor_id: str
    name: str = "branch.created"


@dataclass(frozen=True, slots=True)
class BranchDeleted:
    branch_id: str
    branch_name: str
    space_id: str
    actor_id: str | None
    name: str = "branch.deleted"


@dataclass(frozen=True, slots=True)
class BranchesMerged:
    source_branch_id: str
    source_branch_name: str
    target_branch_id: str
    target_branch_name: str
    merged: int
    conflicts_resolved: int
    actor_id: str | None
    name: str = "branches.merged"


Effect = Union[BranchCreated, BranchDeleted, BranchesMerged]


class EffectPublisher(Protocol):
    def publish(self, effect: Effect) -> None: ...


class LoggingPublisher:
    """Writes effects to the activity log."""

    def publish(self, effect: Effect) -> None:
        if isinstance(effect, BranchCreated):
            activity_logger.info(
                "%s branch_id=%s slug=%s source_branch_id=%s source_branch_name=%s keys=%s actor_id=%s",
                effect.name,
                effect.branch.id,
                effect.branch.slug,
                effect.source_branch_id,
                effect.source_branch_name,
                effect.branch.key_count,
                effect.actor_id,
            )
        elif isinstance(effect, BranchDeleted):
            activity_logger.info(
                "%s branch_id=%s branch_name=%s space_id=%s actor_id=%s",
                effect.name,
                effect.branch_id,
                effect.branch_name,
                effect.space_id,
                effect.actor_id,
            )
        elif isinstance(effect, BranchesMerged):
            activity_logger.info(
                "%s source=%s(%s) target=%s(%s) merged=%s conflicts_resolved=%s actor_id=%s",
                effect.name,
                effect.source_branch_name,
                effect.source_branch_id,
                effect.target_branch_name,
                effect.target_branch_id,
                effect.merged,
                effect.conflicts_resolved,
                effect.actor_id,
            )
        else:
            raise TypeError(f"Unsupported effect: {effect!r}")


def drain(effects: Iterable[Effect], publisher: EffectPublisher) -> int:
    """
    Publish effects of an already committed operation. A failing publisher
    never undoes the operation, so failures are logged and skipped.
    """
    published = 0
    for effect in effects:
        try:
            publisher.publish(effect)
        except Exception:
            logger.exception("Failed to publish effect %s", getattr(effect, "name", effect))
            continue
        published += 1
    return published
