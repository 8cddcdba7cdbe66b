from datetime import datetime
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from lexibranch.infrastructure.database.models.translation import TranslationStatus
from lexibranch.services.branches.diff import BranchDiffResult, ConflictEntry


class BranchOut(BaseModel):
    id: str
    name: str
    slug: str
    space_id: str
    source_branch_id: Optional[str] = None
    is_default: bool
    key_count: int
    created_at: datetime
    updated_at: datetime


class BranchListOut(BaseModel):
    branches: List[BranchOut]


class CreateBranchIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    from_branch_id: str = Field(..., min_length=1)


class CreateSpaceIn(BaseModel):
    project_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class SpaceOut(BaseModel):
    id: str
    project_id: str
    name: str
    slug: str
    description: Optional[str] = None
    default_branch_id: str


class BranchRefOut(BaseModel):
    id: str
    name: str


class DiffEntryOut(BaseModel):
    key: str
    translations: Dict[str, str]


class ModifiedEntryOut(BaseModel):
    key: str
    source: Dict[str, str]
    target: Dict[str, str]


class ConflictEntryOut(ModifiedEntryOut):
    pass


class BranchDiffOut(BaseModel):
    source: BranchRefOut
    target: BranchRefOut
    added: List[DiffEntryOut]
    modified: List[ModifiedEntryOut]
    deleted: List[DiffEntryOut]
    conflicts: List[ConflictEntryOut]

    @classmethod
    def from_result(cls, diff: BranchDiffResult) -> "BranchDiffOut":
        return cls(
            source=BranchRefOut(id=diff.source.id, name=diff.source.name),
            target=BranchRefOut(id=diff.target.id, name=diff.target.name),
            added=[DiffEntryOut(key=e.key, translations=e.translations) for e in diff.added],
            modified=[
                ModifiedEntryOut(key=e.key, source=e.source, target=e.target)
                for e in diff.modified
            ],
            deleted=[DiffEntryOut(key=e.key, translations=e.translations) for e in diff.deleted],
            conflicts=[conflict_entry_out(e) for e in diff.conflicts],
        )


def conflict_entry_out(entry: ConflictEntry) -> ConflictEntryOut:
    return ConflictEntryOut(key=entry.key, source=entry.source, target=entry.target)


class ResolutionIn(BaseModel):
    key: str = Field(..., min_length=1)
    resolution: Union[Literal["source", "target"], Dict[str, str]]


class MergeIn(BaseModel):
    target_branch_id: str = Field(..., min_length=1)
    resolutions: Optional[List[ResolutionIn]] = None


class MergeOut(BaseModel):
    success: bool
    merged: int
    conflicts: Optional[List[ConflictEntryOut]] = None


class CreateKeyIn(BaseModel):
    name: str = Field(..., min_length=1)
    namespace: Optional[str] = None
    description: Optional[str] = None
    translations: Dict[str, str] = Field(default_factory=dict)


class TranslationOut(BaseModel):
    language: str
    value: str
    status: TranslationStatus


class KeyOut(BaseModel):
    id: str
    branch_id: str
    name: str
    namespace: Optional[str] = None
    description: Optional[str] = None
    translations: List[TranslationOut]


class SetTranslationsIn(BaseModel):
    translations: Dict[str, str]


class TranslationListOut(BaseModel):
    translations: List[TranslationOut]
