from datetime import datetime

from pydantic import BaseModel, Field


class BranchModel(BaseModel):
    id: str = Field(..., description="Primary key of the branch")
    space_id: str = Field(..., description="Foreign key referencing the owning space")
    name: str = Field(..., description="Human-readable branch name")
    slug: str = Field(..., description="Slug derived from the name, unique within the space")
    is_default: bool = Field(
        ..., description="Flag marking the single default branch of the space"
    )
    source_branch_id: str | None = Field(
        None, description="Branch this one was copied from (None for the default branch)"
    )
    created_at: datetime = Field(..., description="Timestamp of branch creation")
    updated_at: datetime = Field(..., description="Timestamp of the last branch update")

    class Config:
        from_attributes = True
        frozen = True
        extra = "forbid"


class BranchWithKeyCountModel(BranchModel):
    key_count: int = Field(..., description="Number of translation keys owned by the branch")
