from datetime import datetime

from pydantic import BaseModel, Field


class SpaceModel(BaseModel):
    id: str = Field(..., description="Primary key of the space")
    project_id: str = Field(..., description="Foreign key referencing the owning project")
    name: str = Field(..., description="Human-readable space name")
    slug: str = Field(..., description="Slug unique within the project")
    description: str | None = Field(None, description="Optional description")
    created_at: datetime = Field(..., description="Timestamp of space creation")
    updated_at: datetime = Field(..., description="Timestamp of the last space update")

    class Config:
        from_attributes = True
        frozen = True
        extra = "forbid"
