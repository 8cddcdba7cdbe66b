from pydantic import BaseModel, Field


class EnvironmentModel(BaseModel):
    id: str = Field(..., description="Primary key of the environment")
    project_id: str = Field(..., description="Foreign key referencing the project")
    name: str = Field(..., description="Environment name (e.g. 'production')")
    slug: str = Field(..., description="Slug unique within the project")
    branch_id: str = Field(..., description="Branch currently served by the environment")

    class Config:
        from_attributes = True
        frozen = True
        extra = "forbid"
