from pydantic import BaseModel, Field


class ProjectModel(BaseModel):
    id: str = Field(..., description="Primary key of the project")
    name: str = Field(..., description="Project name")
    slug: str = Field(..., description="Globally unique project slug")
    default_language: str = Field("en", description="Source language of the project")

    class Config:
        from_attributes = True
        frozen = True
        extra = "forbid"
