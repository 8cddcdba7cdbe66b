from pydantic import BaseModel, Field

from lexibranch.infrastructure.database.models.translation import TranslationModel


class TranslationKeyModel(BaseModel):
    id: str = Field(..., description="Primary key of translation key")
    branch_id: str = Field(..., description="Foreign key referencing the owning branch")
    name: str = Field(
        ..., description="Identifier used in code, unique within the branch (case-sensitive)"
    )
    namespace: str | None = Field(None, description="Optional namespace grouping the key")
    description: str | None = Field(
        None, description="Optional human-readable description of the key"
    )

    class Config:
        from_attributes = True
        frozen = True
        extra = "forbid"


class TranslationKeyWithTranslationsModel(TranslationKeyModel):
    translations: tuple[TranslationModel, ...] = Field(
        default=(), description="Translations owned by the key, one per language"
    )
