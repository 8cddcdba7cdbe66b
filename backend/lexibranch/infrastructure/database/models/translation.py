from enum import Enum

from pydantic import BaseModel, Field


class TranslationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TranslationModel(BaseModel):
    id: str = Field(..., description="Primary key of translation record")
    key_id: str = Field(..., description="Foreign key referencing translation key")
    language: str = Field(..., description="Language code (e.g. 'en', 'de')")
    value: str = Field(
        "", description="Translated text value (empty string when untranslated)"
    )
    status: TranslationStatus = Field(
        TranslationStatus.PENDING, description="Approval status of the value"
    )

    class Config:
        from_attributes = True
        frozen = True
        extra = "forbid"
