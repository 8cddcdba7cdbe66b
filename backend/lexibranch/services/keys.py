from __future__ import annotations

import logging
from typing import Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from lexibranch.database import get_session
from lexibranch.errors import FieldValidationError, NotFoundError, ValidationError
from lexibranch.infrastructure.database.db import DB
from lexibranch.infrastructure.database.models.translation import (
    TranslationModel,
    TranslationStatus,
)
from lexibranch.infrastructure.database.models.translation_key import (
    TranslationKeyWithTranslationsModel,
)
from lexibranch.services.access import (
    AccessChecker,
    ProjectMembershipAccess,
    project_id_for_branch,
)

logger = logging.getLogger(__name__)

KEY_NAME_EXISTS = "KEY_NAME_EXISTS"


def _key_name_taken() -> FieldValidationError:
    return FieldValidationError(
        field="name",
        code=KEY_NAME_EXISTS,
        message="Key with this name already exists in the branch",
    )


def _is_name_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "uq_translation_keys_branch_name" in message or "translation_keys.name" in message


class KeyService:
    """Standalone key creation and manual translation edits within one branch."""

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        access: Optional[AccessChecker] = None,
    ) -> None:
        self._session_factory = session_factory
        self._access = access or ProjectMembershipAccess()

    def create_key(
        self,
        *,
        branch_id: str,
        name: str,
        namespace: str | None = None,
        description: str | None = None,
        translations: Mapping[str, str] | None = None,
        actor_id: str | None = None,
    ) -> TranslationKeyWithTranslationsModel:
        if not name or not name.strip():
            raise FieldValidationError(
                field="name", code="KEY_NAME_REQUIRED", message="Key name is required"
            )
        with get_session(self._session_factory) as session:
            db = DB(session)
            project_id = project_id_for_branch(db, branch_id)
            if actor_id is not None:
                self._access.verify_project_access(db, actor_id=actor_id, project_id=project_id)
            if db.translation_keys.get_by_name(branch_id, name) is not None:
                raise _key_name_taken()
            try:
                key = db.translation_keys.create(
                    branch_id=branch_id,
                    name=name,
                    namespace=namespace,
                    description=description,
                )
            except IntegrityError as exc:
                if not _is_name_violation(exc):
                    raise
                raise _key_name_taken() from exc
            db.translations.create_many(
                {"key_id": key.id, "language": language, "value": value}
                for language, value in (translations or {}).items()
            )
            created = TranslationKeyWithTranslationsModel(
                **key.model_dump(), translations=tuple(db.translations.list_by_key(key.id))
            )
        logger.info("Key created branch_id=%s name=%s", branch_id, name)
        return created

    def set_translations(
        self,
        key_id: str,
        translations: Mapping[str, str],
        *,
        actor_id: str | None = None,
    ) -> list[TranslationModel]:
        with get_session(self._session_factory) as session:
            db = DB(session)
            key = db.translation_keys.get(key_id)
            if key is None:
                raise NotFoundError("Translation key")
            if actor_id is not None:
                project_id = project_id_for_branch(db, key.branch_id)
                self._access.verify_project_access(db, actor_id=actor_id, project_id=project_id)
            for language, value in translations.items():
                db.translations.upsert(key_id=key_id, language=language, value=value)
            return db.translations.list_by_key(key_id)

    def set_approval_status(
        self,
        key_id: str,
        language: str,
        status: TranslationStatus,
    ) -> TranslationModel:
        with get_session(self._session_factory) as session:
            db = DB(session)
            if db.translation_keys.get(key_id) is None:
                raise NotFoundError("Translation key")
            translation = db.translations.set_status(
                key_id=key_id, language=language, status=status
            )
            if translation is None:
                raise ValidationError(f"No {language!r} translation to review")
            return translation
