from __future__ import annotations

import os

os.environ.setdefault("LEXIBRANCH_DATABASE_DSN", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("LEXIBRANCH_JWT_SECRET_KEY", "test-secret")

from dataclasses import dataclass
from typing import Iterator, Mapping

import pytest
from sqlalchemy.orm import sessionmaker

from lexibranch.database import build_engine, build_session_factory, get_session
from lexibranch.infrastructure.database.db import DB
from lexibranch.infrastructure.database.schema import metadata
from lexibranch.services.branches.diff import TranslationMap, build_key_index
from lexibranch.services.spaces import SpaceService

ACTOR = "user-1"
OUTSIDER = "user-2"


@dataclass(frozen=True, slots=True)
class Seeded:
    project_id: str
    space_id: str
    main_id: str


@pytest.fixture
def session_factory() -> Iterator[sessionmaker]:
    engine = build_engine("sqlite+pysqlite:///:memory:")
    metadata.create_all(bind=engine)
    try:
        yield build_session_factory(engine)
    finally:
        engine.dispose()


@pytest.fixture
def seeded(session_factory: sessionmaker) -> Seeded:
    return seed_space(session_factory)


def seed_space(
    session_factory: sessionmaker,
    *,
    slug: str = "shop",
    keys: Mapping[str, TranslationMap] | None = None,
) -> Seeded:
    with get_session(session_factory) as session:
        db = DB(session)
        project = db.projects.create(name=slug.title(), slug=slug)
        db.projects.add_member(project_id=project.id, user_id=ACTOR)
    result = SpaceService(session_factory).create_space(
        project_id=project.id, name="Web", actor_id=ACTOR
    )
    if keys:
        add_keys(session_factory, result.default_branch.id, keys)
    return Seeded(
        project_id=project.id,
        space_id=result.space.id,
        main_id=result.default_branch.id,
    )


def add_keys(
    session_factory: sessionmaker, branch_id: str, keys: Mapping[str, TranslationMap]
) -> None:
    with get_session(session_factory) as session:
        db = DB(session)
        for name, translations in keys.items():
            key = db.translation_keys.create(branch_id=branch_id, name=name)
            db.translations.create_many(
                {"key_id": key.id, "language": language, "value": value}
                for language, value in translations.items()
            )


def set_value(
    session_factory: sessionmaker, branch_id: str, key: str, language: str, value: str
) -> None:
    with get_session(session_factory) as session:
        db = DB(session)
        row = db.translation_keys.get_by_name(branch_id, key)
        assert row is not None
        db.translations.upsert(key_id=row.id, language=language, value=value)


def read_branch(session_factory: sessionmaker, branch_id: str) -> dict[str, TranslationMap]:
    with get_session(session_factory) as session:
        return build_key_index(DB(session).translation_keys.list_with_translations(branch_id))
