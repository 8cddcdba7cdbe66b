from __future__ import annotations

import pytest
from sqlalchemy.orm import sessionmaker

from conftest import ACTOR, OUTSIDER, Seeded, add_keys, read_branch, seed_space, set_value
from lexibranch.database import get_session
from lexibranch.errors import FieldValidationError, ForbiddenError, NotFoundError, ValidationError
from lexibranch.infrastructure.database.db import DB
from lexibranch.infrastructure.database.models.translation import TranslationStatus
from lexibranch.infrastructure.database.tables.branches import BranchesTable
from lexibranch.services.branches.creation import (
    BRANCH_NAME_EXISTS,
    BRANCH_NAME_INVALID,
    BranchCreationService,
)
from lexibranch.services.events import BranchCreated


def _create(
    session_factory: sessionmaker, seeded: Seeded, name: str = "feature", **overrides
):
    params = {
        "name": name,
        "space_id": seeded.space_id,
        "from_branch_id": seeded.main_id,
        "actor_id": ACTOR,
    }
    params.update(overrides)
    return BranchCreationService(session_factory).create(**params)


def test_create_copies_every_key_and_translation(session_factory: sessionmaker, seeded: Seeded) -> None:
    add_keys(
        session_factory,
        seeded.main_id,
        {
            "greeting": {"en": "Hi", "de": "Hallo"},
            "farewell": {"en": "Bye"},
            "empty": {},
        },
    )

    result = _create(session_factory, seeded, "Feature Branch!!")

    branch = result.branch
    assert branch.slug == "feature-branch"
    assert branch.name == "Feature Branch!!"
    assert branch.source_branch_id == seeded.main_id
    assert branch.is_default is False
    assert branch.key_count == 3
    assert read_branch(session_factory, branch.id) == read_branch(session_factory, seeded.main_id)


def test_create_gives_copies_fresh_ids(session_factory: sessionmaker, seeded: Seeded) -> None:
    add_keys(session_factory, seeded.main_id, {"greeting": {"en": "Hi"}})

    branch = _create(session_factory, seeded).branch

    with get_session(session_factory) as session:
        db = DB(session)
        source_keys = db.translation_keys.list_with_translations(seeded.main_id)
        copied_keys = db.translation_keys.list_with_translations(branch.id)
    assert {k.id for k in source_keys}.isdisjoint({k.id for k in copied_keys})
    source_translation_ids = {t.id for k in source_keys for t in k.translations}
    copied_translation_ids = {t.id for k in copied_keys for t in k.translations}
    assert source_translation_ids.isdisjoint(copied_translation_ids)


def test_create_copies_translation_status(session_factory: sessionmaker, seeded: Seeded) -> None:
    add_keys(session_factory, seeded.main_id, {"greeting": {"en": "Hi"}})
    with get_session(session_factory) as session:
        db = DB(session)
        key = db.translation_keys.get_by_name(seeded.main_id, "greeting")
        db.translations.set_status(key_id=key.id, language="en", status=TranslationStatus.APPROVED)

    branch = _create(session_factory, seeded).branch

    with get_session(session_factory) as session:
        db = DB(session)
        key = db.translation_keys.get_by_name(branch.id, "greeting")
        (translation,) = db.translations.list_by_key(key.id)
    assert translation.status is TranslationStatus.APPROVED


def test_copies_are_independent(session_factory: sessionmaker, seeded: Seeded) -> None:
    add_keys(session_factory, seeded.main_id, {"greeting": {"en": "Hi"}})
    branch = _create(session_factory, seeded).branch

    set_value(session_factory, branch.id, "greeting", "en", "Hello")

    assert read_branch(session_factory, seeded.main_id) == {"greeting": {"en": "Hi"}}
    assert read_branch(session_factory, branch.id) == {"greeting": {"en": "Hello"}}


def test_create_returns_branch_created_effect(session_factory: sessionmaker, seeded: Seeded) -> None:
    result = _create(session_factory, seeded)

    (effect,) = result.effects
    assert isinstance(effect, BranchCreated)
    assert effect.name == "branch.created"
    assert effect.branch == result.branch
    assert effect.source_branch_id == seeded.main_id
    assert effect.source_branch_name == "main"
    assert effect.actor_id == ACTOR


def test_create_rejects_unknown_space(session_factory: sessionmaker, seeded: Seeded) -> None:
    with pytest.raises(NotFoundError, match="Space not found"):
        _create(session_factory, seeded, space_id="missing")


def test_create_rejects_unknown_source_branch(session_factory: sessionmaker, seeded: Seeded) -> None:
    with pytest.raises(NotFoundError, match="Source branch not found"):
        _create(session_factory, seeded, from_branch_id="missing")


def test_create_rejects_source_from_other_space(session_factory: sessionmaker, seeded: Seeded) -> None:
    other = seed_space(session_factory, slug="blog")

    with pytest.raises(ValidationError, match="Source branch must belong to the same space"):
        _create(session_factory, seeded, from_branch_id=other.main_id)


def test_create_rejects_non_members(session_factory: sessionmaker, seeded: Seeded) -> None:
    with pytest.raises(ForbiddenError):
        _create(session_factory, seeded, actor_id=OUTSIDER)


def test_create_rejects_duplicate_slug(session_factory: sessionmaker, seeded: Seeded) -> None:
    _create(session_factory, seeded, "Feature")

    with pytest.raises(FieldValidationError) as excinfo:
        _create(session_factory, seeded, "feature!!")

    assert excinfo.value.to_dict() == {
        "field": "name",
        "code": BRANCH_NAME_EXISTS,
        "message": "Branch with this name already exists in the space",
    }


def test_create_rejects_name_without_slug_characters(session_factory: sessionmaker, seeded: Seeded) -> None:
    with pytest.raises(FieldValidationError) as excinfo:
        _create(session_factory, seeded, "!!!")
    assert excinfo.value.code == BRANCH_NAME_INVALID


def test_lost_slug_race_maps_to_field_error_and_leaves_nothing_behind(
    session_factory: sessionmaker, seeded: Seeded, monkeypatch: pytest.MonkeyPatch
) -> None:
    add_keys(session_factory, seeded.main_id, {"greeting": {"en": "Hi"}})
    _create(session_factory, seeded, "feature")
    # Simulate a concurrent writer that inserted the slug after our pre-check.
    monkeypatch.setattr(BranchesTable, "get_by_slug", lambda self, space_id, slug: None)

    with pytest.raises(FieldValidationError) as excinfo:
        _create(session_factory, seeded, "Feature")

    assert excinfo.value.code == BRANCH_NAME_EXISTS
    branches = BranchCreationService(session_factory).list_for_space(seeded.space_id)
    assert [b.slug for b in branches] == ["main", "feature"]


def test_failed_copy_rolls_back_branch_row(
    session_factory: sessionmaker, seeded: Seeded, monkeypatch: pytest.MonkeyPatch
) -> None:
    add_keys(session_factory, seeded.main_id, {"greeting": {"en": "Hi"}})

    def _boom(self, source_branch_id: str, target_branch_id: str) -> int:
        raise RuntimeError("copy failed")

    monkeypatch.setattr(BranchesTable, "copy_keys_and_translations", _boom)

    with pytest.raises(RuntimeError):
        _create(session_factory, seeded)

    branches = BranchCreationService(session_factory).list_for_space(seeded.space_id)
    assert [b.slug for b in branches] == ["main"]


def test_list_for_space_puts_default_first_with_key_counts(
    session_factory: sessionmaker, seeded: Seeded
) -> None:
    add_keys(session_factory, seeded.main_id, {"a": {"en": "A"}, "b": {"en": "B"}})
    _create(session_factory, seeded, "alpha")

    branches = BranchCreationService(session_factory).list_for_space(
        seeded.space_id, actor_id=ACTOR
    )

    assert [(b.slug, b.is_default, b.key_count) for b in branches] == [
        ("main", True, 2),
        ("alpha", False, 2),
    ]


def test_get_reports_key_count_and_missing_branch(session_factory: sessionmaker, seeded: Seeded) -> None:
    add_keys(session_factory, seeded.main_id, {"a": {"en": "A"}})
    service = BranchCreationService(session_factory)

    assert service.get(seeded.main_id, actor_id=ACTOR).key_count == 1
    with pytest.raises(NotFoundError, match="Branch not found"):
        service.get("missing")
