from __future__ import annotations

from lexibranch.services.slug import slugify


def test_slugify_collapses_punctuation_and_trims_edges() -> None:
    assert slugify("Feature Branch!!") == "feature-branch"


def test_slugify_is_deterministic_and_keeps_allowed_characters() -> None:
    assert slugify("release_2024-Q1") == "release_2024-q1"
    assert slugify("release_2024-Q1") == slugify("release_2024-Q1")


def test_slugify_merges_runs_of_invalid_characters() -> None:
    assert slugify("fix   /   typo") == "fix-typo"
    assert slugify("  Hotfix  ") == "hotfix"


def test_slugify_names_differing_only_in_case_collide() -> None:
    assert slugify("Main") == slugify("MAIN") == "main"


def test_slugify_returns_empty_for_names_without_letters_or_digits() -> None:
    assert slugify("!!!") == ""
    assert slugify("") == ""
