from __future__ import annotations

import pytest

from lexibranch.errors import ValidationError
from lexibranch.services.branches.resolutions import (
    ConflictResolution,
    Explicit,
    UseSource,
    UseTarget,
    parse_choice,
    parse_resolutions,
)


def test_parse_choice_reads_wire_forms() -> None:
    assert parse_choice("source") == UseSource()
    assert parse_choice(" Target ") == UseTarget()
    assert parse_choice({"en": "Hey"}) == Explicit({"en": "Hey"})


def test_parse_choice_passes_through_parsed_variants() -> None:
    choice = Explicit({"de": "Hallo"})
    assert parse_choice(choice) is choice


@pytest.mark.parametrize("raw", ["theirs", None, 3, ["source"]])
def test_parse_choice_rejects_unknown_values(raw: object) -> None:
    with pytest.raises(ValidationError):
        parse_choice(raw)


def test_parse_choice_rejects_non_string_values() -> None:
    with pytest.raises(ValidationError):
        parse_choice({"en": 1})
    with pytest.raises(ValidationError):
        parse_choice({"": "x"})


def test_parse_resolutions_keeps_order_and_requires_key() -> None:
    parsed = parse_resolutions(
        [
            {"key": "greeting", "resolution": "source"},
            {"key": "farewell", "resolution": {"en": "Bye"}},
        ]
    )
    assert parsed == [
        ConflictResolution(key="greeting", choice=UseSource()),
        ConflictResolution(key="farewell", choice=Explicit({"en": "Bye"})),
    ]
    assert parse_resolutions(None) == []
    with pytest.raises(ValidationError):
        parse_resolutions([{"resolution": "source"}])
