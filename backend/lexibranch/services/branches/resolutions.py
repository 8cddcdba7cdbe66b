from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from lexibranch.errors import ValidationError


@dataclass(frozen=True, slots=True)
class UseSource:
    """Overwrite the target with the source branch's translations."""


@dataclass(frozen=True, slots=True)
class UseTarget:
    """Keep the target branch's translations as they are."""


@dataclass(frozen=True, slots=True)
class Explicit:
    """Write a hand-merged set of translations onto the target."""

    translations: Mapping[str, str] = field(default_factory=dict)


ResolutionChoice = Union[UseSource, UseTarget, Explicit]


@dataclass(frozen=True, slots=True)
class ConflictResolution:
    key: str
    choice: ResolutionChoice


def parse_choice(raw: Any) -> ResolutionChoice:
    """Read the wire form: ``"source"``, ``"target"`` or ``{language: value}``."""
    if isinstance(raw, (UseSource, UseTarget, Explicit)):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized == "source":
            return UseSource()
        if normalized == "target":
            return UseTarget()
        raise ValidationError(f"Unknown conflict resolution: {raw!r}")
    if isinstance(raw, Mapping):
        translations: dict[str, str] = {}
        for language, value in raw.items():
            if not isinstance(language, str) or not language.strip():
                raise ValidationError("Resolution languages must be non-empty strings")
            if not isinstance(value, str):
                raise ValidationError(f"Resolution value for {language!r} must be a string")
            translations[language] = value
        return Explicit(translations=translations)
    raise ValidationError(f"Unsupported conflict resolution: {raw!r}")


def parse_resolutions(items: Any) -> list[ConflictResolution]:
    """Parse ``[{"key": ..., "resolution": ...}, ...]``; later entries win per key."""
    resolutions: list[ConflictResolution] = []
    for item in items or ():
        if not isinstance(item, Mapping) or not isinstance(item.get("key"), str):
            raise ValidationError("Each resolution needs a string 'key'")
        resolutions.append(
            ConflictResolution(key=item["key"], choice=parse_choice(item.get("resolution")))
        )
    return resolutions
