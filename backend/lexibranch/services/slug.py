import re

_SLUG_INVALID_RUN = re.compile(r"[^a-z0-9_-]+")


def slugify(name: str) -> str:
    """
    Deterministic slug: lowercase, every run of characters outside
    ``[a-z0-9_-]`` becomes one hyphen, edge hyphens are trimmed.

    >>> slugify("Feature Branch!!")
    'feature-branch'
    """
    return _SLUG_INVALID_RUN.sub("-", (name or "").lower()).strip("-")
