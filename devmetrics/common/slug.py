"""Repository slug utilities.

Repository dimensions use the ``organization/repository`` slug that GitHub and
Bitbucket expose as ``repository.full_name``. Slugs are identifiers, not
filesystem paths, so they are handled here rather than with ``pathlib``.
"""

from __future__ import annotations

UNKNOWN_OWNER = "unknown"


def normalize_repository_slug(value: str, *, sentinel: str = "unknown") -> str:
    """Return ``value`` in ``organization/repository`` form.

    Slugs without a separator gain an ``unknown/`` owner so downstream
    grouping by organization never sees a bare name. The ``sentinel`` used for
    a missing repository is returned unchanged.

    Examples
    --------
    >>> normalize_repository_slug("my-repo")
    'unknown/my-repo'
    >>> normalize_repository_slug("org/my-repo")
    'org/my-repo'

    """
    text = value.strip()
    if not text or text == sentinel:
        return sentinel
    if "/" in text:
        return text
    return f"{UNKNOWN_OWNER}/{text}"


def owner_from_slug(slug: str | None) -> str | None:
    """Return the organization segment of ``slug`` if it has one.

    Examples
    --------
    >>> owner_from_slug("octocat/hello-world")
    'octocat'
    >>> owner_from_slug("hello-world") is None
    True

    """
    if not slug or "/" not in slug:
        return None
    owner = slug.split("/", 1)[0].strip()
    return owner or None
