"""Reusable Pydantic field annotations."""

from __future__ import annotations

import posixpath
from typing import Annotated

from pydantic import AfterValidator, Field, StrictStr

type JsonValue = dict[str, object] | list[object] | str | int | float | bool | None
type JsonDict = dict[str, object]

NonEmptyString = Annotated[StrictStr, Field(min_length=1, frozen=True)]

# Repository identifier (e.g., "owner/repo", or "group/subgroup/repo" on nested hosts)
RepoName = Annotated[
    StrictStr,
    Field(
        pattern=r"^[a-zA-Z0-9_.-]+(/[a-zA-Z0-9_.-]+)+$",
        frozen=True,
        description="Repository in 'owner/repo' format",
    ),
]


def _normalize_directory(value: str) -> str:
    normalized = posixpath.normpath("/" + value.strip())
    # normpath keeps a leading "//"
    return "/" + normalized.lstrip("/")


# Directory inside the repository, always absolute from the repository root (e.g., "/", "/backend")
RepoDirectory = Annotated[
    StrictStr,
    AfterValidator(_normalize_directory),
    Field(frozen=True, description="Directory relative to the repository root"),
]

__all__ = [
    "JsonDict",
    "JsonValue",
    "NonEmptyString",
    "RepoDirectory",
    "RepoName",
]
