"""Utilities for reusable typed field annotations."""

from .fields import JsonDict, JsonValue, NonEmptyString, RepoDirectory, RepoName

__all__ = [
    "JsonDict",
    "JsonValue",
    "NonEmptyString",
    "RepoDirectory",
    "RepoName",
]
