"""Fault conditions raised by fetchers.

Fetchers signal failures by raising these; the classifier turns them into
reportable JobError values.
"""

from __future__ import annotations

from collections.abc import Sequence


class FetchError(Exception):
    """Base class for expected fetch failures."""


class BranchNotFound(FetchError):
    def __init__(self, branch_name: str | None, message: str | None = None) -> None:
        self.branch_name = branch_name
        super().__init__(message or f"Branch not found: {branch_name}")


class RepoNotFound(FetchError):
    """Repository is gone, or the credentials are not allowed to see it."""

    def __init__(self, source: str, message: str | None = None) -> None:
        self.source = source
        super().__init__(message or f"Repository not found: {source}")


class DependencyFileNotFound(FetchError):
    def __init__(self, file_path: str, message: str | None = None) -> None:
        self.file_path = file_path
        super().__init__(message or f"{file_path} not found")


class DependencyFileNotParseable(FetchError):
    def __init__(self, file_path: str, message: str | None = None) -> None:
        self.file_path = file_path
        super().__init__(message or f"{file_path} not parseable")


class OutOfDisk(FetchError):
    pass


class PathDependenciesNotReachable(FetchError):
    def __init__(self, dependencies: Sequence[str]) -> None:
        self.dependencies = list(dependencies)
        super().__init__(f"The following path based dependencies could not be retrieved: {', '.join(self.dependencies)}")


class MissingCommitError(RuntimeError):
    """A fetcher returned no commit sha; this is a fetcher bug, not a fetch failure."""

    def __init__(self) -> None:
        super().__init__("base commit SHA not found")


class UnsupportedPackageManager(FetchError):
    def __init__(self, package_manager: str) -> None:
        self.package_manager = package_manager
        super().__init__(f"Unsupported package manager: {package_manager}")


class CloneFailed(FetchError):
    """Clone failed for a reason outside the reportable taxonomy (network, missing git)."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(message)
