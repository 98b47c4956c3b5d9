"""Data and error models for a fetch run."""

from __future__ import annotations

import posixpath
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBytes, StrictStr

from depfetch.utils.types import JsonDict, NonEmptyString


class DependencyFile(BaseModel):
    """A dependency declaration file as returned by a fetcher."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: NonEmptyString
    content: StrictStr | StrictBytes
    binary: bool = False
    directory: str = "/"

    @property
    def path(self) -> str:
        return posixpath.join(self.directory, self.name)


class PackageManagerVersion(BaseModel):
    """Package manager versions detected for the fetched files."""

    model_config = ConfigDict(frozen=True)

    ecosystem: NonEmptyString
    package_managers: dict[str, str]


class FetchResult(BaseModel):
    """Dependency files and the commit they were read at."""

    model_config = ConfigDict(frozen=True)

    files: tuple[DependencyFile, ...]
    base_commit_sha: NonEmptyString


class ErrorType(str, Enum):
    """Closed set of error types reported for a failed fetch."""

    BRANCH_NOT_FOUND = "branch_not_found"
    JOB_REPO_NOT_FOUND = "job_repo_not_found"
    DEPENDENCY_FILE_NOT_PARSEABLE = "dependency_file_not_parseable"
    DEPENDENCY_FILE_NOT_FOUND = "dependency_file_not_found"
    OUT_OF_DISK = "out_of_disk"
    PATH_DEPENDENCIES_NOT_REACHABLE = "path_dependencies_not_reachable"
    OCTOKIT_UNAUTHORIZED = "octokit_unauthorized"
    OCTOKIT_RATE_LIMITED = "octokit_rate_limited"
    UNKNOWN_ERROR = "unknown_error"


class BaseJobError(BaseModel):
    """Base reportable error. Fields other than error_type form the detail payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_type: ErrorType

    def error_detail(self) -> JsonDict:
        return self.model_dump(mode="json", by_alias=True, exclude={"error_type"})


class BranchNotFoundError(BaseJobError):
    error_type: Literal[ErrorType.BRANCH_NOT_FOUND] = ErrorType.BRANCH_NOT_FOUND
    branch_name: str | None = Field(serialization_alias="branch-name")


class JobRepoNotFoundError(BaseJobError):
    error_type: Literal[ErrorType.JOB_REPO_NOT_FOUND] = ErrorType.JOB_REPO_NOT_FOUND


class DependencyFileNotParseableError(BaseJobError):
    error_type: Literal[ErrorType.DEPENDENCY_FILE_NOT_PARSEABLE] = ErrorType.DEPENDENCY_FILE_NOT_PARSEABLE
    message: str
    file_path: str = Field(serialization_alias="file-path")


class DependencyFileNotFoundError(BaseJobError):
    error_type: Literal[ErrorType.DEPENDENCY_FILE_NOT_FOUND] = ErrorType.DEPENDENCY_FILE_NOT_FOUND
    file_path: str = Field(serialization_alias="file-path")


class OutOfDiskError(BaseJobError):
    error_type: Literal[ErrorType.OUT_OF_DISK] = ErrorType.OUT_OF_DISK


class PathDependenciesNotReachableError(BaseJobError):
    error_type: Literal[ErrorType.PATH_DEPENDENCIES_NOT_REACHABLE] = ErrorType.PATH_DEPENDENCIES_NOT_REACHABLE
    dependencies: list[str]


class UnauthorizedError(BaseJobError):
    error_type: Literal[ErrorType.OCTOKIT_UNAUTHORIZED] = ErrorType.OCTOKIT_UNAUTHORIZED


class RateLimitedError(BaseJobError):
    error_type: Literal[ErrorType.OCTOKIT_RATE_LIMITED] = ErrorType.OCTOKIT_RATE_LIMITED
    rate_limit_reset: int | None = Field(serialization_alias="rate-limit-reset")


class UnknownError(BaseJobError):
    error_type: Literal[ErrorType.UNKNOWN_ERROR] = ErrorType.UNKNOWN_ERROR
    # Upstream 5xx: reported as unknown but not captured as an exception.
    upstream: bool = Field(default=False, exclude=True)


type JobError = (
    BranchNotFoundError
    | JobRepoNotFoundError
    | DependencyFileNotParseableError
    | DependencyFileNotFoundError
    | OutOfDiskError
    | PathDependenciesNotReachableError
    | UnauthorizedError
    | RateLimitedError
    | UnknownError
)


class FetchFailure(BaseModel):
    """A failed run: what went wrong and the best-known commit."""

    model_config = ConfigDict(frozen=True)

    error: JobError
    base_commit_sha: NonEmptyString


class UnsupportedPackageManagerError(BaseModel):
    """No fetcher is registered for a package manager."""

    model_config = ConfigDict(extra="forbid")

    package_manager: str
    message: str


__all__ = [
    "BaseJobError",
    "BranchNotFoundError",
    "DependencyFile",
    "DependencyFileNotFoundError",
    "DependencyFileNotParseableError",
    "ErrorType",
    "FetchFailure",
    "FetchResult",
    "JobError",
    "JobRepoNotFoundError",
    "OutOfDiskError",
    "PackageManagerVersion",
    "PathDependenciesNotReachableError",
    "RateLimitedError",
    "UnauthorizedError",
    "UnknownError",
    "UnsupportedPackageManagerError",
]
