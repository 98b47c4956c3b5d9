"""Job models and job-definition error models."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from depfetch.utils.types import NonEmptyString, RepoDirectory, RepoName

DEFAULT_HOSTNAME = "github.com"
DEFAULT_API_ENDPOINT = "https://api.github.com/"

type Credential = dict[str, Any]


class JobSource(BaseModel):
    """Where the dependency files live."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    provider: NonEmptyString = "github"
    repo: RepoName
    directory: RepoDirectory = "/"
    branch: str | None = None
    hostname: str | None = None
    api_endpoint: str | None = Field(default=None, alias="api-endpoint")

    @property
    def host(self) -> str:
        return self.hostname or DEFAULT_HOSTNAME

    @property
    def api_url(self) -> str:
        return (self.api_endpoint or DEFAULT_API_ENDPOINT).rstrip("/")

    @property
    def url(self) -> str:
        return f"https://{self.host}/{self.repo}"

    @property
    def clone_url(self) -> str:
        return f"{self.url}.git"


class Job(BaseModel):
    """A single fetch run: which repository, which package manager, how."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: NonEmptyString
    source: JobSource
    package_manager: NonEmptyString = Field(alias="package-manager")
    credentials: list[Credential] = Field(default_factory=list, repr=False, exclude=True)
    experiments: dict[str, Any] = Field(default_factory=dict)
    vendor_dependencies: bool = Field(default=False, alias="vendor-dependencies")
    clone: bool = False
    repo_contents_path: Path | None = None
    definition: dict[str, Any] = Field(default_factory=dict, repr=False, exclude=True)

    @classmethod
    def from_definition(
        cls,
        definition: Mapping[str, Any],
        *,
        job_id: str,
        repo_contents_path: Path | None = None,
        always_clone: bool = False,
    ) -> Job:
        """Build a Job from a pipeline job definition.

        The definition is the document handed over by the pipeline API: a `job`
        mapping with kebab-case keys and a top-level `credentials` list.

        Raises:
            pydantic.ValidationError: If the `job` mapping is malformed.
        """
        job_data = dict(definition.get("job") or {})
        vendor_dependencies = bool(job_data.get("vendor-dependencies", False))
        clone = vendor_dependencies or always_clone

        return cls.model_validate(
            {
                **job_data,
                "id": job_id,
                "credentials": list(definition.get("credentials") or []),
                "clone": clone,
                "repo_contents_path": repo_contents_path,
                "definition": job_data,
            }
        )


class JobDefinitionError(BaseModel):
    """Base job-definition error."""

    model_config = ConfigDict(extra="forbid")

    path: Path
    message: str

    def to_exception(self) -> InvalidJobDefinition:
        return InvalidJobDefinition(self)


class JobDefinitionNotFoundError(JobDefinitionError):
    """Job definition file does not exist."""

    pass


class JobDefinitionIOError(JobDefinitionError):
    """Job definition file could not be read."""

    pass


class JobDefinitionParseError(JobDefinitionError):
    """Job definition is not valid JSON or YAML."""

    line: int | None = None
    column: int | None = None


class JobDefinitionValidationError(JobDefinitionError):
    """Job definition does not describe a valid job."""

    field: str | None = None


class InvalidJobDefinition(ValueError):
    """Raised form of a JobDefinitionError, for reporting a job that never got built."""

    def __init__(self, error: JobDefinitionError) -> None:
        self.error = error
        super().__init__(f"{type(error).__name__}: {error.message} ({error.path})")
