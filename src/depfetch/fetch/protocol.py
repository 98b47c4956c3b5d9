"""Collaborator protocols for the fetch stage."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol

from depfetch.jobs import Credential, Job, JobSource

from .models import DependencyFile, PackageManagerVersion


class Fetcher(Protocol):
    """Retrieves dependency files for one package-manager ecosystem."""

    def clone_repo_contents(self) -> Path:
        """Clone the repository into the configured contents path."""
        ...

    def commit(self) -> str | None:
        """Sha of the commit the files are read at."""
        ...

    def files(self) -> Sequence[DependencyFile]:
        """Fetch the dependency files.

        Raises the exceptions in depfetch.fetch.exceptions, or upstream errors
        from depfetch.github, on failure.
        """
        ...

    def package_manager_version(self) -> PackageManagerVersion | None: ...


class FetcherFactory(Protocol):
    def __call__(
        self,
        *,
        source: JobSource,
        credentials: Sequence[Credential],
        options: Mapping[str, Any],
        repo_contents_path: Path | None,
    ) -> Fetcher: ...


class ReportingService(Protocol):
    """Receives error reports, telemetry and the completion signal for a job."""

    def record_update_job_error(self, error_type: str, error_details: Mapping[str, object] | None) -> None: ...

    def mark_job_as_processed(self, base_commit_sha: str) -> None: ...

    def capture_exception(self, error: BaseException, job: Job | None = None) -> None: ...

    def record_package_manager_version(self, ecosystem: str, package_managers: Mapping[str, str]) -> None: ...
