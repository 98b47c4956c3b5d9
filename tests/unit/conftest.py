from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from depfetch.fetch import DependencyFile, FetcherRegistry, PackageManagerVersion
from depfetch.jobs import Job


@dataclass
class RecordingReportingService:
    errors: list[tuple[str, Mapping[str, object] | None]] = field(default_factory=list)
    processed: list[str] = field(default_factory=list)
    exceptions: list[tuple[BaseException, Job | None]] = field(default_factory=list)
    versions: list[tuple[str, Mapping[str, str]]] = field(default_factory=list)

    def record_update_job_error(self, error_type: str, error_details: Mapping[str, object] | None) -> None:
        self.errors.append((error_type, error_details))

    def mark_job_as_processed(self, base_commit_sha: str) -> None:
        self.processed.append(base_commit_sha)

    def capture_exception(self, error: BaseException, job: Job | None = None) -> None:
        self.exceptions.append((error, job))

    def record_package_manager_version(self, ecosystem: str, package_managers: Mapping[str, str]) -> None:
        self.versions.append((ecosystem, package_managers))


@dataclass
class FakeFetcher:
    """Scripted fetcher: each `files()` call pops the next outcome (exception or file list)."""

    commit_sha: str | None = "abc123"
    file_outcomes: list[Sequence[DependencyFile] | Exception] = field(default_factory=list)
    clone_error: Exception | None = None
    commit_error: Exception | None = None
    version: PackageManagerVersion | None = None
    clone_calls: int = 0
    files_calls: int = 0
    init_kwargs: dict[str, Any] = field(default_factory=dict)

    def clone_repo_contents(self) -> Path:
        self.clone_calls += 1
        if self.clone_error is not None:
            raise self.clone_error
        return Path("/tmp/repo")

    def commit(self) -> str | None:
        if self.commit_error is not None:
            raise self.commit_error
        return self.commit_sha

    def files(self) -> Sequence[DependencyFile]:
        self.files_calls += 1
        outcome = self.file_outcomes.pop(0) if self.file_outcomes else [GEMFILE]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def package_manager_version(self) -> PackageManagerVersion | None:
        return self.version


GEMFILE = DependencyFile(name="Gemfile", content='source "https://rubygems.org"\n', directory="/")


def make_definition(**job_overrides: Any) -> dict[str, Any]:
    job: dict[str, Any] = {
        "package-manager": "bundler",
        "source": {"provider": "github", "repo": "acme/widgets", "directory": "/", "branch": None},
        "experiments": {},
    }
    job.update(job_overrides)
    return {
        "job": job,
        "credentials": [
            {"type": "git_source", "host": "github.com", "username": "x-access-token", "password": "s3cret-token"}
        ],
    }


@pytest.fixture
def reporting() -> RecordingReportingService:
    return RecordingReportingService()


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def registry_for() -> Callable[[FakeFetcher], FetcherRegistry]:
    def build(fetcher: FakeFetcher, *, always_clone: bool = False) -> FetcherRegistry:
        def factory(**kwargs: Any) -> FakeFetcher:
            fetcher.init_kwargs = kwargs
            return fetcher

        registry = FetcherRegistry()
        registry.register("bundler", factory, always_clone=always_clone)
        return registry

    return build


@pytest.fixture
def make_job() -> Callable[..., Job]:
    def build(
        *,
        repo_contents_path: Path | None = None,
        always_clone: bool = False,
        **job_overrides: Any,
    ) -> Job:
        return Job.from_definition(
            make_definition(**job_overrides),
            job_id="42",
            repo_contents_path=repo_contents_path,
            always_clone=always_clone,
        )

    return build


@pytest.fixture
def job_definition() -> dict[str, Any]:
    return make_definition()
