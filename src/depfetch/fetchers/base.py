"""Shared clone/API plumbing for the bundled fetchers."""

from __future__ import annotations

import base64
import posixpath
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, ClassVar

from result import Err, Ok

from depfetch.common import create_logger
from depfetch.fetch.exceptions import BranchNotFound, CloneFailed, DependencyFileNotFound, OutOfDisk, RepoNotFound
from depfetch.fetch.models import DependencyFile, PackageManagerVersion
from depfetch.github import GitHubClient, NotFound, token_from_credentials
from depfetch.jobs import Credential, JobSource
from depfetch.utils.git import GitCloneError, GitError, clone_repository, get_head_commit, is_git_checkout

logger = create_logger("fetchers")

_OUT_OF_DISK_PATTERNS = ("No space left on device", "Disk quota exceeded")
_REPO_NOT_FOUND_PATTERNS = (
    "Repository not found",
    "Authentication failed",
    "could not read Username",
    "The requested URL returned error: 403",
    "The requested URL returned error: 404",
)


class RepositoryFetcher(ABC):
    """Base fetcher reading files from a local checkout, or from the GitHub API when there is none."""

    ecosystem: ClassVar[str]

    def __init__(
        self,
        *,
        source: JobSource,
        credentials: Sequence[Credential],
        options: Mapping[str, Any],
        repo_contents_path: Path | None,
        client: GitHubClient | None = None,
    ) -> None:
        self.source = source
        self.options = dict(options)
        self.repo_contents_path = repo_contents_path
        self._token = token_from_credentials(credentials, source.host)
        self._client = client
        self._commit: str | None = None

    @abstractmethod
    def fetch_files(self) -> list[DependencyFile]:
        """Collect this ecosystem's dependency files using fetch_file/fetch_file_if_present."""

    def files(self) -> list[DependencyFile]:
        fetched = self.fetch_files()
        logger.debug("Fetched dependency files", ecosystem=self.ecosystem, files=[f.path for f in fetched])
        return fetched

    def package_manager_version(self) -> PackageManagerVersion | None:
        return None

    def clone_repo_contents(self) -> Path:
        path = self._require_contents_path()
        if is_git_checkout(path):
            return path

        logger.info("Cloning repository", repo=self.source.repo, branch=self.source.branch, path=str(path))
        match clone_repository(
            self.source.clone_url,
            path,
            branch=self.source.branch,
            extra_headers=self._git_auth_headers(),
        ):
            case Ok(cloned):
                return cloned
            case Err(error):
                raise self._clone_failure(error)

    def commit(self) -> str | None:
        if self._commit is None:
            self._commit = self._local_commit() if self.repo_contents_path else self._remote_commit()
        return self._commit

    def file_path(self, name: str) -> str:
        return posixpath.join(self.source.directory, name)

    def fetch_file(self, name: str) -> DependencyFile:
        if (file := self.fetch_file_if_present(name)) is None:
            raise DependencyFileNotFound(self.file_path(name))
        return file

    def fetch_file_if_present(self, name: str) -> DependencyFile | None:
        if self.repo_contents_path:
            raw = self._read_local(name)
        else:
            raw = self._read_remote(name)

        if raw is None:
            return None
        return _build_file(name, self.source.directory, raw)

    def directory_exists(self, relative: str) -> bool:
        """Whether a directory relative to the source directory exists in the repository."""
        path = posixpath.normpath(posixpath.join(self.source.directory, relative)).lstrip("/")
        if self.repo_contents_path:
            return (self.repo_contents_path / path).is_dir()
        try:
            return isinstance(self._github().contents(self.source.repo, path, self._ref()), list)
        except NotFound:
            return False

    def _local_commit(self) -> str | None:
        match get_head_commit(self._require_contents_path()):
            case Ok(sha):
                return sha
            case Err(error):
                logger.warning("Could not read HEAD of checkout", error=error.message)
                return None

    def _remote_commit(self) -> str:
        client = self._github()
        try:
            branch = self.source.branch or client.default_branch(self.source.repo)
        except NotFound as e:
            raise RepoNotFound(self.source.url) from e

        try:
            return client.branch_head(self.source.repo, branch)
        except NotFound as e:
            try:
                client.repository(self.source.repo)
            except NotFound as repo_error:
                raise RepoNotFound(self.source.url) from repo_error
            raise BranchNotFound(branch) from e

    def _read_local(self, name: str) -> bytes | None:
        path = self._require_contents_path() / self.source.directory.lstrip("/") / name
        if not path.is_file():
            return None
        return path.read_bytes()

    def _read_remote(self, name: str) -> bytes | None:
        try:
            entry = self._github().contents(self.source.repo, self.file_path(name), self._ref())
        except NotFound:
            return None

        if not isinstance(entry, dict) or entry.get("type") != "file":
            return None
        return base64.b64decode(entry.get("content") or "")

    def _ref(self) -> str:
        return self.commit() or self.source.branch or "HEAD"

    def _github(self) -> GitHubClient:
        if self._client is None:
            self._client = GitHubClient(self.source.api_url, token=self._token)
        return self._client

    def _git_auth_headers(self) -> dict[str, str] | None:
        if not self._token:
            return None
        basic = base64.b64encode(f"x-access-token:{self._token}".encode()).decode("ascii")
        return {"Authorization": f"Basic {basic}"}

    def _require_contents_path(self) -> Path:
        if self.repo_contents_path is None:
            raise ValueError("No repository contents path configured for this fetcher")
        return self.repo_contents_path

    def _clone_failure(self, error: GitError) -> Exception:
        stderr = error.stderr if isinstance(error, GitCloneError) else ""
        if any(pattern in stderr for pattern in _OUT_OF_DISK_PATTERNS):
            return OutOfDisk(error.message)
        if self.source.branch and "not found in upstream" in stderr:
            return BranchNotFound(self.source.branch)
        if any(pattern in stderr for pattern in _REPO_NOT_FOUND_PATTERNS):
            return RepoNotFound(self.source.url)
        return CloneFailed(self.source.clone_url, error.message)


def _build_file(name: str, directory: str, raw: bytes) -> DependencyFile:
    try:
        return DependencyFile(name=name, directory=directory, content=raw.decode("utf-8"))
    except UnicodeDecodeError:
        return DependencyFile(name=name, directory=directory, content=raw, binary=True)
