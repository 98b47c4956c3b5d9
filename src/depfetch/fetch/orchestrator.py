"""Runs the file-fetching stage for one job."""

from __future__ import annotations

from collections.abc import Sequence

from result import Err, Ok, Result

from depfetch.common import Logger, create_logger
from depfetch.constants import UNKNOWN_COMMIT_SHA
from depfetch.github import RATE_LIMITED_ERRORS, BadGateway
from depfetch.jobs import Job
from depfetch.utils.git import is_git_checkout

from .classifier import rate_limit_remaining, report_error
from .exceptions import MissingCommitError, UnsupportedPackageManager
from .models import DependencyFile, FetchFailure, FetchResult
from .probe import ConnectivityProbe
from .protocol import Fetcher, ReportingService
from .registry import FetcherRegistry
from .sink import ResultSink

MAX_FILE_FETCH_RETRIES = 2


class Orchestrator:
    """Fetches a job's dependency files at a known commit, or reports why it could not.

    Every run ends with exactly one `mark_job_as_processed` call on the
    reporting service, whether it succeeds or fails.
    """

    def __init__(
        self,
        registry: FetcherRegistry,
        reporting: ReportingService,
        sink: ResultSink,
        *,
        probe: ConnectivityProbe | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._registry = registry
        self._reporting = reporting
        self._sink = sink
        self._probe = probe
        self._logger = logger or create_logger("fetch.orchestrator")

    def run(self, job: Job) -> Result[FetchResult, FetchFailure]:
        self._logger.info("Starting file fetch", job_id=job.id, package_manager=job.package_manager)

        if self._probe is not None:
            self._probe.check(job.source)

        base_commit_sha: str | None = None
        try:
            fetcher = self._build_fetcher(job)
            self._clone_repo_contents(job, fetcher)

            base_commit_sha = fetcher.commit()
            if not base_commit_sha:
                raise MissingCommitError()

            self._record_package_manager_version(fetcher)

            result = FetchResult(files=tuple(self._dependency_files(fetcher)), base_commit_sha=base_commit_sha)
            self._sink.persist(result, {"job": job.definition})
        except Exception as error:
            return Err(self._handle_error(error, job, base_commit_sha))

        self._logger.success("Dependency files fetched", file_count=len(result.files), base_commit_sha=base_commit_sha)
        self._reporting.mark_job_as_processed(result.base_commit_sha)
        return Ok(result)

    def _build_fetcher(self, job: Job) -> Fetcher:
        match self._registry.get(job.package_manager):
            case Ok(registration):
                pass
            case Err(err):
                raise UnsupportedPackageManager(err.package_manager)

        # A mounted checkout is read from disk even when the job does not clone.
        contents_path = job.repo_contents_path if job.clone or self._already_cloned(job) else None

        return registration.factory(
            source=job.source,
            credentials=job.credentials,
            options=job.experiments,
            repo_contents_path=contents_path,
        )

    def _clone_repo_contents(self, job: Job, fetcher: Fetcher) -> None:
        if not job.clone:
            return

        if self._already_cloned(job):
            self._logger.info("Repository already cloned, skipping clone", path=str(job.repo_contents_path))
            return

        self._logger.info("Cloning repository", repo=job.source.repo)
        fetcher.clone_repo_contents()

    def _already_cloned(self, job: Job) -> bool:
        return is_git_checkout(job.repo_contents_path)

    def _record_package_manager_version(self, fetcher: Fetcher) -> None:
        version = fetcher.package_manager_version()
        if version is None:
            return
        self._reporting.record_package_manager_version(version.ecosystem, version.package_managers)

    def _dependency_files(self, fetcher: Fetcher) -> Sequence[DependencyFile]:
        retries = 0
        while True:
            try:
                return fetcher.files()
            except BadGateway:
                retries += 1
                if retries > MAX_FILE_FETCH_RETRIES:
                    raise
                self._logger.warning("Bad gateway while fetching files, retrying", retry=retries)

    def _handle_error(self, error: Exception, job: Job, base_commit_sha: str | None) -> FetchFailure:
        if isinstance(error, RATE_LIMITED_ERRORS):
            remaining = rate_limit_remaining(error)
            self._logger.error(f"Repository is rate limited, attempting to retry in {remaining:.0f}s")
        else:
            self._logger.error("Error during file fetching; aborting", error_class=type(error).__name__)

        sha = base_commit_sha or UNKNOWN_COMMIT_SHA
        try:
            job_error = report_error(error, job=job, reporting=self._reporting, logger=self._logger)
        finally:
            self._reporting.mark_job_as_processed(sha)

        return FetchFailure(error=job_error, base_commit_sha=sha)
