"""Maps fetch failures onto the reportable error taxonomy."""

from __future__ import annotations

import errno
import time
import traceback

from depfetch.common import Logger, create_logger
from depfetch.github import RATE_LIMITED_ERRORS, ServerError, Unauthorized, UpstreamError
from depfetch.jobs import Job

from .exceptions import (
    BranchNotFound,
    DependencyFileNotFound,
    DependencyFileNotParseable,
    OutOfDisk,
    PathDependenciesNotReachable,
    RepoNotFound,
)
from .models import (
    BranchNotFoundError,
    DependencyFileNotFoundError,
    DependencyFileNotParseableError,
    JobError,
    JobRepoNotFoundError,
    OutOfDiskError,
    PathDependenciesNotReachableError,
    RateLimitedError,
    UnauthorizedError,
    UnknownError,
)
from .protocol import ReportingService

_logger = create_logger("fetch.classifier")

RATE_LIMIT_RESET_HEADER = "X-RateLimit-Reset"


def classify_error(error: BaseException) -> JobError:
    """Classify an exception raised during a fetch run. Has no side effects."""
    match error:
        case BranchNotFound():
            return BranchNotFoundError(branch_name=error.branch_name)
        case RepoNotFound():
            # Also raised when the credentials cannot see an existing repository.
            return JobRepoNotFoundError()
        case DependencyFileNotParseable():
            return DependencyFileNotParseableError(message=str(error), file_path=error.file_path)
        case DependencyFileNotFound():
            return DependencyFileNotFoundError(file_path=error.file_path)
        case OutOfDisk():
            return OutOfDiskError()
        case OSError() if error.errno == errno.ENOSPC:
            return OutOfDiskError()
        case PathDependenciesNotReachable():
            return PathDependenciesNotReachableError(dependencies=error.dependencies)
        case Unauthorized():
            return UnauthorizedError()
        case ServerError():
            return UnknownError(upstream=True)
        case UpstreamError() if isinstance(error, RATE_LIMITED_ERRORS):
            return RateLimitedError(rate_limit_reset=rate_limit_reset(error))
        case _:
            return UnknownError()


def rate_limit_reset(error: UpstreamError) -> int | None:
    """Epoch seconds at which the current rate limit window resets."""
    raw = error.response_headers.get(RATE_LIMIT_RESET_HEADER)
    try:
        return int(raw) if raw is not None else None
    except ValueError:
        return None


def rate_limit_remaining(error: UpstreamError, now: float | None = None) -> float:
    """Seconds until the rate limit resets, never negative."""
    reset = rate_limit_reset(error)
    if reset is None:
        return 0.0
    remaining = reset - (time.time() if now is None else now)
    return max(remaining, 0.0)


def report_error(
    error: BaseException,
    *,
    job: Job | None,
    reporting: ReportingService,
    logger: Logger | None = None,
) -> JobError:
    """Classify error, perform its logging and capture side effects, and record it."""
    log = logger or _logger
    job_error = classify_error(error)

    match job_error:
        case UnknownError(upstream=True):
            # Nothing we can do about provider 5xx; keep it out of exception tracking.
            log.error("Upstream server error during file fetching", error=str(error))
        case UnknownError():
            log.error(str(error))
            for line in traceback.format_exception(error):
                log.error(line.rstrip())
            reporting.capture_exception(error, job)
        case _:
            pass

    reporting.record_update_job_error(job_error.error_type.value, job_error.error_detail())
    return job_error
