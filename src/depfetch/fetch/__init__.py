"""File-fetching stage: orchestration, classification and persistence."""

from .classifier import classify_error, rate_limit_remaining, report_error
from .exceptions import (
    BranchNotFound,
    CloneFailed,
    DependencyFileNotFound,
    DependencyFileNotParseable,
    FetchError,
    MissingCommitError,
    OutOfDisk,
    PathDependenciesNotReachable,
    RepoNotFound,
    UnsupportedPackageManager,
)
from .models import (
    DependencyFile,
    ErrorType,
    FetchFailure,
    FetchResult,
    JobError,
    PackageManagerVersion,
)
from .orchestrator import Orchestrator
from .probe import ConnectivityProbe
from .protocol import Fetcher, FetcherFactory, ReportingService
from .registry import FetcherRegistration, FetcherRegistry
from .sink import ResultSink, decode_dependency_files

__all__ = [
    "BranchNotFound",
    "CloneFailed",
    "ConnectivityProbe",
    "DependencyFile",
    "DependencyFileNotFound",
    "DependencyFileNotParseable",
    "ErrorType",
    "FetchError",
    "FetchFailure",
    "FetchResult",
    "Fetcher",
    "FetcherFactory",
    "FetcherRegistration",
    "FetcherRegistry",
    "JobError",
    "MissingCommitError",
    "Orchestrator",
    "OutOfDisk",
    "PackageManagerVersion",
    "PathDependenciesNotReachable",
    "RepoNotFound",
    "ReportingService",
    "ResultSink",
    "UnsupportedPackageManager",
    "classify_error",
    "decode_dependency_files",
    "rate_limit_remaining",
    "report_error",
]
