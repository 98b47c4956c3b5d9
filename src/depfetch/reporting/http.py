"""Reporting service client for the pipeline API."""

from __future__ import annotations

import traceback
from collections.abc import Mapping

import httpx

from depfetch.common import create_logger
from depfetch.jobs import Job

logger = create_logger("reporting")

DEFAULT_TIMEOUT = httpx.Timeout(10.0)


class HttpReportingService:
    """Sends a job's errors, telemetry and completion signal to the pipeline API."""

    def __init__(
        self,
        api_url: str,
        job_id: str,
        *,
        token: str | None = None,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._job_id = job_id
        headers = {"Authorization": token} if token else {}
        self._client = httpx.Client(
            base_url=f"{api_url.rstrip('/')}/update_jobs/{job_id}",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> HttpReportingService:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def record_update_job_error(self, error_type: str, error_details: Mapping[str, object] | None) -> None:
        logger.info("Recording job error", error_type=error_type)
        self._send(
            "POST",
            "/record_update_job_error",
            {"error-type": error_type, "error-details": dict(error_details) if error_details is not None else None},
        )

    def mark_job_as_processed(self, base_commit_sha: str) -> None:
        logger.info("Marking job as processed", base_commit_sha=base_commit_sha)
        self._send("PATCH", "/mark_as_processed", {"base-commit-sha": base_commit_sha})

    def record_package_manager_version(self, ecosystem: str, package_managers: Mapping[str, str]) -> None:
        self._send(
            "POST",
            "/record_package_manager_version",
            {"ecosystem": ecosystem, "package-managers": dict(package_managers)},
        )

    def capture_exception(self, error: BaseException, job: Job | None = None) -> None:
        details = {
            "error-class": type(error).__name__,
            "error-message": str(error),
            "error-backtrace": "".join(traceback.format_exception(error)),
            "job-id": self._job_id,
            "package-manager": job.package_manager if job else None,
        }
        try:
            self._send("POST", "/record_update_job_unknown_error", {"error-type": "unknown_error", "error-details": details})
        except httpx.HTTPError as e:
            logger.error("Failed to capture exception", error=str(e))

    def _send(self, method: str, path: str, data: Mapping[str, object]) -> None:
        response = self._client.request(method, path, json={"data": data})
        response.raise_for_status()
