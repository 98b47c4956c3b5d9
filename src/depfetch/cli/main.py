from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
from result import Err, Ok, Result

from depfetch.common import create_logger, setup_logging
from depfetch.constants import UNKNOWN_COMMIT_SHA
from depfetch.fetch import ConnectivityProbe, FetcherRegistry, Orchestrator, ResultSink, report_error
from depfetch.fetchers import default_registry
from depfetch.jobs import Job, JobDefinitionError, load_job_definition, parse_job
from depfetch.reporting import HttpReportingService
from depfetch.settings import Settings

logger = create_logger("cli")

app = typer.Typer(help="depfetch command-line interface.")


@app.callback(invoke_without_command=True)
def _root_callback(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("fetch")
def fetch(
    job_path: Annotated[
        Path | None,
        typer.Option("--job-path", help="Job definition file (defaults to DEPFETCH_JOB_PATH)."),
    ] = None,
    output_path: Annotated[
        Path | None,
        typer.Option("--output-path", help="Result artifact file (defaults to DEPFETCH_OUTPUT_PATH)."),
    ] = None,
) -> None:
    """Fetch the job's dependency files and write the result artifact.

    The outcome is reported to the pipeline API; a finished run exits 0 whether
    or not the files could be fetched.
    """
    settings = Settings()
    overrides = {
        key: value for key, value in {"job_path": job_path, "output_path": output_path}.items() if value is not None
    }
    if overrides:
        settings = settings.model_copy(update=overrides)

    setup_logging(settings.app, settings.logging)
    registry = default_registry()

    match _load_job(settings, registry):
        case Ok(job):
            pass
        case Err(error):
            logger.error("Failed to load job definition", path=str(error.path), error=error.message)
            _report_unloadable_job(settings, error)
            typer.secho(f"Error: {error.message} ({error.path})", err=True, fg=typer.colors.RED)
            raise typer.Exit(code=1)

    with _reporting_service(settings) as reporting:
        orchestrator = Orchestrator(
            registry,
            reporting,
            ResultSink(settings.output_path, snapshot_path=settings.resolved_snapshot_path()),
            probe=ConnectivityProbe() if settings.enable_connectivity_check else None,
        )
        orchestrator.run(job)


def _load_job(settings: Settings, registry: FetcherRegistry) -> Result[Job, JobDefinitionError]:
    def build(definition: dict[str, Any]) -> Result[Job, JobDefinitionError]:
        job_data = definition.get("job")
        package_manager = str(job_data.get("package-manager", "")) if isinstance(job_data, dict) else ""
        return parse_job(
            definition,
            path=settings.job_path,
            job_id=settings.job_id,
            repo_contents_path=settings.repo_contents_path,
            always_clone=registry.always_clone(package_manager),
        )

    return load_job_definition(settings.job_path).and_then(build)


def _reporting_service(settings: Settings) -> HttpReportingService:
    token = settings.job_token.get_secret_value() if settings.job_token else None
    return HttpReportingService(settings.api_url, settings.job_id, token=token)


def _report_unloadable_job(settings: Settings, error: JobDefinitionError) -> None:
    """Report a job whose definition never became a Job, so the pipeline still sees it finish."""
    with _reporting_service(settings) as reporting:
        try:
            report_error(error.to_exception(), job=None, reporting=reporting, logger=logger)
        finally:
            reporting.mark_job_as_processed(UNKNOWN_COMMIT_SHA)


def main() -> None:
    """Entrypoint for the depfetch CLI."""
    app()
