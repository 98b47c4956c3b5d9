"""Job definition loading and validation helpers."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from result import Err, Ok, Result

from .models import (
    Job,
    JobDefinitionError,
    JobDefinitionIOError,
    JobDefinitionNotFoundError,
    JobDefinitionParseError,
    JobDefinitionValidationError,
)

_YAML_SUFFIXES = {".yml", ".yaml"}


def load_job_definition(path: Path) -> Result[dict[str, Any], JobDefinitionError]:
    """Read the job definition document (JSON, or YAML by file suffix)."""
    if not path.exists() or not path.is_file():
        return Err(JobDefinitionNotFoundError(path=path, message=f"Job definition not found: {path}"))

    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        return Err(JobDefinitionIOError(path=path, message=str(exc)))

    if path.suffix.lower() in _YAML_SUFFIXES:
        parsed = _parse_yaml(path, raw_text)
    else:
        parsed = _parse_json(path, raw_text)

    return parsed.and_then(lambda data: _ensure_mapping(path, data))


def parse_job(
    definition: Mapping[str, Any],
    *,
    path: Path,
    job_id: str,
    repo_contents_path: Path | None = None,
    always_clone: bool = False,
) -> Result[Job, JobDefinitionError]:
    """Validate a loaded definition into a Job."""
    if not isinstance(definition.get("job"), Mapping):
        return Err(
            JobDefinitionValidationError(
                path=path,
                field="job",
                message="Job definition must contain a 'job' mapping.",
            )
        )

    try:
        return Ok(
            Job.from_definition(
                definition,
                job_id=job_id,
                repo_contents_path=repo_contents_path,
                always_clone=always_clone,
            )
        )
    except ValidationError as exc:
        error_details = exc.errors()
        field = None
        message = str(exc)
        if error_details:
            first = error_details[0]
            loc = first.get("loc") or ()
            field = ".".join(str(part) for part in loc) or None
            message = first.get("msg", message)
        return Err(JobDefinitionValidationError(path=path, field=field, message=message))


def _parse_json(path: Path, raw_text: str) -> Result[object, JobDefinitionError]:
    try:
        return Ok(json.loads(raw_text))
    except json.JSONDecodeError as exc:
        return Err(JobDefinitionParseError(path=path, line=exc.lineno, column=exc.colno, message=exc.msg))


def _parse_yaml(path: Path, raw_text: str) -> Result[object, JobDefinitionError]:
    try:
        return Ok(yaml.safe_load(raw_text))
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        line = getattr(mark, "line", None)
        column = getattr(mark, "column", None)
        return Err(
            JobDefinitionParseError(
                path=path,
                line=(line + 1) if line is not None else None,
                column=(column + 1) if column is not None else None,
                message=str(exc),
            )
        )


def _ensure_mapping(path: Path, data: object) -> Result[dict[str, Any], JobDefinitionError]:
    if not isinstance(data, dict):
        return Err(
            JobDefinitionValidationError(
                path=path,
                field=None,
                message="Job definition root must be a mapping of keys to values.",
            )
        )
    return Ok(data)
