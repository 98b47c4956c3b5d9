"""Job models and job-definition loading."""

from .loader import load_job_definition, parse_job
from .models import (
    Credential,
    InvalidJobDefinition,
    Job,
    JobDefinitionError,
    JobDefinitionIOError,
    JobDefinitionNotFoundError,
    JobDefinitionParseError,
    JobDefinitionValidationError,
    JobSource,
)

__all__ = [
    "Credential",
    "InvalidJobDefinition",
    "Job",
    "JobDefinitionError",
    "JobDefinitionIOError",
    "JobDefinitionNotFoundError",
    "JobDefinitionParseError",
    "JobDefinitionValidationError",
    "JobSource",
    "load_job_definition",
    "parse_job",
]
