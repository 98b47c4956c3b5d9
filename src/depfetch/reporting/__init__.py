"""Pipeline API reporting client."""

from .http import HttpReportingService

__all__ = ["HttpReportingService"]
