"""Package-manager to fetcher registry."""

from __future__ import annotations

from dataclasses import dataclass

from result import Err, Ok, Result

from depfetch.common import create_logger

from .models import UnsupportedPackageManagerError
from .protocol import FetcherFactory

logger = create_logger("fetch.registry")


@dataclass(frozen=True)
class FetcherRegistration:
    """A registered fetcher factory.

    Attributes:
        package_manager: Identifier used in job definitions (e.g. "bundler")
        factory: Callable producing a Fetcher for one job
        always_clone: Whether jobs for this package manager always clone
    """

    package_manager: str
    factory: FetcherFactory
    always_clone: bool = False


class FetcherRegistry:
    """Resolves package-manager identifiers to fetcher factories."""

    def __init__(self) -> None:
        self._registrations: dict[str, FetcherRegistration] = {}

    def register(self, package_manager: str, factory: FetcherFactory, *, always_clone: bool = False) -> None:
        if package_manager in self._registrations:
            logger.warning("Replacing registered fetcher", package_manager=package_manager)
        self._registrations[package_manager] = FetcherRegistration(
            package_manager=package_manager,
            factory=factory,
            always_clone=always_clone,
        )

    def get(self, package_manager: str) -> Result[FetcherRegistration, UnsupportedPackageManagerError]:
        if (registration := self._registrations.get(package_manager)) is not None:
            return Ok(registration)
        return Err(
            UnsupportedPackageManagerError(
                package_manager=package_manager,
                message=f"Unsupported package manager: {package_manager}",
            )
        )

    def always_clone(self, package_manager: str) -> bool:
        return self.get(package_manager).map_or(False, lambda registration: registration.always_clone)

    def package_managers(self) -> list[str]:
        return sorted(self._registrations)

    def __contains__(self, package_manager: object) -> bool:
        return package_manager in self._registrations
