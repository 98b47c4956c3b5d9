"""Bundler (Ruby) fetcher."""

from __future__ import annotations

import re

from depfetch.fetch.exceptions import PathDependenciesNotReachable
from depfetch.fetch.models import DependencyFile, PackageManagerVersion

from .base import RepositoryFetcher

DEFAULT_BUNDLER_VERSION = "2"

_PATH_OPTION = re.compile(r"""(?:\bpath:\s*|:path\s*=>\s*)["']([^"']+)["']""")
_BUNDLED_WITH = re.compile(r"^BUNDLED WITH\s*\n\s+(\d+)(?:\.\d+)*\s*$", re.MULTILINE)


class BundlerFetcher(RepositoryFetcher):
    ecosystem = "bundler"

    def fetch_files(self) -> list[DependencyFile]:
        gemfile = self.fetch_file("Gemfile")
        fetched = [gemfile]
        for name in ("Gemfile.lock", ".ruby-version"):
            if (file := self.fetch_file_if_present(name)) is not None:
                fetched.append(file)

        self._check_path_dependencies(gemfile)
        return fetched

    def package_manager_version(self) -> PackageManagerVersion | None:
        lockfile = self.fetch_file_if_present("Gemfile.lock")
        version = DEFAULT_BUNDLER_VERSION
        if lockfile is not None and isinstance(lockfile.content, str):
            if match := _BUNDLED_WITH.search(lockfile.content):
                version = match.group(1)
        return PackageManagerVersion(ecosystem=self.ecosystem, package_managers={"bundler": version})

    def _check_path_dependencies(self, gemfile: DependencyFile) -> None:
        if not isinstance(gemfile.content, str):
            return
        unreachable = [path for path in _PATH_OPTION.findall(gemfile.content) if not self.directory_exists(path)]
        if unreachable:
            raise PathDependenciesNotReachable(unreachable)
