"""pip (Python) fetcher."""

from __future__ import annotations

import tomllib

from depfetch.fetch.exceptions import DependencyFileNotFound, DependencyFileNotParseable
from depfetch.fetch.models import DependencyFile

from .base import RepositoryFetcher

MANIFEST_FILES = ("requirements.txt", "pyproject.toml", "setup.py", "setup.cfg", "Pipfile")
LOCK_FILES = ("Pipfile.lock", "poetry.lock")


class PipFetcher(RepositoryFetcher):
    ecosystem = "pip"

    def fetch_files(self) -> list[DependencyFile]:
        manifests = [file for name in MANIFEST_FILES if (file := self.fetch_file_if_present(name)) is not None]
        if not manifests:
            raise DependencyFileNotFound(
                self.file_path("requirements.txt"),
                f"No requirements.txt, pyproject.toml, setup.py, setup.cfg or Pipfile in {self.source.directory}",
            )

        for file in manifests:
            if file.name == "pyproject.toml":
                _check_pyproject(file)

        locks = [file for name in LOCK_FILES if (file := self.fetch_file_if_present(name)) is not None]
        return manifests + locks


def _check_pyproject(file: DependencyFile) -> None:
    if not isinstance(file.content, str):
        raise DependencyFileNotParseable(file.path, f"{file.path} is not valid UTF-8")
    try:
        tomllib.loads(file.content)
    except tomllib.TOMLDecodeError as e:
        raise DependencyFileNotParseable(file.path, f"{file.path}: {e}") from e
