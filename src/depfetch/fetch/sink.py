"""Persists fetch results for later pipeline stages."""

from __future__ import annotations

import base64
import json
import os
import tempfile
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from depfetch.common import create_logger
from depfetch.utils.types import JsonDict

from .models import DependencyFile, FetchResult

logger = create_logger("fetch.sink")


def encode_dependency_file(file: DependencyFile) -> JsonDict:
    """Transport form of a file: binary content base64 encoded, text unchanged."""
    if file.binary:
        raw = file.content if isinstance(file.content, bytes) else file.content.encode("utf-8")
        content = base64.b64encode(raw).decode("ascii")
    else:
        content = file.content if isinstance(file.content, str) else file.content.decode("utf-8")

    return {
        "name": file.name,
        "directory": file.directory,
        "content": content,
        "binary": file.binary,
    }


def decode_dependency_files(payload: Mapping[str, Any]) -> list[DependencyFile]:
    """Rebuild dependency files from a result artifact or snapshot."""
    files = []
    for entry in payload.get("base64_dependency_files", []):
        binary = bool(entry.get("binary", False))
        content = base64.b64decode(entry["content"]) if binary else entry["content"]
        files.append(
            DependencyFile(
                name=entry["name"],
                directory=entry.get("directory", "/"),
                content=content,
                binary=binary,
            )
        )
    return files


def build_artifact(result: FetchResult) -> JsonDict:
    return {
        "base64_dependency_files": [encode_dependency_file(file) for file in result.files],
        "base_commit_sha": result.base_commit_sha,
    }


class ResultSink:
    """Writes the result artifact and, in single-process mode, the job snapshot."""

    def __init__(self, output_path: Path, *, snapshot_path: Path | None = None) -> None:
        self._output_path = output_path
        self._snapshot_path = snapshot_path

    def persist(self, result: FetchResult, job_definition: Mapping[str, Any]) -> list[Path]:
        """Write every artifact for result and return the written paths.

        Raises:
            OSError: If an artifact cannot be written. Neither a temporary file nor
                a subset of the artifacts is left behind.
        """
        artifact = build_artifact(result)
        documents: list[tuple[Path, JsonDict]] = [(self._output_path, artifact)]

        if self._snapshot_path is not None:
            documents.append((self._snapshot_path, {**artifact, "job": job_definition.get("job")}))

        written = _write_all(documents)
        logger.info(
            "Fetch result persisted",
            paths=[str(path) for path in written],
            file_count=len(result.files),
            base_commit_sha=result.base_commit_sha,
        )
        return written


def _write_all(documents: Iterable[tuple[Path, JsonDict]]) -> list[Path]:
    staged: list[tuple[Path, Path]] = []
    moved: list[Path] = []
    try:
        for path, document in documents:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
            staged.append((Path(temp_name), path))
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle)

        for temp_path, path in staged:
            os.replace(temp_path, path)
            moved.append(path)
    except Exception:
        # Artifacts are published as a set: drop the ones already moved.
        for path in moved:
            path.unlink(missing_ok=True)
        for temp_path, _ in staged:
            temp_path.unlink(missing_ok=True)
        raise

    return moved
