from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from depfetch.fetch import DependencyFile, FetchResult, ResultSink, decode_dependency_files
from depfetch.fetch.sink import encode_dependency_file

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\xfe"


@pytest.fixture
def fetch_result() -> FetchResult:
    return FetchResult(
        files=(
            DependencyFile(name="Gemfile", content='gem "rails"\n', directory="/app"),
            DependencyFile(name="logo.png", content=PNG_BYTES, binary=True, directory="/app"),
        ),
        base_commit_sha="deadbeef",
    )


def test_text_content_is_unchanged() -> None:
    file = DependencyFile(name="requirements.txt", content="requests==2.31.0\n")

    encoded = encode_dependency_file(file)

    assert encoded == {"name": "requirements.txt", "directory": "/", "content": "requests==2.31.0\n", "binary": False}


def test_binary_content_round_trips(fetch_result: FetchResult, tmp_path: Path) -> None:
    output = tmp_path / "output.json"

    ResultSink(output).persist(fetch_result, {"job": {}})
    decoded = decode_dependency_files(json.loads(output.read_text()))

    assert decoded == list(fetch_result.files)
    assert decoded[1].content == PNG_BYTES


def test_artifact_layout(fetch_result: FetchResult, tmp_path: Path) -> None:
    output = tmp_path / "out" / "output.json"

    written = ResultSink(output).persist(fetch_result, {"job": {"package-manager": "bundler"}})

    assert written == [output]
    artifact = json.loads(output.read_text())
    assert set(artifact) == {"base64_dependency_files", "base_commit_sha"}
    assert artifact["base_commit_sha"] == "deadbeef"
    assert artifact["base64_dependency_files"][0] == {
        "name": "Gemfile",
        "directory": "/app",
        "content": 'gem "rails"\n',
        "binary": False,
    }
    assert artifact["base64_dependency_files"][1]["binary"] is True


def test_snapshot_includes_job_definition(fetch_result: FetchResult, tmp_path: Path) -> None:
    output = tmp_path / "output.json"
    snapshot = tmp_path / "job.json"
    definition = {"job": {"package-manager": "bundler"}, "credentials": [{"password": "secret"}]}

    written = ResultSink(output, snapshot_path=snapshot).persist(fetch_result, definition)

    assert written == [output, snapshot]
    payload = json.loads(snapshot.read_text())
    assert payload["job"] == {"package-manager": "bundler"}
    assert payload["base_commit_sha"] == "deadbeef"
    assert "secret" not in snapshot.read_text()
    assert payload["base64_dependency_files"] == json.loads(output.read_text())["base64_dependency_files"]


def test_failed_write_leaves_no_partial_files(fetch_result: FetchResult, tmp_path: Path) -> None:
    output = tmp_path / "output.json"
    snapshot = tmp_path / "job.json"

    with patch("depfetch.fetch.sink.json.dump", side_effect=[None, OSError(28, "No space left on device")]):
        with pytest.raises(OSError):
            ResultSink(output, snapshot_path=snapshot).persist(fetch_result, {"job": {}})

    assert not output.exists()
    assert not snapshot.exists()
    assert os.listdir(tmp_path) == []


def test_failed_move_removes_artifacts_already_in_place(fetch_result: FetchResult, tmp_path: Path) -> None:
    output = tmp_path / "output.json"
    snapshot = tmp_path / "snapshot.json"
    real_replace = os.replace
    calls: list[Path] = []

    def replace_then_fail(src: Path, dst: Path) -> None:
        calls.append(Path(dst))
        if len(calls) > 1:
            raise OSError(28, "No space left on device")
        real_replace(src, dst)

    with patch("depfetch.fetch.sink.os.replace", side_effect=replace_then_fail):
        with pytest.raises(OSError):
            ResultSink(output, snapshot_path=snapshot).persist(fetch_result, {"job": {}})

    assert calls == [output, snapshot]
    assert os.listdir(tmp_path) == []
