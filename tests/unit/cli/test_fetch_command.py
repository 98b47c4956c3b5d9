from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
import respx
from result import Ok
from typer.testing import CliRunner

from depfetch.cli import main as cli_main
from depfetch.cli.main import app

runner = CliRunner()
API = "http://api.test/update_jobs/42"


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_main, "setup_logging", lambda app_info, config: None)


@pytest.fixture
def env(tmp_path: Path) -> dict[str, str]:
    checkout = tmp_path / "repo"
    (checkout / ".git").mkdir(parents=True)
    (checkout / "requirements.txt").write_text("requests==2.31.0\n")
    return {
        "DEPFETCH_JOB_ID": "42",
        "DEPFETCH_API_URL": "http://api.test",
        "DEPFETCH_JOB_TOKEN": "job-token",
        "DEPFETCH_JOB_PATH": str(tmp_path / "job.json"),
        "DEPFETCH_OUTPUT_PATH": str(tmp_path / "output.json"),
        "DEPFETCH_REPO_CONTENTS_PATH": str(checkout),
    }


def _write_job(path: Path, package_manager: str = "pip") -> None:
    path.write_text(
        json.dumps(
            {
                "job": {"package-manager": package_manager, "source": {"provider": "github", "repo": "acme/service"}},
                "credentials": [],
            }
        )
    )


def test_cli_without_subcommand_shows_help() -> None:
    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert "fetch" in result.stdout


@respx.mock
def test_fetch_writes_artifact_and_marks_processed(env: dict[str, str], tmp_path: Path) -> None:
    _write_job(tmp_path / "job.json")
    processed = respx.patch(f"{API}/mark_as_processed").mock(return_value=httpx.Response(204))

    with patch("depfetch.fetchers.base.get_head_commit", return_value=Ok("c0ffee")):
        result = runner.invoke(app, ["fetch"], env=env)

    assert result.exit_code == 0, result.output
    artifact = json.loads((tmp_path / "output.json").read_text())
    assert artifact["base_commit_sha"] == "c0ffee"
    assert [file["name"] for file in artifact["base64_dependency_files"]] == ["requirements.txt"]
    assert json.loads(processed.calls.last.request.content) == {"data": {"base-commit-sha": "c0ffee"}}


@respx.mock
def test_fetch_single_process_writes_snapshot(env: dict[str, str], tmp_path: Path) -> None:
    _write_job(tmp_path / "job.json")
    respx.patch(f"{API}/mark_as_processed").mock(return_value=httpx.Response(204))
    env = {**env, "DEPFETCH_SINGLE_PROCESS": "true", "DEPFETCH_SNAPSHOT_PATH": str(tmp_path / "snapshot.json")}

    with patch("depfetch.fetchers.base.get_head_commit", return_value=Ok("c0ffee")):
        result = runner.invoke(app, ["fetch"], env=env)

    assert result.exit_code == 0, result.output
    snapshot = json.loads((tmp_path / "snapshot.json").read_text())
    assert snapshot["job"]["package-manager"] == "pip"
    assert snapshot["base_commit_sha"] == "c0ffee"


@respx.mock
def test_fetch_failure_is_reported_and_exits_zero(env: dict[str, str], tmp_path: Path) -> None:
    _write_job(tmp_path / "job.json")
    (Path(env["DEPFETCH_REPO_CONTENTS_PATH"]) / "requirements.txt").unlink()
    error = respx.post(f"{API}/record_update_job_error").mock(return_value=httpx.Response(204))
    processed = respx.patch(f"{API}/mark_as_processed").mock(return_value=httpx.Response(204))

    with patch("depfetch.fetchers.base.get_head_commit", return_value=Ok("c0ffee")):
        result = runner.invoke(app, ["fetch"], env=env)

    assert result.exit_code == 0, result.output
    assert json.loads(error.calls.last.request.content)["data"]["error-type"] == "dependency_file_not_found"
    assert json.loads(processed.calls.last.request.content) == {"data": {"base-commit-sha": "c0ffee"}}
    assert not (tmp_path / "output.json").exists()


def _unloadable_job_routes() -> tuple[respx.Route, respx.Route, respx.Route]:
    error = respx.post(f"{API}/record_update_job_error").mock(return_value=httpx.Response(204))
    captured = respx.post(f"{API}/record_update_job_unknown_error").mock(return_value=httpx.Response(204))
    processed = respx.patch(f"{API}/mark_as_processed").mock(return_value=httpx.Response(204))
    return error, captured, processed


@respx.mock
def test_fetch_with_missing_job_definition_exits_one(env: dict[str, str], tmp_path: Path) -> None:
    _, _, processed = _unloadable_job_routes()

    result = runner.invoke(app, ["fetch", "--job-path", str(tmp_path / "nope.json")], env=env)

    assert result.exit_code == 1
    assert "nope.json" in result.output
    assert processed.call_count == 1


@respx.mock
def test_invalid_job_definition_is_reported_and_marked_processed(env: dict[str, str], tmp_path: Path) -> None:
    (tmp_path / "job.json").write_text(
        json.dumps({"job": {"package-manager": "pip", "source": {"repo": "not a repo"}}, "credentials": []})
    )
    error, captured, processed = _unloadable_job_routes()

    result = runner.invoke(app, ["fetch"], env=env)

    assert result.exit_code == 1
    assert json.loads(error.calls.last.request.content) == {
        "data": {"error-type": "unknown_error", "error-details": {}}
    }
    assert captured.call_count == 1
    capture = json.loads(captured.calls.last.request.content)["data"]["error-details"]
    assert capture["error-class"] == "InvalidJobDefinition"
    assert capture["package-manager"] is None
    assert processed.call_count == 1
    assert json.loads(processed.calls.last.request.content) == {"data": {"base-commit-sha": "unknown"}}
