"""Git utility functions."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel
from result import Err, Ok, Result


class GitError(BaseModel):
    """Base error for git operations."""

    message: str


class GitNotInstalledError(GitError):
    """Git command not found."""

    pass


class GitCloneError(GitError):
    """Failed to clone repository."""

    url: str
    stderr: str = ""


class GitRevParseError(GitError):
    """Failed to resolve a revision in a checkout."""

    path: Path


def is_git_checkout(path: Path | None) -> bool:
    """Check whether path already holds version-control metadata."""
    if path is None:
        return False
    return (path / ".git").is_dir()


def clone_repository(
    url: str,
    destination: Path,
    *,
    branch: str | None = None,
    depth: int = 1,
    extra_headers: Mapping[str, str] | None = None,
) -> Result[Path, GitError]:
    if destination.exists() and any(destination.iterdir()):
        return Err(GitCloneError(url=url, message=f"Destination is not empty: {destination}"))

    command = ["git", "clone", "--no-tags", "--depth", str(depth)]
    if branch:
        command += ["--branch", branch, "--single-branch"]
    command += [url, str(destination)]

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)

        subprocess.run(
            command,
            capture_output=True,
            text=True,
            check=True,
            env=_git_env(extra_headers),
        )

        return Ok(destination)

    except FileNotFoundError:
        return Err(GitNotInstalledError(message="git command not found. Please install git."))
    except subprocess.CalledProcessError as e:
        stderr = e.stderr.strip() if e.stderr else "Unknown error"
        return Err(GitCloneError(url=url, stderr=stderr, message=f"Failed to clone repository: {stderr}"))
    except OSError as e:
        return Err(GitCloneError(url=url, stderr=str(e), message=f"Unexpected error cloning repository: {e}"))


def get_head_commit(path: Path) -> Result[str, GitError]:
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            cwd=path,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError:
        return Err(GitNotInstalledError(message="git command not found. Please install git."))
    except subprocess.CalledProcessError as e:
        stderr = e.stderr.strip() if e.stderr else "Unknown error"
        return Err(GitRevParseError(path=path, message=f"Failed to resolve HEAD: {stderr}"))

    return Ok(result.stdout.strip())


def _git_env(extra_headers: Mapping[str, str] | None) -> dict[str, str]:
    # Headers go through GIT_CONFIG_* so tokens never appear in argv or urls.
    env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
    for index, (name, value) in enumerate((extra_headers or {}).items()):
        env[f"GIT_CONFIG_KEY_{index}"] = "http.extraHeader"
        env[f"GIT_CONFIG_VALUE_{index}"] = f"{name}: {value}"
    if extra_headers:
        env["GIT_CONFIG_COUNT"] = str(len(extra_headers))
    return env
