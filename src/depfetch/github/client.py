"""GitHub REST client used for API-based fetching and connectivity checks."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote

import httpx

from depfetch.common import create_logger

from .errors import raise_for_response

logger = create_logger("github")

DEFAULT_TIMEOUT = httpx.Timeout(30.0)


def token_from_credentials(credentials: Iterable[Mapping[str, Any]], host: str) -> str | None:
    """Return the git_source token configured for host, if any."""
    for credential in credentials:
        if credential.get("type") == "git_source" and credential.get("host") == host:
            token = credential.get("password") or credential.get("token")
            if token:
                return str(token)
    return None


class GitHubClient:
    """Thin synchronous client over the GitHub REST API."""

    def __init__(
        self,
        api_url: str,
        *,
        token: str | None = None,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def repository(self, repo: str) -> dict[str, Any]:
        return self._get(f"/repos/{repo}")

    def default_branch(self, repo: str) -> str:
        return str(self.repository(repo)["default_branch"])

    def branch_head(self, repo: str, branch: str) -> str:
        """Return the sha at the tip of branch."""
        data = self._get(f"/repos/{repo}/branches/{quote(branch, safe='')}")
        return str(data["commit"]["sha"])

    def contents(self, repo: str, path: str, ref: str) -> Any:
        """Return the contents entry for path at ref (a dict for files, a list for directories)."""
        return self._get(f"/repos/{repo}/contents/{quote(path.lstrip('/'))}", params={"ref": ref})

    def _get(self, url: str, params: Mapping[str, str] | None = None) -> Any:
        logger.debug("GitHub request", url=url)
        response = self._client.get(url, params=params)
        raise_for_response(response)
        return response.json()
