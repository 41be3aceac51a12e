"""
github_client.py

Responsibility: Isolate all direct GitHub REST API interaction.

This module must be the only place that:
- Constructs GitHub REST endpoints
- Sends HTTP requests to api.github.com
- Interprets GitHub API responses / error payloads

The only consumed operation is private repository creation; git operations live in `workspace.py`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests


class RemoteCreationError(RuntimeError):
    pass


@dataclass(frozen=True)
class RemoteRepositoryHandle:
    display_url: str
    publish_url: str


class GitHubClient:
    def __init__(self, token: str, api_base: str = "https://api.github.com") -> None:
        if not token.strip():
            raise RemoteCreationError("GitHub token is required.")
        self._token = token
        self._api_base = api_base.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "repo-init",
        }

    def _request(self, method: str, path: str, *, json_body: dict[str, Any] | None = None) -> Any:
        url = f"{self._api_base}{path}"
        try:
            r = requests.request(method, url, headers=self._headers(), json=json_body, timeout=30)
        except requests.RequestException as e:
            raise RemoteCreationError(f"GitHub API request failed {method} {path}: {e}") from e
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"message": r.text}
            raise RemoteCreationError(f"GitHub API error {r.status_code} {method} {path}: {payload.get('message', payload)}")
        if r.status_code == 204:
            return None
        return r.json()

    def create_private_repo(self, name: str) -> RemoteRepositoryHandle:
        """
        Create a private, empty repository owned by the authenticated user.

        A single POST: no existence check, no retry. A name collision surfaces as a RemoteCreationError.
        """
        body = {
            "name": name,
            "private": True,
            "auto_init": False,
        }
        data = self._request("POST", "/user/repos", json_body=body)
        return RemoteRepositoryHandle(display_url=data["html_url"], publish_url=data["ssh_url"])
