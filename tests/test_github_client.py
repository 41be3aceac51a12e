"""Tests for GitHub repository creation."""
import pytest
import requests

from repoinit import github_client
from repoinit.github_client import GitHubClient, RemoteCreationError, RemoteRepositoryHandle


class FakeResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


CREATED = {
    "html_url": "https://github.com/octo/demo-repo",
    "ssh_url": "git@github.com:octo/demo-repo.git",
}


def _fake_request(calls, responses):
    def fake(method, url, headers=None, json=None, timeout=None):
        calls.append((method, url, json, headers))
        return responses.pop(0)

    return fake


def test_create_private_repo_is_single_user_post(monkeypatch):
    calls = []
    monkeypatch.setattr(github_client.requests, "request", _fake_request(calls, [FakeResponse(201, CREATED)]))

    handle = GitHubClient("tok").create_private_repo("demo-repo")

    assert handle == RemoteRepositoryHandle(
        display_url="https://github.com/octo/demo-repo",
        publish_url="git@github.com:octo/demo-repo.git",
    )
    assert len(calls) == 1
    method, url, body, headers = calls[0]
    assert (method, url) == ("POST", "https://api.github.com/user/repos")
    assert body == {"name": "demo-repo", "private": True, "auto_init": False}
    assert headers["Authorization"] == "Bearer tok"


def test_name_collision_raises_without_retry(monkeypatch):
    calls = []
    error = FakeResponse(422, {"message": "Repository creation failed."})
    monkeypatch.setattr(github_client.requests, "request", _fake_request(calls, [error]))

    with pytest.raises(RemoteCreationError, match="422"):
        GitHubClient("tok").create_private_repo("demo-repo")

    assert len(calls) == 1


def test_non_json_error_payload(monkeypatch):
    calls = []
    monkeypatch.setattr(
        github_client.requests, "request", _fake_request(calls, [FakeResponse(502, None, text="Bad gateway")])
    )

    with pytest.raises(RemoteCreationError, match="Bad gateway"):
        GitHubClient("tok").create_private_repo("demo-repo")


def test_network_error_is_remote_creation_error(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(github_client.requests, "request", boom)

    with pytest.raises(RemoteCreationError, match="unreachable"):
        GitHubClient("tok").create_private_repo("demo-repo")


def test_blank_token_rejected():
    with pytest.raises(RemoteCreationError):
        GitHubClient("  ")
