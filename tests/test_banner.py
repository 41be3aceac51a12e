"""Tests for banner prompt rendering and the Replicate client."""
import pytest
import requests

from repoinit import banner
from repoinit.banner import DownloadError, GenerationError, ReplicateClient, render_prompt


class FakeResponse:
    def __init__(self, status_code, payload=None, content=b""):
        self.status_code = status_code
        self._payload = payload
        self.content = content
        self.text = ""

    def json(self):
        return self._payload


MODEL = {"latest_version": {"id": "v123"}}
PREDICTION_GET = "https://api.replicate.com/v1/predictions/p1"


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(banner.time, "sleep", lambda _s: None)


def _install(monkeypatch, responses):
    calls = []

    def fake(method, url, headers=None, json=None, timeout=None):
        calls.append((method, url, json))
        return responses.pop(0)

    monkeypatch.setattr(banner.requests, "request", fake)
    return calls


def _generate(client):
    return client.generate_banner("a prompt", "text", 1200, 400, 50, 7.5)


def test_render_prompt_is_deterministic():
    first = render_prompt("demo-repo")

    assert first == render_prompt("demo-repo")
    assert "software project called demo-repo" in first


def test_render_prompt_custom_template():
    assert render_prompt("demo-repo", "Banner for {{ repo_name }}") == "Banner for demo-repo"


def test_render_prompt_unknown_variable_fails():
    with pytest.raises(GenerationError):
        render_prompt("demo-repo", "Banner for {{ project }}")


def test_generate_banner_polls_until_succeeded(monkeypatch):
    calls = _install(
        monkeypatch,
        [
            FakeResponse(200, MODEL),
            FakeResponse(201, {"status": "starting", "urls": {"get": PREDICTION_GET}}),
            FakeResponse(200, {"status": "processing", "urls": {"get": PREDICTION_GET}}),
            FakeResponse(200, {"status": "succeeded", "output": ["https://replicate.delivery/out.png"]}),
        ],
    )

    url = _generate(ReplicateClient("r8"))

    assert url == "https://replicate.delivery/out.png"
    assert calls[0][:2] == ("GET", "https://api.replicate.com/v1/models/stability-ai/sdxl")
    method, path, body = calls[1]
    assert (method, path) == ("POST", "https://api.replicate.com/v1/predictions")
    assert body["version"] == "v123"
    assert body["input"] == {
        "prompt": "a prompt",
        "negative_prompt": "text",
        "width": 1200,
        "height": 400,
        "num_outputs": 1,
        "scheduler": "K_EULER",
        "num_inference_steps": 50,
        "guidance_scale": 7.5,
    }
    assert [c[1] for c in calls[2:]] == [PREDICTION_GET, PREDICTION_GET]


def test_failed_prediction_raises(monkeypatch):
    _install(
        monkeypatch,
        [
            FakeResponse(200, MODEL),
            FakeResponse(201, {"status": "failed", "error": "NSFW content detected", "urls": {"get": PREDICTION_GET}}),
        ],
    )

    with pytest.raises(GenerationError, match="NSFW"):
        _generate(ReplicateClient("r8"))


def test_empty_output_raises(monkeypatch):
    _install(monkeypatch, [FakeResponse(200, MODEL), FakeResponse(201, {"status": "succeeded", "output": []})])

    with pytest.raises(GenerationError):
        _generate(ReplicateClient("r8"))


def test_api_error_raises(monkeypatch):
    _install(monkeypatch, [FakeResponse(401, {"detail": "Invalid token."})])

    with pytest.raises(GenerationError, match="Invalid token"):
        _generate(ReplicateClient("r8"))


def test_fetch_returns_bytes(monkeypatch):
    monkeypatch.setattr(banner.requests, "get", lambda url, timeout=None: FakeResponse(200, content=b"\x89PNG"))

    assert ReplicateClient("r8").fetch("https://replicate.delivery/out.png") == b"\x89PNG"


def test_fetch_http_error(monkeypatch):
    monkeypatch.setattr(banner.requests, "get", lambda url, timeout=None: FakeResponse(404))

    with pytest.raises(DownloadError, match="404"):
        ReplicateClient("r8").fetch("https://replicate.delivery/gone.png")


def test_fetch_network_error(monkeypatch):
    def boom(url, timeout=None):
        raise requests.ConnectionError("reset")

    monkeypatch.setattr(banner.requests, "get", boom)

    with pytest.raises(DownloadError):
        ReplicateClient("r8").fetch("https://replicate.delivery/out.png")
