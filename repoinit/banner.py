"""
banner.py

Responsibility: Produce the README banner image.

- The prompt is rendered from a Jinja2 template with the repository name.
- Images come from the Replicate predictions API (`stability-ai/sdxl`), polled until done.
- The resulting image URL is fetched into memory; writing it to disk is the workspace's job.

This module intentionally does NOT know about git or the README layout.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests
from jinja2 import Environment, StrictUndefined, TemplateError

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_TEMPLATE = (
    "A modern, minimalist logo for a software project called {{ repo_name }}, "
    "digital art style, clean design, white background"
)
NEGATIVE_PROMPT = "text, words, letters, blurry, low quality"
WIDTH = 1200
HEIGHT = 400
STEPS = 50
GUIDANCE_SCALE = 7.5

DEFAULT_MODEL = "stability-ai/sdxl"
TERMINAL_STATUSES = frozenset({"succeeded", "failed", "canceled"})


class GenerationError(RuntimeError):
    pass


class DownloadError(RuntimeError):
    pass


def render_prompt(repository_name: str, template: str | None = None) -> str:
    """Render the banner prompt; the same name always yields the same prompt."""
    env = Environment(autoescape=False, undefined=StrictUndefined)
    try:
        return env.from_string(template or DEFAULT_PROMPT_TEMPLATE).render(repo_name=repository_name)
    except TemplateError as e:
        raise GenerationError(f"Failed rendering banner prompt: {e}") from e


class ReplicateClient:
    def __init__(
        self,
        token: str,
        api_base: str = "https://api.replicate.com/v1",
        *,
        model: str = DEFAULT_MODEL,
        poll_interval: float = 1.0,
    ) -> None:
        if not token.strip():
            raise GenerationError("Replicate token is required.")
        self._token = token
        self._api_base = api_base.rstrip("/")
        self._model = model
        self._poll_interval = poll_interval

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
            "User-Agent": "repo-init",
        }

    def _request(self, method: str, path_or_url: str, *, json_body: dict[str, Any] | None = None) -> Any:
        url = path_or_url if path_or_url.startswith("http") else f"{self._api_base}{path_or_url}"
        try:
            r = requests.request(method, url, headers=self._headers(), json=json_body, timeout=30)
        except requests.RequestException as e:
            raise GenerationError(f"Replicate request failed {method} {url}: {e}") from e
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"detail": r.text}
            raise GenerationError(f"Replicate API error {r.status_code} {method} {url}: {payload.get('detail', payload)}")
        return r.json()

    def latest_version(self) -> str:
        data = self._request("GET", f"/models/{self._model}")
        version = (data.get("latest_version") or {}).get("id")
        if not version:
            raise GenerationError(f"Model has no published version: {self._model}")
        return str(version)

    def generate_banner(
        self,
        prompt: str,
        negative_prompt: str,
        width: int,
        height: int,
        steps: int,
        guidance_scale: float,
    ) -> str:
        """
        Run one prediction and return the URL of its first output image.

        Polls until the prediction reaches a terminal status; there is no overall deadline.
        """
        prediction = self._request(
            "POST",
            "/predictions",
            json_body={
                "version": self.latest_version(),
                "input": {
                    "prompt": prompt,
                    "negative_prompt": negative_prompt,
                    "width": width,
                    "height": height,
                    "num_outputs": 1,
                    "scheduler": "K_EULER",
                    "num_inference_steps": steps,
                    "guidance_scale": guidance_scale,
                },
            },
        )

        while prediction.get("status") not in TERMINAL_STATUSES:
            time.sleep(self._poll_interval)
            prediction = self._request("GET", prediction["urls"]["get"])

        if prediction["status"] != "succeeded":
            raise GenerationError(f"Banner generation {prediction['status']}: {prediction.get('error') or 'no details'}")

        output = prediction.get("output")
        if isinstance(output, list):
            output = output[0] if output else None
        if not output:
            raise GenerationError("Banner generation returned no image")
        return str(output)

    def fetch(self, url: str) -> bytes:
        try:
            r = requests.get(url, timeout=30)
        except requests.RequestException as e:
            raise DownloadError(f"Failed downloading banner image {url}: {e}") from e
        if r.status_code >= 400:
            raise DownloadError(f"Failed downloading banner image {url}: HTTP {r.status_code}")
        return r.content
