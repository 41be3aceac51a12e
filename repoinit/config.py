"""
config.py

Responsibility: Load the persisted config file and merge it with CLI overrides
into a single immutable `EffectiveConfig`.

Precedence (highest first):
- CLI overrides (non-None values only)
- values from `~/.github-init-config.yml`
- environment fallbacks (`GITHUB_TOKEN`, `REPLICATE_API_TOKEN`), applied by the caller as a base layer

Validation reports every missing required field at once.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

DEFAULT_CONFIG_PATH = Path("~/.github-init-config.yml")

# File key -> (EffectiveConfig field, human-facing label)
REQUIRED_KEYS: dict[str, tuple[str, str]] = {
    "github_token": ("github_token", "GitHub token"),
    "github_username": ("github_username", "GitHub username"),
    "bot_git_email": ("git_email", "Git email"),
    "bot_git_name": ("git_name", "Git name"),
    "template_repo": ("template_repo", "Template repository"),
    "replicate_token": ("replicate_token", "Replicate token"),
}

OPTIONAL_KEYS: dict[str, str] = {
    "banner_prompt": "banner_prompt",
}

ENV_FALLBACKS: dict[str, str] = {
    "GITHUB_TOKEN": "github_token",
    "REPLICATE_API_TOKEN": "replicate_token",
}


class ConfigurationError(ValueError):
    pass


class MissingFieldsError(ConfigurationError):
    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            "Missing required configuration: "
            + ", ".join(self.missing)
            + " (provide them in the config file or as parameters)"
        )


@dataclass(frozen=True)
class EffectiveConfig:
    """Fully merged configuration passed explicitly to every component."""

    github_token: str | None = None
    github_username: str | None = None
    git_email: str | None = None
    git_name: str | None = None
    template_repo: str | None = None
    replicate_token: str | None = None
    verbose: bool = False
    banner_prompt: str | None = None

    def missing_fields(self) -> list[str]:
        """Labels of required fields that are unset or blank, in a stable order."""
        missing: list[str] = []
        for field_name, label in REQUIRED_KEYS.values():
            value = getattr(self, field_name)
            if value is None or not str(value).strip():
                missing.append(label)
        return missing

    def require_complete(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise MissingFieldsError(missing)


def load_config_file(path: str | Path = DEFAULT_CONFIG_PATH) -> dict[str, Any]:
    """
    Read the YAML config file. A missing file is an empty config, not an error.
    """
    config_path = Path(path).expanduser()
    if not config_path.exists():
        return {}
    data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must contain a mapping at the top level: {config_path}")
    return data


def env_defaults(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Environment values keyed like the config file, for use as the lowest layer."""
    env = os.environ if environ is None else environ
    out: dict[str, str] = {}
    for var, key in ENV_FALLBACKS.items():
        value = env.get(var)
        if value:
            out[key] = value
    return out


def merge_layers(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """
    Stack config mappings, later layers winning. Null or blank values are skipped so
    an empty key in the file (`github_token:`) does not hide a lower layer.
    """
    out: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            out[key] = value
    return out


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def resolve(
    file_config: Mapping[str, Any],
    overrides: Mapping[str, Any],
    *,
    verbose: bool = False,
    validate: bool = True,
) -> EffectiveConfig:
    """
    Merge `overrides` over `file_config` field by field.

    Both mappings use the config-file key names. An override only counts when its
    value is not None. With `validate`, all missing required fields are reported in
    a single `MissingFieldsError`.
    """
    fields = {key: field_name for key, (field_name, _label) in REQUIRED_KEYS.items()}
    fields.update(OPTIONAL_KEYS)

    values: dict[str, Any] = {}
    for key, field_name in fields.items():
        override = overrides.get(key)
        values[field_name] = _clean(override if override is not None else file_config.get(key))

    config = EffectiveConfig(verbose=bool(verbose), **values)
    if validate:
        config.require_complete()
    return config
