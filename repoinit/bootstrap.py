"""
bootstrap.py

Responsibility: Sequence one bootstrap run.

config check -> name -> remote creation -> local workspace (banner inside) -> handle

Errors are not caught here; they propagate to the CLI's single top-level handler.
A failure after remote creation leaves the remote repository and the local directory as they are.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from repoinit.config import EffectiveConfig
from repoinit.github_client import RemoteRepositoryHandle
from repoinit.naming import NameProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BootstrapRequest:
    repository_name: str
    template_repo: str
    config: EffectiveConfig


class RemoteRepositoryService(Protocol):
    def create_private_repo(self, name: str) -> RemoteRepositoryHandle: ...


class WorkspaceBuilder(Protocol):
    def build(self, request: BootstrapRequest, handle: RemoteRepositoryHandle) -> Path: ...


class BootstrapOrchestrator:
    def __init__(
        self,
        config: EffectiveConfig,
        *,
        remote: RemoteRepositoryService,
        builder: WorkspaceBuilder,
        names: NameProvider,
    ) -> None:
        self._config = config
        self._remote = remote
        self._builder = builder
        self._names = names

    def run(self, name: str | None = None) -> RemoteRepositoryHandle:
        config = self._config
        config.require_complete()

        repository_name = self._names.choose_name(name)
        request = BootstrapRequest(
            repository_name=repository_name,
            template_repo=str(config.template_repo),
            config=config,
        )

        logger.info("Creating repository: %s", repository_name)
        handle = self._remote.create_private_repo(repository_name)

        self._builder.build(request, handle)
        logger.info("Repository successfully created and initialized!")
        return handle
