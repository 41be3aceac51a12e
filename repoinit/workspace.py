"""
workspace.py

Responsibility: Turn an empty local directory into a published repository.

Steps run in strict order; each is a precondition for the next:
1) git init
2) repository-local commit identity (email, name)
3) pull the template's default branch into the tree
4) generate the banner image into `assets/banner.png`
5) rewrite README.md with the banner block
6) add the remote as `origin`
7) add, signed commit, rename branch, push with upstream

Any failed command raises CommandFailedError and nothing after it runs.
Nothing is rolled back: the directory is left on disk for inspection.
"""

from __future__ import annotations

import logging
import os
import subprocess
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterator, Protocol, Sequence

from repoinit import readme
from repoinit.banner import GUIDANCE_SCALE, HEIGHT, NEGATIVE_PROMPT, STEPS, WIDTH, render_prompt
from repoinit.github_client import RemoteRepositoryHandle

if TYPE_CHECKING:
    from repoinit.bootstrap import BootstrapRequest

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"
TEMPLATE_BRANCH = "main"
COMMIT_MESSAGE = "Initial commit"
BANNER_PATH = Path(readme.BANNER_ASSET)


@dataclass(frozen=True)
class CommandResult:
    args: tuple[str, ...]
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandFailedError(RuntimeError):
    def __init__(self, result: CommandResult) -> None:
        self.result = result
        super().__init__(f"Command failed: {' '.join(result.args)}\n\n{result.output}")

    @property
    def output(self) -> str:
        return self.result.output


class BannerGenerator(Protocol):
    def generate_banner(
        self,
        prompt: str,
        negative_prompt: str,
        width: int,
        height: int,
        steps: int,
        guidance_scale: float,
    ) -> str: ...

    def fetch(self, url: str) -> bytes: ...


Runner = Callable[[Sequence[str]], CommandResult]


def run_command(cmd: Sequence[str], *, cwd: Path | None = None) -> CommandResult:
    """
    Run a command as an argument list (never through a shell), capturing stdout and
    stderr together. Raises CommandFailedError on a non-zero exit.
    """
    args = tuple(str(part) for part in cmd)
    logger.debug("> %s", " ".join(args))
    try:
        proc = subprocess.run(
            list(args),
            cwd=str(cwd) if cwd is not None else None,
            check=False,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        raise CommandFailedError(CommandResult(args=args, returncode=127, output=str(e))) from e

    result = CommandResult(args=args, returncode=proc.returncode, output=proc.stdout or "")
    if not result.ok:
        raise CommandFailedError(result)
    if result.output:
        logger.debug("%s", result.output.rstrip())
    return result


@contextmanager
def working_directory(path: Path) -> Iterator[Path]:
    """Change into `path` for the duration of the block; always restore the previous cwd."""
    previous = Path.cwd()
    os.chdir(path)
    try:
        yield path
    finally:
        os.chdir(previous)


def template_url(template_repo: str) -> str:
    return f"git@github.com:{template_repo}.git"


class LocalWorkspaceBuilder:
    def __init__(
        self,
        banner: BannerGenerator,
        *,
        base_dir: str | Path | None = None,
        runner: Runner = run_command,
    ) -> None:
        self._banner = banner
        self._base_dir = Path(base_dir) if base_dir is not None else None
        self._run = runner

    def _git(self, *args: str) -> CommandResult:
        return self._run(("git", *args))

    def build(self, request: BootstrapRequest, handle: RemoteRepositoryHandle) -> Path:
        """
        Create `<base_dir>/<repository_name>` and publish it to `handle.publish_url`.

        Returns the workspace directory.
        """
        config = request.config
        base_dir = self._base_dir if self._base_dir is not None else Path.cwd()
        directory = (base_dir / request.repository_name).resolve()
        directory.mkdir(parents=True, exist_ok=True)

        logger.debug("Using template repository: %s", request.template_repo)

        with working_directory(directory):
            self._git("init")

            self._git("config", "user.email", str(config.git_email))
            self._git("config", "user.name", str(config.git_name))

            self._git("pull", template_url(request.template_repo), TEMPLATE_BRANCH)

            self.place_banner(request.repository_name, prompt_template=config.banner_prompt)
            readme.update_readme(readme.README_PATH)

            self._git("remote", "add", "origin", handle.publish_url)
            self._git("add", ".")
            self._git("commit", "-S", "-m", COMMIT_MESSAGE)
            self._git("branch", "-M", DEFAULT_BRANCH)
            self._git("push", "-u", "origin", DEFAULT_BRANCH)

        return directory

    def place_banner(self, repository_name: str, *, prompt_template: str | None = None) -> Path:
        """Generate the banner and write it under the current directory."""
        logger.info("Generating project banner image...")
        prompt = render_prompt(repository_name, prompt_template)
        image_url = self._banner.generate_banner(prompt, NEGATIVE_PROMPT, WIDTH, HEIGHT, STEPS, GUIDANCE_SCALE)
        data = self._banner.fetch(image_url)

        BANNER_PATH.parent.mkdir(parents=True, exist_ok=True)
        BANNER_PATH.write_bytes(data)
        logger.info("Banner image generated successfully!")
        return BANNER_PATH
