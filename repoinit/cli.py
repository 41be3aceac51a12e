"""
cli.py

Responsibility: CLI entrypoint for repo-init.

High-level flow:
1) Parse options (`--generate` prints name suggestions and stops here)
2) Resolve config: env fallbacks < config file < CLI overrides
3) Choose a repository name
4) Create the private GitHub repo
5) Seed the local workspace from the template, add the banner, commit, push
6) Print the repository URL

This module should orchestrate behavior but keep concerns isolated:
- Config: `config.py`
- Naming: `naming.py`
- GitHub API: `github_client.py`
- Banner: `banner.py`
- Git + filesystem: `workspace.py`
- Sequencing: `bootstrap.py`
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, NoReturn

from repoinit.banner import ReplicateClient
from repoinit.bootstrap import BootstrapOrchestrator
from repoinit.config import DEFAULT_CONFIG_PATH, EffectiveConfig, env_defaults, load_config_file, merge_layers, resolve
from repoinit.github_client import GitHubClient
from repoinit.naming import NameDecision, NameProvider, prompt_for_decision
from repoinit.workspace import LocalWorkspaceBuilder

logger = logging.getLogger(__name__)

GENERATE_COUNT = 5
EXIT_INTERRUPTED = 130


def configure_logging(verbose: bool) -> None:
    root = logging.getLogger("repoinit")
    root.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.propagate = False


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        # Usage errors share the exit status of every other failure.
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(prog="repo-init", description="Create a GitHub repository seeded from a template")

    p.add_argument("-n", "--name", default=None, help="Repository name")
    p.add_argument("-t", "--template", default=None, help="Template repository (e.g., username/repo)")

    p.add_argument("--github-token", default=None, help="GitHub API token")
    p.add_argument("--github-username", default=None, help="GitHub username")

    p.add_argument("--git-email", default=None, help="Git email for commit signing")
    p.add_argument("--git-name", default=None, help="Git name for commit signing")

    p.add_argument("--replicate-token", default=None, help="Replicate API token for image generation")

    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    p.add_argument("-g", "--generate", action="store_true", help=f"Print {GENERATE_COUNT} generated names and exit")
    return p


def _overrides(args: argparse.Namespace) -> dict[str, str | None]:
    return {
        "github_token": args.github_token,
        "github_username": args.github_username,
        "bot_git_email": args.git_email,
        "bot_git_name": args.git_name,
        "template_repo": args.template,
        "replicate_token": args.replicate_token,
    }


def _build_orchestrator(config: EffectiveConfig, names: NameProvider) -> BootstrapOrchestrator:
    return BootstrapOrchestrator(
        config,
        remote=GitHubClient(str(config.github_token)),
        builder=LocalWorkspaceBuilder(ReplicateClient(str(config.replicate_token))),
        names=names,
    )


def _one_line(exc: BaseException) -> str:
    return " ".join(str(exc).split()) or exc.__class__.__name__


def main(argv: list[str] | None = None, *, decide: Callable[[str], NameDecision] = prompt_for_decision) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    args = _build_parser().parse_args(argv)
    configure_logging(bool(args.verbose))

    names = NameProvider(decide=decide)
    if args.generate:
        for candidate in names.generate_candidates(GENERATE_COUNT):
            print(f"Generated name option: {candidate}")
        return 0

    try:
        file_config = merge_layers(env_defaults(), load_config_file(args.config))
        config = resolve(file_config, _overrides(args), verbose=bool(args.verbose), validate=bool(argv))
        # Clients refuse blank tokens, so report every gap before constructing them.
        config.require_complete()
        handle = _build_orchestrator(config, names).run(args.name)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return EXIT_INTERRUPTED
    except Exception as e:  # noqa: BLE001 - single top-level handler
        logger.debug("Bootstrap failed", exc_info=True)
        print(f"Error: {_one_line(e)}")
        return 1

    print(f"GitHub URL: {handle.display_url}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
