"""
repoinit package

This package implements repo-init: bootstrap a new GitHub repository from a template.

Key responsibilities are split across modules:
- `config.py`: merge the YAML config file with CLI overrides into an immutable config
- `naming.py`: explicit or interactively confirmed generated repository names
- `github_client.py`: isolated GitHub REST API interactions (private repo creation)
- `banner.py`: banner prompt rendering, image generation and download
- `readme.py`: README banner block injection
- `workspace.py`: local git steps (init -> pull template -> banner -> commit -> push)
- `bootstrap.py`: orchestration of one bootstrap run
- `cli.py`: CLI entrypoint and top-level error handling
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
