"""README banner injection."""

from __future__ import annotations

import re
from pathlib import Path

README_PATH = Path("README.md")
BANNER_ASSET = "assets/banner.png"
BANNER_MARKER = "![Project Banner]"
BANNER_MARKDOWN = f"{BANNER_MARKER}({BANNER_ASSET})\n\n"

# First banner reference up to the first blank line.
_BANNER_BLOCK = re.compile(r"!\[Project Banner\].*?\n\n", re.DOTALL)
# Banner reference with no blank line after it: only its own line is replaced.
_BANNER_LINE = re.compile(r"!\[Project Banner\][^\n]*\n?")


def inject_banner(content: str) -> str:
    """
    Replace the first banner block in place, or prepend one. Idempotent.

    Expects LF line endings; `update_readme` converts CRLF files before calling this.
    """
    if BANNER_MARKER not in content:
        return BANNER_MARKDOWN + content
    if _BANNER_BLOCK.search(content):
        return _BANNER_BLOCK.sub(lambda _m: BANNER_MARKDOWN, content, count=1)
    return _BANNER_LINE.sub(lambda _m: BANNER_MARKDOWN, content, count=1)


def update_readme(path: str | Path = README_PATH) -> bool:
    """
    Rewrite the README with the banner block, keeping the file's newline style (LF or CRLF).

    Returns False when there is no README.
    """
    readme = Path(path)
    if not readme.exists():
        return False
    with open(readme, encoding="utf-8", newline="") as f:
        content = f.read()

    crlf = "\r\n" in content
    updated = inject_banner(content.replace("\r\n", "\n") if crlf else content)
    if crlf:
        updated = updated.replace("\n", "\r\n")

    with open(readme, "w", encoding="utf-8", newline="") as f:
        f.write(updated)
    return True
