"""
naming.py

Responsibility: Supply a repository name.

- An explicit name is used as-is.
- Otherwise generated names are proposed one at a time to a `decide` callback
  until one is accepted or the user quits.

Name strings come from `haikunator` (adjective-noun, optional numeric suffix).
"""

from __future__ import annotations

import enum
import logging
from typing import Callable

from haikunator import Haikunator

logger = logging.getLogger(__name__)

_haikunator = Haikunator()


class NamingAborted(RuntimeError):
    pass


class NameDecision(enum.Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    QUIT = "quit"


def generate_name(token_length: int = 0) -> str:
    return _haikunator.haikunate(token_length=token_length)


def prompt_for_decision(candidate: str, *, input_fn: Callable[[str], str] = input) -> NameDecision:
    """
    Console decision: `y` accepts, `q` quits, anything else rejects. EOF quits.
    """
    try:
        answer = input_fn(f"Suggested repository name: {candidate}\nUse this name? (y/n/q to quit) ")
    except EOFError:
        return NameDecision.QUIT
    answer = answer.strip().lower()
    if answer == "y":
        return NameDecision.ACCEPT
    if answer == "q":
        return NameDecision.QUIT
    return NameDecision.REJECT


class NameProvider:
    def __init__(
        self,
        decide: Callable[[str], NameDecision] = prompt_for_decision,
        generate: Callable[[], str] | None = None,
    ) -> None:
        self._decide = decide
        self._generate = generate if generate is not None else generate_name

    def generate_candidates(self, n: int) -> list[str]:
        return [self._generate() for _ in range(n)]

    def choose_name(self, explicit: str | None = None) -> str:
        """
        Return `explicit` when given; otherwise loop until a candidate is accepted.

        There is no retry limit. A QUIT decision raises `NamingAborted` before any
        other side effect happens.
        """
        if explicit:
            return explicit

        while True:
            candidate = self._generate()
            decision = self._decide(candidate)
            if decision is NameDecision.ACCEPT:
                return candidate
            if decision is NameDecision.QUIT:
                raise NamingAborted("Repository naming aborted by user")
            logger.debug("Rejected name: %s", candidate)
