"""Cosmetic phrasing for interrogation replies.

Dialogue wording draws from its own unseeded generator. It never touches the
seeded ``Rng`` that builds case facts.
"""

from __future__ import annotations

import random
from typing import Callable, Sequence, TypeVar

from whodunit.domain.models import Suspect
from whodunit.util.grammar import normalize_line

T = TypeVar("T")

# (decision name, probability) -> take the branch?
Decider = Callable[[str, float], bool]

_PHRASING = random.Random()


def default_decider(name: str, chance: float) -> bool:
    return _PHRASING.random() < chance


def always(name: str, chance: float) -> bool:
    return True


def never(name: str, chance: float) -> bool:
    return False


def pick(options: Sequence[T]) -> T:
    return _PHRASING.choice(list(options))


def render_line(template: str, context: dict[str, str]) -> str:
    class _SafeDict(dict):
        def __missing__(self, key: str) -> str:
            return ""

    return template.format_map(_SafeDict(context)).strip()


def mannerism(suspect: Suspect) -> str:
    if not suspect.mannerisms:
        return ""
    return pick(suspect.mannerisms)


def with_mannerism(suspect: Suspect, text: str) -> str:
    prefix = mannerism(suspect)
    line = normalize_line(text)
    if not prefix:
        return line
    return f"{prefix} {line}"


def join_names(names: Sequence[str]) -> str:
    if len(names) <= 1:
        return "".join(names)
    return f"{', '.join(names[:-1])} and {names[-1]}"
