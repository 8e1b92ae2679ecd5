"""Tunable constants for case generation and interrogation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import os

from whodunit.domain.enums import Opinion

# None resolves to today's seed.
SEED: int | None = None

CASE_EPOCH = date(2024, 1, 1)
SUSPECT_COUNT = 5
MIN_SUSPECT_COUNT = 4
MAX_RELATIONSHIP_PAIRS = 3
MAX_ITEM_SWAPS = 2
TWO_TRAIT_CHANCE = 0.5
VERIFIABLE_ALIBI_CHANCE = 0.6
NAMED_WITNESS_CHANCE = 0.5

# Innocent suspicion buckets: none below the first cut, one below the second,
# several above it.
SUSPICION_NONE_CUT = 0.2
SUSPICION_ONE_CUT = 0.6
SUSPICION_POINTS_AT_KILLER = 0.4

OPINION_WEIGHTS = ((Opinion.POSITIVE, 0.3), (Opinion.NEUTRAL, 0.3), (Opinion.NEGATIVE, 0.4))

QUESTION_LIMIT = 24

# Dialogue weights. Not contractual; tests inject a decider instead.
LIE_CHANCE = 0.5
SECRET_SHARE_CHANCE = 0.4


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ResponderConfig:
    """Connection settings for the remote dialogue backend.

    Attributes:
        base_url: Chat endpoint of the proxy (``POST`` with system + messages).
        timeout:  Seconds before a request is abandoned and the local engine
                  answers instead.
        enabled:  When false the remote backend is never contacted.
    """

    base_url: str = "http://localhost:3001/api/chat"
    timeout: float = 15.0
    enabled: bool = False

    @classmethod
    def from_env(cls) -> "ResponderConfig":
        return cls(
            base_url=os.environ.get("WHODUNIT_RESPONDER_URL", cls.base_url),
            timeout=float(os.environ.get("WHODUNIT_RESPONDER_TIMEOUT", cls.timeout)),
            enabled=_env_flag("WHODUNIT_RESPONDER_ENABLED", cls.enabled),
        )
