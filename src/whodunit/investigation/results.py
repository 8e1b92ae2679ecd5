"""Result structures for interrogation actions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from whodunit.investigation.intents import Intent
from whodunit.presentation.evidence import Disclosure, EvidenceUpdate


class ActionOutcome(StrEnum):
    ANSWERED = "answered"
    BUDGET_EXHAUSTED = "budget_exhausted"


class ReplySource(StrEnum):
    LOCAL = "local"
    RESPONDER = "responder"


@dataclass(frozen=True)
class InterrogationReply:
    text: str
    intent: Intent
    disclosure: Disclosure | None = None
    evidence_update: EvidenceUpdate | None = None
    lied: bool = False


@dataclass(frozen=True)
class AskResult:
    character_id: str
    question: str
    text: str
    outcome: ActionOutcome
    source: ReplySource = ReplySource.LOCAL
    reply: InterrogationReply | None = None
    new_disclosure: bool = False
    remaining_questions: int = 0
