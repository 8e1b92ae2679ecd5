"""Keyword classification of free-text questions.

Rules are tried in list order and the first match wins, so a question that
mentions both an item and another suspect is answered as an item question.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
import logging
import re
from typing import Callable

from whodunit.domain.models import Case, CharacterState
from whodunit.presentation.evidence import DisclosureRecord
from whodunit.presentation.knowledge import EvidenceLedger

logger = logging.getLogger(__name__)


class Intent(StrEnum):
    CONFRONT = "confront"
    CONFESS = "confess"
    NAME = "name"
    ITEM = "item"
    RELATIONSHIP = "relationship"
    OTHER_CHARACTER = "other_character"
    SUSPICION = "suspicion"
    ALIBI = "alibi"
    MOTIVE = "motive"
    VICTIM = "victim"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Classification:
    intent: Intent
    other_character_id: str | None = None
    source_character_id: str | None = None
    disclosure: DisclosureRecord | None = None


@dataclass(frozen=True)
class QuestionContext:
    text: str
    target: CharacterState
    case: Case
    ledger: EvidenceLedger | None
    mentioned: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class IntentRule:
    intent: Intent
    match: Callable[[QuestionContext], Classification | None]


_CONFRONT_VERBS = re.compile(
    r"\b(told|tells|said|says|confessed|mentioned|claims?|claimed|admitted|saw)\b"
)
_CONFESS = re.compile(
    r"\b(did you (do it|kill|murder)|are you (guilty|the (killer|murderer))"
    r"|you (did it|killed|murdered)|confess|admit it)\b"
)
_NAME = re.compile(r"\b(who are you|your name|what do you do|occupation|introduce yourself|your job)\b")
_ITEM = re.compile(
    r"\b(weapon|knife|items?|carrying|carry|have on you|possess|object|tool|pockets?|holding)\b"
)
_RELATIONSHIP = re.compile(
    r"\b(relationship|how do you know|know the victim|related to|connection|connected)\b"
)
_SUSPICION = re.compile(r"\b(suspect|suspicious|who do you think|who did it|who killed|theory)\b")
_ALIBI = re.compile(
    r"\b(alibi|where were you|whereabouts|at the time|that night|what were you doing|time of death)\b"
)
_MOTIVE = re.compile(r"\b(motive|why would|grudge|problem with|issue with|angry|upset|reason to)\b")
_VICTIM = re.compile(r"\b(victim|deceased|the body|the dead)\b")
_TITLES = {"dr", "dr.", "mr", "mr.", "mrs", "mrs.", "miss", "lady", "lord", "sir"}
_WORDS = re.compile(r"[a-z']+")


def _alias_pattern(aliases: tuple[str, ...]) -> re.Pattern[str]:
    escaped = "|".join(re.escape(alias) for alias in aliases)
    return re.compile(rf"\b({escaped})\b")


def mentioned_characters(text: str, target: CharacterState, case: Case) -> tuple[str, ...]:
    """Ids of other suspects named in ``text``, in order of first mention."""
    hits: list[tuple[int, str]] = []
    for state in case.others(target.id):
        suspect = state.suspect
        aliases = suspect.aliases or tuple(suspect.name.lower().split())
        match = _alias_pattern(aliases + (suspect.name.lower(),)).search(text)
        if match:
            hits.append((match.start(), state.id))
    return tuple(character_id for _, character_id in sorted(hits))


def _victim_tokens(case: Case) -> set[str]:
    return {
        token
        for token in case.victim.name.lower().split()
        if token not in _TITLES and len(token) > 2
    }


def _overlap(text: str, info: str) -> int:
    return len(set(_WORDS.findall(text)) & set(_WORDS.findall(info.lower())))


def _match_confront(context: QuestionContext) -> Classification | None:
    if context.ledger is None or not context.mentioned:
        return None
    if not _CONFRONT_VERBS.search(context.text):
        return None
    for source_id in context.mentioned:
        records = context.ledger.disclosures_about(context.target.id, from_character_id=source_id)
        if not records:
            continue
        best = max(records, key=lambda record: _overlap(context.text, record.info))
        return Classification(
            Intent.CONFRONT,
            other_character_id=source_id,
            source_character_id=source_id,
            disclosure=best,
        )
    return None


def _pattern_rule(intent: Intent, pattern: re.Pattern[str]) -> IntentRule:
    def match(context: QuestionContext) -> Classification | None:
        if pattern.search(context.text):
            return Classification(intent)
        return None

    return IntentRule(intent, match)


def _match_other(context: QuestionContext) -> Classification | None:
    if not context.mentioned:
        return None
    return Classification(Intent.OTHER_CHARACTER, other_character_id=context.mentioned[0])


def _match_victim(context: QuestionContext) -> Classification | None:
    if _VICTIM.search(context.text):
        return Classification(Intent.VICTIM)
    if _victim_tokens(context.case) & set(_WORDS.findall(context.text)):
        return Classification(Intent.VICTIM)
    return None


def _match_fallback(context: QuestionContext) -> Classification | None:
    return Classification(Intent.FALLBACK)


INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(Intent.CONFRONT, _match_confront),
    _pattern_rule(Intent.CONFESS, _CONFESS),
    _pattern_rule(Intent.NAME, _NAME),
    _pattern_rule(Intent.ITEM, _ITEM),
    _pattern_rule(Intent.RELATIONSHIP, _RELATIONSHIP),
    IntentRule(Intent.OTHER_CHARACTER, _match_other),
    _pattern_rule(Intent.SUSPICION, _SUSPICION),
    _pattern_rule(Intent.ALIBI, _ALIBI),
    _pattern_rule(Intent.MOTIVE, _MOTIVE),
    IntentRule(Intent.VICTIM, _match_victim),
    IntentRule(Intent.FALLBACK, _match_fallback),
)


def classify(
    question: str,
    target: CharacterState,
    case: Case,
    ledger: EvidenceLedger | None = None,
) -> Classification:
    text = " ".join(question.lower().split())
    context = QuestionContext(
        text=text,
        target=target,
        case=case,
        ledger=ledger,
        mentioned=mentioned_characters(text, target, case),
    )
    for rule in INTENT_RULES:
        result = rule.match(context)
        if result is not None:
            logger.debug("Question to %s classified as %s", target.id, result.intent.value)
            return result
    return Classification(Intent.FALLBACK)
