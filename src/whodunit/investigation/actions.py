"""Player actions: asking questions and making the accusation."""

from __future__ import annotations

import logging

from whodunit import config
from whodunit.content import ContentTables, load_content
from whodunit.deduction.validation import AccusationResult, validate_accusation
from whodunit.domain.models import Case
from whodunit.investigation.costs import would_exceed_budget
from whodunit.investigation.intents import Intent, classify
from whodunit.investigation.interviews import interrogate
from whodunit.investigation.phrasing import Decider
from whodunit.investigation.results import (
    ActionOutcome,
    AskResult,
    InterrogationReply,
    ReplySource,
)
from whodunit.presentation.knowledge import EvidenceLedger
from whodunit.responder import ResponderClient, ResponderError

logger = logging.getLogger(__name__)


def new_ledger(case: Case, question_limit: int = config.QUESTION_LIMIT) -> EvidenceLedger:
    ledger = EvidenceLedger(question_limit=question_limit)
    for state in case.characters:
        ledger.evidence_for(state.id)
    return ledger


def _exhausted(suspect_id: str, question: str, message: str) -> AskResult:
    logger.info("Question budget exhausted; %s was not asked", suspect_id)
    return AskResult(
        character_id=suspect_id,
        question=question,
        text=message,
        outcome=ActionOutcome.BUDGET_EXHAUSTED,
    )


def _fold(
    ledger: EvidenceLedger,
    suspect_id: str,
    question: str,
    reply: InterrogationReply,
    source: ReplySource,
) -> AskResult:
    ledger.apply_update(suspect_id, reply.evidence_update)
    new_disclosure = ledger.record_disclosure(suspect_id, reply.disclosure)
    ledger.record_question(suspect_id, question, reply.text)
    return AskResult(
        character_id=suspect_id,
        question=question,
        text=reply.text,
        outcome=ActionOutcome.ANSWERED,
        source=source,
        reply=reply,
        new_disclosure=new_disclosure,
        remaining_questions=ledger.remaining_questions(),
    )


def ask(
    question: str,
    suspect_id: str,
    case: Case,
    ledger: EvidenceLedger,
    decide: Decider | None = None,
    *,
    content: ContentTables | None = None,
) -> AskResult:
    """Answer with the local engine and fold the result into ``ledger``."""
    case.character(suspect_id)
    tables = content or load_content()
    exceeded, message = would_exceed_budget(ledger, tables)
    if exceeded:
        return _exhausted(suspect_id, question, message)
    reply = interrogate(question, suspect_id, case, ledger, decide, content=tables)
    return _fold(ledger, suspect_id, question, reply, ReplySource.LOCAL)


async def ask_with_responder(
    question: str,
    suspect_id: str,
    case: Case,
    ledger: EvidenceLedger,
    client: ResponderClient | None,
    decide: Decider | None = None,
    *,
    content: ContentTables | None = None,
) -> AskResult:
    """Answer through the remote backend, falling back to the local engine on failure."""
    target = case.character(suspect_id)
    if client is None or not client.config.enabled:
        return ask(question, suspect_id, case, ledger, decide, content=content)
    tables = content or load_content()
    exceeded, message = would_exceed_budget(ledger, tables)
    if exceeded:
        return _exhausted(suspect_id, question, message)

    try:
        parsed = await client.respond(
            question,
            target,
            case,
            history=ledger.history_for(suspect_id),
            disclosures=list(ledger.disclosures),
        )
    except ResponderError as exc:
        logger.warning("Responder unavailable (%s); answering locally", exc)
        return ask(question, suspect_id, case, ledger, decide, content=tables)

    classification = classify(question, target, case, ledger)
    if classification.intent == Intent.CONFRONT and classification.disclosure is not None:
        target.disclosure.present(classification.disclosure.info)

    disclosure = parsed.disclosure
    if disclosure is not None:
        known = {state.id for state in case.others(suspect_id)}
        if disclosure.about_character_id in known:
            target.disclosure.mark_secret_revealed(disclosure.about_character_id)
        else:
            logger.warning(
                "Dropping secret about unknown character %r", disclosure.about_character_id
            )
            disclosure = None

    reply = InterrogationReply(
        text=parsed.text,
        intent=classification.intent,
        disclosure=disclosure,
        evidence_update=parsed.evidence_update,
    )
    return _fold(ledger, suspect_id, question, reply, ReplySource.RESPONDER)


def accuse(
    accused_id: str, case: Case, ledger: EvidenceLedger | None = None
) -> AccusationResult:
    result = validate_accusation(case, accused_id)
    if ledger is not None:
        ledger.accused_id = accused_id
        ledger.accusation_correct = result.is_correct
    logger.info("Accused %s: %s", accused_id, "correct" if result.is_correct else "wrong")
    return result
