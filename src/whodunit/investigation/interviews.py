"""Rule-based interrogation engine.

Characters may lie about themselves but never about anyone else. A lie is
only possible while the speaker is guilty, the fact is incriminating and no
verified evidence has been put to them yet. Once confronted they answer
every later question truthfully.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from whodunit import config
from whodunit.content import ContentTables, load_content
from whodunit.domain.enums import VICTIM_ID, EvidenceCategory, SecretType, SuspicionLevel
from whodunit.domain.models import Case, CharacterState
from whodunit.investigation.intents import Classification, Intent, classify
from whodunit.investigation.phrasing import (
    Decider,
    default_decider,
    join_names,
    pick,
    render_line,
    with_mannerism,
)
from whodunit.investigation.results import InterrogationReply
from whodunit.presentation.evidence import Disclosure, EvidenceUpdate
from whodunit.presentation.knowledge import EvidenceLedger
from whodunit.util.grammar import indefinite, lower_first, normalize_line

logger = logging.getLogger(__name__)


class _Turn:
    """Everything a handler needs to answer one question."""

    def __init__(
        self,
        target: CharacterState,
        case: Case,
        ledger: EvidenceLedger | None,
        classification: Classification,
        decide: Decider,
        tables: ContentTables,
    ) -> None:
        self.target = target
        self.facts = target.facts
        self.case = case
        self.ledger = ledger
        self.classification = classification
        self.decide = decide
        self.tables = tables
        self.dialogue: dict[str, Any] = tables.dialogue

    def line(self, key: str, **context: str) -> str:
        return render_line(self.dialogue[key], context)

    def reply(self, text: str, **kwargs: Any) -> InterrogationReply:
        return InterrogationReply(
            text=with_mannerism(self.target.suspect, text),
            intent=self.classification.intent,
            **kwargs,
        )

    def should_lie(self, incriminating: bool) -> bool:
        if not self.target.is_guilty or not incriminating:
            return False
        if self.target.disclosure.is_confronted:
            return False
        return self.decide("lie", config.LIE_CHANCE)

    def revealed(self, category: EvidenceCategory) -> bool:
        if self.ledger is None:
            return False
        return self.ledger.evidence_for(self.target.id).is_revealed(category)


def _answer_confess(turn: _Turn) -> InterrogationReply:
    return turn.reply(pick(turn.dialogue["denials"]))


def _answer_name(turn: _Turn) -> InterrogationReply:
    suspect = turn.target.suspect
    text = turn.line("name", name=suspect.name, occupation=suspect.occupation)
    return turn.reply(text, evidence_update=EvidenceUpdate.revealing(EvidenceCategory.NAME))


def _answer_relationship(turn: _Turn) -> InterrogationReply:
    victim_view = turn.facts.relationship_with(VICTIM_ID)
    reason = victim_view.opinion_reason if victim_view else ""
    text = turn.line(
        "relationship",
        relationship=turn.facts.relationship_to_victim,
        reason=reason,
    )
    return turn.reply(
        text, evidence_update=EvidenceUpdate.revealing(EvidenceCategory.RELATIONSHIP)
    )


def _decoy_item(turn: _Turn):
    held = {state.facts.item.id for state in turn.case.characters}
    spare = [item for item in turn.tables.innocent_items if item.id not in held]
    return pick(spare or turn.tables.innocent_items)


def _answer_item(turn: _Turn) -> InterrogationReply:
    item = turn.facts.item
    if turn.should_lie(item.is_murder_weapon):
        cover = _decoy_item(turn)
        text = turn.line("item_lie", item=indefinite(cover.name), description=cover.description)
        return turn.reply(text, lied=True)
    parts = [turn.line("item_truth", item=indefinite(item.name), description=item.description)]
    if item.original_owner_id != turn.target.id:
        parts.append(turn.line("item_provenance", owner=turn.case.name_of(item.original_owner_id)))
    update = EvidenceUpdate.revealing(EvidenceCategory.ITEM)
    if item.is_weapon_type:
        update = update.merged(
            EvidenceUpdate.revealing(EvidenceCategory.MEANS, f"Carries {indefinite(item.name)}")
        )
    return turn.reply(" ".join(parts), evidence_update=update)


def _answer_alibi(turn: _Turn) -> InterrogationReply:
    alibi = turn.facts.alibi
    if turn.should_lie(alibi.was_at_crime_scene):
        return turn.reply(turn.line("alibi_lie"), lied=True)
    parts = [turn.line("alibi_truth", time=alibi.time_accounted_for, description=alibi.description)]
    if alibi.witness and alibi.witness not in alibi.description:
        parts.append(normalize_line(turn.line("alibi_witness", witness=alibi.witness)))
    update = None
    if alibi.was_at_crime_scene:
        update = EvidenceUpdate.revealing(EvidenceCategory.OPPORTUNITY, alibi.description)
    return turn.reply(" ".join(parts), evidence_update=update)


def _answer_motive(turn: _Turn) -> InterrogationReply:
    motive = turn.facts.motive
    if turn.should_lie(motive.has_motive):
        return turn.reply(turn.line("motive_lie"), lied=True)
    if not motive.has_motive:
        return turn.reply(turn.line("motive_none", description=motive.description))
    return turn.reply(
        turn.line("motive_truth", description=motive.description),
        evidence_update=EvidenceUpdate.revealing(EvidenceCategory.MOTIVE, motive.description),
    )


def _answer_victim(turn: _Turn) -> InterrogationReply:
    victim_view = turn.facts.relationship_with(VICTIM_ID)
    reason = victim_view.opinion_reason if victim_view else ""
    return turn.reply(turn.line("victim_opinion", victim=turn.case.victim.name, reason=reason))


def _answer_other(turn: _Turn) -> InterrogationReply:
    other_id = turn.classification.other_character_id or ""
    relationship = turn.facts.relationship_with(other_id)
    if relationship is None:
        return _answer_fallback(turn)
    parts = [
        render_line(
            turn.dialogue["other_opinion"][relationship.opinion.value],
            {"target": relationship.target_name, "reason": relationship.opinion_reason},
        )
    ]
    disclosure_state = turn.target.disclosure
    disclosure = None
    if disclosure_state.secret_revealed(other_id):
        parts.append(turn.line("other_secret_repeat", secret=relationship.secret))
        disclosure = Disclosure(
            about_character_id=other_id,
            info=relationship.secret,
            info_type=relationship.secret_type,
        )
    elif disclosure_state.has_opened_up or turn.decide("secret", config.SECRET_SHARE_CHANCE):
        disclosure_state.mark_secret_revealed(other_id)
        parts.append(turn.line("other_secret", secret=relationship.secret))
        disclosure = Disclosure(
            about_character_id=other_id,
            info=relationship.secret,
            info_type=relationship.secret_type,
        )
    return turn.reply(" ".join(parts), disclosure=disclosure)


def _answer_suspicion(turn: _Turn) -> InterrogationReply:
    facts = turn.facts
    if facts.suspicion == SuspicionLevel.NONE or not facts.suspicion_targets:
        return turn.reply(turn.line("suspicion_none", reason=facts.suspicion_reason))
    names = [turn.case.name_of(target_id) for target_id in facts.suspicion_targets]
    return turn.reply(
        turn.line("suspicion_some", names=join_names(names), reason=facts.suspicion_reason)
    )


def _answer_fallback(turn: _Turn) -> InterrogationReply:
    return turn.reply(pick(turn.dialogue["fallbacks"]))


def _admission(turn: _Turn, info: str, info_type: SecretType) -> tuple[str, EvidenceUpdate | None]:
    facts = turn.facts
    source_id = turn.classification.source_character_id or ""
    source = turn.case.name_of(source_id) if source_id else "someone"
    template = turn.dialogue["confront_admit"][SecretType(info_type).value]
    update: EvidenceUpdate | None = None
    detail = info
    if info_type == SecretType.MOTIVE and facts.has_motive:
        detail = facts.motive.description
        update = EvidenceUpdate.revealing(EvidenceCategory.MOTIVE, detail)
    elif info_type == SecretType.MEANS and facts.has_means:
        if facts.item.is_weapon_type:
            detail = f"I had the {facts.item.name} on me that night"
            carried = f"Carries {indefinite(facts.item.name)}"
            update = EvidenceUpdate.revealing(EvidenceCategory.ITEM).merged(
                EvidenceUpdate.revealing(EvidenceCategory.MEANS, carried)
            )
        else:
            weapon = turn.case.crime_details.murder_weapon
            detail = f"I knew where the {weapon} was kept"
            update = EvidenceUpdate.revealing(EvidenceCategory.MEANS, detail)
    elif info_type == SecretType.OPPORTUNITY and facts.has_opportunity:
        detail = facts.alibi.description
        update = EvidenceUpdate.revealing(EvidenceCategory.OPPORTUNITY, detail)
    return render_line(template, {"source": source, "detail": detail, "info": info}), update


def _answer_confront(turn: _Turn) -> InterrogationReply:
    record = turn.classification.disclosure
    if record is None:
        return _answer_fallback(turn)
    if turn.target.disclosure.present(record.info):
        logger.info("%s confronted with evidence from %s", turn.target.id, record.from_character_id)
    parts = []
    admission, update = _admission(turn, record.info, record.info_type)
    parts.append(admission)
    if turn.target.is_guilty:
        admitted = set(update.categories()) if update else set()
        details: list[str] = []
        bundle: EvidenceUpdate | None = None
        facts = turn.facts
        if EvidenceCategory.MOTIVE not in admitted and not turn.revealed(EvidenceCategory.MOTIVE):
            details.append(lower_first(facts.motive.description))
            bundle = EvidenceUpdate.revealing(EvidenceCategory.MOTIVE, facts.motive.description)
        if EvidenceCategory.OPPORTUNITY not in admitted and not turn.revealed(
            EvidenceCategory.OPPORTUNITY
        ):
            details.append(lower_first(facts.alibi.description))
            opportunity = EvidenceUpdate.revealing(
                EvidenceCategory.OPPORTUNITY, facts.alibi.description
            )
            bundle = opportunity.merged(bundle)
        if details:
            parts.append(turn.line("confront_bundle", details=" and ".join(details)))
            update = bundle.merged(update) if bundle else update
        parts.append(turn.line("confront_denial"))
    return turn.reply(" ".join(parts), evidence_update=update)


_HANDLERS: dict[Intent, Callable[[_Turn], InterrogationReply]] = {
    Intent.CONFRONT: _answer_confront,
    Intent.CONFESS: _answer_confess,
    Intent.NAME: _answer_name,
    Intent.ITEM: _answer_item,
    Intent.RELATIONSHIP: _answer_relationship,
    Intent.OTHER_CHARACTER: _answer_other,
    Intent.SUSPICION: _answer_suspicion,
    Intent.ALIBI: _answer_alibi,
    Intent.MOTIVE: _answer_motive,
    Intent.VICTIM: _answer_victim,
    Intent.FALLBACK: _answer_fallback,
}


def interrogate(
    question: str,
    suspect_id: str,
    case: Case,
    ledger: EvidenceLedger | None = None,
    decide: Decider | None = None,
    *,
    content: ContentTables | None = None,
) -> InterrogationReply:
    """Answer one question from ``suspect_id``.

    Only the target's disclosure state is updated here. Folding the returned
    disclosure and evidence update into the ledger is the caller's job.
    """
    target = case.character(suspect_id)
    classification = classify(question, target, case, ledger)
    turn = _Turn(
        target=target,
        case=case,
        ledger=ledger,
        classification=classification,
        decide=decide or default_decider,
        tables=content or load_content(),
    )
    reply = _HANDLERS[classification.intent](turn)
    if reply.lied:
        logger.debug("%s lied about %s", suspect_id, classification.intent.value)
    return reply
