"""Natural-language brief sent to the remote dialogue backend."""

from __future__ import annotations

from typing import Iterable

from whodunit.domain.enums import VICTIM_ID, SuspicionLevel
from whodunit.domain.models import Case, CharacterState
from whodunit.presentation.evidence import DisclosureRecord

_KILLER_RULES = """\
LYING RULES FOR THE KILLER:
- Never admit to the murder directly.
- You may lie about your alibi, your motive or your item to protect yourself.
- If the detective presents verified evidence that another character told them about you, reluctantly admit that specific thing.
- Keep denying the murder even when forced to admit incriminating facts."""

_INNOCENT_RULES = (
    "NO. You are innocent. Tell the truth, though you may be nervous or evasive "
    "about embarrassing details."
)

_GUIDELINES = """\
## RESPONSE GUIDELINES
1. Stay in character at all times.
2. Keep responses concise, usually one to three sentences.
3. Speak in the first person.
4. Show personality through mannerisms and speech patterns.
5. When asked about other characters, be truthful about what you know.
6. {conduct}
7. If asked directly whether you killed the victim, deny it. Innocent people deny it too."""

_TAGS = """\
## EVIDENCE REVELATION
When you reveal certain information, end your response with one of these tags:
- [REVEAL:NAME] when you state your name
- [REVEAL:RELATIONSHIP] when you describe your relationship to the victim
- [REVEAL:ITEM] when you describe what you're carrying
- [REVEAL:MOTIVE] when you reveal a motive
- [REVEAL:MEANS] when you reveal access to a weapon
- [REVEAL:OPPORTUNITY] when you reveal being near the crime scene
- [SECRET:<character id>:<info>] when you reveal a secret about another character ({ids})

Only add ONE tag per response, for the most significant revelation."""


def _knowledge_lines(character: CharacterState, case: Case) -> list[str]:
    lines = []
    for other in case.others(character.id):
        relationship = character.facts.relationship_with(other.id)
        reason = relationship.opinion_reason if relationship else "You know them casually."
        secret = f" SECRET: {relationship.secret}" if relationship else ""
        lines.append(f"- {other.suspect.name} ({other.suspect.occupation}): {reason}.{secret}")
    return lines


def _confrontation_lines(
    character: CharacterState, case: Case, disclosures: Iterable[DisclosureRecord]
) -> list[str]:
    lines = []
    for record in disclosures:
        if record.about_character_id != character.id:
            continue
        source = case.name_of(record.from_character_id)
        lines.append(f'{source} told the detective: "{record.info}"')
    return lines


def build_system_prompt(
    character: CharacterState,
    case: Case,
    disclosures: Iterable[DisclosureRecord] = (),
) -> str:
    facts = character.facts
    suspect = character.suspect
    victim = case.victim
    crime = case.crime_details
    victim_view = facts.relationship_with(VICTIM_ID)

    sections = [
        f"You are {suspect.name}, the {suspect.occupation} in a murder mystery. "
        f"A detective is interrogating you about the murder of {victim.name}.",
        f"## YOUR PERSONALITY\n{suspect.personality}",
        "## YOUR BACKGROUND\n"
        f"- Name: {suspect.name}\n"
        f"- Occupation: {suspect.occupation}\n"
        f"- Relationship to victim: {facts.relationship_to_victim}\n"
        f"- Opinion of victim: {victim_view.opinion_reason if victim_view else 'Complex.'}",
        "## THE CRIME\n"
        f"- Victim: {victim.name} ({victim.description})\n"
        f"- Cause of death: {crime.cause_of_death.value}\n"
        f"- Time: {crime.time_of_death}\n"
        f"- Location: {crime.location}",
    ]

    alibi = [f"## YOUR ALIBI\n{facts.alibi.description}"]
    if facts.alibi.was_at_crime_scene:
        alibi.append("Note: this places you near the crime scene.")
    if facts.alibi.witness:
        alibi.append(f"Witness: {facts.alibi.witness}")
    sections.append("\n".join(alibi))

    item = [f"## YOUR ITEM\nYou are carrying: {facts.item.name}\n{facts.item.description}"]
    if facts.item.is_weapon_type:
        item.append("Note: this could be used as the murder weapon.")
    if facts.item.original_owner_id != character.id:
        owner = case.name_of(facts.item.original_owner_id)
        item.append(f"It originally belonged to {owner}. You picked it up by mistake.")
    sections.append("\n".join(item))

    if facts.has_motive:
        sections.append(f"## YOUR MOTIVE\nYou have a motive: {facts.motive.description}")
    else:
        sections.append("## YOUR MOTIVE\nYou have no real motive to kill the victim.")

    sections.append("## YOUR KNOWLEDGE OF OTHERS\n" + "\n".join(_knowledge_lines(character, case)))

    if facts.suspicion == SuspicionLevel.NONE:
        sections.append(f"## YOUR SUSPICIONS\n{facts.suspicion_reason}")
    else:
        names = ", ".join(case.name_of(target_id) for target_id in facts.suspicion_targets)
        sections.append(f"## YOUR SUSPICIONS\nYou suspect: {names}. Reason: {facts.suspicion_reason}")

    if character.is_guilty:
        sections.append(
            f"## ARE YOU THE KILLER?\nYES. You killed {victim.name}. {crime.how_it_happened}\n\n"
            f"{_KILLER_RULES}"
        )
    else:
        sections.append(f"## ARE YOU THE KILLER?\n{_INNOCENT_RULES}")

    confrontations = _confrontation_lines(character, case, disclosures)
    if confrontations:
        sections.append(
            "## EVIDENCE PRESENTED AGAINST YOU\n"
            + "\n".join(confrontations)
            + "\nThis evidence is verified. Acknowledge it and tell the truth about these points."
        )

    conduct = (
        "As the killer, be evasive about incriminating details unless confronted with evidence."
        if character.is_guilty
        else "As an innocent person, be cooperative, though you may keep unrelated secrets."
    )
    sections.append(_GUIDELINES.format(conduct=conduct))
    ids = ", ".join(f"{other.id} = {other.suspect.name}" for other in case.others(character.id))
    sections.append(_TAGS.format(ids=ids))
    return "\n\n".join(sections)
