"""Case dump helpers for debugging."""

from __future__ import annotations

from whodunit.domain.models import Case
from whodunit.truth.graph import build_web


def _flag(value: bool) -> str:
    return "Y" if value else "-"


def dump_case(case: Case) -> str:
    details = case.crime_details
    lines: list[str] = []
    lines.append(f"Case #{case.case_number} (seed {case.seed}) {case.date}")
    lines.append(f"Victim: {case.victim.name}, {case.victim.occupation}. {case.victim.background}")
    lines.append(
        f"Crime: {details.cause_of_death} with the {details.murder_weapon} "
        f"in {details.location} at {details.time_of_death}"
    )
    lines.append(f"Murderer: {case.murderer_id}")
    lines.append("")
    lines.append("Suspects (motive/means/opportunity):")
    for state in case.characters:
        facts = state.facts
        guilty = " GUILTY" if facts.is_guilty else ""
        lines.append(
            f"- {facts.suspect.name} [{facts.suspect.id}] "
            f"M{_flag(facts.has_motive)} W{_flag(facts.has_means)} O{_flag(facts.has_opportunity)}"
            f"{guilty}"
        )
        lines.append(f"    item: {facts.item.name} (from {facts.item.original_owner_id})")
        lines.append(f"    alibi: {facts.alibi.description} [{facts.alibi.location}]")
        lines.append(f"    motive: {facts.motive.description}")
        lines.append(f"    suspicion: {facts.suspicion} {list(facts.suspicion_targets)}")
    lines.append("")
    lines.append("Item swaps:")
    for swap in case.item_swaps:
        lines.append(f"- {swap.item_id}: {swap.from_character_id} -> {swap.to_character_id} ({swap.reason})")
    lines.append("")
    lines.append("Relationship pairs:")
    for pair in case.relationship_pairs:
        lines.append(f"- {pair.character1_id} + {pair.character2_id} ({pair.relationship_type})")
    lines.append("")
    lines.append("Relationship web:")
    web = build_web(case)
    for source_id, target_id, data in web.graph.edges(data=True):
        relationship = data["relationship"]
        lines.append(
            f"- {source_id} -> {target_id}: {relationship.opinion} "
            f"[{relationship.secret_type}] {relationship.secret}"
        )
    return "\n".join(lines)
