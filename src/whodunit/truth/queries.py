"""Queries over a generated case and its relationship web."""

from __future__ import annotations

from whodunit.domain.enums import SecretType, Trait
from whodunit.domain.models import Case, RelationshipPair
from whodunit.truth.graph import RelationshipWeb, build_web


def informants_about(
    case: Case,
    target_id: str,
    secret_type: SecretType | None = None,
    web: RelationshipWeb | None = None,
) -> list[str]:
    """Ids of characters holding a secret about ``target_id``, optionally of one category."""
    case.character(target_id)
    web = web or build_web(case)
    informants: list[str] = []
    for source_id, relationship in web.relationships_about(target_id):
        if secret_type is not None and relationship.secret_type != secret_type:
            continue
        informants.append(source_id)
    return informants


def trait_holders(case: Case, trait: Trait) -> list[str]:
    return [state.id for state in case.characters if trait in state.facts.traits()]


def corroborating_pairs(case: Case) -> list[RelationshipPair]:
    """Pairs whose alibis name each other as witness at the same place."""
    pairs: list[RelationshipPair] = []
    for pair in case.relationship_pairs:
        first = case.character(pair.character1_id)
        second = case.character(pair.character2_id)
        if (
            first.facts.alibi.witness == second.suspect.name
            and second.facts.alibi.witness == first.suspect.name
            and first.facts.alibi.location == second.facts.alibi.location
        ):
            pairs.append(pair)
    return pairs
