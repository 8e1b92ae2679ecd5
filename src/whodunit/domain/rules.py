"""Invariant checks for generated cases."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Mapping, Sequence

if TYPE_CHECKING:
    from whodunit.domain.models import CharacterFacts


class CaseInvariantError(ValueError):
    """A generated case breaks the fairness contract. Always a programming error."""


class UnknownCharacterError(KeyError):
    """A caller asked for a suspect id that is not part of the active case."""

    def __init__(self, character_id: str) -> None:
        super().__init__(character_id)
        self.character_id = character_id

    def __str__(self) -> str:
        return f"Unknown character id: {self.character_id}"


def ensure_character_exists(character_id: str, characters: Mapping[str, object]) -> None:
    if character_id not in characters:
        raise UnknownCharacterError(character_id)


def trait_count(facts: "CharacterFacts") -> int:
    return sum((facts.has_motive, facts.has_means, facts.has_opportunity))


def ensure_case_invariants(
    characters: Sequence["CharacterFacts"],
    murderer_id: str,
    min_characters: int = 4,
) -> None:
    if len(characters) < min_characters:
        raise CaseInvariantError(
            f"case needs at least {min_characters} suspects, got {len(characters)}"
        )
    ids = [facts.suspect.id for facts in characters]
    if len(set(ids)) != len(ids):
        raise CaseInvariantError("suspect ids must be unique within a case")
    guilty = [facts for facts in characters if facts.is_guilty]
    if len(guilty) != 1:
        raise CaseInvariantError(f"expected exactly one guilty suspect, found {len(guilty)}")
    killer = guilty[0]
    if killer.suspect.id != murderer_id:
        raise CaseInvariantError(
            f"murderer id {murderer_id!r} does not match guilty suspect {killer.suspect.id!r}"
        )
    if trait_count(killer) != 3:
        raise CaseInvariantError("guilty suspect must hold motive, means and opportunity")
    for facts in characters:
        if not facts.is_guilty and trait_count(facts) > 2:
            raise CaseInvariantError(
                f"innocent suspect {facts.suspect.id!r} holds all three traits"
            )
    _ensure_provenance(characters, ids)


def _ensure_provenance(characters: Iterable["CharacterFacts"], ids: list[str]) -> None:
    known = set(ids)
    for facts in characters:
        if facts.item.original_owner_id not in known:
            raise CaseInvariantError(
                f"item {facts.item.id!r} traces to unknown owner {facts.item.original_owner_id!r}"
            )
