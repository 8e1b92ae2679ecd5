"""Domain models for a generated case.

Generated facts are frozen. The only mutable per-character state lives in
``DisclosureState``, which the interrogation engine updates as the player
confronts suspects.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from whodunit.domain import rules
from whodunit.domain.enums import (
    VICTIM_ID,
    CauseOfDeath,
    Opinion,
    SecretType,
    SuspicionLevel,
    Trait,
)


class FactModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class Suspect(FactModel):
    id: str
    name: str
    occupation: str
    personality: str
    aliases: Tuple[str, ...] = ()
    mannerisms: Tuple[str, ...] = ()

    @property
    def first_name(self) -> str:
        return self.name.split(" ", 1)[0]


class Victim(FactModel):
    name: str
    occupation: str
    description: str
    background: str


class CrimeDetails(FactModel):
    cause_of_death: CauseOfDeath
    murder_weapon: str
    murder_weapon_id: str
    time_of_death: str
    location: str
    killer_motive: str
    how_it_happened: str


class Relationship(FactModel):
    target_id: str
    target_name: str
    opinion: Opinion
    opinion_reason: str
    relationship_type: str
    secret: str
    secret_type: SecretType = SecretType.GENERAL


class Alibi(FactModel):
    description: str
    is_verifiable: bool
    was_at_crime_scene: bool
    time_accounted_for: str
    location: str
    witness: Optional[str] = None


class CharacterItem(FactModel):
    id: str
    name: str
    description: str
    emoji: str
    is_weapon_type: bool = False
    is_murder_weapon: bool = False
    original_owner_id: str


class Motive(FactModel):
    description: str
    has_motive: bool


class ItemSwap(FactModel):
    from_character_id: str
    to_character_id: str
    item_id: str
    reason: str


class RelationshipPair(FactModel):
    character1_id: str
    character2_id: str
    relationship_type: str

    def includes(self, character_id: str) -> bool:
        return character_id in (self.character1_id, self.character2_id)

    def partner_of(self, character_id: str) -> str | None:
        if character_id == self.character1_id:
            return self.character2_id
        if character_id == self.character2_id:
            return self.character1_id
        return None


class CharacterFacts(FactModel):
    suspect: Suspect
    relationships: Tuple[Relationship, ...]
    relationship_to_victim: str
    alibi: Alibi
    item: CharacterItem
    motive: Motive
    has_means: bool
    is_guilty: bool
    suspicion: SuspicionLevel
    suspicion_targets: Tuple[str, ...] = ()
    suspicion_reason: str

    @property
    def has_motive(self) -> bool:
        return self.motive.has_motive

    @property
    def has_opportunity(self) -> bool:
        return self.alibi.was_at_crime_scene

    def traits(self) -> set[Trait]:
        held: set[Trait] = set()
        if self.has_motive:
            held.add(Trait.MOTIVE)
        if self.has_means:
            held.add(Trait.MEANS)
        if self.has_opportunity:
            held.add(Trait.OPPORTUNITY)
        return held

    def relationship_with(self, target_id: str) -> Relationship | None:
        return next((rel for rel in self.relationships if rel.target_id == target_id), None)


class DisclosureState(BaseModel):
    model_config = ConfigDict(extra="forbid")

    presented_evidence: List[str] = Field(default_factory=list)
    has_opened_up: bool = False
    revealed_secret_targets: List[str] = Field(default_factory=list)

    @property
    def is_confronted(self) -> bool:
        return self.has_opened_up or bool(self.presented_evidence)

    def present(self, info: str) -> bool:
        """Record verified evidence put to this character. Returns False if already presented."""
        self.has_opened_up = True
        if info in self.presented_evidence:
            return False
        self.presented_evidence.append(info)
        return True

    def mark_secret_revealed(self, target_id: str) -> None:
        if target_id not in self.revealed_secret_targets:
            self.revealed_secret_targets.append(target_id)

    def secret_revealed(self, target_id: str) -> bool:
        return target_id in self.revealed_secret_targets


class CharacterState(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    facts: CharacterFacts
    disclosure: DisclosureState = Field(default_factory=DisclosureState)

    @property
    def id(self) -> str:
        return self.facts.suspect.id

    @property
    def suspect(self) -> Suspect:
        return self.facts.suspect

    @property
    def is_guilty(self) -> bool:
        return self.facts.is_guilty


class Case(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed: int
    case_number: int
    date: str
    victim: Victim
    crime_details: CrimeDetails
    characters: Tuple[CharacterState, ...]
    murderer_id: str
    item_swaps: Tuple[ItemSwap, ...] = ()
    relationship_pairs: Tuple[RelationshipPair, ...] = ()

    @model_validator(mode="after")
    def _check_invariants(self) -> "Case":
        rules.ensure_case_invariants([state.facts for state in self.characters], self.murderer_id)
        return self

    @property
    def roster(self) -> list[Suspect]:
        return [state.suspect for state in self.characters]

    @property
    def guilty(self) -> CharacterState:
        return next(state for state in self.characters if state.is_guilty)

    def character(self, character_id: str) -> CharacterState:
        by_id = {state.id: state for state in self.characters}
        rules.ensure_character_exists(character_id, by_id)
        return by_id[character_id]

    def name_of(self, character_id: str) -> str:
        if character_id == VICTIM_ID:
            return self.victim.name
        return self.character(character_id).suspect.name

    def others(self, character_id: str) -> list[CharacterState]:
        return [state for state in self.characters if state.id != character_id]
